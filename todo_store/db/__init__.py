"""Database Foundation: the SQLAlchemy declarative Base shared by all models.

Invariants:
    - asyncpg driver for PostgreSQL, aiosqlite for SQLite; engines live in infrastructure/
"""
