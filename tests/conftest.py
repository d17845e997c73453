"""Root conftest: shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh file-backed SQLite database under tmp_path
    - Foreign keys are enforced (PRAGMA foreign_keys=ON via DatabaseSessionManager)

Design Decisions:
    - File database over :memory:: each pooled connection sees the same data,
      so concurrent transactions behave like separate clients
"""

import os

import pytest

# Ensure tests never reach a real database through default settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")

from todo_store.infrastructure.database import DatabaseSessionManager  # noqa: E402


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'todo_store.db'}"


@pytest.fixture
async def test_manager(database_url):
    manager = DatabaseSessionManager(database_url)
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture
async def test_db(test_manager):
    async with test_manager.session() as session:
        yield session
