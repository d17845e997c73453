"""Infrastructure Layer: engine lifecycle, schema management, logging.

Invariants:
    - Every SQLAlchemy failure leaving this layer is a TodoStoreError
"""
