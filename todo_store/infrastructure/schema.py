"""Schema Management: create-if-not-exists DDL for todos, labels and todo_labels.

Invariants:
    - create_schema is idempotent: re-running it against a migrated database is a no-op
    - No down migration here; drop_schema exists for tests and local resets only
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from todo_store.db.base import Base
import todo_store.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info("Schema ensured", extra={"operation": "create_schema"})


async def drop_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all, checkfirst=True)
    logger.info("Schema dropped", extra={"operation": "drop_schema"})
