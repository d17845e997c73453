"""Database Session Manager: async connection pool, transactions and error mapping.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - transaction() commits on exit; deferred foreign keys are validated there
    - All SQLAlchemy exceptions mapped to TodoStoreError subclasses (core/errors.py),
      chained to the driver exception and never swallowed
    - SQLite connections run PRAGMA foreign_keys=ON so deferred FKs are enforced

Design Decisions:
    - Singleton db_manager initialized by the embedding application (init_db)
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, make_url, text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError, StatementError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)

from todo_store.config import get_settings
from todo_store.core.errors import (
    DatabaseError,
    ErrorContext,
    ReferentialIntegrityError,
    StorageUnavailableError,
)
from todo_store.infrastructure.observability import setup_logging
from todo_store.infrastructure.schema import create_schema

logger = logging.getLogger(__name__)

_FOREIGN_KEY_VIOLATION = "23503"


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    """True for PostgreSQL SQLSTATE 23503 and SQLite FOREIGN KEY failures."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == _FOREIGN_KEY_VIOLATION:
        return True
    return "foreign key" in str(orig).lower()


def failed_operation(exc: SQLAlchemyError) -> str:
    """Name the step that raised: "execute", "commit", "connection" or "session".

    SQLAlchemy attaches the statement to errors raised while executing one;
    COMMIT and connection setup carry none. Only COMMIT raises integrity
    errors without a statement, since deferred foreign keys fire there.
    """
    if isinstance(exc, StatementError) and exc.statement is not None:
        return "execute"
    if isinstance(exc, IntegrityError):
        return "commit"
    if isinstance(exc, DBAPIError):
        return "connection"
    return "session"


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        engine_kwargs: dict = {"echo": echo, "pool_pre_ping": True}
        if make_url(database_url).get_backend_name() != "sqlite":
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        enable_sqlite_foreign_keys(self.engine)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception. Caller commits."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            operation = failed_operation(e)
            if is_foreign_key_violation(e):
                logger.error(
                    f"DB referential integrity error: {e}",
                    extra={"error_code": "REFERENTIAL_INTEGRITY_VIOLATION", "operation": operation},
                )
                raise ReferentialIntegrityError(
                    str(e.orig), ErrorContext(operation=operation),
                ) from e
            logger.error(
                f"DB integrity error: {e}",
                extra={"error_code": "DATABASE_ERROR", "operation": operation},
            )
            raise DatabaseError(
                "Integrity constraint violated", operation, ErrorContext(operation=operation),
            ) from e
        except OperationalError as e:
            await session.rollback()
            operation = failed_operation(e)
            logger.error(
                f"DB operational error: {e}",
                extra={"error_code": "STORAGE_UNAVAILABLE", "operation": operation},
            )
            raise StorageUnavailableError(
                "Connection or operational error", ErrorContext(operation=operation),
            ) from e
        except DBAPIError as e:
            await session.rollback()
            operation = failed_operation(e)
            if e.connection_invalidated:
                logger.error(
                    f"DB connection lost: {e}",
                    extra={"error_code": "STORAGE_UNAVAILABLE", "operation": operation},
                )
                raise StorageUnavailableError(
                    "Connection invalidated", ErrorContext(operation=operation),
                ) from e
            logger.error(
                f"DB driver error: {e}",
                extra={"error_code": "DATABASE_ERROR", "operation": operation},
            )
            raise DatabaseError(
                "Database driver error", operation, ErrorContext(operation=operation),
            ) from e
        except SQLAlchemyError as e:
            await session.rollback()
            operation = failed_operation(e)
            logger.error(
                f"SQLAlchemy error: {e}",
                extra={"error_code": "DATABASE_ERROR", "operation": operation},
            )
            raise DatabaseError(
                "Database operation failed", operation, ErrorContext(operation=operation),
            ) from e
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session inside one transaction, committed on normal exit.

        Todo, label and association inserts may come in any order inside the
        block; their foreign keys are checked when the block exits.
        """
        async with self.session() as session:
            async with session.begin():
                yield session

    async def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def create_schema(self) -> None:
        await create_schema(self.engine)

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized by the embedding application)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str | None = None, **kwargs) -> DatabaseSessionManager:
    """Create the process-wide manager.

    Without an explicit URL, Settings supply the URL and pool options, and the
    store logger is configured from LOG_LEVEL / LOG_FORMAT.
    """
    global db_manager
    if database_url is None:
        settings = get_settings()
        setup_logging(settings.log_level, settings.log_format)
        database_url = settings.database_url
        kwargs = {
            "pool_size": settings.database_pool_size,
            "max_overflow": settings.database_max_overflow,
            "echo": settings.database_echo,
            **kwargs,
        }
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency-injection friendly session generator."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
