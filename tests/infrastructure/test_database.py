"""Database Session Manager: transactions, error mapping, health checks.

Tests:
    - transaction() commits on exit and rolls back on error
    - Foreign key IntegrityError maps to ReferentialIntegrityError, others to DatabaseError
    - Mapped errors name the failing step (execute, commit, connection, session)
    - Unreachable storage maps to StorageUnavailableError; health_check reports False
    - SQLite connections have foreign keys switched on
    - get_db() refuses to run before init_db(); init_db() falls back to Settings
"""

import logging

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, InvalidRequestError, OperationalError

import todo_store.infrastructure.database as db_module
from todo_store.config import get_settings
from todo_store.core.errors import (
    DatabaseError,
    ReferentialIntegrityError,
    StorageUnavailableError,
)
from todo_store.infrastructure.database import (
    DatabaseSessionManager,
    failed_operation,
    get_db,
    init_db,
    is_foreign_key_violation,
)
from todo_store.infrastructure.observability import STORE_LOGGER
from todo_store.models.label import Label as LabelModel
from todo_store.models.todo_label import TodoLabel as TodoLabelModel
from todo_store.repositories.todo_label_repository import SqlTodoLabelRepository


class _FakeDriverError(Exception):
    def __init__(self, message: str, sqlstate: str | None = None):
        super().__init__(message)
        self.sqlstate = sqlstate


async def test_sqlite_foreign_keys_enabled(test_db):
    result = await test_db.execute(text("PRAGMA foreign_keys"))
    assert result.scalar_one() == 1


async def test_transaction_commits_on_exit(test_manager):
    async with test_manager.transaction() as db:
        db.add(LabelModel(name="committed"))

    async with test_manager.session() as db:
        result = await db.execute(select(LabelModel.name))
        assert result.scalars().all() == ["committed"]


async def test_dangling_reference_maps_to_referential_integrity_error(test_manager):
    with pytest.raises(ReferentialIntegrityError) as exc_info:
        async with test_manager.transaction() as db:
            db.add(TodoLabelModel(todo_id=1, label_id=1))

    assert exc_info.value.code == "REFERENTIAL_INTEGRITY_VIOLATION"


async def test_not_null_violation_maps_to_database_error(test_manager):
    with pytest.raises(DatabaseError) as exc_info:
        async with test_manager.transaction() as db:
            db.add(LabelModel(name=None))
            await db.flush()

    assert not isinstance(exc_info.value, ReferentialIntegrityError)
    assert exc_info.value.operation == "execute"
    assert exc_info.value.context.operation == "execute"
    assert isinstance(exc_info.value.__cause__, IntegrityError)


async def test_unreachable_database_maps_to_storage_unavailable(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nowhere.db'}",
    )
    with pytest.raises(StorageUnavailableError):
        async with manager.session() as db:
            await db.execute(text("SELECT 1"))
    assert await manager.health_check() is False
    await manager.dispose()


async def test_health_check_ok(test_manager):
    assert await test_manager.health_check() is True


async def test_non_store_errors_propagate_unchanged(test_manager):
    with pytest.raises(KeyError):
        async with test_manager.session():
            raise KeyError("not a storage problem")


def test_is_foreign_key_violation_by_sqlstate():
    exc = IntegrityError("INSERT", {}, _FakeDriverError("violates constraint", "23503"))
    assert is_foreign_key_violation(exc)


def test_is_foreign_key_violation_by_sqlite_message():
    exc = IntegrityError("COMMIT", {}, _FakeDriverError("FOREIGN KEY constraint failed"))
    assert is_foreign_key_violation(exc)


def test_unique_violation_is_not_foreign_key_violation():
    exc = IntegrityError("INSERT", {}, _FakeDriverError("duplicate key", "23505"))
    assert not is_foreign_key_violation(exc)


async def test_get_db_requires_init(monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    with pytest.raises(RuntimeError, match="not initialized"):
        async for _ in get_db():
            pass


async def test_get_db_yields_session_after_init(monkeypatch, database_url):
    monkeypatch.setattr(db_module, "db_manager", None)
    manager = init_db(database_url)
    assert db_module.db_manager is manager
    async for session in get_db():
        result = await session.execute(text("SELECT 1"))
        assert result.scalar_one() == 1
    await manager.dispose()


async def test_caller_commit_of_dangling_reference_maps_to_referential_integrity_error(test_manager):
    with pytest.raises(ReferentialIntegrityError) as exc_info:
        async with test_manager.session() as db:
            await SqlTodoLabelRepository(db).associate(1, 1)
            await db.commit()

    assert exc_info.value.context.operation == "commit"
    async with test_manager.session() as db:
        assert await db.scalar(select(TodoLabelModel.id)) is None


async def test_session_level_errors_carry_context(test_manager):
    with pytest.raises(DatabaseError) as exc_info:
        async with test_manager.session():
            raise InvalidRequestError("session misuse")

    assert exc_info.value.operation == "session"
    assert exc_info.value.context.operation == "session"
    assert isinstance(exc_info.value.__cause__, InvalidRequestError)


def test_failed_operation_names_the_step():
    driver_error = _FakeDriverError("boom")
    assert failed_operation(IntegrityError("INSERT INTO labels", {}, driver_error)) == "execute"
    assert failed_operation(IntegrityError(None, None, driver_error)) == "commit"
    assert failed_operation(OperationalError(None, None, driver_error)) == "connection"
    assert failed_operation(InvalidRequestError("x")) == "session"


async def test_init_db_reads_settings_and_configures_logging(monkeypatch, database_url):
    monkeypatch.setattr(db_module, "db_manager", None)
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("LOG_LEVEL", "warning")
    monkeypatch.setenv("LOG_FORMAT", "text")
    get_settings.cache_clear()
    store_logger = logging.getLogger(STORE_LOGGER)
    previous_level = store_logger.level
    try:
        manager = init_db()
        assert manager.engine.url.database.endswith("todo_store.db")
        assert store_logger.level == logging.WARNING
        assert len(store_logger.handlers) == 1
        await manager.dispose()
    finally:
        for handler in list(store_logger.handlers):
            store_logger.removeHandler(handler)
        store_logger.setLevel(previous_level)
        get_settings.cache_clear()
