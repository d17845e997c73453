"""Structured Logging: JSON formatter fields and setup."""

import json
import logging
import sys

import pytest

from todo_store.core.errors import (
    ErrorContext,
    ReferencedRowError,
    ReferentialIntegrityError,
)
from todo_store.infrastructure.observability import STORE_LOGGER, JSONFormatter, setup_logging
from todo_store.repositories.label_repository import SqlLabelRepository
from todo_store.repositories.memory import MemoryStore, MemoryTodoLabelRepository


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "todo_store.test", logging.INFO, __file__, 1, "Label %s", ("created",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "todo_store.test"
    assert payload["message"] == "Label created"
    assert "timestamp" in payload


def test_json_formatter_surfaces_store_fields():
    payload = json.loads(JSONFormatter().format(
        _record(label_id=3, todo_id=None, error_code="ROW_IS_REFERENCED"),
    ))
    assert payload["label_id"] == 3
    assert payload["error_code"] == "ROW_IS_REFERENCED"
    assert "todo_id" not in payload


def test_json_formatter_adds_store_error_details():
    try:
        raise ReferencedRowError("Label", 3, 1, ErrorContext(table="labels", operation="delete"))
    except ReferencedRowError:
        record = logging.LogRecord(
            "todo_store.test", logging.ERROR, __file__, 1, "delete refused", (), sys.exc_info(),
        )

    payload = json.loads(JSONFormatter().format(record))
    assert payload["error_code"] == "ROW_IS_REFERENCED"
    assert payload["error_category"] == "conflict"
    assert payload["table"] == "labels"
    assert "ReferencedRowError" in payload["exception"]


@pytest.fixture
def store_logger():
    logger = logging.getLogger(STORE_LOGGER)
    previous_level = logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(previous_level)


def test_setup_logging_targets_store_logger(store_logger):
    handler = setup_logging("debug", "text")

    assert store_logger.handlers == [handler]
    assert handler not in logging.root.handlers
    assert store_logger.level == logging.DEBUG
    assert not isinstance(handler.formatter, JSONFormatter)


def test_setup_logging_replaces_previous_handler(store_logger):
    setup_logging("info", "text")
    handler = setup_logging("warning", "json")

    assert store_logger.handlers == [handler]
    assert isinstance(handler.formatter, JSONFormatter)
    assert store_logger.level == logging.WARNING


async def test_repository_writes_are_logged(caplog, test_db):
    caplog.set_level(logging.DEBUG, logger="todo_store")

    label_id = await SqlLabelRepository(test_db).create("logged")

    records = [r for r in caplog.records if r.getMessage() == "Label created"]
    assert records and records[0].label_id == label_id


async def test_rejected_memory_commit_is_logged(caplog):
    caplog.set_level(logging.ERROR, logger="todo_store")
    store = MemoryStore()

    with pytest.raises(ReferentialIntegrityError):
        async with store.transaction() as tx:
            await MemoryTodoLabelRepository(tx).associate(1, 1)

    assert any(
        getattr(r, "error_code", None) == "REFERENTIAL_INTEGRITY_VIOLATION"
        for r in caplog.records
    )
