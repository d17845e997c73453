"""Store Logging: one JSON line per record from the todo_store logger tree.

Invariants:
    - Handlers attach to the "todo_store" logger, never to the root logger
    - setup_logging() replaces the handler it installed earlier instead of stacking a second one
    - Row ids and error codes passed via `extra=` become top-level keys
    - A TodoStoreError in exc_info contributes its code, category and context table

Design Decisions:
    - The embedding application owns root logging; the store only formats its own tree
"""

import json
import logging
from datetime import datetime, timezone

from todo_store.core.errors import TodoStoreError

STORE_LOGGER = "todo_store"

_EXTRA_FIELDS = ("todo_id", "label_id", "association_id", "error_code", "operation")
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Render store log records as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key])
            for key in _EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            error = record.exc_info[1]
            if isinstance(error, TodoStoreError):
                entry.setdefault("error_code", error.code)
                entry["error_category"] = error.category.value
                if error.context.table:
                    entry["table"] = error.context.table
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class _StoreHandler(logging.StreamHandler):
    """Marker type so setup_logging() can find the handler it installed."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Send the store's log records to stderr as JSON ("json") or plain text."""
    store_logger = logging.getLogger(STORE_LOGGER)
    for existing in [h for h in store_logger.handlers if isinstance(h, _StoreHandler)]:
        store_logger.removeHandler(existing)

    handler = _StoreHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT))
    store_logger.addHandler(handler)
    store_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
