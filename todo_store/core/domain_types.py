"""Domain Types: identity types that replace bare integers across the codebase.

Invariants:
    - TodoId, LabelId, AssociationId wrap integer primary keys
    - Ids are assigned by the store, never chosen by callers

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TodoId = NewType("TodoId", int)
LabelId = NewType("LabelId", int)
AssociationId = NewType("AssociationId", int)


# ─── Enums ───────────────────────────────────────────────────────

class TableName(str, Enum):
    """Persisted tables: maps to ORM __tablename__ values."""
    TODOS = "todos"
    LABELS = "labels"
    TODO_LABELS = "todo_labels"
