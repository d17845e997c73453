"""Repositories: SQL and in-memory implementations of the store contracts.

Invariants:
    - Repositories never commit; the caller owns the transaction
    - SQL and memory variants satisfy the same Protocols (core/repository_protocols.py)
"""

from todo_store.repositories.label_repository import SqlLabelRepository
from todo_store.repositories.todo_repository import SqlTodoRepository
from todo_store.repositories.todo_label_repository import SqlTodoLabelRepository
from todo_store.repositories.memory import (
    MemoryStore,
    MemoryLabelRepository,
    MemoryTodoRepository,
    MemoryTodoLabelRepository,
)

__all__ = [
    "SqlLabelRepository",
    "SqlTodoRepository",
    "SqlTodoLabelRepository",
    "MemoryStore",
    "MemoryLabelRepository",
    "MemoryTodoRepository",
    "MemoryTodoLabelRepository",
]
