"""In-Memory Store: database-free implementation of the repository contracts.

Invariants:
    - Every read and write happens inside MemoryStore.transaction()
    - Writes are staged on a private copy; commit validates every todo_labels
      reference and either publishes the copy or discards it whole
    - Transactions are serialized by one asyncio.Lock (serializable isolation)
    - Id sequences never roll back, so ids are monotonic and never reused

Design Decisions:
    - Existence is validated explicitly at commit, standing in for the deferred
      foreign keys of the SQL schema
    - Meant for tests of the application layer; not durable
"""

import asyncio
import itertools
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncGenerator

from todo_store.core.domain_types import AssociationId, LabelId, TableName, TodoId
from todo_store.core.errors import (
    ErrorContext,
    NotFoundError,
    ReferencedRowError,
    ReferentialIntegrityError,
)
from todo_store.schemas.label import Label
from todo_store.schemas.todo import Todo
from todo_store.schemas.todo_label import TodoLabel

logger = logging.getLogger(__name__)


@dataclass
class _Tables:
    todos: dict[int, Todo] = field(default_factory=dict)
    labels: dict[int, Label] = field(default_factory=dict)
    todo_labels: dict[int, TodoLabel] = field(default_factory=dict)

    def copy(self) -> "_Tables":
        return _Tables(
            todos=dict(self.todos),
            labels=dict(self.labels),
            todo_labels=dict(self.todo_labels),
        )


class MemoryTransaction:
    """Staged view of the store for the duration of one transaction."""

    def __init__(self, store: "MemoryStore", tables: _Tables):
        self.store = store
        self.tables = tables

    def next_id(self, table: TableName) -> int:
        return self.store.next_id(table)

    def validate(self) -> None:
        """Raise ReferentialIntegrityError on the first dangling reference."""
        for row in self.tables.todo_labels.values():
            if row.todo_id not in self.tables.todos:
                raise ReferentialIntegrityError(
                    f"todo_labels.todo_id={row.todo_id} references a missing todo",
                    ErrorContext(table="todo_labels", row_id=row.id, operation="commit"),
                )
            if row.label_id not in self.tables.labels:
                raise ReferentialIntegrityError(
                    f"todo_labels.label_id={row.label_id} references a missing label",
                    ErrorContext(table="todo_labels", row_id=row.id, operation="commit"),
                )


class MemoryStore:
    """Process-local store holding todos, labels and associations."""

    def __init__(self):
        self._committed = _Tables()
        self._sequences = {table: itertools.count(1) for table in TableName}
        self._lock = asyncio.Lock()

    def next_id(self, table: TableName) -> int:
        return next(self._sequences[table])

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[MemoryTransaction, None]:
        """Stage writes and publish them on exit if every reference resolves."""
        async with self._lock:
            tx = MemoryTransaction(self, self._committed.copy())
            yield tx
            try:
                tx.validate()
            except ReferentialIntegrityError as e:
                logger.error(
                    f"Memory commit rejected: {e.message}",
                    extra={"error_code": e.code, "operation": "commit"},
                )
                raise
            self._committed = tx.tables


class MemoryLabelRepository:
    def __init__(self, tx: MemoryTransaction):
        self.tx = tx

    async def create(self, name: str) -> LabelId:
        label_id = self.tx.next_id(TableName.LABELS)
        self.tx.tables.labels[label_id] = Label(id=label_id, name=name)
        return LabelId(label_id)

    async def get(self, label_id: LabelId) -> Label:
        label = self.tx.tables.labels.get(label_id)
        if label is None:
            raise NotFoundError(
                "Label", label_id,
                ErrorContext(table="labels", row_id=label_id, operation="get"),
            )
        return label

    async def all(self) -> list[Label]:
        return [self.tx.tables.labels[k] for k in sorted(self.tx.tables.labels)]

    async def delete(self, label_id: LabelId) -> None:
        await self.get(label_id)
        references = sum(
            1 for row in self.tx.tables.todo_labels.values() if row.label_id == label_id
        )
        if references:
            raise ReferencedRowError(
                "Label", label_id, references,
                ErrorContext(table="labels", row_id=label_id, operation="delete"),
            )
        del self.tx.tables.labels[label_id]


class MemoryTodoRepository:
    def __init__(self, tx: MemoryTransaction):
        self.tx = tx

    async def create(self, text: str) -> TodoId:
        todo_id = self.tx.next_id(TableName.TODOS)
        self.tx.tables.todos[todo_id] = Todo(id=todo_id, text=text, completed=False)
        return TodoId(todo_id)

    async def get(self, todo_id: TodoId) -> Todo:
        todo = self.tx.tables.todos.get(todo_id)
        if todo is None:
            raise NotFoundError(
                "Todo", todo_id,
                ErrorContext(table="todos", row_id=todo_id, operation="get"),
            )
        return todo

    async def all(self) -> list[Todo]:
        return [self.tx.tables.todos[k] for k in sorted(self.tx.tables.todos)]

    async def update(
        self,
        todo_id: TodoId,
        *,
        text: str | None = None,
        completed: bool | None = None,
    ) -> Todo:
        todo = await self.get(todo_id)
        changes = {}
        if text is not None:
            changes["text"] = text
        if completed is not None:
            changes["completed"] = completed
        todo = todo.model_copy(update=changes)
        self.tx.tables.todos[todo_id] = todo
        return todo

    async def delete(self, todo_id: TodoId) -> None:
        await self.get(todo_id)
        references = sum(
            1 for row in self.tx.tables.todo_labels.values() if row.todo_id == todo_id
        )
        if references:
            raise ReferencedRowError(
                "Todo", todo_id, references,
                ErrorContext(table="todos", row_id=todo_id, operation="delete"),
            )
        del self.tx.tables.todos[todo_id]


class MemoryTodoLabelRepository:
    def __init__(self, tx: MemoryTransaction):
        self.tx = tx

    async def associate(self, todo_id: TodoId, label_id: LabelId) -> AssociationId:
        association_id = self.tx.next_id(TableName.TODO_LABELS)
        self.tx.tables.todo_labels[association_id] = TodoLabel(
            id=association_id, todo_id=todo_id, label_id=label_id,
        )
        return AssociationId(association_id)

    async def disassociate(self, association_id: AssociationId) -> bool:
        return self.tx.tables.todo_labels.pop(association_id, None) is not None

    async def list_for_todo(self, todo_id: TodoId) -> list[TodoLabel]:
        return [row for row in self._rows() if row.todo_id == todo_id]

    async def list_labels_for_todo(self, todo_id: TodoId) -> list[Label]:
        return [
            self.tx.tables.labels[row.label_id]
            for row in self._rows()
            if row.todo_id == todo_id and row.label_id in self.tx.tables.labels
        ]

    async def list_todos_for_label(self, label_id: LabelId) -> list[TodoId]:
        return [TodoId(row.todo_id) for row in self._rows() if row.label_id == label_id]

    def _rows(self) -> list[TodoLabel]:
        return [self.tx.tables.todo_labels[k] for k in sorted(self.tx.tables.todo_labels)]
