"""Boundary Protocols: contracts between the application layer and the stores.

Invariants:
    - Both SQL (AsyncSession) and in-memory implementations satisfy these
    - No method commits; the transaction belongs to the caller
    - Lookups of a missing id raise NotFoundError rather than returning None

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async methods: implementations do IO even when the memory variant does not
"""

from typing import Protocol

from todo_store.core.domain_types import TodoId, LabelId, AssociationId
from todo_store.schemas.label import Label
from todo_store.schemas.todo import Todo
from todo_store.schemas.todo_label import TodoLabel


class LabelRepository(Protocol):
    """Contract for label persistence."""
    async def create(self, name: str) -> LabelId: ...
    async def get(self, label_id: LabelId) -> Label: ...
    async def all(self) -> list[Label]: ...
    async def delete(self, label_id: LabelId) -> None: ...


class TodoRepository(Protocol):
    """Contract for todo persistence."""
    async def create(self, text: str) -> TodoId: ...
    async def get(self, todo_id: TodoId) -> Todo: ...
    async def all(self) -> list[Todo]: ...
    async def update(
        self,
        todo_id: TodoId,
        *,
        text: str | None = None,
        completed: bool | None = None,
    ) -> Todo: ...
    async def delete(self, todo_id: TodoId) -> None: ...


class TodoLabelRepository(Protocol):
    """Contract for the todo <-> label association."""
    async def associate(self, todo_id: TodoId, label_id: LabelId) -> AssociationId: ...
    async def disassociate(self, association_id: AssociationId) -> bool: ...
    async def list_for_todo(self, todo_id: TodoId) -> list[TodoLabel]: ...
    async def list_labels_for_todo(self, todo_id: TodoId) -> list[Label]: ...
    async def list_todos_for_label(self, label_id: LabelId) -> list[TodoId]: ...
