"""Todo Repository: CRUD for the todo entity labels attach to.

Invariants:
    - get()/update()/delete() raise NotFoundError for unknown ids
    - delete() refuses while todo_labels rows reference the todo (restrict)
    - Never commits
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from todo_store.core.domain_types import TodoId
from todo_store.core.errors import ErrorContext, NotFoundError, ReferencedRowError
from todo_store.models.todo import Todo as TodoModel
from todo_store.models.todo_label import TodoLabel as TodoLabelModel
from todo_store.schemas.todo import Todo

logger = logging.getLogger(__name__)


class SqlTodoRepository:
    """Todo persistence on an AsyncSession owned by the caller."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, text: str) -> TodoId:
        todo = TodoModel(text=text, completed=False)
        self.db.add(todo)
        await self.db.flush()
        logger.debug("Todo created", extra={"todo_id": todo.id})
        return TodoId(todo.id)

    async def get(self, todo_id: TodoId) -> Todo:
        return Todo.model_validate(await self._get_model(todo_id))

    async def all(self) -> list[Todo]:
        result = await self.db.execute(select(TodoModel).order_by(TodoModel.id))
        return [Todo.model_validate(row) for row in result.scalars().all()]

    async def update(
        self,
        todo_id: TodoId,
        *,
        text: str | None = None,
        completed: bool | None = None,
    ) -> Todo:
        """Apply the given fields; None leaves a field untouched."""
        todo = await self._get_model(todo_id)
        if text is not None:
            todo.text = text
        if completed is not None:
            todo.completed = completed
        await self.db.flush()
        logger.debug("Todo updated", extra={"todo_id": todo_id})
        return Todo.model_validate(todo)

    async def delete(self, todo_id: TodoId) -> None:
        todo = await self._get_model(todo_id)
        references = await self.db.scalar(
            select(func.count())
            .select_from(TodoLabelModel)
            .where(TodoLabelModel.todo_id == todo_id)
        )
        if references:
            raise ReferencedRowError(
                "Todo", todo_id, references,
                ErrorContext(table="todos", row_id=todo_id, operation="delete"),
            )
        await self.db.delete(todo)
        await self.db.flush()
        logger.debug("Todo deleted", extra={"todo_id": todo_id})

    async def _get_model(self, todo_id: TodoId) -> TodoModel:
        result = await self.db.execute(
            select(TodoModel).where(TodoModel.id == todo_id),
        )
        todo = result.scalar_one_or_none()
        if todo is None:
            raise NotFoundError(
                "Todo", todo_id,
                ErrorContext(table="todos", row_id=todo_id, operation="get"),
            )
        return todo
