"""TodoLabel Repository: the many-to-many link and its commit-time integrity contract.

Invariants:
    - associate() does not look up the referenced rows; the deferred foreign keys
      validate them when the surrounding transaction commits
    - Duplicate (todo_id, label_id) pairs are stored as distinct rows
    - disassociate() removes exactly one row by its own id and never touches todos or labels
    - List order follows association id; callers must not depend on it

Design Decisions:
    - Insert order of todo, label and association inside one transaction is irrelevant
    - Joins select plain columns so duplicate associations yield duplicate entries
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from todo_store.core.domain_types import AssociationId, LabelId, TodoId
from todo_store.models.label import Label as LabelModel
from todo_store.models.todo_label import TodoLabel as TodoLabelModel
from todo_store.schemas.label import Label
from todo_store.schemas.todo_label import TodoLabel

logger = logging.getLogger(__name__)


class SqlTodoLabelRepository:
    """Association persistence on an AsyncSession owned by the caller."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def associate(self, todo_id: TodoId, label_id: LabelId) -> AssociationId:
        """Insert one association row. Must share a transaction with any
        todo or label created alongside it."""
        association = TodoLabelModel(todo_id=todo_id, label_id=label_id)
        self.db.add(association)
        await self.db.flush()
        logger.debug(
            "Association created",
            extra={
                "association_id": association.id,
                "todo_id": todo_id,
                "label_id": label_id,
            },
        )
        return AssociationId(association.id)

    async def disassociate(self, association_id: AssociationId) -> bool:
        """Delete one association row. Returns whether a row was removed."""
        result = await self.db.execute(
            delete(TodoLabelModel).where(TodoLabelModel.id == association_id),
        )
        removed = result.rowcount > 0
        logger.debug(
            "Association removed" if removed else "Association not found",
            extra={"association_id": association_id},
        )
        return removed

    async def list_for_todo(self, todo_id: TodoId) -> list[TodoLabel]:
        result = await self.db.execute(
            select(TodoLabelModel)
            .where(TodoLabelModel.todo_id == todo_id)
            .order_by(TodoLabelModel.id)
        )
        return [TodoLabel.model_validate(row) for row in result.scalars().all()]

    async def list_labels_for_todo(self, todo_id: TodoId) -> list[Label]:
        result = await self.db.execute(
            select(LabelModel.id, LabelModel.name)
            .join(TodoLabelModel, TodoLabelModel.label_id == LabelModel.id)
            .where(TodoLabelModel.todo_id == todo_id)
            .order_by(TodoLabelModel.id)
        )
        return [Label(id=row.id, name=row.name) for row in result.all()]

    async def list_todos_for_label(self, label_id: LabelId) -> list[TodoId]:
        result = await self.db.execute(
            select(TodoLabelModel.todo_id)
            .where(TodoLabelModel.label_id == label_id)
            .order_by(TodoLabelModel.id)
        )
        return [TodoId(todo_id) for todo_id in result.scalars().all()]
