"""Label Repository: durable storage of label identities and names.

Invariants:
    - create() accepts any name: empty, whitespace-only and duplicate names all persist
    - get() raises NotFoundError for unknown ids
    - delete() refuses while todo_labels rows reference the label (restrict)
    - Never commits; ids are available after flush
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from todo_store.core.domain_types import LabelId
from todo_store.core.errors import ErrorContext, NotFoundError, ReferencedRowError
from todo_store.models.label import Label as LabelModel
from todo_store.models.todo_label import TodoLabel as TodoLabelModel
from todo_store.schemas.label import Label

logger = logging.getLogger(__name__)


class SqlLabelRepository:
    """Label persistence on an AsyncSession owned by the caller."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, name: str) -> LabelId:
        label = LabelModel(name=name)
        self.db.add(label)
        await self.db.flush()
        logger.debug("Label created", extra={"label_id": label.id})
        return LabelId(label.id)

    async def get(self, label_id: LabelId) -> Label:
        return Label.model_validate(await self._get_model(label_id))

    async def all(self) -> list[Label]:
        result = await self.db.execute(select(LabelModel).order_by(LabelModel.id))
        return [Label.model_validate(row) for row in result.scalars().all()]

    async def delete(self, label_id: LabelId) -> None:
        label = await self._get_model(label_id)
        references = await self.db.scalar(
            select(func.count())
            .select_from(TodoLabelModel)
            .where(TodoLabelModel.label_id == label_id)
        )
        if references:
            raise ReferencedRowError(
                "Label", label_id, references,
                ErrorContext(table="labels", row_id=label_id, operation="delete"),
            )
        await self.db.delete(label)
        await self.db.flush()
        logger.debug("Label deleted", extra={"label_id": label_id})

    async def _get_model(self, label_id: LabelId) -> LabelModel:
        result = await self.db.execute(
            select(LabelModel).where(LabelModel.id == label_id),
        )
        label = result.scalar_one_or_none()
        if label is None:
            raise NotFoundError(
                "Label", label_id,
                ErrorContext(table="labels", row_id=label_id, operation="get"),
            )
        return label
