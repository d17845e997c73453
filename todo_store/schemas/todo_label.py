"""TodoLabel Schema: one association row."""

from pydantic import BaseModel, ConfigDict


class TodoLabel(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    todo_id: int
    label_id: int
