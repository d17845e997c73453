"""Todo Schemas: read model plus create/update payloads."""

from pydantic import BaseModel, ConfigDict, Field


class Todo(BaseModel):
    """Persisted todo."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    text: str
    completed: bool = False


class TodoCreate(BaseModel):
    text: str = Field(min_length=1, max_length=100)


class TodoUpdate(BaseModel):
    """Partial update: omitted fields are left untouched."""
    text: str | None = Field(None, min_length=1, max_length=100)
    completed: bool | None = None
