"""Label Schemas: read model and creation payload.

Invariants:
    - Label is immutable and built from ORM rows (from_attributes)
    - LabelCreate validates payload length only; the store accepts any name
"""

from pydantic import BaseModel, ConfigDict, Field


class Label(BaseModel):
    """Persisted label."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str


class LabelCreate(BaseModel):
    """Label creation payload: name is required and at most 255 chars."""
    name: str = Field(min_length=1, max_length=255)
