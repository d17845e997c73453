"""Label ORM: a named tag shared across todos.

Invariants:
    - id is an autoincrement integer primary key, never reused
    - name is non-nullable text with no uniqueness constraint
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from todo_store.db.base import Base


class Label(Base):
    """Label entity: created independently, never mutated by the store."""
    __tablename__ = "labels"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Label id={self.id} name={self.name!r}>"
