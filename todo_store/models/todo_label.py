"""TodoLabel ORM: association row linking one todo to one label.

Invariants:
    - id is a surrogate key; (todo_id, label_id) is NOT unique
    - Both foreign keys are DEFERRABLE INITIALLY DEFERRED: checked at COMMIT, not per statement
    - No ON DELETE action on either foreign key

Design Decisions:
    - Deferred checks let a transaction insert todo, label and association in any order
"""

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from todo_store.db.base import Base


class TodoLabel(Base):
    """Many-to-many link between todos and labels."""
    __tablename__ = "todo_labels"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    todo_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("todos.id", deferrable=True, initially="DEFERRED"),
        nullable=False,
    )
    label_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("labels.id", deferrable=True, initially="DEFERRED"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<TodoLabel id={self.id} todo_id={self.todo_id} label_id={self.label_id}>"
