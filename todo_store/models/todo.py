"""Todo ORM: the task entity labels attach to.

Invariants:
    - id is an autoincrement integer primary key, never reused
    - text is non-nullable
"""

from sqlalchemy import Boolean, Integer, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from todo_store.db.base import Base


class Todo(Base):
    """Todo entity: referenced by todo_labels.todo_id."""
    __tablename__ = "todos"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )

    def __repr__(self) -> str:
        return f"<Todo id={self.id} completed={self.completed}>"
