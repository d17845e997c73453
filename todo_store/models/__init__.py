"""ORM Models: SQLAlchemy declarative models for todos, labels and their association.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before create_all / autogenerate

Design Decisions:
    - One file per entity
    - No relationship() between models: joins are explicit in the repositories and
      no ORM cascade can stand in for the missing ON DELETE action
"""

from todo_store.models.todo import Todo  # noqa: F401
from todo_store.models.label import Label  # noqa: F401
from todo_store.models.todo_label import TodoLabel  # noqa: F401
