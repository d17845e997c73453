"""Create labels and todo_labels tables.

Revision ID: 002_create_labels_table
Revises: 001_create_todos_table
Create Date: 2023-05-01

todo_labels foreign keys are DEFERRABLE INITIALLY DEFERRED: they are checked
at COMMIT, so a todo, a label and their association can be inserted in any
order inside one transaction. No ON DELETE action and no uniqueness on
(todo_id, label_id) or labels.name.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002_create_labels_table"
down_revision: Union[str, None] = "001_create_todos_table"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "labels",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sqlite_autoincrement=True,
        if_not_exists=True,
    )

    op.create_table(
        "todo_labels",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "todo_id", sa.Integer,
            sa.ForeignKey("todos.id", deferrable=True, initially="DEFERRED"),
            nullable=False,
        ),
        sa.Column(
            "label_id", sa.Integer,
            sa.ForeignKey("labels.id", deferrable=True, initially="DEFERRED"),
            nullable=False,
        ),
        sqlite_autoincrement=True,
        if_not_exists=True,
    )


def downgrade() -> None:
    op.drop_table("todo_labels", if_exists=True)
    op.drop_table("labels", if_exists=True)
