"""Pydantic Schemas: read models returned by the stores and collaborator payloads."""

from todo_store.schemas.label import Label, LabelCreate
from todo_store.schemas.todo import Todo, TodoCreate, TodoUpdate
from todo_store.schemas.todo_label import TodoLabel

__all__ = ["Label", "LabelCreate", "Todo", "TodoCreate", "TodoUpdate", "TodoLabel"]
