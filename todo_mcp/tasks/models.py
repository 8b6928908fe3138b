"""Pydantic models for to-do tasks and Task Store results."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TodoModel(BaseModel):
    """Base for persisted models: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Task(TodoModel):
    """A single to-do item.

    Tasks are created by the Task Store on a confirmed add and are never
    modified afterwards; they only disappear on a confirmed delete.

    Attributes:
        id: Unique identifier (UUID4).
        title: Short task title, never empty.
        description: Optional longer description.
        completed: Completion flag, always False on creation.
        created_at: Creation timestamp (UTC).
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique identifier for this task",
    )
    title: str = Field(..., min_length=1, description="Task title")
    description: str | None = Field(
        default=None,
        description="Optional task description",
    )
    completed: bool = Field(default=False, description="Completion flag")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the task was created (UTC)",
    )


class TaskDeleted(TodoModel):
    """Result of deleting a task that existed."""

    kind: Literal["task_deleted"] = "task_deleted"
    task_id: str


class TaskNotFound(TodoModel):
    """Result of deleting a task id that matched nothing."""

    kind: Literal["task_not_found"] = "task_not_found"
    task_id: str
    message: str = "No task with this id exists."
