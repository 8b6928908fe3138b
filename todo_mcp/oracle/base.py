"""Contract for the natural-language oracle.

The oracle classifies a request into an intent and, for add/delete,
extracts the parameters. How it does so is its own business; the core only
relies on this interface and on ``None`` meaning "could not extract".
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, Field

from todo_mcp.tasks.models import Task


class IntentKind(str, Enum):
    """What a request asks for."""

    ADD = "add"
    DELETE = "delete"
    LIST = "list"
    NONE = "none"


class Intent(BaseModel):
    """Classification of a request.

    Attributes:
        kind: The recognized intent.
        message: Explanation for the user (used with ``none``).
    """

    kind: IntentKind
    message: str | None = None


class AddParams(BaseModel):
    """Parameters extracted for an add request."""

    title: str | None = Field(default=None, description="Task title, if found")
    description: str | None = Field(default=None, description="Optional details")


class DeleteParams(BaseModel):
    """Parameters extracted for a delete request."""

    task_id: str | None = Field(
        default=None,
        description="Id of the best-matching task, if any",
    )


class IntentOracle(Protocol):
    """Natural-language interpretation used by ``TaskManagerAgent``.

    Implementations may suspend and may raise; ``TaskManagerAgent`` turns
    any failure into ``OracleError`` and applies the timeout.
    """

    async def classify(self, query: str, tasks: Sequence[Task]) -> Intent: ...

    async def extract_add_params(self, query: str) -> AddParams: ...

    async def extract_delete_params(
        self, query: str, tasks: Sequence[Task]
    ) -> DeleteParams: ...
