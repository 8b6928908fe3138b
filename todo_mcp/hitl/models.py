"""Pydantic models for the confirmation (human-in-the-loop) workflow.

A query never mutates the task list. Add and delete requests are staged
as a ``Confirmation`` and only applied when ``confirm`` is called with
``approved=True``. Every outcome of ``query`` and ``confirm`` is one of the
tagged variants below; the ``kind`` field is the discriminator.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import Field, model_validator

from todo_mcp.middleware.validator import MAX_TITLE_LENGTH
from todo_mcp.tasks.models import Task, TaskDeleted, TaskNotFound, TodoModel

CONFIRMATION_PENDING_MESSAGE = (
    "ACTION NOT TAKEN. Approve or reject this confirmation with todo_confirm."
)
MISSING_TITLE_MESSAGE = "I could not determine a title to add."
MISSING_TASK_MESSAGE = "No matching task found to delete."
TITLE_TOO_LONG_MESSAGE = (
    f"That title is too long (max {MAX_TITLE_LENGTH} characters). "
    "Please shorten it and ask again."
)
REJECTED_MESSAGE = "User chose not to proceed with this action."
NO_SUCH_CONFIRMATION_MESSAGE = "No matching confirmation found."


class ConfirmationAction(str, Enum):
    """The two reversible actions that require approval."""

    ADD = "add"
    DELETE = "delete"


class ConfirmationStatus(str, Enum):
    """Lifecycle of a confirmation.

    Attributes:
        PENDING: Staged and waiting for a decision.
        APPLIED: Approved; the action was carried out.
        DISCARDED: Rejected; nothing was changed.
    """

    PENDING = "pending"
    APPLIED = "applied"
    DISCARDED = "discarded"


class Confirmation(TodoModel):
    """A staged add or delete awaiting human approval.

    Attributes:
        id: Unique identifier for this confirmation (UUID4).
        action: Which action will run on approval.
        title: Task title (add only).
        description: Optional task description (add only).
        task_id: Target task id (delete only).
        created_at: Timestamp when the confirmation was staged.
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique identifier for this confirmation",
    )
    action: ConfirmationAction = Field(..., description="Action to apply on approval")
    title: str | None = Field(default=None, description="Title of the task to add")
    description: str | None = Field(
        default=None,
        description="Description of the task to add",
    )
    task_id: str | None = Field(default=None, description="Id of the task to delete")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the confirmation was created (UTC)",
    )

    @model_validator(mode="after")
    def _check_payload(self) -> Confirmation:
        if self.action is ConfirmationAction.ADD and not (self.title or "").strip():
            raise ValueError("add confirmation requires a non-empty title")
        if self.action is ConfirmationAction.DELETE and not (self.task_id or "").strip():
            raise ValueError("delete confirmation requires a non-empty task_id")
        return self


# =============================================================================
# Query Results
# =============================================================================


class ConfirmationRequest(TodoModel):
    """Returned by ``query`` when an add or delete has been staged."""

    kind: Literal["confirmation"] = "confirmation"
    status: Literal["pending_confirmation"] = "pending_confirmation"
    confirmation: Confirmation
    preview: dict[str, Any] = Field(
        default_factory=dict,
        description="Human-readable summary of what approval will do",
    )
    message: str = CONFIRMATION_PENDING_MESSAGE


class TaskListResult(TodoModel):
    """Returned by ``query`` for a list intent."""

    kind: Literal["tasks"] = "tasks"
    tasks: tuple[Task, ...] = ()


class MessageResult(TodoModel):
    """Returned by ``query`` when nothing was staged."""

    kind: Literal["message"] = "message"
    message: str = ""


QueryResult = Annotated[
    ConfirmationRequest | TaskListResult | MessageResult,
    Field(discriminator="kind"),
]


# =============================================================================
# Confirm Results
# =============================================================================


class TaskAdded(TodoModel):
    """Returned by ``confirm`` after an approved add."""

    kind: Literal["task_added"] = "task_added"
    task: Task


class ActionRejected(TodoModel):
    """Returned by ``confirm`` when the user declined."""

    kind: Literal["rejected"] = "rejected"
    confirmation_id: str
    message: str = REJECTED_MESSAGE


class NoSuchConfirmation(TodoModel):
    """Returned by ``confirm`` when the id is not pending."""

    kind: Literal["no_such_confirmation"] = "no_such_confirmation"
    confirmation_id: str
    message: str = NO_SUCH_CONFIRMATION_MESSAGE


ConfirmResult = Annotated[
    TaskAdded | TaskDeleted | TaskNotFound | ActionRejected | NoSuchConfirmation,
    Field(discriminator="kind"),
]


def resolution_status(result: Any) -> ConfirmationStatus | None:
    """Map a confirm result to the terminal state of its confirmation.

    Returns:
        APPLIED or DISCARDED, or None when no confirmation was matched.
    """
    if isinstance(result, TaskAdded | TaskDeleted | TaskNotFound):
        return ConfirmationStatus.APPLIED
    if isinstance(result, ActionRejected):
        return ConfirmationStatus.DISCARDED
    return None
