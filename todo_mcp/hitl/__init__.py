"""Human-in-the-loop confirmation workflow for task mutations.

Adding or deleting a task is never done directly from a natural-language
request. The request is staged as a pending confirmation and applied only
when the user approves it.

Usage:
    from todo_mcp.hitl import ConfirmationManager

    manager = ConfirmationManager(context)

    # Step 1: stage
    request = manager.stage_add("buy milk")

    # Step 2: resolve (once)
    result = manager.resolve(request.confirmation.id, approved=True)
"""

from todo_mcp.hitl.manager import ConfirmationManager
from todo_mcp.hitl.models import (
    ActionRejected,
    Confirmation,
    ConfirmationAction,
    ConfirmationRequest,
    ConfirmationStatus,
    ConfirmResult,
    MessageResult,
    NoSuchConfirmation,
    QueryResult,
    TaskAdded,
    TaskListResult,
    resolution_status,
)

__all__ = [
    "ActionRejected",
    "Confirmation",
    "ConfirmationAction",
    "ConfirmationManager",
    "ConfirmationRequest",
    "ConfirmationStatus",
    "ConfirmResult",
    "MessageResult",
    "NoSuchConfirmation",
    "QueryResult",
    "TaskAdded",
    "TaskListResult",
    "resolution_status",
]
