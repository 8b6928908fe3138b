"""Confirmation manager: staging and resolving pending actions.

Staging turns an extracted add/delete request into a pending
``Confirmation`` without touching the task list. Resolving consumes a
pending confirmation exactly once: the action is applied on approval and
discarded otherwise, and in both cases the confirmation leaves the pending
set in the same state replacement.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from todo_mcp.hitl.models import (
    MISSING_TASK_MESSAGE,
    MISSING_TITLE_MESSAGE,
    TITLE_TOO_LONG_MESSAGE,
    ActionRejected,
    Confirmation,
    ConfirmationAction,
    ConfirmationRequest,
    MessageResult,
    NoSuchConfirmation,
    TaskAdded,
    resolution_status,
)
from todo_mcp.middleware.validator import MAX_TITLE_LENGTH, normalize_title
from todo_mcp.tasks.models import Task, TaskDeleted, TaskNotFound
from todo_mcp.tasks.store import add_task_to, delete_task_from

if TYPE_CHECKING:
    from todo_mcp.agent.state import AgentContext

logger = logging.getLogger(__name__)

DELETE_WARNING = "WARNING: Approving will permanently remove this task."


class ConfirmationManager:
    """Stages and resolves confirmations for one agent.

    Example:
        >>> manager = ConfirmationManager(context)
        >>> request = manager.stage_add("buy milk")
        >>> manager.resolve(request.confirmation.id, approved=True)
        TaskAdded(kind='task_added', task=Task(...))
    """

    def __init__(self, context: AgentContext) -> None:
        """Initialize the manager.

        Args:
            context: The agent context holding tasks and confirmations.
        """
        self._context = context

    def pending(self) -> tuple[Confirmation, ...]:
        """Return pending confirmations in staging order."""
        return self._context.state.confirmations

    # =========================================================================
    # Staging
    # =========================================================================

    def stage_add(
        self,
        title: str | None,
        description: str | None = None,
    ) -> ConfirmationRequest | MessageResult:
        """Stage a task creation.

        Args:
            title: Extracted title, or None if extraction failed.
            description: Optional extracted description.

        Returns:
            ConfirmationRequest if a title was available, otherwise a
            MessageResult explaining why nothing was staged (no title, or a
            title longer than MAX_TITLE_LENGTH).
        """
        title = normalize_title(title)
        if not title:
            logger.info("Add not staged for agent %s: no title", self._context.agent_id)
            return MessageResult(message=MISSING_TITLE_MESSAGE)

        if len(title) > MAX_TITLE_LENGTH:
            logger.info(
                "Add not staged for agent %s: title has %d characters",
                self._context.agent_id,
                len(title),
            )
            return MessageResult(message=TITLE_TOO_LONG_MESSAGE)

        description = (description or "").strip() or None
        confirmation = Confirmation(
            action=ConfirmationAction.ADD,
            title=title,
            description=description,
        )
        preview: dict[str, Any] = {"action": "add", "title": title}
        if description:
            preview["description"] = description
        return self._store(confirmation, preview)

    def stage_delete(
        self,
        task_id: str | None,
    ) -> ConfirmationRequest | MessageResult:
        """Stage a task deletion.

        The id must name a task that exists right now; an id that matches
        nothing is treated the same as a failed extraction.

        Args:
            task_id: Extracted task id, or None if extraction failed.

        Returns:
            ConfirmationRequest if the target resolved, otherwise a
            MessageResult explaining why nothing was staged.
        """
        task_id = (task_id or "").strip()
        target = self._find_task(task_id) if task_id else None
        if target is None:
            logger.info(
                "Delete not staged for agent %s: target %r unresolved",
                self._context.agent_id,
                task_id or None,
            )
            return MessageResult(message=MISSING_TASK_MESSAGE)

        confirmation = Confirmation(action=ConfirmationAction.DELETE, task_id=task_id)
        preview = {
            "action": "delete",
            "task_id": target.id,
            "title": target.title,
            "warning": DELETE_WARNING,
        }
        return self._store(confirmation, preview)

    def _store(
        self,
        confirmation: Confirmation,
        preview: dict[str, Any],
    ) -> ConfirmationRequest:
        self._context.set_state(self._context.state.with_confirmation(confirmation))
        logger.debug(
            "Stored confirmation: id=%s, action=%s, agent=%s",
            confirmation.id,
            confirmation.action.value,
            self._context.agent_id,
        )
        return ConfirmationRequest(confirmation=confirmation, preview=preview)

    def _find_task(self, task_id: str) -> Task | None:
        for task in self._context.state.tasks:
            if task.id == task_id:
                return task
        return None

    # =========================================================================
    # Resolving
    # =========================================================================

    def resolve(
        self,
        confirmation_id: str,
        approved: bool,
    ) -> TaskAdded | TaskDeleted | TaskNotFound | ActionRejected | NoSuchConfirmation:
        """Apply or discard a pending confirmation.

        Args:
            confirmation_id: Id returned by a staging call.
            approved: True to apply the action, False to discard it.

        Returns:
            TaskAdded / TaskDeleted / TaskNotFound when approved,
            ActionRejected when declined, NoSuchConfirmation if the id is
            not pending (state is left untouched in that case).
        """
        state = self._context.state
        confirmation = state.find_confirmation(confirmation_id)

        if confirmation is None:
            logger.warning(
                "Resolve failed: confirmation_id=%s not found for agent %s",
                confirmation_id,
                self._context.agent_id,
            )
            return NoSuchConfirmation(confirmation_id=confirmation_id)

        result: TaskAdded | TaskDeleted | TaskNotFound | ActionRejected
        if not approved:
            result = ActionRejected(confirmation_id=confirmation_id)
        elif confirmation.action is ConfirmationAction.ADD:
            assert confirmation.title is not None  # guaranteed by Confirmation
            state, task = add_task_to(state, confirmation.title, confirmation.description)
            result = TaskAdded(task=task)
        else:
            assert confirmation.task_id is not None  # guaranteed by Confirmation
            state, result = delete_task_from(state, confirmation.task_id)

        self._context.set_state(state.without_confirmation(confirmation_id))
        logger.info(
            "Resolved confirmation: id=%s, action=%s, status=%s, result=%s",
            confirmation_id,
            confirmation.action.value,
            resolution_status(result).value,
            result.kind,
        )
        return result
