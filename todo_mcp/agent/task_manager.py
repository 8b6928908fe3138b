"""Task manager agent: natural-language requests with confirmation.

``query`` interprets a request through the oracle. Listing is answered
directly; add and delete are only staged. ``confirm`` then applies or
discards a staged action. Nothing in ``query`` ever adds or removes a task.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from todo_mcp.agent.state import AgentContext
from todo_mcp.config import get_oracle_timeout_ms
from todo_mcp.hitl.manager import ConfirmationManager
from todo_mcp.hitl.models import (
    ActionRejected,
    Confirmation,
    ConfirmationRequest,
    MessageResult,
    NoSuchConfirmation,
    TaskAdded,
    TaskListResult,
)
from todo_mcp.oracle.base import IntentKind, IntentOracle
from todo_mcp.tasks.models import Task, TaskDeleted, TaskNotFound
from todo_mcp.tasks.store import TaskStore
from todo_mcp.utils.errors import OracleError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaskManagerAgent:
    """Confirmation-gated task manager for one agent identity.

    Example:
        >>> agent = TaskManagerAgent(context, RuleBasedOracle())
        >>> request = await agent.query("add a task to buy milk")
        >>> agent.confirm(request.confirmation.id, approved=True)
        TaskAdded(kind='task_added', task=Task(title='buy milk', ...))
    """

    def __init__(
        self,
        context: AgentContext,
        oracle: IntentOracle | None,
        oracle_timeout_ms: int | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            context: State holder for this identity.
            oracle: Classification/extraction service. May be None when the
                agent is only used to confirm or list.
            oracle_timeout_ms: Per-call timeout. Defaults to ORACLE_TIMEOUT_MS.
        """
        self._context = context
        self._oracle = oracle
        self._timeout_ms = oracle_timeout_ms or get_oracle_timeout_ms()
        self.tasks = TaskStore(context)
        self.confirmations = ConfirmationManager(context)

    @property
    def agent_id(self) -> str:
        return self._context.agent_id

    async def _ask_oracle(self, operation: str, call: Awaitable[T]) -> T:
        """Await an oracle call with the timeout, normalizing failures.

        Cancellation propagates unchanged.

        Raises:
            OracleError: On timeout or any oracle-side failure.
        """
        try:
            return await asyncio.wait_for(call, timeout=self._timeout_ms / 1000)
        except TimeoutError as e:
            logger.warning(
                "Oracle %s timed out after %d ms for agent %s",
                operation,
                self._timeout_ms,
                self.agent_id,
            )
            raise OracleError(
                f"Oracle {operation} timed out",
                timed_out=True,
                details={"operation": operation, "timeout_ms": self._timeout_ms},
            ) from e
        except OracleError:
            raise
        except Exception as e:
            logger.error("Oracle %s failed for agent %s: %s", operation, self.agent_id, e)
            raise OracleError(
                f"Oracle {operation} failed: {e}",
                details={"operation": operation, "error_type": type(e).__name__},
            ) from e

    async def query(
        self, text: str
    ) -> ConfirmationRequest | TaskListResult | MessageResult:
        """Process one natural-language request.

        Args:
            text: The user's request.

        Returns:
            ConfirmationRequest for a staged add/delete, TaskListResult for
            a list request, MessageResult otherwise.

        Raises:
            OracleError: If classification or extraction fails or times out.
                No state is changed in that case.
        """
        if self._oracle is None:
            raise OracleError("No oracle configured for this agent")

        intent = await self._ask_oracle(
            "classify", self._oracle.classify(text, self.tasks.list_tasks())
        )
        logger.info("Query for agent %s classified as %s", self.agent_id, intent.kind.value)

        match intent.kind:
            case IntentKind.LIST:
                return TaskListResult(tasks=self.tasks.list_tasks())
            case IntentKind.ADD:
                add_params = await self._ask_oracle(
                    "extract_add_params", self._oracle.extract_add_params(text)
                )
                return self.confirmations.stage_add(
                    add_params.title, add_params.description
                )
            case IntentKind.DELETE:
                delete_params = await self._ask_oracle(
                    "extract_delete_params",
                    self._oracle.extract_delete_params(text, self.tasks.list_tasks()),
                )
                return self.confirmations.stage_delete(delete_params.task_id)
            case _:
                return MessageResult(message=intent.message or "")

    def confirm(
        self,
        confirmation_id: str,
        approved: bool,
    ) -> TaskAdded | TaskDeleted | TaskNotFound | ActionRejected | NoSuchConfirmation:
        """Resolve a pending confirmation.

        Args:
            confirmation_id: Id from a ConfirmationRequest.
            approved: Whether to carry out the action.

        Returns:
            The outcome; see ``ConfirmationManager.resolve``.
        """
        return self.confirmations.resolve(confirmation_id, approved)

    def list_tasks(self) -> tuple[Task, ...]:
        return self.tasks.list_tasks()

    def pending_confirmations(self) -> tuple[Confirmation, ...]:
        return self.confirmations.pending()
