"""Per-identity agent state and the context object that owns it.

``AgentState`` is an immutable value. The only way to change what an agent
holds is ``AgentContext.set_state`` with a complete new value, which
persists it, swaps it in and then notifies the state-change hook.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from todo_mcp.hitl.models import Confirmation
from todo_mcp.tasks.models import Task, TodoModel

if TYPE_CHECKING:
    from todo_mcp.agent.storage import StateStorage

logger = logging.getLogger(__name__)

StateHook = Callable[[str, "AgentState"], None]


class AgentState(TodoModel):
    """Everything one agent identity holds.

    Attributes:
        tasks: Tasks in insertion order.
        confirmations: Pending confirmations in staging order.
    """

    tasks: tuple[Task, ...] = ()
    confirmations: tuple[Confirmation, ...] = ()

    def find_confirmation(self, confirmation_id: str) -> Confirmation | None:
        for confirmation in self.confirmations:
            if confirmation.id == confirmation_id:
                return confirmation
        return None

    def with_confirmation(self, confirmation: Confirmation) -> AgentState:
        return self.model_copy(
            update={"confirmations": (*self.confirmations, confirmation)}
        )

    def without_confirmation(self, confirmation_id: str) -> AgentState:
        remaining = tuple(c for c in self.confirmations if c.id != confirmation_id)
        return self.model_copy(update={"confirmations": remaining})


class AgentContext:
    """Owns the current ``AgentState`` for one agent identity.

    Attributes:
        agent_id: The identity this context serves.

    Example:
        >>> context = AgentContext("default")
        >>> context.set_state(context.state.model_copy(update={"tasks": ()}))
    """

    def __init__(
        self,
        agent_id: str,
        state: AgentState | None = None,
        storage: StateStorage | None = None,
        on_state_update: StateHook | None = None,
    ) -> None:
        """Initialize the context.

        Args:
            agent_id: Agent identity.
            state: Initial state. Defaults to an empty task list.
            storage: Optional storage written on every state change.
            on_state_update: Optional hook called with (agent_id, state)
                after every successful change.
        """
        self.agent_id = agent_id
        self._state = state if state is not None else AgentState()
        self._storage = storage
        self._on_state_update = on_state_update

    @property
    def state(self) -> AgentState:
        """The current state snapshot."""
        return self._state

    def set_state(self, state: AgentState) -> None:
        """Replace the whole state.

        The new state is persisted first, so a storage failure leaves the
        current state in place and propagates as StorageError.

        Args:
            state: The complete new state.
        """
        if self._storage is not None:
            self._storage.save(self.agent_id, state)
        self._state = state
        self._notify(state)

    def _notify(self, state: AgentState) -> None:
        if self._on_state_update is None:
            return
        try:
            self._on_state_update(self.agent_id, state)
        except Exception:
            logger.exception(
                "State update hook failed for agent %s; ignoring", self.agent_id
            )
