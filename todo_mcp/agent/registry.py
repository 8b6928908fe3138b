"""Registry of per-identity agent contexts.

The registry is the hosting layer's side of the concurrency contract: it
hands out one ``AgentContext`` per agent identity, loads it from storage on
first use, and serializes requests for the same identity with an
``asyncio.Lock``. Different identities never share anything.
"""

from __future__ import annotations

import asyncio
import logging

from todo_mcp.agent.state import AgentContext, StateHook
from todo_mcp.agent.storage import StateStorage
from todo_mcp.config import get_state_dir, is_persistence_enabled
from todo_mcp.middleware.audit_logger import audit_logger

logger = logging.getLogger(__name__)


class AgentRegistry:
    """Lazily created, optionally persisted agent contexts.

    Example:
        >>> registry = AgentRegistry(storage=None)
        >>> async with registry.lock("alice"):
        ...     context = registry.get("alice")
    """

    def __init__(
        self,
        storage: StateStorage | None = None,
        on_state_update: StateHook | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            storage: Where to load and save state. None keeps state in memory.
            on_state_update: Hook passed to every context.
        """
        self._storage = storage
        self._on_state_update = on_state_update
        # One entry per identity seen, kept for the process lifetime.
        self._contexts: dict[str, AgentContext] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def storage(self) -> StateStorage | None:
        return self._storage

    def get(self, agent_id: str) -> AgentContext:
        """Get the context for an identity, loading stored state once.

        Raises:
            StorageError: If stored state exists but cannot be read.
        """
        context = self._contexts.get(agent_id)
        if context is None:
            state = self._storage.load(agent_id) if self._storage else None
            context = AgentContext(
                agent_id,
                state=state,
                storage=self._storage,
                on_state_update=self._on_state_update,
            )
            self._contexts[agent_id] = context
            logger.info(
                "Loaded agent %s (%d tasks, %d pending confirmations)",
                agent_id,
                len(context.state.tasks),
                len(context.state.confirmations),
            )
        return context

    def lock(self, agent_id: str) -> asyncio.Lock:
        """Get the lock serializing requests for one identity."""
        if agent_id not in self._locks:
            self._locks[agent_id] = asyncio.Lock()
        return self._locks[agent_id]

    def known_agents(self) -> list[str]:
        """Identities that are loaded or have stored state."""
        agents = set(self._contexts)
        if self._storage is not None:
            agents.update(self._storage.list_agents())
        return sorted(agents)


def create_registry() -> AgentRegistry:
    """Build the registry from environment configuration."""
    storage = StateStorage(get_state_dir()) if is_persistence_enabled() else None
    if storage is None:
        logger.info("State persistence disabled; agent state is kept in memory")
    return AgentRegistry(storage=storage, on_state_update=audit_logger.log_state_update)
