"""File-based persistence for per-agent state.

Each agent identity is stored as one JSON document:

    {TODO_STATE_DIR}/{quoted agent_id}.state.json

    {"tasks": [{"id", "title", "description", "completed", "createdAt"}],
     "confirmations": [{"id", "action", "title", "description", "taskId",
                        "createdAt"}]}

The identity is percent-encoded into the file name, which keeps every
identity in its own file and lets ``list_agents`` recover it exactly.

Writes go to a temporary file that is then renamed over the target, so a
reader never sees a half-written document. File permissions are restricted
to the owner.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote, unquote

import pydantic

from todo_mcp.agent.state import AgentState
from todo_mcp.utils.errors import StorageError

logger = logging.getLogger(__name__)

STATE_SUFFIX = ".state.json"


class StateStorage:
    """JSON file storage keyed by agent identity.

    Example:
        >>> storage = StateStorage(Path("/tmp/todo-state"))
        >>> storage.save("default", AgentState())
        >>> storage.load("default")
        AgentState(tasks=(), confirmations=())
    """

    def __init__(self, base_dir: Path) -> None:
        """Initialize storage rooted at ``base_dir`` (created if missing).

        Args:
            base_dir: Directory for state files.
        """
        self._base_dir = base_dir
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                "Cannot create state directory",
                details={"path": str(base_dir), "error": str(e)},
            ) from e
        logger.info("StateStorage initialized at %s", self._base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _state_path(self, agent_id: str) -> Path:
        """Get the file path for an agent's state.

        Everything but letters, digits and ``_.-~`` is percent-encoded, so
        distinct identities never share a file and path separators cannot
        escape the base directory.

        Raises:
            StorageError: If the agent id is empty.
        """
        if not agent_id:
            raise StorageError("Invalid agent_id - empty")

        return self._base_dir / f"{quote(agent_id, safe='')}{STATE_SUFFIX}"

    def save(self, agent_id: str, state: AgentState) -> None:
        """Write an agent's state.

        Args:
            agent_id: Agent identity.
            state: State to persist.

        Raises:
            StorageError: If the file cannot be written.
        """
        path = self._state_path(agent_id)
        tmp_path = path.with_suffix(path.suffix + ".tmp")

        try:
            tmp_path.write_text(state.model_dump_json(by_alias=True, indent=2))
            tmp_path.chmod(0o600)
            tmp_path.replace(path)
            logger.debug(
                "Saved state for agent %s (%d tasks, %d pending)",
                agent_id,
                len(state.tasks),
                len(state.confirmations),
            )
        except PermissionError as e:
            logger.error("Permission denied writing state file: %s", e)
            raise StorageError(
                "Permission denied writing state file",
                details={"path": str(path), "error": str(e)},
            ) from e
        except OSError as e:
            logger.error("Failed to save state for %s: %s", agent_id, e)
            raise StorageError(
                f"Failed to save state: {e}",
                details={"agent_id": agent_id, "error_type": type(e).__name__},
            ) from e

    def load(self, agent_id: str) -> AgentState | None:
        """Read an agent's state.

        Args:
            agent_id: Agent identity.

        Returns:
            The stored state, or None if nothing was stored yet.

        Raises:
            StorageError: If the file exists but cannot be read or parsed.
        """
        path = self._state_path(agent_id)

        if not path.exists():
            logger.debug("No stored state for agent %s", agent_id)
            return None

        try:
            return AgentState.model_validate_json(path.read_bytes())
        except (pydantic.ValidationError, UnicodeDecodeError) as e:
            logger.error("Invalid state file for %s: %s", agent_id, e)
            raise StorageError(
                "State file is corrupted",
                details={"agent_id": agent_id, "error": str(e)},
            ) from e
        except OSError as e:
            logger.error("Failed to load state for %s: %s", agent_id, e)
            raise StorageError(
                f"Failed to load state: {e}",
                details={"agent_id": agent_id, "error_type": type(e).__name__},
            ) from e

    def list_agents(self) -> list[str]:
        """List agent identities with stored state.

        Returns:
            Sorted agent ids, decoded from their file names.
        """
        agents = []
        for path in self._base_dir.glob(f"*{STATE_SUFFIX}"):
            agents.append(unquote(path.name[: -len(STATE_SUFFIX)]))
        return sorted(agents)
