"""Environment-driven configuration accessors.

Values are read on every call so tests can patch ``os.environ`` without
reloading modules. ``__main__`` loads a ``.env`` file (if present) before
anything here is consulted.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

ORACLE_BACKENDS = ("llm", "rules")
DEFAULT_ORACLE_BACKEND = "llm"
DEFAULT_LLM_MODEL = "gpt-4o-mini"
DEFAULT_ORACLE_TIMEOUT_MS = 30000


def _is_truthy(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


def get_oracle_backend() -> str:
    """Get the configured oracle backend name (``llm`` or ``rules``)."""
    return os.getenv("ORACLE_BACKEND", DEFAULT_ORACLE_BACKEND).strip().lower()


def get_llm_model() -> str:
    """Get the chat model used by the LLM oracle."""
    return os.getenv("LLM_MODEL", DEFAULT_LLM_MODEL)


def get_oracle_timeout_ms() -> int:
    """Get the per-call oracle timeout.

    Returns:
        Timeout in milliseconds from ORACLE_TIMEOUT_MS or 30000.
    """
    try:
        value = int(os.getenv("ORACLE_TIMEOUT_MS", str(DEFAULT_ORACLE_TIMEOUT_MS)))
    except ValueError:
        logger.warning(
            "Invalid ORACLE_TIMEOUT_MS value, using default %d",
            DEFAULT_ORACLE_TIMEOUT_MS,
        )
        return DEFAULT_ORACLE_TIMEOUT_MS
    if value <= 0:
        logger.warning(
            "ORACLE_TIMEOUT_MS must be positive, using default %d",
            DEFAULT_ORACLE_TIMEOUT_MS,
        )
        return DEFAULT_ORACLE_TIMEOUT_MS
    return value


def get_state_dir() -> Path:
    """Get the directory holding per-agent state files."""
    configured = os.getenv("TODO_STATE_DIR")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".todo-mcp" / "state"


def is_persistence_enabled() -> bool:
    """Check if agent state should be written to disk."""
    return _is_truthy(os.getenv("PERSIST_STATE", "true"))


def is_audit_enabled() -> bool:
    """Check if JSON audit lines should be written to stderr."""
    return _is_truthy(os.getenv("AUDIT_LOG", "true"))
