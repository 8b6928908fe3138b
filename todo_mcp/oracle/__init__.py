"""Natural-language oracles for intent classification and extraction.

Two backends are available, selected with ORACLE_BACKEND:

- ``llm`` (default): OpenAI-compatible chat model (``LLMOracle``)
- ``rules``: offline regex patterns (``RuleBasedOracle``)
"""

from __future__ import annotations

import logging

from todo_mcp.config import ORACLE_BACKENDS, get_oracle_backend
from todo_mcp.oracle.base import (
    AddParams,
    DeleteParams,
    Intent,
    IntentKind,
    IntentOracle,
)
from todo_mcp.oracle.llm import LLMOracle
from todo_mcp.oracle.rules import RuleBasedOracle
from todo_mcp.utils.errors import ValidationError

logger = logging.getLogger(__name__)


def create_oracle(backend: str | None = None) -> IntentOracle:
    """Create the oracle for the configured backend.

    Args:
        backend: Backend name; defaults to ORACLE_BACKEND.

    Returns:
        A ready-to-use oracle.

    Raises:
        ValidationError: If the backend name is unknown.
        OracleError: If the LLM client cannot be created.
    """
    backend = (backend or get_oracle_backend()).lower()
    match backend:
        case "llm":
            oracle: IntentOracle = LLMOracle()
        case "rules":
            oracle = RuleBasedOracle()
        case _:
            raise ValidationError(
                f"Unknown oracle backend: {backend}",
                field="ORACLE_BACKEND",
                details={"supported": list(ORACLE_BACKENDS)},
            )
    logger.info("Using %s oracle backend", backend)
    return oracle


__all__ = [
    "AddParams",
    "DeleteParams",
    "Intent",
    "IntentKind",
    "IntentOracle",
    "LLMOracle",
    "RuleBasedOracle",
    "create_oracle",
]
