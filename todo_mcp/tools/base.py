"""Base utilities for Todo MCP tools.

This module provides shared utilities used by all Todo MCP tools including:
- Standardized response builders
- Audit logging wrapper
- Access to the agent registry and oracle singletons
"""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from todo_mcp.agent.registry import AgentRegistry, create_registry
from todo_mcp.agent.task_manager import TaskManagerAgent
from todo_mcp.middleware.audit_logger import audit_logger
from todo_mcp.oracle import IntentOracle, create_oracle

logger = logging.getLogger(__name__)

T = TypeVar("T")

_registry: AgentRegistry | None = None
_oracle: IntentOracle | None = None


# =============================================================================
# Standard Response Keys
# =============================================================================


class ResponseKeys:
    """Standard keys for tool responses."""

    STATUS = "status"
    DATA = "data"
    MESSAGE = "message"
    COUNT = "count"
    ERROR = "error"
    ERROR_CODE = "error_code"


# =============================================================================
# Response Builders
# =============================================================================


def build_success_response(
    data: Any,
    message: str | None = None,
    count: int | None = None,
) -> dict[str, Any]:
    """Build standardized success response.

    Args:
        data: Tool-specific payload.
        message: Optional human-readable message.
        count: Optional item count.

    Returns:
        Standardized success response dict.
    """
    response: dict[str, Any] = {
        ResponseKeys.STATUS: "success",
        ResponseKeys.DATA: data,
    }
    if message:
        response[ResponseKeys.MESSAGE] = message
    if count is not None:
        response[ResponseKeys.COUNT] = count
    return response


def build_error_response(
    error: str,
    error_code: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build standardized error response.

    Args:
        error: Human-readable error message.
        error_code: Optional error code for programmatic handling.
        details: Optional additional error details.

    Returns:
        Standardized error response dict.
    """
    response: dict[str, Any] = {
        ResponseKeys.STATUS: "error",
        ResponseKeys.ERROR: error,
    }
    if error_code:
        response[ResponseKeys.ERROR_CODE] = error_code
    if details:
        response.update(details)
    return response


# =============================================================================
# Tool Execution Wrapper
# =============================================================================


async def execute_tool(
    tool_name: str,
    params: dict[str, Any],
    operation: Callable[[], T | Awaitable[T]],
    agent_id: str = "default",
) -> T:
    """Execute a tool operation with timing and audit logging.

    Args:
        tool_name: Name of the tool being executed.
        params: Tool parameters (for audit logging).
        operation: The operation to execute; may be sync or return an
            awaitable.
        agent_id: Agent identity for the audit entry.

    Returns:
        Result of the operation.

    Raises:
        Whatever the operation raises, after it has been audited.
    """
    start_time = time.perf_counter()
    result_status = "success"
    error_message: str | None = None

    try:
        result = operation()
        if inspect.isawaitable(result):
            result = await result
        return result  # type: ignore[return-value]

    except Exception as e:
        result_status = "error"
        error_message = str(e)
        raise
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        audit_logger.log_tool_call(
            tool_name=tool_name,
            parameters=params,
            agent_id=agent_id,
            result_status=result_status,
            error_message=error_message,
            duration_ms=duration_ms,
        )


# =============================================================================
# Agent Access
# =============================================================================


def get_registry() -> AgentRegistry:
    """Get the process-wide agent registry, creating it on first use."""
    global _registry
    if _registry is None:
        _registry = create_registry()
    return _registry


def get_oracle() -> IntentOracle:
    """Get the process-wide oracle, creating it on first use.

    Raises:
        OracleError: If the configured backend cannot be created.
    """
    global _oracle
    if _oracle is None:
        _oracle = create_oracle()
    return _oracle


def get_agent(agent_id: str, with_oracle: bool = True) -> TaskManagerAgent:
    """Build a task manager bound to an identity's context.

    Callers that mutate state must hold ``get_registry().lock(agent_id)``.

    Args:
        agent_id: Agent identity.
        with_oracle: Attach the oracle. Confirming and listing do not need
            it, so they work even when the oracle cannot be created.
    """
    oracle = get_oracle() if with_oracle else None
    return TaskManagerAgent(get_registry().get(agent_id), oracle)
