"""Read-only tools: list tasks and pending confirmations."""

from __future__ import annotations

import logging
from typing import Any

from todo_mcp.middleware.validator import validate_agent_id
from todo_mcp.schemas.tools import ListConfirmationsParams, ListTasksParams
from todo_mcp.tools.base import (
    build_error_response,
    build_success_response,
    execute_tool,
    get_agent,
)
from todo_mcp.utils.errors import TodoMCPError, ValidationError

logger = logging.getLogger(__name__)


async def todo_list_tasks(params: ListTasksParams) -> dict[str, Any]:
    """List an identity's tasks in insertion order.

    Args:
        params: ListTasksParams containing agent_id.

    Returns:
        Success response with data.tasks and count, or an error response.
    """
    try:
        agent_id = validate_agent_id(params.agent_id)

        def _list_operation():
            return get_agent(agent_id, with_oracle=False).list_tasks()

        tasks = await execute_tool(
            tool_name="todo_list_tasks",
            params={},
            operation=_list_operation,
            agent_id=agent_id,
        )

        return build_success_response(
            data={
                "tasks": [t.model_dump(mode="json", by_alias=True) for t in tasks],
            },
            count=len(tasks),
        )

    except ValidationError as e:
        logger.warning("Validation error in todo_list_tasks: %s", e)
        return build_error_response(error=str(e), error_code="VALIDATION_ERROR")
    except TodoMCPError as e:
        logger.error("Todo MCP error in todo_list_tasks: %s", e)
        return build_error_response(
            error=str(e),
            error_code=e.__class__.__name__.upper(),
        )
    except Exception as e:
        logger.exception("Unexpected error in todo_list_tasks")
        return build_error_response(
            error=f"Failed to list tasks: {e}",
            error_code="INTERNAL_ERROR",
        )


async def todo_list_confirmations(params: ListConfirmationsParams) -> dict[str, Any]:
    """List confirmations still waiting for todo_confirm."""
    try:
        agent_id = validate_agent_id(params.agent_id)

        def _list_operation():
            return get_agent(agent_id, with_oracle=False).pending_confirmations()

        confirmations = await execute_tool(
            tool_name="todo_list_confirmations",
            params={},
            operation=_list_operation,
            agent_id=agent_id,
        )

        return build_success_response(
            data={
                "confirmations": [
                    c.model_dump(mode="json", by_alias=True) for c in confirmations
                ],
            },
            count=len(confirmations),
        )

    except ValidationError as e:
        logger.warning("Validation error in todo_list_confirmations: %s", e)
        return build_error_response(error=str(e), error_code="VALIDATION_ERROR")
    except TodoMCPError as e:
        logger.error("Todo MCP error in todo_list_confirmations: %s", e)
        return build_error_response(
            error=str(e),
            error_code=e.__class__.__name__.upper(),
        )
    except Exception as e:
        logger.exception("Unexpected error in todo_list_confirmations")
        return build_error_response(
            error=f"Failed to list confirmations: {e}",
            error_code="INTERNAL_ERROR",
        )
