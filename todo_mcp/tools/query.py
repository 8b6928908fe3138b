"""Todo query tool: natural-language requests with confirmation staging."""

from __future__ import annotations

import logging
from typing import Any

from todo_mcp.hitl.models import ConfirmationRequest, TaskListResult
from todo_mcp.middleware.validator import sanitize_query, validate_agent_id
from todo_mcp.schemas.tools import QueryParams
from todo_mcp.tools.base import (
    build_error_response,
    build_success_response,
    execute_tool,
    get_agent,
    get_registry,
)
from todo_mcp.utils.errors import OracleError, TodoMCPError, ValidationError

logger = logging.getLogger(__name__)

TOOL_NAME = "todo_query"


def confirmation_response(request: ConfirmationRequest) -> dict[str, Any]:
    """Flatten a staged confirmation into the pending-confirmation envelope."""
    confirmation = request.confirmation
    return {
        "status": request.status,
        "confirmation_id": confirmation.id,
        "action": confirmation.action.value,
        "confirmation": confirmation.model_dump(mode="json", by_alias=True),
        "preview": request.preview,
        "message": request.message,
    }


async def todo_query(params: QueryParams) -> dict[str, Any]:
    """Interpret a natural-language request about the task list.

    List requests are answered immediately. Add and delete requests are
    NOT carried out: they are staged and the response carries a
    confirmation_id to pass to todo_confirm.

    Args:
        params: QueryParams containing:
            - query: The request text
            - agent_id: Identity whose task list to use

    Returns:
        dict with either:
            - Pending confirmation: status, confirmation_id, action, preview, message
            - Success response: status, data (tasks or message)
            - Error response: status, error, error_code
    """
    try:
        agent_id = validate_agent_id(params.agent_id)
        text = sanitize_query(params.query)
        registry = get_registry()

        async def _query_operation():
            async with registry.lock(agent_id):
                return await get_agent(agent_id).query(text)

        result = await execute_tool(
            tool_name=TOOL_NAME,
            params={"query": text},
            operation=_query_operation,
            agent_id=agent_id,
        )

        if isinstance(result, ConfirmationRequest):
            logger.info(
                "Staged %s confirmation %s for agent %s",
                result.confirmation.action.value,
                result.confirmation.id,
                agent_id,
            )
            return confirmation_response(result)

        if isinstance(result, TaskListResult):
            return build_success_response(
                data=result.model_dump(mode="json", by_alias=True),
                count=len(result.tasks),
            )

        return build_success_response(
            data=result.model_dump(mode="json", by_alias=True),
            message=result.message,
        )

    except ValidationError as e:
        logger.warning("Validation error in todo_query: %s", e)
        return build_error_response(
            error=str(e),
            error_code="VALIDATION_ERROR",
        )
    except OracleError as e:
        logger.error("Oracle error in todo_query: %s", e)
        return build_error_response(
            error=str(e),
            error_code="ORACLE_TIMEOUT" if e.timed_out else "ORACLE_ERROR",
        )
    except TodoMCPError as e:
        logger.error("Todo MCP error in todo_query: %s", e)
        return build_error_response(
            error=str(e),
            error_code=e.__class__.__name__.upper(),
        )
    except Exception as e:
        logger.exception("Unexpected error in todo_query")
        return build_error_response(
            error=f"Failed to process query: {e}",
            error_code="INTERNAL_ERROR",
        )
