"""Todo confirm tool: approve or reject a staged action."""

from __future__ import annotations

import logging
from typing import Any

from todo_mcp.hitl.models import (
    ActionRejected,
    NoSuchConfirmation,
    TaskAdded,
)
from todo_mcp.middleware.validator import validate_agent_id, validate_confirmation_id
from todo_mcp.schemas.tools import ConfirmParams
from todo_mcp.tasks.models import TaskDeleted, TaskNotFound
from todo_mcp.tools.base import (
    build_error_response,
    build_success_response,
    execute_tool,
    get_agent,
    get_registry,
)
from todo_mcp.utils.errors import TodoMCPError, ValidationError

logger = logging.getLogger(__name__)

TOOL_NAME = "todo_confirm"


def _result_message(
    result: TaskAdded | TaskDeleted | TaskNotFound | ActionRejected | NoSuchConfirmation,
) -> str:
    match result:
        case TaskAdded(task=task):
            return f"Added task: {task.title}"
        case TaskDeleted(task_id=task_id):
            return f"Deleted task {task_id}"
        case TaskNotFound() | ActionRejected() | NoSuchConfirmation():
            return result.message
    raise TypeError(f"Unexpected confirm result: {type(result).__name__}")


async def todo_confirm(params: ConfirmParams) -> dict[str, Any]:
    """Resolve a pending confirmation created by todo_query.

    Approving runs the staged add or delete; rejecting discards it. Either
    way the confirmation is used up. Unknown ids are reported in the data
    (kind "no_such_confirmation"), not as an error, and change nothing.

    Args:
        params: ConfirmParams containing:
            - confirmation_id: Id from todo_query
            - approved: Whether to carry out the action
            - agent_id: Identity whose task list to use

    Returns:
        Success response with data.kind one of task_added, task_deleted,
        task_not_found, rejected, no_such_confirmation; or an error response.
    """
    try:
        agent_id = validate_agent_id(params.agent_id)
        confirmation_id = validate_confirmation_id(params.confirmation_id)
        registry = get_registry()

        async def _confirm_operation():
            async with registry.lock(agent_id):
                agent = get_agent(agent_id, with_oracle=False)
                return agent.confirm(confirmation_id, params.approved)

        result = await execute_tool(
            tool_name=TOOL_NAME,
            params={"confirmation_id": confirmation_id, "approved": params.approved},
            operation=_confirm_operation,
            agent_id=agent_id,
        )

        return build_success_response(
            data=result.model_dump(mode="json", by_alias=True),
            message=_result_message(result),
        )

    except ValidationError as e:
        logger.warning("Validation error in todo_confirm: %s", e)
        return build_error_response(
            error=str(e),
            error_code="VALIDATION_ERROR",
        )
    except TodoMCPError as e:
        logger.error("Todo MCP error in todo_confirm: %s", e)
        return build_error_response(
            error=str(e),
            error_code=e.__class__.__name__.upper(),
        )
    except Exception as e:
        logger.exception("Unexpected error in todo_confirm")
        return build_error_response(
            error=f"Failed to resolve confirmation: {e}",
            error_code="INTERNAL_ERROR",
        )
