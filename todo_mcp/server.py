"""FastMCP server for Todo MCP.

This module provides the FastMCP server instance with tool registrations:

- Read Tools (2): list tasks and pending confirmations
- Write Tools (2): todo_query stages add/delete actions, todo_confirm
  applies or discards them

The server uses a lifespan context manager to load stored agent state at
startup and report what is waiting for confirmation.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from todo_mcp.schemas.tools import (
    DEFAULT_AGENT_ID,
    ConfirmParams,
    ListConfirmationsParams,
    ListTasksParams,
    QueryParams,
)
from todo_mcp.tools import (
    todo_confirm,
    todo_list_confirmations,
    todo_list_tasks,
    todo_query,
)
from todo_mcp.tools.base import get_registry

logger = logging.getLogger(__name__)


# =============================================================================
# Startup Helper
# =============================================================================


async def load_known_agents() -> int:
    """Load stored agent state and log pending confirmations.

    Called during server startup via the lifespan context manager. A
    corrupt state file for one identity is logged and skipped so the
    others still load.

    Returns:
        Number of agent identities loaded.
    """
    try:
        registry = get_registry()
        agent_ids = registry.known_agents()
    except Exception as e:
        logger.warning("Error opening agent registry: %s", e)
        return 0

    loaded = 0
    for agent_id in agent_ids:
        try:
            context = registry.get(agent_id)
        except Exception as e:
            logger.warning("Error loading state for agent %s: %s", agent_id, e)
            continue
        loaded += 1
        pending = len(context.state.confirmations)
        if pending > 0:
            logger.info(
                "Agent %s has %d confirmations awaiting a decision", agent_id, pending
            )
    return loaded


# =============================================================================
# Lifespan Context Manager
# =============================================================================


@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Lifespan context manager for server startup/shutdown.

    Args:
        server: The FastMCP server instance.

    Yields:
        Empty context dict (no shared state needed).
    """
    logger.info("Todo MCP server starting up...")

    loaded = await load_known_agents()
    if loaded:
        logger.info("Loaded state for %d agents", loaded)

    logger.info("Todo MCP server ready")

    yield {}

    logger.info("Todo MCP server shutting down...")


# =============================================================================
# Read Tool Wrappers
# =============================================================================


def _register_read_tools(mcp: FastMCP) -> None:
    """Register read-only tools with the FastMCP server.

    Args:
        mcp: The FastMCP server instance.
    """

    @mcp.tool(
        name="todo_list_tasks",
        annotations=ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
        ),
    )
    async def todo_list_tasks_tool(agent_id: str = DEFAULT_AGENT_ID) -> dict[str, Any]:
        """List all tasks for an agent, oldest first.

        Args:
            agent_id: Which task list to read (default "default").

        Returns:
            Success: {status, data: {tasks}, count}
            Error: {status, error, error_code}
        """
        params = ListTasksParams(agent_id=agent_id)
        return await todo_list_tasks(params)

    @mcp.tool(
        name="todo_list_confirmations",
        annotations=ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
        ),
    )
    async def todo_list_confirmations_tool(
        agent_id: str = DEFAULT_AGENT_ID,
    ) -> dict[str, Any]:
        """List staged add/delete actions still waiting for todo_confirm.

        Args:
            agent_id: Which task list to read (default "default").

        Returns:
            Success: {status, data: {confirmations}, count}
        """
        params = ListConfirmationsParams(agent_id=agent_id)
        return await todo_list_confirmations(params)


# =============================================================================
# Write Tool Wrappers
# =============================================================================


def _register_write_tools(mcp: FastMCP) -> None:
    """Register the query and confirm tools with the FastMCP server.

    Args:
        mcp: The FastMCP server instance.
    """

    @mcp.tool(
        name="todo_query",
        annotations=ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
        ),
    )
    async def todo_query_tool(
        query: str,
        agent_id: str = DEFAULT_AGENT_ID,
    ) -> dict[str, Any]:
        """Ask about or change the task list in plain language.

        Two-step confirmation flow:
        1. This tool: "add a task to buy milk" or "delete the milk task"
           returns status "pending_confirmation" with a confirmation_id.
           NOTHING has changed yet.
        2. todo_confirm with that confirmation_id applies or discards it.

        Listing ("show my tasks") is answered directly.

        Args:
            query: The request in natural language.
            agent_id: Which task list to use (default "default").

        Returns:
            Pending confirmation, task list, or a plain message.
        """
        params = QueryParams(query=query, agent_id=agent_id)
        return await todo_query(params)

    @mcp.tool(
        name="todo_confirm",
        annotations=ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=True,
            idempotentHint=False,
        ),
    )
    async def todo_confirm_tool(
        confirmation_id: str,
        approved: bool,
        agent_id: str = DEFAULT_AGENT_ID,
    ) -> dict[str, Any]:
        """Approve or reject a staged action from todo_query.

        Only call with approved=True after the user has agreed to the
        previewed action. Each confirmation can be resolved once.

        Args:
            confirmation_id: Id returned by todo_query.
            approved: True to carry out the action, False to discard it.
            agent_id: Which task list to use (default "default").

        Returns:
            Success response whose data.kind describes the outcome.
        """
        params = ConfirmParams(
            confirmation_id=confirmation_id,
            approved=approved,
            agent_id=agent_id,
        )
        return await todo_confirm(params)


# =============================================================================
# Server Factory
# =============================================================================


def create_server() -> FastMCP:
    """Create and configure the FastMCP server instance.

    Returns:
        Configured FastMCP server instance.
    """
    server = FastMCP(
        name="todo-mcp-server",
        lifespan=server_lifespan,
    )

    _register_read_tools(server)
    _register_write_tools(server)

    # 2 read + 2 write, checked by test_tool_registration_count.
    tool_count = 4
    logger.info("Todo MCP server created with %d tools registered", tool_count)

    return server


# =============================================================================
# Global Server Instance
# =============================================================================

# Create the global server instance for use by __main__.py
mcp = create_server()
