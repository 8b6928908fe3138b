"""Pydantic schemas for Todo MCP.

This module exports all tool parameter models for the Todo MCP server.
"""

from todo_mcp.schemas.tools import (
    DEFAULT_AGENT_ID,
    ConfirmParams,
    ListConfirmationsParams,
    ListTasksParams,
    QueryParams,
)

__all__ = [
    "DEFAULT_AGENT_ID",
    # Read tools
    "ListTasksParams",
    "ListConfirmationsParams",
    # Write tools
    "QueryParams",
    "ConfirmParams",
]
