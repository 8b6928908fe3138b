"""Todo MCP tools package.

Tools fall into two groups:

- Read Tools: listing tasks and pending confirmations (no confirmation needed)
- Write Tools: todo_query stages add/delete, todo_confirm applies or discards
"""

from todo_mcp.tools.base import (
    build_error_response,
    build_success_response,
    execute_tool,
    get_agent,
)
from todo_mcp.tools.confirm import todo_confirm
from todo_mcp.tools.query import todo_query
from todo_mcp.tools.tasks import todo_list_confirmations, todo_list_tasks

__all__ = [
    # Base utilities
    "build_error_response",
    "build_success_response",
    "execute_tool",
    "get_agent",
    # Read tools
    "todo_list_confirmations",
    "todo_list_tasks",
    # Write tools
    "todo_confirm",
    "todo_query",
]
