"""Shared utilities for the Todo MCP Server."""

from todo_mcp.utils.errors import (
    OracleError,
    StorageError,
    TodoMCPError,
    ValidationError,
)

__all__ = [
    "TodoMCPError",
    "OracleError",
    "StorageError",
    "ValidationError",
]
