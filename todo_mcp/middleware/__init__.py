"""Middleware module for the Todo MCP server."""

from todo_mcp.middleware.audit_logger import AuditEntry, AuditLogger, audit_logger
from todo_mcp.middleware.validator import (
    normalize_title,
    sanitize_query,
    validate_agent_id,
    validate_confirmation_id,
)

__all__ = [
    "AuditLogger",
    "AuditEntry",
    "audit_logger",
    "normalize_title",
    "sanitize_query",
    "validate_agent_id",
    "validate_confirmation_id",
]
