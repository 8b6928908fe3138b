"""Audit logging for tool invocations and agent state changes."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from todo_mcp.config import is_audit_enabled

if TYPE_CHECKING:
    from todo_mcp.agent.state import AgentState

logger = logging.getLogger(__name__)


class AuditEntry(BaseModel):
    """Model for an audit log entry."""

    timestamp: str = Field(
        default_factory=lambda: datetime.now(UTC).isoformat(),
        description="ISO format timestamp",
    )
    agent_id: str = Field(default="default", description="Agent identity")
    event: str = Field(..., description="Tool name or state event")
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        description="Event parameters (sensitive data redacted)",
    )
    result_status: str | None = Field(
        default=None,
        description="Result status (success/error)",
    )
    error_message: str | None = Field(
        default=None,
        description="Error message if failed",
    )
    duration_ms: float | None = Field(
        default=None,
        description="Execution duration in milliseconds",
    )


class AuditLogger:
    """Audit logger that writes JSON lines to stderr (STDIO-safe).

    Registered as the agent state-change hook, so every committed
    mutation shows up as one ``state_update`` line.
    """

    SENSITIVE_KEYS = {
        "api_key",
        "authorization",
        "password",
        "secret",
        "token",
    }

    def __init__(self, enabled: bool = True):
        """Initialize audit logger.

        Args:
            enabled: Whether audit logging is enabled.
        """
        self._enabled = enabled
        logger.info("AuditLogger initialized (enabled=%s)", enabled)

    def _redact_sensitive(self, params: dict[str, Any]) -> dict[str, Any]:
        """Redact sensitive values from parameters."""
        redacted: dict[str, Any] = {}
        for key, value in params.items():
            if key.lower() in self.SENSITIVE_KEYS:
                redacted[key] = "[REDACTED]"
            elif isinstance(value, dict):
                redacted[key] = self._redact_sensitive(value)
            else:
                redacted[key] = value
        return redacted

    def log(self, entry: AuditEntry) -> None:
        """Write audit entry to stderr.

        Args:
            entry: The audit entry to log.
        """
        if not self._enabled:
            return

        try:
            line = json.dumps({"audit": entry.model_dump()}, default=str)
            print(line, file=sys.stderr, flush=True)
        except Exception as e:
            logger.error("Failed to write audit log: %s", e)

    def log_tool_call(
        self,
        tool_name: str,
        parameters: dict[str, Any],
        agent_id: str = "default",
        result_status: str | None = None,
        error_message: str | None = None,
        duration_ms: float | None = None,
    ) -> None:
        """Log a tool invocation.

        Args:
            tool_name: Name of the tool being invoked.
            parameters: Tool parameters (will be redacted).
            agent_id: Agent identity.
            result_status: "success" or "error".
            error_message: Error message if failed.
            duration_ms: Execution time in milliseconds.
        """
        entry = AuditEntry(
            agent_id=agent_id,
            event=tool_name,
            parameters=self._redact_sensitive(parameters),
            result_status=result_status,
            error_message=error_message,
            duration_ms=duration_ms,
        )
        self.log(entry)

    def log_state_update(self, agent_id: str, state: AgentState) -> None:
        """Log a committed state change with the full new state."""
        entry = AuditEntry(
            agent_id=agent_id,
            event="state_update",
            parameters={
                "task_count": len(state.tasks),
                "pending_confirmations": len(state.confirmations),
                "state": state.model_dump(mode="json", by_alias=True),
            },
            result_status="success",
        )
        self.log(entry)


# Global singleton
audit_logger = AuditLogger(enabled=is_audit_enabled())
