"""Custom exception hierarchy for the Todo MCP Server.

Only failures that cannot be expressed as data end up here. Extraction
failures, unknown confirmation ids and missing delete targets are returned
as result variants instead (see ``todo_mcp.hitl.models``).
"""

from __future__ import annotations


class TodoMCPError(Exception):
    """Base exception for all Todo MCP Server errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class OracleError(TodoMCPError):
    """Exception raised when intent classification or extraction fails.

    The oracle is the external language-understanding service. Any failure
    on its side (transport error, malformed payload, timeout) fails the
    whole query without touching agent state.

    Attributes:
        timed_out: True if the call exceeded the configured timeout.
    """

    def __init__(
        self,
        message: str,
        timed_out: bool = False,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize the oracle error.

        Args:
            message: Human-readable error description.
            timed_out: Whether the failure was a timeout.
            details: Optional dictionary containing additional error context.
        """
        super().__init__(message, details)
        self.timed_out = timed_out


class StorageError(TodoMCPError):
    """Exception raised when agent state cannot be read or written.

    Examples:
        - State file contains invalid JSON
        - Permission denied writing the state directory
        - Agent id sanitizes to an empty file name
    """

    pass


class ValidationError(TodoMCPError):
    """Exception raised for input validation errors.

    Attributes:
        field: The name of the field that failed validation, if applicable.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize the validation error exception.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            details: Optional dictionary containing additional error context.
        """
        super().__init__(message, details)
        self.field = field


__all__ = [
    "TodoMCPError",
    "OracleError",
    "StorageError",
    "ValidationError",
]
