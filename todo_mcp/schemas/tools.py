"""Pydantic parameter models for Todo MCP tools.

- Read Tools: list tasks and pending confirmations, no approval involved
- Write Tools: ``todo_query`` stages add/delete, ``todo_confirm`` applies them
"""

from pydantic import BaseModel, Field

DEFAULT_AGENT_ID = "default"


class AgentParams(BaseModel):
    """Parameters shared by every tool."""

    agent_id: str = Field(
        default=DEFAULT_AGENT_ID,
        min_length=1,
        max_length=128,
        description="Identity whose task list to use",
    )


# =============================================================================
# Read Tool Parameter Models
# =============================================================================


class ListTasksParams(AgentParams):
    """Parameters for todo_list_tasks tool."""


class ListConfirmationsParams(AgentParams):
    """Parameters for todo_list_confirmations tool."""


# =============================================================================
# Write Tool Parameter Models (Confirmation Required)
# =============================================================================


class QueryParams(AgentParams):
    """Parameters for todo_query tool.

    Interprets a natural-language request. Add and delete requests are
    staged for confirmation, never applied directly.
    """

    query: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="Natural-language request (e.g., 'add a task to buy milk')",
    )


class ConfirmParams(AgentParams):
    """Parameters for todo_confirm tool.

    Approves or rejects a pending confirmation. Each confirmation can be
    resolved once.
    """

    confirmation_id: str = Field(
        ...,
        min_length=1,
        description="Confirmation ID returned by todo_query",
    )
    approved: bool = Field(
        ...,
        description="True to carry out the action, False to discard it",
    )
