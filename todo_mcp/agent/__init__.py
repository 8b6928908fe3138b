"""Agent state, persistence and the confirmation-gated task manager."""

from todo_mcp.agent.registry import AgentRegistry, create_registry
from todo_mcp.agent.state import AgentContext, AgentState
from todo_mcp.agent.storage import StateStorage
from todo_mcp.agent.task_manager import TaskManagerAgent

__all__ = [
    "AgentContext",
    "AgentRegistry",
    "AgentState",
    "StateStorage",
    "TaskManagerAgent",
    "create_registry",
]
