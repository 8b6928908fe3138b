"""Task Store: create, delete and list tasks for one agent."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from todo_mcp.tasks.models import Task, TaskDeleted, TaskNotFound

if TYPE_CHECKING:
    from todo_mcp.agent.state import AgentContext, AgentState

logger = logging.getLogger(__name__)


def add_task_to(
    state: AgentState,
    title: str,
    description: str | None = None,
) -> tuple[AgentState, Task]:
    """Build the state that results from appending a new task.

    Args:
        state: The state to start from.
        title: Task title (non-empty).
        description: Optional task description.

    Returns:
        The new state and the created task.
    """
    task = Task(title=title, description=description)
    return state.model_copy(update={"tasks": (*state.tasks, task)}), task


def delete_task_from(
    state: AgentState,
    task_id: str,
) -> tuple[AgentState, TaskDeleted | TaskNotFound]:
    """Build the state that results from removing a task.

    Args:
        state: The state to start from.
        task_id: Id of the task to remove.

    Returns:
        The new state and TaskDeleted, or the unchanged state and
        TaskNotFound when no task has that id.
    """
    remaining = tuple(task for task in state.tasks if task.id != task_id)
    if len(remaining) == len(state.tasks):
        return state, TaskNotFound(task_id=task_id)
    return state.model_copy(update={"tasks": remaining}), TaskDeleted(task_id=task_id)


class TaskStore:
    """Direct task operations over an ``AgentContext``.

    These apply immediately. The confirmation workflow goes through
    ``ConfirmationManager`` instead, which uses the same transforms.
    """

    def __init__(self, context: AgentContext) -> None:
        self._context = context

    def list_tasks(self) -> tuple[Task, ...]:
        """Return the current tasks in insertion order."""
        return self._context.state.tasks

    def add_task(self, title: str, description: str | None = None) -> Task:
        """Append a new task.

        Args:
            title: Task title (non-empty).
            description: Optional task description.

        Returns:
            The created task.
        """
        state, task = add_task_to(self._context.state, title, description)
        self._context.set_state(state)
        logger.info("Added task id=%s for agent %s", task.id, self._context.agent_id)
        return task

    def delete_task(self, task_id: str) -> TaskDeleted | TaskNotFound:
        """Remove the task with the given id.

        Args:
            task_id: Id of the task to remove.

        Returns:
            TaskDeleted on success, TaskNotFound if nothing matched.
        """
        state, result = delete_task_from(self._context.state, task_id)
        if isinstance(result, TaskNotFound):
            logger.info(
                "Delete skipped: task id=%s not found for agent %s",
                task_id,
                self._context.agent_id,
            )
            return result
        self._context.set_state(state)
        logger.info("Deleted task id=%s for agent %s", task_id, self._context.agent_id)
        return result
