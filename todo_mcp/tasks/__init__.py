"""Task models and the Task Store."""

from todo_mcp.tasks.models import Task, TaskDeleted, TaskNotFound
from todo_mcp.tasks.store import TaskStore, add_task_to, delete_task_from

__all__ = [
    "Task",
    "TaskDeleted",
    "TaskNotFound",
    "TaskStore",
    "add_task_to",
    "delete_task_from",
]
