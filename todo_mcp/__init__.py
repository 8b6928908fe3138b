"""Todo MCP Server.

A to-do list manager driven by natural language. Adding or deleting a task
is always staged as a confirmation first and only happens once a human
approves it with ``todo_confirm``.
"""

__version__ = "0.1.0"
