"""Pytest configuration and fixtures for Todo MCP server tests."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from todo_mcp.agent.state import AgentContext, AgentState
from todo_mcp.agent.storage import StateStorage
from todo_mcp.agent.task_manager import TaskManagerAgent
from todo_mcp.oracle.base import AddParams, DeleteParams, Intent, IntentKind
from todo_mcp.tasks.models import Task


class ScriptedOracle:
    """Oracle stand-in that returns preset answers and records calls.

    Attributes:
        intent: Kind returned by classify.
        message: Message returned with the intent.
        add_params: Returned by extract_add_params.
        delete_params: Returned by extract_delete_params.
        error: Raised by every call when set.
        delay: Seconds every call sleeps before answering.
        calls: Names of the operations invoked, in order.
    """

    def __init__(
        self,
        intent: IntentKind = IntentKind.NONE,
        message: str | None = None,
        title: str | None = None,
        description: str | None = None,
        task_id: str | None = None,
    ) -> None:
        self.intent = intent
        self.message = message
        self.add_params = AddParams(title=title, description=description)
        self.delete_params = DeleteParams(task_id=task_id)
        self.error: Exception | None = None
        self.delay = 0.0
        self.calls: list[str] = []

    async def _answer(self, operation: str) -> None:
        self.calls.append(operation)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

    async def classify(self, query: str, tasks: Sequence[Task]) -> Intent:
        await self._answer("classify")
        return Intent(kind=self.intent, message=self.message)

    async def extract_add_params(self, query: str) -> AddParams:
        await self._answer("extract_add_params")
        return self.add_params

    async def extract_delete_params(
        self, query: str, tasks: Sequence[Task]
    ) -> DeleteParams:
        await self._answer("extract_delete_params")
        return self.delete_params


@pytest.fixture
def oracle() -> ScriptedOracle:
    """Fixture providing a scripted oracle (classifies as none by default)."""
    return ScriptedOracle()


@pytest.fixture
def state_hook() -> MagicMock:
    """Fixture providing a mock state-change hook."""
    return MagicMock()


@pytest.fixture
def context(state_hook: MagicMock) -> AgentContext:
    """Fixture providing an empty in-memory agent context."""
    return AgentContext("test-agent", on_state_update=state_hook)


@pytest.fixture
def milk_task() -> Task:
    """Fixture providing the task used by the delete scenarios."""
    return Task(id="t1", title="buy milk")


@pytest.fixture
def seeded_context(state_hook: MagicMock, milk_task: Task) -> AgentContext:
    """Fixture providing a context that already holds three tasks."""
    state = AgentState(
        tasks=(
            milk_task,
            Task(id="t2", title="walk the dog"),
            Task(id="t3", title="pay rent"),
        )
    )
    return AgentContext("test-agent", state=state, on_state_update=state_hook)


@pytest.fixture
def agent(context: AgentContext, oracle: ScriptedOracle) -> TaskManagerAgent:
    """Fixture providing a task manager over the empty context."""
    return TaskManagerAgent(context, oracle, oracle_timeout_ms=1000)


@pytest.fixture
def seeded_agent(
    seeded_context: AgentContext, oracle: ScriptedOracle
) -> TaskManagerAgent:
    """Fixture providing a task manager over the seeded context."""
    return TaskManagerAgent(seeded_context, oracle, oracle_timeout_ms=1000)


@pytest.fixture
def storage(tmp_path: Path) -> StateStorage:
    """Fixture providing file storage in a temporary directory."""
    return StateStorage(tmp_path / "state")
