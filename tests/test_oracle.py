"""Tests for the intent oracles.

Tests cover:
- RuleBasedOracle classification and parameter extraction
- LLMOracle request shape, payload parsing and error mapping
- create_oracle backend selection
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from todo_mcp.oracle import (
    IntentKind,
    LLMOracle,
    RuleBasedOracle,
    create_oracle,
)
from todo_mcp.oracle.llm import UNSUPPORTED_REQUEST_MESSAGE
from todo_mcp.tasks.models import Task
from todo_mcp.utils.errors import OracleError, ValidationError


@pytest.fixture
def tasks() -> list[Task]:
    """Tasks to match delete requests against."""
    return [
        Task(title="buy milk"),
        Task(title="walk the dog"),
        Task(title="buy bread"),
    ]


def _completion(content: str | None) -> MagicMock:
    """Build a chat completion response with one choice."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture
def mock_client() -> MagicMock:
    """Mock AsyncOpenAI client."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def llm_oracle(mock_client: MagicMock) -> LLMOracle:
    """LLMOracle over the mock client."""
    return LLMOracle(client=mock_client, model="test-model")


def _reply(mock_client: MagicMock, payload: dict[str, Any] | str | None) -> None:
    content = payload if payload is None or isinstance(payload, str) else json.dumps(payload)
    mock_client.chat.completions.create.return_value = _completion(content)


# =============================================================================
# Rule-based oracle
# =============================================================================


class TestRuleBasedClassify:
    """Tests for RuleBasedOracle.classify."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("query", "kind"),
        [
            ("add a task to buy milk", IntentKind.ADD),
            ("remind me to call mom", IntentKind.ADD),
            ("Create a todo called groceries", IntentKind.ADD),
            ("delete the milk task", IntentKind.DELETE),
            ("remove eggs from my list", IntentKind.DELETE),
            ("show my tasks", IntentKind.LIST),
            ("what's on my to-do list?", IntentKind.LIST),
            ("tasks?", IntentKind.LIST),
            ("what's the weather", IntentKind.NONE),
        ],
    )
    async def test_classify(self, query: str, kind: IntentKind) -> None:
        """Test keyword classification of common phrasings."""
        intent = await RuleBasedOracle().classify(query, [])

        assert intent.kind == kind

    @pytest.mark.asyncio
    async def test_none_has_message(self) -> None:
        """Test unrecognized requests carry an explanation."""
        intent = await RuleBasedOracle().classify("what's the weather", [])

        assert intent.message == UNSUPPORTED_REQUEST_MESSAGE


class TestRuleBasedExtractAdd:
    """Tests for RuleBasedOracle.extract_add_params."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("query", "title"),
        [
            ("add a task to buy milk", "buy milk"),
            ("add a new task called pay rent.", "pay rent"),
            ("remind me to call mom", "call mom"),
            ("add eggs to my list", "eggs"),
            ("add water the plants", "water the plants"),
        ],
    )
    async def test_extract_title(self, query: str, title: str) -> None:
        """Test titles are pulled out of common phrasings."""
        params = await RuleBasedOracle().extract_add_params(query)

        assert params.title == title
        assert params.description is None

    @pytest.mark.asyncio
    async def test_extract_description(self) -> None:
        """Test a trailing description is split from the title."""
        params = await RuleBasedOracle().extract_add_params(
            "add a task to buy milk, description: 2 liters"
        )

        assert params.title == "buy milk"
        assert params.description == "2 liters"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["add a task", "add something", "hello"])
    async def test_no_title(self, query: str) -> None:
        """Test generic or missing titles are not extracted."""
        params = await RuleBasedOracle().extract_add_params(query)

        assert params.title is None


class TestRuleBasedExtractDelete:
    """Tests for RuleBasedOracle.extract_delete_params."""

    @pytest.mark.asyncio
    async def test_matches_by_title_words(self, tasks: list[Task]) -> None:
        """Test the task sharing the most words is chosen."""
        params = await RuleBasedOracle().extract_delete_params(
            "delete the milk task", tasks
        )

        assert params.task_id == tasks[0].id

    @pytest.mark.asyncio
    async def test_explicit_id_wins(self, tasks: list[Task]) -> None:
        """Test an id in the request selects that task."""
        params = await RuleBasedOracle().extract_delete_params(
            f"delete task {tasks[2].id} about milk", tasks
        )

        assert params.task_id == tasks[2].id

    @pytest.mark.asyncio
    async def test_ambiguous_match(self, tasks: list[Task]) -> None:
        """Test a tie between tasks resolves to nothing."""
        params = await RuleBasedOracle().extract_delete_params("delete buy", tasks)

        assert params.task_id is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["delete the weather", "delete the task"])
    async def test_no_match(self, tasks: list[Task], query: str) -> None:
        """Test requests sharing no words with any task resolve to nothing."""
        params = await RuleBasedOracle().extract_delete_params(query, tasks)

        assert params.task_id is None

    @pytest.mark.asyncio
    async def test_empty_task_list(self) -> None:
        """Test nothing can be matched when there are no tasks."""
        params = await RuleBasedOracle().extract_delete_params("delete milk", [])

        assert params.task_id is None


# =============================================================================
# LLM oracle
# =============================================================================


class TestLLMOracleInit:
    """Tests for LLMOracle construction."""

    def test_model_from_env(
        self, mock_client: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test LLM_MODEL is used when no model is given."""
        monkeypatch.setenv("LLM_MODEL", "custom-model")

        assert LLMOracle(client=mock_client).model == "custom-model"

    def test_missing_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a client that cannot be built raises OracleError."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(OracleError, match="Cannot create OpenAI client"):
            LLMOracle()


class TestLLMOracleClassify:
    """Tests for LLMOracle.classify."""

    @pytest.mark.asyncio
    async def test_classify_add(
        self, llm_oracle: LLMOracle, mock_client: MagicMock
    ) -> None:
        """Test the action field becomes the intent kind."""
        _reply(mock_client, {"action": "add"})

        intent = await llm_oracle.classify("add a task to buy milk", [])

        assert intent.kind == IntentKind.ADD

    @pytest.mark.asyncio
    async def test_request_shape(
        self, llm_oracle: LLMOracle, mock_client: MagicMock, tasks: list[Task]
    ) -> None:
        """Test the request uses JSON mode and includes the tasks."""
        _reply(mock_client, {"action": "list"})

        await llm_oracle.classify("show my tasks", tasks)

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0]["role"] == "system"
        assert "show my tasks" in kwargs["messages"][1]["content"]
        assert tasks[0].id in kwargs["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_classify_none_with_message(
        self, llm_oracle: LLMOracle, mock_client: MagicMock
    ) -> None:
        """Test the explanation is kept for a none intent."""
        _reply(mock_client, {"action": "none", "message": "I only manage tasks."})

        intent = await llm_oracle.classify("what's the weather", [])

        assert intent.kind == IntentKind.NONE
        assert intent.message == "I only manage tasks."

    @pytest.mark.asyncio
    async def test_unknown_action(
        self, llm_oracle: LLMOracle, mock_client: MagicMock
    ) -> None:
        """Test an unknown action is treated as none."""
        _reply(mock_client, {"action": "Complete"})

        intent = await llm_oracle.classify("finish the milk task", [])

        assert intent.kind == IntentKind.NONE
        assert intent.message == UNSUPPORTED_REQUEST_MESSAGE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["not json", '{"message": "hi"}', None, ""])
    async def test_invalid_payload(
        self, llm_oracle: LLMOracle, mock_client: MagicMock, content: str | None
    ) -> None:
        """Test unparseable or empty replies raise OracleError."""
        _reply(mock_client, content)

        with pytest.raises(OracleError):
            await llm_oracle.classify("add a task", [])

    @pytest.mark.asyncio
    async def test_api_timeout(
        self, llm_oracle: LLMOracle, mock_client: MagicMock
    ) -> None:
        """Test client timeouts map to a timed-out OracleError."""
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_client.chat.completions.create.side_effect = openai.APITimeoutError(
            request=request
        )

        with pytest.raises(OracleError) as exc_info:
            await llm_oracle.classify("add a task", [])

        assert exc_info.value.timed_out is True

    @pytest.mark.asyncio
    async def test_api_error(
        self, llm_oracle: LLMOracle, mock_client: MagicMock
    ) -> None:
        """Test other API errors map to OracleError."""
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=request
        )

        with pytest.raises(OracleError) as exc_info:
            await llm_oracle.classify("add a task", [])

        assert exc_info.value.timed_out is False
        assert exc_info.value.details["error_type"] == "APIConnectionError"


class TestLLMOracleExtract:
    """Tests for LLMOracle parameter extraction."""

    @pytest.mark.asyncio
    async def test_extract_add(
        self, llm_oracle: LLMOracle, mock_client: MagicMock
    ) -> None:
        """Test title and description are read from the reply."""
        _reply(mock_client, {"title": "buy milk", "description": "2 liters"})

        params = await llm_oracle.extract_add_params("add a task to buy milk")

        assert params.title == "buy milk"
        assert params.description == "2 liters"

    @pytest.mark.asyncio
    async def test_extract_add_null_title(
        self, llm_oracle: LLMOracle, mock_client: MagicMock
    ) -> None:
        """Test a null title means nothing could be extracted."""
        _reply(mock_client, {"title": None})

        params = await llm_oracle.extract_add_params("add a task")

        assert params.title is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", ["taskId", "task_id"])
    async def test_extract_delete(
        self,
        llm_oracle: LLMOracle,
        mock_client: MagicMock,
        tasks: list[Task],
        key: str,
    ) -> None:
        """Test the task id is read under either key spelling."""
        _reply(mock_client, {key: tasks[1].id})

        params = await llm_oracle.extract_delete_params("delete the dog task", tasks)

        assert params.task_id == tasks[1].id

    @pytest.mark.asyncio
    async def test_extract_delete_numeric_id(
        self, llm_oracle: LLMOracle, mock_client: MagicMock, tasks: list[Task]
    ) -> None:
        """Test numeric ids in the reply are coerced to strings."""
        _reply(mock_client, {"taskId": 42})

        params = await llm_oracle.extract_delete_params("delete 42", tasks)

        assert params.task_id == "42"

    @pytest.mark.asyncio
    async def test_extract_delete_without_tasks(
        self, llm_oracle: LLMOracle, mock_client: MagicMock
    ) -> None:
        """Test no request is made when there is nothing to delete."""
        params = await llm_oracle.extract_delete_params("delete milk", [])

        assert params.task_id is None
        mock_client.chat.completions.create.assert_not_called()


# =============================================================================
# Factory
# =============================================================================


class TestCreateOracle:
    """Tests for create_oracle."""

    def test_rules_backend(self) -> None:
        """Test the rules backend needs no configuration."""
        assert isinstance(create_oracle("rules"), RuleBasedOracle)

    def test_backend_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test ORACLE_BACKEND selects the backend."""
        monkeypatch.setenv("ORACLE_BACKEND", "RULES")

        assert isinstance(create_oracle(), RuleBasedOracle)

    def test_llm_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the llm backend builds an LLMOracle."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        assert isinstance(create_oracle("llm"), LLMOracle)

    def test_unknown_backend(self) -> None:
        """Test an unknown backend is a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            create_oracle("magic")

        assert exc_info.value.field == "ORACLE_BACKEND"
