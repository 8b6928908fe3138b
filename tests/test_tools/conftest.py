"""Fixtures for tool tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from todo_mcp.agent.registry import AgentRegistry
from todo_mcp.oracle import RuleBasedOracle
from todo_mcp.utils.errors import OracleError


@pytest.fixture
def mock_audit_logger():
    """Mock audit_logger.log_tool_call()."""
    with patch("todo_mcp.tools.base.audit_logger") as mock:
        yield mock


@pytest.fixture
def registry(mock_audit_logger: MagicMock):
    """In-memory registry installed as the tools' registry."""
    registry = AgentRegistry()
    with patch("todo_mcp.tools.base._registry", registry):
        yield registry


@pytest.fixture
def rules_oracle(registry: AgentRegistry):
    """Offline rules oracle installed as the tools' oracle."""
    oracle = RuleBasedOracle()
    with patch("todo_mcp.tools.base._oracle", oracle):
        yield oracle


def _failing_oracle(error: Exception) -> MagicMock:
    oracle = MagicMock()
    oracle.classify = AsyncMock(side_effect=error)
    return oracle


@pytest.fixture
def failing_oracle(registry: AgentRegistry):
    """Oracle whose classify call fails."""
    with patch(
        "todo_mcp.tools.base._oracle",
        _failing_oracle(OracleError("LLM request failed: connection reset")),
    ) as mock:
        yield mock


@pytest.fixture
def timing_out_oracle(registry: AgentRegistry):
    """Oracle whose classify call reports a timeout."""
    with patch(
        "todo_mcp.tools.base._oracle",
        _failing_oracle(OracleError("LLM request timed out", timed_out=True)),
    ) as mock:
        yield mock
