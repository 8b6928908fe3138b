"""LLM-backed oracle using an OpenAI-compatible chat completions API.

Each oracle operation is one chat completion in JSON mode. The reply is
validated with pydantic; anything that cannot be parsed is an
``OracleError`` rather than a guess.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import TypeVar

import openai
import pydantic
from openai import AsyncOpenAI
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from todo_mcp.config import get_llm_model
from todo_mcp.oracle.base import AddParams, DeleteParams, Intent, IntentKind
from todo_mcp.tasks.models import Task
from todo_mcp.utils.errors import OracleError

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)

UNSUPPORTED_REQUEST_MESSAGE = "I can only add, delete, or list tasks."

SYSTEM_PROMPT = (
    "You are an intelligent task manager. "
    "Always reply with a single JSON object and nothing else."
)

CLASSIFY_PROMPT = """\
Based on the user's prompt, decide whether to:
  - "add" a new task,
  - "delete" an existing task,
  - "list" existing tasks,
  - "none" if no action is needed.

Prompt: {query}

Current tasks: {tasks}

Respond with one of:
  {{"action": "add"}}
  {{"action": "delete"}}
  {{"action": "list"}}
  {{"action": "none", "message": "<short explanation for the user>"}}
"""

EXTRACT_TITLE_PROMPT = """\
Extract the title of the task the user wants to add. Add a description only
if the user gave extra details beyond the title.

Prompt: {query}

Respond with {{"title": "<title>", "description": "<details or null>"}} if a
title can be extracted, otherwise {{"title": null}}.
"""

EXTRACT_TASK_ID_PROMPT = """\
The user wants to delete a task. Pick the id of the task from the list below
that best matches the request.

Prompt: {query}

Current tasks: {tasks}

Respond with {{"taskId": "<id>"}} if one task matches, otherwise
{{"taskId": null}}.
"""


class _ActionPayload(BaseModel):
    action: str
    message: str | None = None


class _TitlePayload(BaseModel):
    title: str | None = None
    description: str | None = None


class _TaskIdPayload(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    task_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("taskId", "task_id"),
    )


def _tasks_json(tasks: Sequence[Task]) -> str:
    return json.dumps(
        [
            {"id": t.id, "title": t.title, "description": t.description}
            for t in tasks
        ]
    )


class LLMOracle:
    """Oracle that asks a chat model to classify and extract.

    Example:
        >>> oracle = LLMOracle(model="gpt-4o-mini")
        >>> intent = await oracle.classify("add a task to buy milk", [])
        >>> intent.kind
        <IntentKind.ADD: 'add'>
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str | None = None,
        temperature: float = 0.1,
    ) -> None:
        """Initialize the oracle.

        Args:
            client: Async OpenAI client. Defaults to one configured from
                OPENAI_API_KEY / OPENAI_BASE_URL.
            model: Chat model name. Defaults to LLM_MODEL.
            temperature: Sampling temperature.

        Raises:
            OracleError: If no client is given and one cannot be created.
        """
        if client is None:
            try:
                client = AsyncOpenAI()
            except openai.OpenAIError as e:
                raise OracleError(
                    "Cannot create OpenAI client",
                    details={"error": str(e)},
                ) from e
        self._client = client
        self._model = model or get_llm_model()
        self._temperature = temperature
        logger.info("LLMOracle initialized with model=%s", self._model)

    @property
    def model(self) -> str:
        return self._model

    async def _generate(self, prompt: str, payload_type: type[PayloadT]) -> PayloadT:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._temperature,
                response_format={"type": "json_object"},
            )
        except openai.APITimeoutError as e:
            raise OracleError(
                "LLM request timed out",
                timed_out=True,
                details={"model": self._model},
            ) from e
        except openai.APIError as e:
            raise OracleError(
                f"LLM request failed: {e}",
                details={"model": self._model, "error_type": type(e).__name__},
            ) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise OracleError("LLM returned an empty response", details={"model": self._model})

        try:
            return payload_type.model_validate_json(content)
        except pydantic.ValidationError as e:
            logger.warning("Unparseable LLM payload: %s", content[:200])
            raise OracleError(
                "LLM returned an invalid payload",
                details={"model": self._model, "error": str(e)},
            ) from e

    async def classify(self, query: str, tasks: Sequence[Task]) -> Intent:
        payload = await self._generate(
            CLASSIFY_PROMPT.format(query=json.dumps(query), tasks=_tasks_json(tasks)),
            _ActionPayload,
        )
        action = payload.action.strip().lower()
        try:
            kind = IntentKind(action)
        except ValueError:
            logger.info("LLM returned unknown action %r, treating as none", action)
            return Intent(
                kind=IntentKind.NONE,
                message=payload.message or UNSUPPORTED_REQUEST_MESSAGE,
            )
        logger.debug("Classified query as %s", kind.value)
        return Intent(kind=kind, message=payload.message)

    async def extract_add_params(self, query: str) -> AddParams:
        payload = await self._generate(
            EXTRACT_TITLE_PROMPT.format(query=json.dumps(query)),
            _TitlePayload,
        )
        return AddParams(title=payload.title, description=payload.description)

    async def extract_delete_params(
        self, query: str, tasks: Sequence[Task]
    ) -> DeleteParams:
        if not tasks:
            return DeleteParams()
        payload = await self._generate(
            EXTRACT_TASK_ID_PROMPT.format(query=json.dumps(query), tasks=_tasks_json(tasks)),
            _TaskIdPayload,
        )
        return DeleteParams(task_id=payload.task_id)
