"""Offline, pattern-based oracle.

Classifies requests with keyword patterns and extracts parameters with
phrase patterns, much like a search box that understands a handful of
idioms. It needs no network access, which makes it the backend of choice
for local use and tests; anything it does not recognize is ``none``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from todo_mcp.oracle.base import AddParams, DeleteParams, Intent, IntentKind
from todo_mcp.tasks.models import Task

logger = logging.getLogger(__name__)

UNSUPPORTED_REQUEST_MESSAGE = "I can only add, delete, or list tasks."

_TASK_NOUN = r"(?:tasks?|to-?dos?|items?|list)"

# Checked in order; the first match wins. Delete comes before add so that
# "remove X from my list" is not read as a list request.
INTENT_PATTERNS: list[tuple[re.Pattern[str], IntentKind]] = [
    (
        re.compile(r"\b(?:delete|remove|drop|erase|cancel|get rid of)\b", re.IGNORECASE),
        IntentKind.DELETE,
    ),
    (
        re.compile(r"\b(?:add|create|remind me to|remember to)\b", re.IGNORECASE),
        IntentKind.ADD,
    ),
    (
        re.compile(
            rf"\b(?:list|show|display|view|see|what)\b.*\b{_TASK_NOUN}\b",
            re.IGNORECASE,
        ),
        IntentKind.LIST,
    ),
    (re.compile(rf"^\s*{_TASK_NOUN}\s*\??\s*$", re.IGNORECASE), IntentKind.LIST),
]

TITLE_PATTERNS: list[re.Pattern[str]] = [
    # "add a task to buy milk", "create a new todo called groceries"
    re.compile(
        r"\b(?:add|create)\s+(?:a\s+|an\s+)?(?:new\s+)?(?:task|to-?do|item)\s+"
        r"(?:to|for|called|named|titled)?\s*:?\s*(?P<title>.+)$",
        re.IGNORECASE,
    ),
    # "remind me to call mom"
    re.compile(r"\b(?:remind me to|remember to)\s+(?P<title>.+)$", re.IGNORECASE),
    # "add eggs to my list"
    re.compile(
        r"\b(?:add|put)\s+(?P<title>.+?)\s+(?:to|on)\s+(?:my\s+|the\s+)?"
        r"(?:to-?do\s+)?(?:list|tasks)\b",
        re.IGNORECASE,
    ),
    # "add buy bread"
    re.compile(r"\b(?:add|create)\s+(?P<title>.+)$", re.IGNORECASE),
]

DESCRIPTION_PATTERN = re.compile(
    r"^(?P<title>.+?)\s*,?\s+(?:with\s+)?(?:description|details|notes?)\s*:?\s+"
    r"(?P<description>.+)$",
    re.IGNORECASE,
)

GENERIC_TITLES = {
    "task",
    "a task",
    "new task",
    "a new task",
    "todo",
    "a todo",
    "to-do",
    "a to-do",
    "item",
    "an item",
    "something",
}

STOP_WORDS = {
    "a",
    "an",
    "the",
    "my",
    "please",
    "delete",
    "remove",
    "drop",
    "erase",
    "cancel",
    "get",
    "rid",
    "of",
    "from",
    "task",
    "tasks",
    "todo",
    "todos",
    "to-do",
    "item",
    "list",
    "that",
    "which",
    "one",
    "about",
    "called",
    "named",
    "titled",
    "to",
    "is",
    "it",
}

WORD_PATTERN = re.compile(r"[a-z0-9][a-z0-9'-]*")


def _words(text: str) -> set[str]:
    return set(WORD_PATTERN.findall(text.lower()))


def _clean_title(raw: str) -> str | None:
    title = raw.strip().rstrip(".!?").strip()
    if title.lower() in GENERIC_TITLES:
        return None
    return title or None


class RuleBasedOracle:
    """Regex-driven oracle; see module docstring.

    Example:
        >>> oracle = RuleBasedOracle()
        >>> (await oracle.extract_add_params("add a task to buy milk")).title
        'buy milk'
    """

    async def classify(self, query: str, tasks: Sequence[Task]) -> Intent:
        for pattern, kind in INTENT_PATTERNS:
            if pattern.search(query):
                logger.debug("Classified query as %s", kind.value)
                return Intent(kind=kind)
        return Intent(kind=IntentKind.NONE, message=UNSUPPORTED_REQUEST_MESSAGE)

    async def extract_add_params(self, query: str) -> AddParams:
        for pattern in TITLE_PATTERNS:
            match = pattern.search(query)
            if not match:
                continue
            title = _clean_title(match.group("title"))
            if title is None:
                continue
            description = None
            described = DESCRIPTION_PATTERN.match(title)
            if described:
                title = described.group("title").strip()
                description = described.group("description").strip().rstrip(".")
            return AddParams(title=title, description=description)
        return AddParams()

    async def extract_delete_params(
        self, query: str, tasks: Sequence[Task]
    ) -> DeleteParams:
        # An explicit id wins over fuzzy matching.
        for task in tasks:
            if task.id in query:
                return DeleteParams(task_id=task.id)

        wanted = _words(query) - STOP_WORDS
        if not wanted:
            return DeleteParams()

        scored = sorted(
            ((len(wanted & _words(task.title)), index) for index, task in enumerate(tasks)),
            reverse=True,
        )
        if not scored or scored[0][0] == 0:
            return DeleteParams()
        if len(scored) > 1 and scored[1][0] == scored[0][0]:
            logger.info("Delete target ambiguous for query %r", query)
            return DeleteParams()
        return DeleteParams(task_id=tasks[scored[0][1]].id)
