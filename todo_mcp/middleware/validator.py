"""Input validation utilities."""

from __future__ import annotations

import logging
import re

from todo_mcp.utils.errors import ValidationError

logger = logging.getLogger(__name__)

# Regex patterns
AGENT_ID_PATTERN = re.compile(r"^[a-zA-Z0-9._@-]+$")

MAX_AGENT_ID_LENGTH = 128
MAX_CONFIRMATION_ID_LENGTH = 64
MAX_QUERY_LENGTH = 2000
MAX_TITLE_LENGTH = 200


def validate_agent_id(agent_id: str) -> str:
    """Validate an agent identity.

    Args:
        agent_id: Agent identity to validate.

    Returns:
        Validated agent id (stripped).

    Raises:
        ValidationError: If the id is empty, too long or has invalid characters.
    """
    agent_id = agent_id.strip()
    if not agent_id:
        raise ValidationError("Agent ID cannot be empty", field="agent_id")

    if len(agent_id) > MAX_AGENT_ID_LENGTH:
        raise ValidationError(
            f"Agent ID too long (max {MAX_AGENT_ID_LENGTH} characters)",
            field="agent_id",
        )

    if not AGENT_ID_PATTERN.match(agent_id):
        raise ValidationError(f"Invalid agent ID format: {agent_id}", field="agent_id")

    return agent_id


def validate_confirmation_id(confirmation_id: str) -> str:
    """Validate a confirmation id.

    Only empty or oversized ids are rejected. Anything else is passed on,
    and an id that matches nothing is answered as an unknown confirmation.

    Args:
        confirmation_id: Confirmation id to validate.

    Returns:
        Validated confirmation id (stripped).

    Raises:
        ValidationError: If the id is empty or too long.
    """
    confirmation_id = confirmation_id.strip()
    if not confirmation_id:
        raise ValidationError(
            "Confirmation ID cannot be empty", field="confirmation_id"
        )

    if len(confirmation_id) > MAX_CONFIRMATION_ID_LENGTH:
        raise ValidationError("Confirmation ID too long", field="confirmation_id")

    return confirmation_id


def sanitize_query(query: str) -> str:
    """Sanitize a natural-language request.

    Args:
        query: Request text.

    Returns:
        Query with whitespace normalized.

    Raises:
        ValidationError: If the query is empty or too long.
    """
    query = " ".join(query.split())
    if not query:
        raise ValidationError("Query cannot be empty", field="query")

    if len(query) > MAX_QUERY_LENGTH:
        raise ValidationError(
            f"Query too long (max {MAX_QUERY_LENGTH} characters)", field="query"
        )

    return query


def normalize_title(title: str | None) -> str | None:
    """Normalize an extracted task title.

    Collapses whitespace and strips surrounding quotes. Returns None when
    nothing usable remains. Length is checked by the caller against
    ``MAX_TITLE_LENGTH``.
    """
    if title is None:
        return None

    title = " ".join(title.split()).strip("\"'")
    if not title:
        return None

    return title
