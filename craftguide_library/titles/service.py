"""Session title generation."""

import re

from ..llm.client import ModelClient
from ..models.messages import DEFAULT_SESSION_NAME
from ..models.messages import ChatMessage
from ..utils.structured_log import RouteLogger
from ..utils.structured_log import create_logger

_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")


def clean_title(raw: str | None) -> str:
    """Trim whitespace and one leading/trailing quote; fall back to the placeholder."""
    if not raw:
        return DEFAULT_SESSION_NAME
    title = _SURROUNDING_QUOTES.sub("", raw.strip()).strip()
    return title or DEFAULT_SESSION_NAME


def title_context(messages: list[ChatMessage], limit: int) -> list[dict]:
    """Leading messages reduced to role and text parts, to save tokens."""
    return [
        {"role": message.role, "parts": [{"text": part.text} for part in message.parts]}
        for message in messages[:limit]
    ]


async def generate_title(
    client: ModelClient,
    messages: list[ChatMessage],
    context_messages: int = 4,
    log: RouteLogger | None = None,
) -> str:
    """Generate a short title from the first few messages.

    Raises:
        Exception: Provider call failures propagate to the caller
    """
    log = log or create_logger("generate-title")
    timer = log.start_timer()
    raw = await client.generate_title_text(title_context(messages, context_messages))
    title = clean_title(raw)
    timer.done("Title generated", {"title": title})
    return title
