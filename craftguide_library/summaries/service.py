"""Session summarization.

Turns a full transcript into a validated SessionSummary. The provider is
asked for schema-shaped JSON; whatever comes back is merged over defaults
and validated, and a minimal empty summary is returned instead of a
validation failure.
"""

import json
from datetime import UTC
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from ..llm.client import ModelClient
from ..llm.prompts import build_summary_prompt
from ..models.messages import ChatMessage
from ..models.summary import SUMMARY_VERSION
from ..models.summary import SessionSummary
from ..models.summary import empty_summary
from ..utils.structured_log import RouteLogger
from ..utils.structured_log import create_logger


def _defaults() -> dict[str, Any]:
    return {
        "summaryVersion": SUMMARY_VERSION,
        "currentProjects": [],
        "knowledgeBase": {
            "mechanicsLearned": [],
            "recipesKnown": [],
            "strategiesDiscovered": [],
        },
        "goals": {
            "shortTerm": [],
            "longTerm": [],
        },
    }


def coerce_summary(raw: Any, log: RouteLogger | None = None) -> SessionSummary:
    """Merge a decoded model response over defaults and validate it.

    ``lastUpdated`` is always replaced by server time.

    Returns:
        The validated summary, or ``empty_summary()`` if validation fails
    """
    log = log or create_logger("summary")

    if not isinstance(raw, dict):
        log.error("Summary response is not a JSON object", {"type": type(raw).__name__})
        return empty_summary()

    data = {**_defaults(), **raw, "lastUpdated": datetime.now(UTC).isoformat()}

    try:
        summary = SessionSummary.model_validate(data)
    except ValidationError as e:
        log.error(
            "Summary validation failed; returning fallback",
            {"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        )
        return empty_summary()

    log.info("Summary validation successful", {"projects": len(summary.current_projects)})
    return summary


async def summarize(
    client: ModelClient,
    messages: list[ChatMessage],
    log: RouteLogger | None = None,
) -> SessionSummary:
    """Extract a SessionSummary from the full message list.

    Args:
        client: Model provider handle
        messages: Full transcript, oldest first
        log: Route logger

    Returns:
        Validated summary (possibly the empty fallback)

    Raises:
        Exception: Provider call failures propagate to the caller
    """
    log = log or create_logger("summary")
    prompt = build_summary_prompt([(message.role, message.text) for message in messages])

    timer = log.start_timer()
    output_text = await client.generate_summary_json(prompt)
    timer.done("Summary model call finished", {"promptChars": len(prompt), "responseChars": len(output_text)})

    try:
        raw = json.loads(output_text)
    except json.JSONDecodeError as e:
        log.error("Summary response is not valid JSON; returning fallback", {"error": str(e)})
        return empty_summary()

    return coerce_summary(raw, log)
