"""Conversation history conversion for provider calls."""

from google.genai import types

from ..llm.client import model_content
from ..llm.client import user_content
from ..llm.prompts import SUMMARY_CONTEXT_ACK
from ..llm.prompts import build_summary_context
from ..models.messages import ChatMessage
from ..models.summary import SessionSummary


def summary_to_json(summary: SessionSummary) -> str:
    return summary.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def build_history(messages: list[ChatMessage], summary: SessionSummary | None = None) -> list[types.Content]:
    """Convert prior turns to provider contents.

    When a summary is given, a synthetic user turn carrying it and a model
    acknowledgement are prepended so the model gets the compact context
    without the full transcript. Turns with no text are skipped because the
    provider rejects empty parts.

    Args:
        messages: Prior turns, oldest first (excluding the latest user message)
        summary: Optional session summary to inject

    Returns:
        Provider contents, oldest first
    """
    history: list[types.Content] = []

    if summary is not None:
        history.append(user_content(build_summary_context(summary_to_json(summary))))
        history.append(model_content(SUMMARY_CONTEXT_ACK))

    for message in messages:
        text = message.text
        if not text.strip():
            continue
        history.append(types.Content(role=message.role, parts=[types.Part(text=text)]))

    return history
