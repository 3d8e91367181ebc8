"""Request models for craftguided API.

Pydantic models for validating incoming API requests.
"""

from pydantic import Field

from craftguide_library.models.base import CamelCaseModel
from craftguide_library.models.messages import ChatMessage
from craftguide_library.models.summary import SessionSummary


class ChatRequest(CamelCaseModel):
    """Request body for POST /api/chat.

    Attributes:
        messages: Conversation so far; the last entry is the new user message
        summary: Optional session summary injected as leading context
        edition: Optional game edition ("java" or "bedrock")
    """

    messages: list[ChatMessage] = Field(..., min_length=1, description="Conversation, newest last")
    summary: SessionSummary | None = Field(default=None, description="Prior session summary")
    edition: str | None = Field(default=None, description="Game edition")

    @property
    def latest_text(self) -> str:
        return self.messages[-1].text

    @property
    def prior_messages(self) -> list[ChatMessage]:
        return self.messages[:-1]


class TranscriptRequest(CamelCaseModel):
    """Request body for POST /api/summary and POST /api/generate-title."""

    messages: list[ChatMessage] = Field(..., min_length=1, description="Full conversation")
