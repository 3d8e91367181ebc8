"""Chat message and session models."""

import time
import uuid
from typing import Any
from typing import Literal

from pydantic import Field

from .base import CamelCaseModel
from .recipe import CraftingRecipe
from .summary import SessionSummary

DEFAULT_SESSION_NAME = "New Chat"


class MessagePart(CamelCaseModel):
    """One text fragment of a message."""

    text: str | None = None
    thought_signature: str | None = None


class ChatMessage(CamelCaseModel):
    """One turn in a conversation.

    Model turns are created as streaming placeholders (empty text,
    ``is_streaming=True``) and updated in place by their ``id`` as events
    arrive.
    """

    id: str | None = Field(default=None, description="Stable turn identifier assigned by the client")
    role: Literal["user", "model"]
    parts: list[MessagePart] = Field(default_factory=lambda: [MessagePart(text="")])
    timestamp: str | None = None
    grounding_metadata: dict[str, Any] | None = None
    is_streaming: bool | None = None
    crafting_recipe: CraftingRecipe | None = None

    @property
    def text(self) -> str:
        """Text of the first part ("" when absent)."""
        if not self.parts:
            return ""
        return self.parts[0].text or ""

    @classmethod
    def user(cls, text: str, timestamp: str | None = None) -> "ChatMessage":
        return cls(id=new_message_id(), role="user", parts=[MessagePart(text=text)], timestamp=timestamp)

    @classmethod
    def placeholder(cls, timestamp: str | None = None) -> "ChatMessage":
        """Empty model turn awaiting streamed text."""
        return cls(
            id=new_message_id(),
            role="model",
            parts=[MessagePart(text="")],
            timestamp=timestamp,
            is_streaming=True,
        )


class ChatSession(CamelCaseModel):
    """A named, persisted conversation."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = DEFAULT_SESSION_NAME
    messages: list[ChatMessage] = Field(default_factory=list)
    summary: SessionSummary | None = None
    last_updated: int = Field(default_factory=lambda: now_ms(), description="Epoch milliseconds")

    @property
    def is_streaming(self) -> bool:
        return any(message.is_streaming for message in self.messages)

    @property
    def has_placeholder_name(self) -> bool:
        return self.name == DEFAULT_SESSION_NAME


def new_message_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)
