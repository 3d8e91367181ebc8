"""Shared data structures for craftguide.

Public Interface:
    - ChatMessage, MessagePart, ChatSession: Conversation models
    - SessionSummary and its sub-models: Structured session snapshot
    - CraftingRecipe: Structured crafting side-payload
    - StreamEvent variants: Wire events for one assistant turn
"""

from .base import CamelCaseModel
from .events import DoneEvent
from .events import ErrorEvent
from .events import MetadataEvent
from .events import RecipeEvent
from .events import StreamEvent
from .events import TERMINAL_EVENT_TYPES
from .events import TextEvent
from .events import parse_stream_event
from .events import serialize_stream_event
from .messages import DEFAULT_SESSION_NAME
from .messages import ChatMessage
from .messages import ChatSession
from .messages import MessagePart
from .messages import new_message_id
from .messages import now_ms
from .recipe import CraftingRecipe
from .summary import SUMMARY_VERSION
from .summary import ConversationSummary
from .summary import Goals
from .summary import KnowledgeBase
from .summary import PlayerContext
from .summary import Project
from .summary import Resources
from .summary import SessionSummary
from .summary import SummaryMetadata
from .summary import empty_summary

__all__ = [
    "CamelCaseModel",
    "ChatMessage",
    "ChatSession",
    "ConversationSummary",
    "CraftingRecipe",
    "DEFAULT_SESSION_NAME",
    "DoneEvent",
    "ErrorEvent",
    "Goals",
    "KnowledgeBase",
    "MessagePart",
    "MetadataEvent",
    "PlayerContext",
    "Project",
    "RecipeEvent",
    "Resources",
    "SUMMARY_VERSION",
    "SessionSummary",
    "StreamEvent",
    "SummaryMetadata",
    "TERMINAL_EVENT_TYPES",
    "TextEvent",
    "empty_summary",
    "new_message_id",
    "now_ms",
    "parse_stream_event",
    "serialize_stream_event",
]
