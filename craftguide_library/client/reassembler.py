"""Client-side reassembly of one streamed model turn.

Contract:
- ``text``: append to the accumulator, then replace the message's sole
  text part with the full accumulated value
- ``metadata``: attach grounding citations
- ``recipe``: attach the crafting recipe
- ``done``: clear the streaming flag; the message is final
- ``error``: clear the streaming flag and keep the partial text
"""

import logging

from ..models.events import DoneEvent
from ..models.events import ErrorEvent
from ..models.events import MetadataEvent
from ..models.events import RecipeEvent
from ..models.events import StreamEvent
from ..models.events import TextEvent
from ..models.messages import ChatMessage
from ..models.messages import MessagePart
from .conversation import Conversation

logger = logging.getLogger(__name__)


class StreamReassembler:
    """Maintains the in-progress model message identified by ``message_id``."""

    def __init__(self, conversation: Conversation, message_id: str) -> None:
        if conversation.get(message_id) is None:
            raise KeyError(f"Message {message_id} not found")
        self.conversation = conversation
        self.message_id = message_id
        self.accumulated = ""
        self.error: str | None = None
        self.finished = False
        self.events_applied = 0

    @property
    def message(self) -> ChatMessage:
        message = self.conversation.get(self.message_id)
        if message is None:
            raise KeyError(f"Message {self.message_id} not found")
        return message

    def apply(self, event: StreamEvent) -> ChatMessage:
        """Apply one event as exactly one conversation update."""
        if self.finished:
            logger.warning(f"Ignoring {event.type} event after the turn finished")
            return self.message

        if isinstance(event, TextEvent):
            self.accumulated += event.content
            text = self.accumulated

            def change(message: ChatMessage) -> None:
                message.parts = [MessagePart(text=text)]

        elif isinstance(event, MetadataEvent):

            def change(message: ChatMessage) -> None:
                message.grounding_metadata = event.content

        elif isinstance(event, RecipeEvent):

            def change(message: ChatMessage) -> None:
                message.crafting_recipe = event.content

        elif isinstance(event, DoneEvent):
            self.finished = True

            def change(message: ChatMessage) -> None:
                message.is_streaming = False

        elif isinstance(event, ErrorEvent):
            self.finished = True
            self.error = event.message
            logger.error(f"Stream error for message {self.message_id}: {event.message}")

            def change(message: ChatMessage) -> None:
                message.is_streaming = False

        else:
            raise TypeError(f"Unknown stream event: {event!r}")

        self.events_applied += 1
        return self.conversation.update(self.message_id, change)

    def finish(self) -> ChatMessage:
        """Finalize after the stream closed; a no-op once a terminal event arrived."""
        if self.finished:
            return self.message
        logger.info(f"Stream for message {self.message_id} closed without a terminal event")
        return self.apply(DoneEvent())

    def fail(self, message: str) -> ChatMessage:
        """Finalize after a transport failure, keeping any partial text."""
        if self.finished:
            return self.message
        return self.apply(ErrorEvent(message=message))
