"""Client side of the chat service.

Public Interface:
    - AssistantAPIClient, AssistantAPIError: HTTP client for the service
    - SSEDecoder: Incremental event-stream decoder
    - Conversation: Messages addressed by stable id
    - StreamReassembler: Applies stream events to the in-progress message
    - ChatController: Session state machine (autosave, titles, summaries)
"""

from .api import AssistantAPIClient
from .api import AssistantAPIError
from .controller import ChatController
from .conversation import Conversation
from .reassembler import StreamReassembler
from .sse import SSEDecoder

__all__ = [
    "AssistantAPIClient",
    "AssistantAPIError",
    "ChatController",
    "Conversation",
    "SSEDecoder",
    "StreamReassembler",
]
