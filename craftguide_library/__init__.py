"""Craftguide library layer.

This is the business logic layer that sits between craftguided (transport)
and the hosted model provider.

Public Interface:
    Modules:
    - config: Configuration loading
    - models: Shared data structures
    - llm: Model provider handle
    - chat: Reply aggregation pipeline
    - summaries: Session summarization
    - titles: Session titles
    - sessions: Session persistence
    - storage: Filesystem locations and key/value store
    - client: Service client, stream reassembly and chat controller
"""

from .models import ChatMessage
from .models import ChatSession
from .models import SessionSummary

__version__ = "0.1.0"

__all__ = [
    "ChatMessage",
    "ChatSession",
    "SessionSummary",
    "__version__",
]
