"""craftguided: HTTP service for the craftguide assistant.

Exposes the chat pipeline from craftguide_library over FastAPI with
server-sent events for streamed replies.
"""

from craftguide_library import __version__

__all__ = ["__version__"]
