"""SSE streaming utilities for craftguided.

Every record is a single ``data: <json>`` line followed by a blank line;
the event type travels inside the JSON as ``type``.
"""

import logging
from collections.abc import AsyncIterator

from sse_starlette import ServerSentEvent

from craftguide_library.models.events import ErrorEvent
from craftguide_library.models.events import StreamEvent
from craftguide_library.models.events import serialize_stream_event

logger = logging.getLogger(__name__)

# Line separator for SSE records
SSE_SEPARATOR = "\n"

# Seconds between keepalive comments on idle streams
PING_INTERVAL = 15


def format_sse_event(event: StreamEvent) -> str:
    """Format a StreamEvent as one SSE record.

    Example:
        >>> format_sse_event(TextEvent(content="Hi"))
        'data: {"type":"text","content":"Hi"}\\n\\n'
    """
    return f"data: {serialize_stream_event(event)}\n\n"


async def sse_event_stream(events: AsyncIterator[StreamEvent]) -> AsyncIterator[ServerSentEvent]:
    """Convert a StreamEvent iterator into ServerSentEvents.

    Args:
        events: Events of one turn, already ordered

    Yields:
        ServerSentEvent records carrying the serialized event as data
    """
    try:
        async for event in events:
            yield ServerSentEvent(data=serialize_stream_event(event), sep=SSE_SEPARATOR)
    except Exception as e:
        # Producers convert their own failures; this covers serialization bugs
        logger.error(f"Error in SSE stream: {e}")
        yield ServerSentEvent(data=serialize_stream_event(ErrorEvent(message=str(e))), sep=SSE_SEPARATOR)
