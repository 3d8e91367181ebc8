"""
Unit tests for SSE streaming utilities.
"""

import pytest

from craftguide_library.models.events import DoneEvent
from craftguide_library.models.events import TextEvent
from craftguided.streaming import format_sse_event
from craftguided.streaming import sse_event_stream


@pytest.mark.unit
class TestStreaming:
    """Test SSE record formatting."""

    def test_format_sse_event(self) -> None:
        assert format_sse_event(TextEvent(content="Hi")) == 'data: {"type":"text","content":"Hi"}\n\n'

    @pytest.mark.asyncio
    async def test_sse_event_stream_encodes_data_records(self) -> None:
        async def events():
            yield TextEvent(content="Hi")
            yield DoneEvent()

        records = [record.encode() async for record in sse_event_stream(events())]

        assert records == [b'data: {"type":"text","content":"Hi"}\n\n', b'data: {"type":"done"}\n\n']

    @pytest.mark.asyncio
    async def test_sse_event_stream_converts_failures(self) -> None:
        async def events():
            yield TextEvent(content="Hi")
            raise ValueError("bad event")

        records = [record.data async for record in sse_event_stream(events())]

        assert records[-1] == '{"type":"error","message":"bad event"}'
