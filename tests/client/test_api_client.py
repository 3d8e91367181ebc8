"""
Unit tests for the HTTP client.

The service is replaced by an httpx.MockTransport.
"""

import json

import httpx
import pytest

from craftguide_library.client.api import AssistantAPIClient
from craftguide_library.client.api import AssistantAPIError
from craftguide_library.models.events import DoneEvent
from craftguide_library.models.events import TextEvent
from craftguide_library.models.messages import ChatMessage
from craftguide_library.models.summary import empty_summary

BASE_URL = "http://testserver"


def _client(handler) -> AssistantAPIClient:
    http = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return AssistantAPIClient(BASE_URL, http_client=http)


@pytest.mark.unit
class TestAssistantAPIClient:
    """Test request shapes and response handling."""

    @pytest.mark.asyncio
    async def test_stream_chat_yields_events(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            body = b'data: {"type":"text","content":"Hi"}\n\ndata: {"type":"done"}\n\n'
            return httpx.Response(200, content=body, headers={"content-type": "text/event-stream"})

        summary = empty_summary()
        async with _client(handler) as api:
            events = [event async for event in api.stream_chat([ChatMessage.user("hi")], summary, "bedrock")]

        assert events == [TextEvent(content="Hi"), DoneEvent()]
        assert seen["path"] == "/api/chat"
        assert seen["body"]["edition"] == "bedrock"
        assert seen["body"]["summary"]["summaryVersion"] == "1.0"
        assert seen["body"]["messages"][0]["parts"] == [{"text": "hi"}]

    @pytest.mark.asyncio
    async def test_stream_chat_raises_on_error_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, text="Invalid request body")

        async with _client(handler) as api:
            with pytest.raises(AssistantAPIError) as exc_info:
                async for _ in api.stream_chat([ChatMessage.user("hi")]):
                    pass

        assert exc_info.value.status_code == 400
        assert exc_info.value.body == "Invalid request body"

    @pytest.mark.asyncio
    async def test_summarize_returns_summary(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/summary"
            return httpx.Response(200, json=empty_summary().to_wire())

        async with _client(handler) as api:
            summary = await api.summarize([ChatMessage.user("hi")])

        assert summary.summary_version == "1.0"

    @pytest.mark.asyncio
    async def test_summarize_rejects_invalid_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"summaryVersion": "9"})

        async with _client(handler) as api:
            with pytest.raises(AssistantAPIError):
                await api.summarize([ChatMessage.user("hi")])

    @pytest.mark.asyncio
    async def test_generate_title(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/generate-title"
            return httpx.Response(200, json={"title": "Lantern Crafting"})

        async with _client(handler) as api:
            assert await api.generate_title([ChatMessage.user("hi")]) == "Lantern Crafting"

    @pytest.mark.asyncio
    async def test_generate_title_blank_falls_back(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"title": "  "})

        async with _client(handler) as api:
            assert await api.generate_title([ChatMessage.user("hi")]) == "New Chat"

    @pytest.mark.asyncio
    async def test_generate_title_non_json_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>proxy error</html>")

        async with _client(handler) as api:
            with pytest.raises(AssistantAPIError) as exc_info:
                await api.generate_title([ChatMessage.user("hi")])

        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_generate_title_non_object_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=["Lantern Crafting"])

        async with _client(handler) as api:
            with pytest.raises(AssistantAPIError):
                await api.generate_title([ChatMessage.user("hi")])

    @pytest.mark.asyncio
    async def test_generate_title_error_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "boom"})

        async with _client(handler) as api:
            with pytest.raises(AssistantAPIError) as exc_info:
                await api.generate_title([ChatMessage.user("hi")])

        assert exc_info.value.status_code == 500
