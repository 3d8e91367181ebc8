"""HTTP client for the craftguide service."""

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
from pydantic import ValidationError

from ..models.events import StreamEvent
from ..models.messages import DEFAULT_SESSION_NAME
from ..models.messages import ChatMessage
from ..models.summary import SessionSummary
from .sse import SSEDecoder

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"
SUMMARY_PATH = "/api/summary"
TITLE_PATH = "/api/generate-title"

# The service enforces no reply timeout; only connecting is bounded
DEFAULT_TIMEOUT = httpx.Timeout(None, connect=10.0)


class AssistantAPIError(Exception):
    """Raised when the service answers with an error status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")


def messages_payload(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    return [message.to_wire() for message in messages]


class AssistantAPIClient:
    """Async client for /api/chat, /api/summary and /api/generate-title.

    Example:
        >>> async with AssistantAPIClient("http://127.0.0.1:8430") as api:
        ...     async for event in api.stream_chat(messages):
        ...         print(event)
    """

    def __init__(
        self,
        base_url: str,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=self.base_url, timeout=DEFAULT_TIMEOUT)

    async def __aenter__(self) -> "AssistantAPIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    @staticmethod
    async def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        body = (await response.aread()).decode("utf-8", errors="replace")
        raise AssistantAPIError(response.status_code, body)

    async def stream_chat(
        self,
        messages: list[ChatMessage],
        summary: SessionSummary | None = None,
        edition: str | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """POST the conversation and yield events as records complete.

        Raises:
            AssistantAPIError: On 4xx/5xx responses (before any event)
            httpx.HTTPError: On transport failures
        """
        payload: dict[str, Any] = {"messages": messages_payload(messages)}
        if summary is not None:
            payload["summary"] = summary.to_wire()
        if edition is not None:
            payload["edition"] = edition

        decoder = SSEDecoder()
        async with self._http.stream("POST", CHAT_PATH, json=payload) as response:
            await self._raise_for_status(response)
            async for chunk in response.aiter_bytes():
                for event in decoder.feed(chunk):
                    yield event
        for event in decoder.flush():
            yield event

    async def summarize(self, messages: list[ChatMessage]) -> SessionSummary:
        """Request a fresh SessionSummary for the full transcript.

        Raises:
            AssistantAPIError: On error status or an unparseable body
        """
        response = await self._http.post(SUMMARY_PATH, json={"messages": messages_payload(messages)})
        await self._raise_for_status(response)
        try:
            return SessionSummary.model_validate_json(response.content)
        except ValidationError as e:
            raise AssistantAPIError(response.status_code, f"Invalid summary: {e}") from e

    async def generate_title(self, messages: list[ChatMessage]) -> str:
        """Request a short title; returns the placeholder when none came back.

        Raises:
            AssistantAPIError: On error status or a body that is not a JSON object
        """
        response = await self._http.post(TITLE_PATH, json={"messages": messages_payload(messages)})
        await self._raise_for_status(response)
        try:
            body = response.json()
        except ValueError as e:
            raise AssistantAPIError(response.status_code, f"Invalid title response: {e}") from e
        if not isinstance(body, dict):
            raise AssistantAPIError(response.status_code, "Invalid title response: expected a JSON object")
        title = body.get("title")
        return title if isinstance(title, str) and title.strip() else DEFAULT_SESSION_NAME
