"""
Integration tests for the /api/chat endpoint with SSE streaming.

Tests the endpoint that:
1. Validates the request body (400 plain text on failure)
2. Opens the reply stream eagerly (500 plain text on setup failure)
3. Streams text, metadata, recipe and done/error events as data records
"""

import json

import pytest
from fastapi.testclient import TestClient

from craftguide_library.llm.client import ReplyChunk
from craftguide_library.models.summary import empty_summary
from craftguided.main import create_app


def parse_sse_stream(response_text: str) -> list[dict]:
    """Parse SSE stream into the list of decoded data payloads.

    Args:
        response_text: Raw SSE response text

    Returns:
        List of event dictionaries
    """
    events = []
    for raw_event in response_text.replace("\r\n", "\n").strip().split("\n\n"):
        data_lines = [line[6:] for line in raw_event.split("\n") if line.startswith("data: ")]
        if data_lines:
            events.append(json.loads("\n".join(data_lines)))
    return events


def _user(text: str) -> dict:
    return {"role": "user", "parts": [{"text": text}]}


@pytest.fixture
def client(mock_storage_env, settings, fake_model_client) -> TestClient:
    """Create FastAPI test client with a scripted model client.

    Args:
        mock_storage_env: Storage environment fixture
        settings: Settings fixture
        fake_model_client: Scripted model client

    Returns:
        Test client
    """
    return TestClient(create_app(settings=settings, model_client=fake_model_client))


@pytest.mark.integration
class TestChatAPI:
    """Test /api/chat streaming."""

    def test_chat_returns_sse_stream(self, client: TestClient) -> None:
        """Test POST /api/chat returns text events followed by done."""
        response = client.post("/api/chat", json={"messages": [_user("Hi")]})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        events = parse_sse_stream(response.text)
        assert events == [
            {"type": "text", "content": "Hello"},
            {"type": "text", "content": " world"},
            {"type": "done"},
        ]

    def test_records_are_data_lines(self, client: TestClient) -> None:
        """Test each record is a single data line ended by a blank line."""
        response = client.post("/api/chat", json={"messages": [_user("Hi")]})

        assert 'data: {"type":"done"}\n\n' in response.text.replace("\r\n", "\n")
        assert "event:" not in response.text

    def test_grounding_and_recipe_follow_text(self, client: TestClient, fake_model_client, sample_recipe) -> None:
        """Test metadata then recipe then done after the text."""
        fake_model_client.reply_chunks = [
            ReplyChunk(text="Surround a torch"),
            ReplyChunk(text=" with nuggets.", grounding_metadata={"webSearchQueries": ["lantern"]}),
        ]
        fake_model_client.wants_recipe = True
        fake_model_client.recipe = sample_recipe

        response = client.post("/api/chat", json={"messages": [_user("How do I craft a lantern?")]})

        events = parse_sse_stream(response.text)
        assert [event["type"] for event in events] == ["text", "text", "metadata", "recipe", "done"]
        assert events[2]["content"] == {"webSearchQueries": ["lantern"]}
        assert events[3]["content"]["outputItem"] == "lantern"
        assert len(events[3]["content"]["slots"]) == 9

    def test_recipe_failure_does_not_break_reply(self, client: TestClient, fake_model_client) -> None:
        """Test side-call failures are invisible to the client."""
        fake_model_client.wants_recipe = True
        fake_model_client.recipe_error = RuntimeError("quota exceeded")

        events = parse_sse_stream(client.post("/api/chat", json={"messages": [_user("lantern?")]}).text)

        assert [event["type"] for event in events] == ["text", "text", "done"]

    def test_stream_failure_ends_with_error(self, client: TestClient, fake_model_client) -> None:
        """Test a mid-stream failure produces one error event and no done."""
        fake_model_client.stream_error = RuntimeError("connection reset")

        response = client.post("/api/chat", json={"messages": [_user("Hi")]})

        assert response.status_code == 200
        events = parse_sse_stream(response.text)
        assert [event["type"] for event in events] == ["text", "text", "error"]
        assert events[-1]["message"] == "connection reset"

    def test_setup_failure_returns_500(self, client: TestClient, fake_model_client) -> None:
        """Test failures before streaming become a plain-text 500."""
        fake_model_client.open_error = RuntimeError("API key not valid")

        response = client.post("/api/chat", json={"messages": [_user("Hi")]})

        assert response.status_code == 500
        assert response.text == "API key not valid"

    @pytest.mark.parametrize(
        "body",
        [
            {"messages": []},
            {},
            {"messages": [{"role": "user", "parts": [{"text": "   "}]}]},
            {"messages": [{"role": "robot", "parts": [{"text": "hi"}]}]},
            {"messages": [_user("hi")], "summary": {"summaryVersion": "2.0"}},
        ],
    )
    def test_invalid_body_returns_400(self, client: TestClient, fake_model_client, body: dict) -> None:
        """Test malformed requests are rejected before any model call."""
        response = client.post("/api/chat", json=body)

        assert response.status_code == 400
        assert response.text == "Invalid request body"
        assert fake_model_client.calls == []

    def test_non_json_body_returns_400(self, client: TestClient) -> None:
        """Test a body that is not JSON is rejected."""
        response = client.post("/api/chat", content=b"not json", headers={"content-type": "application/json"})

        assert response.status_code == 400

    def test_history_and_summary_reach_the_model(self, client: TestClient, fake_model_client) -> None:
        """Test prior turns and the summary context are sent as history."""
        body = {
            "messages": [
                _user("Where are diamonds?"),
                {"role": "model", "parts": [{"text": "Deep down."}]},
                _user("And emeralds?"),
            ],
            "summary": empty_summary().to_wire(),
            "edition": "bedrock",
        }

        client.post("/api/chat", json=body)

        history, message, edition = next(args for name, args in fake_model_client.calls if name == "open_reply_stream")
        assert message == "And emeralds?"
        assert edition == "bedrock"
        assert [content.role for content in history] == ["user", "model", "user", "model"]
        assert history[0].parts[0].text.startswith("[SYSTEM: Session Context Loaded]")

    def test_unknown_edition_falls_back_to_java(self, client: TestClient, fake_model_client) -> None:
        """Test an unsupported edition is treated as java."""
        client.post("/api/chat", json={"messages": [_user("Hi")], "edition": "pocket"})

        _, _, edition = next(args for name, args in fake_model_client.calls if name == "open_reply_stream")
        assert edition == "java"
