"""
Integration tests for /api/summary and /api/generate-title.
"""

import json

import pytest
from fastapi.testclient import TestClient

from craftguided.main import create_app

TRANSCRIPT = {
    "messages": [
        {"role": "user", "parts": [{"text": "How do I build an iron farm?"}]},
        {"role": "model", "parts": [{"text": "You need villagers and a zombie."}]},
    ]
}


@pytest.fixture
def client(mock_storage_env, settings, fake_model_client) -> TestClient:
    """Create FastAPI test client with a scripted model client."""
    return TestClient(create_app(settings=settings, model_client=fake_model_client))


@pytest.mark.integration
class TestSummaryAPI:
    """Test POST /api/summary."""

    def test_summary_returns_camel_case(self, client: TestClient, fake_model_client) -> None:
        fake_model_client.summary_json = json.dumps(
            {
                "currentProjects": [
                    {
                        "name": "Iron farm",
                        "type": "farm",
                        "status": "planning",
                        "description": "Villager-based iron farm",
                        "progress": 10,
                        "nextSteps": ["Find villagers"],
                    }
                ]
            }
        )

        response = client.post("/api/summary", json=TRANSCRIPT)

        assert response.status_code == 200
        data = response.json()
        assert data["summaryVersion"] == "1.0"
        assert data["currentProjects"][0]["nextSteps"] == ["Find villagers"]
        assert "lastUpdated" in data

    def test_unusable_output_returns_fallback(self, client: TestClient, fake_model_client) -> None:
        fake_model_client.summary_json = "not json"

        response = client.post("/api/summary", json=TRANSCRIPT)

        assert response.status_code == 200
        assert response.json()["currentProjects"] == []

    def test_model_failure_returns_500(self, client: TestClient, fake_model_client) -> None:
        fake_model_client.summary_error = RuntimeError("quota exceeded")

        response = client.post("/api/summary", json=TRANSCRIPT)

        assert response.status_code == 500
        assert response.json() == {"error": "quota exceeded"}

    @pytest.mark.parametrize("body", [{}, {"messages": []}])
    def test_missing_messages_returns_400(self, client: TestClient, fake_model_client, body: dict) -> None:
        response = client.post("/api/summary", json=body)

        assert response.status_code == 400
        assert fake_model_client.calls == []


@pytest.mark.integration
class TestTitleAPI:
    """Test POST /api/generate-title."""

    def test_title_is_cleaned(self, client: TestClient, fake_model_client) -> None:
        fake_model_client.title_text = '  "Iron Farm Build"\n'

        response = client.post("/api/generate-title", json=TRANSCRIPT)

        assert response.status_code == 200
        assert response.json() == {"title": "Iron Farm Build"}

    def test_only_leading_messages_are_sent(self, client: TestClient, fake_model_client) -> None:
        body = {"messages": [{"role": "user", "parts": [{"text": str(i)}]} for i in range(10)]}

        client.post("/api/generate-title", json=body)

        (context,) = fake_model_client.calls[0][1]
        assert len(context) == 4

    def test_empty_title_falls_back(self, client: TestClient, fake_model_client) -> None:
        fake_model_client.title_text = ""

        assert client.post("/api/generate-title", json=TRANSCRIPT).json() == {"title": "New Chat"}

    def test_model_failure_returns_500(self, client: TestClient, fake_model_client) -> None:
        fake_model_client.title_error = RuntimeError("boom")

        response = client.post("/api/generate-title", json=TRANSCRIPT)

        assert response.status_code == 500
        assert response.json() == {"error": "boom"}

    def test_missing_messages_returns_400(self, client: TestClient) -> None:
        response = client.post("/api/generate-title", json={"messages": []})

        assert response.status_code == 400
