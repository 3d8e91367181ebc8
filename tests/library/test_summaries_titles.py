"""
Unit tests for summarization and title generation.

Tests default merging, fallbacks for unusable model output, and title cleanup.
"""

import json

import pytest

from craftguide_library.models.messages import ChatMessage
from craftguide_library.models.messages import MessagePart
from craftguide_library.summaries.service import coerce_summary
from craftguide_library.summaries.service import summarize
from craftguide_library.titles.service import clean_title
from craftguide_library.titles.service import generate_title
from craftguide_library.titles.service import title_context


@pytest.mark.unit
class TestCoerceSummary:
    """Test merging model output over defaults."""

    def test_missing_keys_get_defaults(self) -> None:
        summary = coerce_summary({"goals": {"shortTerm": ["build a base"], "longTerm": []}})

        assert summary.summary_version == "1.0"
        assert summary.goals.short_term == ["build a base"]
        assert summary.current_projects == []

    def test_last_updated_is_server_time(self) -> None:
        summary = coerce_summary({"lastUpdated": "1999-01-01T00:00:00Z"})

        assert not summary.last_updated.startswith("1999")

    def test_invalid_payload_returns_fallback(self) -> None:
        summary = coerce_summary({"currentProjects": [{"name": "x", "progress": 500}]})

        assert summary.current_projects == []
        assert summary.summary_version == "1.0"

    def test_non_object_returns_fallback(self) -> None:
        summary = coerce_summary(["not", "an", "object"])

        assert summary.goals.short_term == []


@pytest.mark.unit
class TestSummarize:
    """Test the summarize service."""

    @pytest.mark.asyncio
    async def test_builds_prompt_from_transcript(self, fake_model_client, sample_messages) -> None:
        fake_model_client.summary_json = json.dumps(
            {"knowledgeBase": {"mechanicsLearned": ["strip mining"], "recipesKnown": [], "strategiesDiscovered": []}}
        )

        summary = await summarize(fake_model_client, sample_messages)

        assert summary.knowledge_base.mechanics_learned == ["strip mining"]
        prompt = fake_model_client.calls[0][1][0]
        assert "user: How do I find diamonds?" in prompt
        assert "model: Dig down" in prompt

    @pytest.mark.asyncio
    async def test_unparseable_json_returns_fallback(self, fake_model_client, sample_messages) -> None:
        fake_model_client.summary_json = "Sure! Here is your summary:"

        summary = await summarize(fake_model_client, sample_messages)

        assert summary.current_projects == []

    @pytest.mark.asyncio
    async def test_model_failure_propagates(self, fake_model_client, sample_messages) -> None:
        fake_model_client.summary_error = RuntimeError("quota exceeded")

        with pytest.raises(RuntimeError, match="quota exceeded"):
            await summarize(fake_model_client, sample_messages)


@pytest.mark.unit
class TestTitles:
    """Test title generation."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ('  "Diamond Mining Tips"  ', "Diamond Mining Tips"),
            ("'Redstone Clock'", "Redstone Clock"),
            ("Plain Title\n", "Plain Title"),
            ("", "New Chat"),
            (None, "New Chat"),
            ('""', "New Chat"),
        ],
    )
    def test_clean_title(self, raw: str | None, expected: str) -> None:
        assert clean_title(raw) == expected

    def test_context_is_limited_to_leading_messages(self) -> None:
        messages = [ChatMessage(role="user", parts=[MessagePart(text=str(i))]) for i in range(6)]

        context = title_context(messages, 4)

        assert len(context) == 4
        assert context[0] == {"role": "user", "parts": [{"text": "0"}]}

    @pytest.mark.asyncio
    async def test_generate_title(self, fake_model_client, sample_messages) -> None:
        fake_model_client.title_text = '"Finding Diamonds"'

        assert await generate_title(fake_model_client, sample_messages) == "Finding Diamonds"

    @pytest.mark.asyncio
    async def test_generate_title_failure_propagates(self, fake_model_client, sample_messages) -> None:
        fake_model_client.title_error = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await generate_title(fake_model_client, sample_messages)
