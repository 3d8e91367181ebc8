"""
Shared pytest fixtures for the craftguide test suite.

Provides fixtures for:
- Temporary storage directories
- Settings with a dummy provider key
- A scripted stand-in for the model provider handle
- Sample messages and summaries
"""

import asyncio
import tempfile
from collections.abc import AsyncIterator
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from craftguide_library.config.settings import AssistantSettings
from craftguide_library.llm.client import ReplyChunk
from craftguide_library.models.messages import ChatMessage
from craftguide_library.models.messages import MessagePart
from craftguide_library.models.recipe import CraftingRecipe
from craftguide_library.models.summary import SessionSummary
from craftguide_library.models.summary import empty_summary

_PATH_OVERRIDES = ("CRAFTGUIDE_CONFIG_DIR", "CRAFTGUIDE_STATE_DIR", "CRAFTGUIDE_LOG_DIR")


class FakeModelClient:
    """Scripted replacement for ModelClient.

    Set the public attributes to control each call; every call is recorded
    in ``calls`` as ``(method, args)``.
    """

    def __init__(self) -> None:
        self.reply_chunks: list[ReplyChunk] = [ReplyChunk(text="Hello"), ReplyChunk(text=" world")]
        self.open_error: Exception | None = None
        self.stream_error: Exception | None = None
        self.wants_recipe = False
        self.classify_error: Exception | None = None
        self.recipe: CraftingRecipe | None = None
        self.recipe_error: Exception | None = None
        self.summary_json = "{}"
        self.summary_error: Exception | None = None
        self.title_text: str | None = "Crafting a Lantern"
        self.title_error: Exception | None = None
        self.calls: list[tuple[str, tuple]] = []

    async def open_reply_stream(self, history: list, message: str, edition: str) -> AsyncIterator[ReplyChunk]:
        self.calls.append(("open_reply_stream", (history, message, edition)))
        if self.open_error is not None:
            raise self.open_error
        return self._iter_chunks()

    async def _iter_chunks(self) -> AsyncIterator[ReplyChunk]:
        for chunk in self.reply_chunks:
            # Let the side-call task run between fragments
            await asyncio.sleep(0)
            yield chunk
        if self.stream_error is not None:
            raise self.stream_error

    async def classify_recipe_intent(self, message: str) -> bool:
        self.calls.append(("classify_recipe_intent", (message,)))
        if self.classify_error is not None:
            raise self.classify_error
        return self.wants_recipe

    async def generate_recipe(self, history: list, message: str, edition: str) -> CraftingRecipe | None:
        self.calls.append(("generate_recipe", (history, message, edition)))
        if self.recipe_error is not None:
            raise self.recipe_error
        return self.recipe

    async def generate_summary_json(self, prompt: str) -> str:
        self.calls.append(("generate_summary_json", (prompt,)))
        if self.summary_error is not None:
            raise self.summary_error
        return self.summary_json

    async def generate_title_text(self, context: list[dict[str, Any]]) -> str | None:
        self.calls.append(("generate_title_text", (context,)))
        if self.title_error is not None:
            raise self.title_error
        return self.title_text

    def called(self, method: str) -> bool:
        return any(name == method for name, _ in self.calls)


@pytest.fixture
def temp_storage_dir() -> Generator[Path, None, None]:
    """Create temporary storage directory for tests.

    Automatically cleaned up after test completes.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_storage_env(temp_storage_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point CRAFTGUIDE_HOME at a temp directory.

    This ensures tests use isolated storage and don't interfere with
    real data or other tests.

    Args:
        temp_storage_dir: Temporary directory fixture
        monkeypatch: pytest monkeypatch fixture

    Returns:
        Path to temporary storage directory
    """
    monkeypatch.setenv("CRAFTGUIDE_HOME", str(temp_storage_dir))
    for name in _PATH_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    return temp_storage_dir


@pytest.fixture
def settings() -> AssistantSettings:
    """Settings with a dummy key and default models."""
    return AssistantSettings(gemini_api_key="test-key")


@pytest.fixture
def fake_model_client() -> FakeModelClient:
    """Scripted model client returning "Hello world" with no recipe."""
    return FakeModelClient()


@pytest.fixture
def sample_recipe() -> CraftingRecipe:
    """Torch-surrounded lantern recipe."""
    return CraftingRecipe(
        slots=[
            "iron_nugget",
            "iron_nugget",
            "iron_nugget",
            "iron_nugget",
            "torch",
            "iron_nugget",
            "iron_nugget",
            "iron_nugget",
            "iron_nugget",
        ],
        output_item="lantern",
        output_amount=1,
    )


@pytest.fixture
def sample_messages() -> list[ChatMessage]:
    """Two completed turns.

    Example:
        >>> def test_transcript(sample_messages):
        ...     assert sample_messages[0].role == "user"
    """
    return [
        ChatMessage(id="m1", role="user", parts=[MessagePart(text="How do I find diamonds?")]),
        ChatMessage(id="m2", role="model", parts=[MessagePart(text="Dig down to Y=-59 and strip mine.")]),
    ]


@pytest.fixture
def sample_summary() -> SessionSummary:
    """Minimal valid summary."""
    return empty_summary()


@pytest.fixture(autouse=True)
def reset_sse_app_status() -> Generator[None, None, None]:
    """Reset sse-starlette's shutdown event between tests.

    The event is bound to the loop of the first request; TestClient starts
    a new loop per client.
    """
    from sse_starlette.sse import AppStatus

    if hasattr(AppStatus, "should_exit_event"):
        AppStatus.should_exit_event = None
    yield
    if hasattr(AppStatus, "should_exit_event"):
        AppStatus.should_exit_event = None
