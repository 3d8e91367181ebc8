"""Model provider handle.

Wraps the google-genai SDK behind the handful of calls the assistant needs.
A ModelClient is constructed explicitly from settings and passed to the
routers and services that use it; there is no process-wide client.

Contract:
- Inputs: Provider contents (history), user text, edition
- Outputs: Provider-neutral ReplyChunk streams, booleans, recipes, raw text
- Side Effects: Network calls to the model provider
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from google import genai
from google.genai import types
from pydantic import ValidationError

from ..config.settings import AssistantSettings
from ..models.recipe import CraftingRecipe
from . import prompts
from .tools import CRAFTING_FUNCTION_NAME
from .tools import CRAFTING_TOOL
from .tools import SEARCH_TOOL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplyChunk:
    """One partial response from the reply stream."""

    text: str = ""
    grounding_metadata: dict[str, Any] | None = None


def user_content(text: str) -> types.Content:
    return types.Content(role="user", parts=[types.Part(text=text)])


def model_content(text: str) -> types.Content:
    return types.Content(role="model", parts=[types.Part(text=text)])


def to_reply_chunk(response: types.GenerateContentResponse) -> ReplyChunk:
    """Extract visible text and grounding data from a streamed response.

    Thought parts are skipped. Grounding metadata is dumped with the
    provider's camelCase field names.
    """
    if not response.candidates:
        return ReplyChunk()

    candidate = response.candidates[0]
    text = ""
    if candidate.content and candidate.content.parts:
        text = "".join(part.text for part in candidate.content.parts if part.text and not part.thought)

    grounding = None
    if candidate.grounding_metadata is not None:
        grounding = candidate.grounding_metadata.model_dump(mode="json", by_alias=True, exclude_none=True)

    return ReplyChunk(text=text, grounding_metadata=grounding)


class ModelClient:
    """Async calls against the hosted model provider.

    Example:
        >>> client = ModelClient.from_settings(load_config())
        >>> chunks = await client.open_reply_stream([], "How do I craft a piston?", "java")
        >>> async for chunk in chunks:
        ...     print(chunk.text, end="")
    """

    def __init__(self, client: genai.Client, settings: AssistantSettings) -> None:
        """Initialize with an SDK client and the settings naming the models.

        Args:
            client: google-genai client
            settings: Assistant settings (model ids, thinking levels)
        """
        self._client = client
        self.settings = settings

    @classmethod
    def from_settings(cls, settings: AssistantSettings) -> "ModelClient":
        if not settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set; model calls will fail")

        client = genai.Client(
            api_key=settings.gemini_api_key or "dummy",
            http_options=types.HttpOptions(api_version=settings.api_version),
        )
        logger.info(f"Created model client: model={settings.model_id}, router={settings.router_model_id}")
        return cls(client, settings)

    @property
    def model_id(self) -> str:
        return self.settings.model_id

    @property
    def router_model_id(self) -> str:
        return self.settings.router_model_id

    def _thinking_config(self, model_id: str, level: str) -> types.ThinkingConfig | None:
        # Thinking levels are only understood by Gemini 3 models
        if "gemini-3" not in model_id.lower():
            return None
        return types.ThinkingConfig(thinking_level=level.upper())

    def _reply_config(self, edition: str) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=prompts.get_system_instruction(edition),
            tools=[SEARCH_TOOL],
            thinking_config=self._thinking_config(self.model_id, self.settings.thinking_level),
        )

    async def open_reply_stream(
        self,
        history: list[types.Content],
        message: str,
        edition: str,
    ) -> AsyncIterator[ReplyChunk]:
        """Open the conversational token stream.

        The provider call is made before this coroutine returns, so setup
        failures (bad key, unknown model) raise here rather than inside
        the iteration.

        Args:
            history: Prior turns as provider contents
            message: Latest user text
            edition: Game edition selecting the system instruction

        Returns:
            Async iterator of ReplyChunk in generation order
        """
        stream = await self._client.aio.models.generate_content_stream(
            model=self.model_id,
            contents=[*history, user_content(message)],
            config=self._reply_config(edition),
        )
        return self._iter_reply_chunks(stream)

    async def _iter_reply_chunks(
        self,
        stream: AsyncIterator[types.GenerateContentResponse],
    ) -> AsyncIterator[ReplyChunk]:
        async for response in stream:
            yield to_reply_chunk(response)

    async def classify_recipe_intent(self, message: str) -> bool:
        """Ask the router model whether the message requests a crafting recipe."""
        response = await self._client.aio.models.generate_content(
            model=self.router_model_id,
            contents=prompts.build_router_prompt(message),
            config=types.GenerateContentConfig(
                system_instruction=prompts.ROUTER_INSTRUCTION,
                temperature=0.0,
                response_mime_type="text/plain",
            ),
        )
        answer = (response.text or "").strip().upper()
        return answer.startswith("YES")

    async def generate_recipe(
        self,
        history: list[types.Content],
        message: str,
        edition: str,
    ) -> CraftingRecipe | None:
        """Force one crafting-function call and return its arguments.

        Returns:
            The validated recipe, or None when the model produced no usable call
        """
        response = await self._client.aio.models.generate_content(
            model=self.model_id,
            contents=[*history, user_content(message)],
            config=types.GenerateContentConfig(
                system_instruction=prompts.get_recipe_instruction(edition),
                tools=[CRAFTING_TOOL],
                tool_config=types.ToolConfig(
                    function_calling_config=types.FunctionCallingConfig(
                        mode=types.FunctionCallingConfigMode.ANY,
                        allowed_function_names=[CRAFTING_FUNCTION_NAME],
                    )
                ),
                thinking_config=self._thinking_config(self.model_id, "low"),
            ),
        )

        for call in response.function_calls or []:
            if call.name != CRAFTING_FUNCTION_NAME:
                continue
            try:
                return CraftingRecipe.model_validate(dict(call.args or {}))
            except ValidationError as e:
                logger.warning(f"Discarding malformed crafting recipe: {e.error_count()} validation error(s)")
                return None

        return None

    async def generate_summary_json(self, prompt: str) -> str:
        """Run the structured summary extraction and return the raw JSON text."""
        response = await self._client.aio.models.generate_content(
            model=self.model_id,
            contents=[user_content(prompt)],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_json_schema=prompts.SUMMARY_JSON_SCHEMA,
                thinking_config=self._thinking_config(self.model_id, self.settings.summary_thinking_level),
            ),
        )
        return response.text or "{}"

    async def generate_title_text(self, context: list[dict[str, Any]]) -> str | None:
        """Ask for a short session title for the given message context."""
        response = await self._client.aio.models.generate_content(
            model=self.model_id,
            contents=prompts.build_title_prompt(context),
            config=types.GenerateContentConfig(
                system_instruction=prompts.TITLE_INSTRUCTION,
                response_mime_type="text/plain",
            ),
        )
        return response.text
