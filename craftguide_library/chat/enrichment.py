"""Recipe side-channel: classify, then conditionally enrich.

The two stages run as one background task next to the reply stream. Each
stage is its own failure domain and neither can fail the reply.
"""

import asyncio
import logging

from google.genai import types

from ..llm.client import ModelClient
from ..models.recipe import CraftingRecipe
from ..utils.structured_log import RouteLogger
from ..utils.structured_log import create_logger

logger = logging.getLogger(__name__)


class RecipeEnrichment:
    """Two-stage task graph: router classification -> recipe generation.

    Example:
        >>> enrichment = RecipeEnrichment(client, history, "How do I craft a bow?", "java")
        >>> enrichment.start()
        >>> ...  # stream the reply
        >>> recipe = await enrichment.result()
    """

    def __init__(
        self,
        client: ModelClient,
        history: list[types.Content],
        message: str,
        edition: str,
        log: RouteLogger | None = None,
    ) -> None:
        self.client = client
        self.history = history
        self.message = message
        self.edition = edition
        self.log = log or create_logger("chat.recipe")
        self.classified: bool | None = None
        self._task: asyncio.Task[CraftingRecipe | None] | None = None

    def start(self) -> "RecipeEnrichment":
        """Schedule the task graph on the running loop. Idempotent."""
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="recipe-enrichment")
        return self

    async def _classify(self) -> bool:
        timer = self.log.start_timer()
        try:
            wants_recipe = await self.client.classify_recipe_intent(self.message)
        except Exception as e:
            self.log.warn("Router classification failed; continuing without recipe", {"error": str(e)})
            return False
        timer.done("Router classification finished", {"wantsRecipe": wants_recipe})
        return wants_recipe

    async def _enrich(self) -> CraftingRecipe | None:
        timer = self.log.start_timer()
        try:
            recipe = await self.client.generate_recipe(self.history, self.message, self.edition)
        except Exception as e:
            self.log.warn("Recipe generation failed; continuing without recipe", {"error": str(e)})
            return None
        timer.done(
            "Recipe generation finished",
            {"outputItem": recipe.output_item if recipe else None},
        )
        return recipe

    async def _run(self) -> CraftingRecipe | None:
        self.classified = await self._classify()
        if not self.classified:
            return None
        return await self._enrich()

    async def result(self) -> CraftingRecipe | None:
        """Await the recipe, or None when absent, failed or cancelled."""
        task = self._task or self.start()._task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            return None
        except Exception as e:
            # Stage handlers catch their own errors; this guards bugs in the graph itself
            logger.warning(f"Recipe enrichment task failed: {e}")
            return None

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()
