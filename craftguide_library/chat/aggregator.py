"""Reply aggregation: one ordered event stream per assistant turn.

Merges three independently arriving signals into a single sequence:
text fragments from the reply stream, grounding metadata seen along the way,
and the recipe side-call result.
"""

from collections.abc import AsyncIterator
from typing import Any

from ..llm.client import ReplyChunk
from ..models.events import DoneEvent
from ..models.events import ErrorEvent
from ..models.events import MetadataEvent
from ..models.events import RecipeEvent
from ..models.events import StreamEvent
from ..models.events import TextEvent
from ..utils.structured_log import RouteLogger
from ..utils.structured_log import create_logger
from .enrichment import RecipeEnrichment


async def aggregate_reply(
    chunks: AsyncIterator[ReplyChunk],
    enrichment: RecipeEnrichment | None = None,
    log: RouteLogger | None = None,
) -> AsyncIterator[StreamEvent]:
    """Yield the events of one turn in order.

    Text fragments are forwarded as soon as they arrive. The last grounding
    payload seen wins and is emitted once after the text. The recipe, if
    any, follows, then ``done``. Any exception becomes a single ``error``
    event which ends the stream in place of ``done``.

    Args:
        chunks: Reply stream opened by ModelClient.open_reply_stream
        enrichment: Started recipe side-call, or None when disabled
        log: Route logger for the turn

    Yields:
        StreamEvent instances
    """
    log = log or create_logger("chat")
    timer = log.start_timer()
    grounding: dict[str, Any] | None = None
    fragments = 0
    chars = 0

    try:
        async for chunk in chunks:
            if chunk.text:
                fragments += 1
                chars += len(chunk.text)
                yield TextEvent(content=chunk.text)
            if chunk.grounding_metadata is not None:
                grounding = chunk.grounding_metadata

        if grounding is not None:
            yield MetadataEvent(content=grounding)

        if enrichment is not None:
            recipe = await enrichment.result()
            if recipe is not None:
                yield RecipeEvent(content=recipe)

        timer.done(
            "Reply stream finished",
            {"fragments": fragments, "chars": chars, "grounded": grounding is not None},
        )
        yield DoneEvent()

    except Exception as e:
        log.error("Reply stream failed", {"error": str(e), "fragments": fragments})
        yield ErrorEvent(message=str(e) or type(e).__name__)

    finally:
        if enrichment is not None:
            enrichment.cancel()
