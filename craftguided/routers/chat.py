"""Chat router for craftguided API.

Streams one assistant turn as server-sent events while a recipe side-call
runs next to the reply.
"""

from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi.responses import PlainTextResponse
from fastapi.responses import Response
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse

from craftguide_library.chat.aggregator import aggregate_reply
from craftguide_library.chat.enrichment import RecipeEnrichment
from craftguide_library.chat.history import build_history
from craftguide_library.config.settings import AssistantSettings
from craftguide_library.llm.client import ModelClient
from craftguide_library.llm.prompts import normalize_edition
from craftguide_library.utils.structured_log import create_logger
from craftguide_library.utils.structured_log import preview

from ..dependencies import get_model_client
from ..dependencies import get_settings
from ..models import ChatRequest
from ..streaming import PING_INTERVAL
from ..streaming import SSE_SEPARATOR
from ..streaming import sse_event_stream

router = APIRouter(prefix="/api", tags=["chat"])

INVALID_BODY = "Invalid request body"


@router.post("/chat", response_model=None)
async def chat(
    request: Request,
    client: Annotated[ModelClient, Depends(get_model_client)],
    settings: Annotated[AssistantSettings, Depends(get_settings)],
) -> Response:
    """Stream the assistant's reply to the latest user message.

    The router classification and the optional recipe call start first and
    run in the background; the reply stream is opened right away without
    waiting on them.

    Returns:
        text/event-stream of ``data: <json>`` records (text*, metadata?,
        recipe?, then done or error)

    Errors:
        400: Malformed body, empty messages, or a last message without text
        500: Failure before the stream was opened (plain-text message)
    """
    log = create_logger("chat")

    try:
        body = await request.json()
    except ValueError:
        log.warn("Rejected chat request: body is not JSON")
        return PlainTextResponse(INVALID_BODY, status_code=400)

    try:
        chat_request = ChatRequest.model_validate(body)
    except ValidationError as e:
        log.warn("Rejected chat request: invalid body", {"errors": e.error_count()})
        return PlainTextResponse(INVALID_BODY, status_code=400)

    message = chat_request.latest_text
    if not message.strip():
        log.warn("Rejected chat request: last message has no text")
        return PlainTextResponse(INVALID_BODY, status_code=400)

    enrichment: RecipeEnrichment | None = None
    try:
        edition = normalize_edition(chat_request.edition or settings.default_edition)
        history = build_history(chat_request.prior_messages, chat_request.summary)

        log.info(
            "Chat request received",
            {
                "edition": edition,
                "historyTurns": len(history),
                "hasSummary": chat_request.summary is not None,
                "preview": preview(message, settings.preview_length),
            },
        )

        enrichment = RecipeEnrichment(client, history, message, edition, log).start()
        chunks = await client.open_reply_stream(history, message, edition)

    except Exception as e:
        if enrichment is not None:
            enrichment.cancel()
        log.error("Failed to open reply stream", {"error": str(e)})
        return PlainTextResponse(str(e) or "Internal Server Error", status_code=500)

    return EventSourceResponse(
        sse_event_stream(aggregate_reply(chunks, enrichment, log)),
        sep=SSE_SEPARATOR,
        ping=PING_INTERVAL,
    )
