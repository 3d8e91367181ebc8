"""Title router for craftguided API."""

from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.responses import PlainTextResponse
from fastapi.responses import Response
from pydantic import ValidationError

from craftguide_library.config.settings import AssistantSettings
from craftguide_library.llm.client import ModelClient
from craftguide_library.titles.service import generate_title
from craftguide_library.utils.structured_log import create_logger

from ..dependencies import get_model_client
from ..dependencies import get_settings
from ..models import ErrorResponse
from ..models import TitleResponse
from ..models import TranscriptRequest

router = APIRouter(prefix="/api", tags=["titles"])


@router.post("/generate-title", response_model=None)
async def create_title(
    request: Request,
    client: Annotated[ModelClient, Depends(get_model_client)],
    settings: Annotated[AssistantSettings, Depends(get_settings)],
) -> Response:
    """Generate a short title from the first few messages.

    Returns:
        ``{"title": ...}``; "New Chat" when the model returned nothing usable

    Errors:
        400: Missing or empty messages
        500: Model call failed
    """
    log = create_logger("generate-title")

    try:
        transcript = TranscriptRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        log.warn("Rejected title request: invalid body")
        return PlainTextResponse("Invalid request body", status_code=400)

    try:
        title = await generate_title(client, transcript.messages, settings.title_context_messages, log)
    except Exception as e:
        log.error("Title generation failed", {"error": str(e)})
        return JSONResponse(ErrorResponse(error=str(e)).model_dump(), status_code=500)

    return JSONResponse(TitleResponse(title=title).model_dump())
