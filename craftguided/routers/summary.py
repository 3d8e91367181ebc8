"""Summary router for craftguided API."""

from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.responses import PlainTextResponse
from fastapi.responses import Response
from pydantic import ValidationError

from craftguide_library.llm.client import ModelClient
from craftguide_library.summaries.service import summarize
from craftguide_library.utils.structured_log import create_logger

from ..dependencies import get_model_client
from ..models import ErrorResponse
from ..models import TranscriptRequest

router = APIRouter(prefix="/api", tags=["summary"])


@router.post("/summary", response_model=None)
async def create_summary(
    request: Request,
    client: Annotated[ModelClient, Depends(get_model_client)],
) -> Response:
    """Extract a SessionSummary from the full transcript.

    Always answers 200 with a valid summary once the model has responded;
    unusable model output is replaced by an empty fallback summary.

    Errors:
        400: Missing or empty messages
        500: Model call failed
    """
    log = create_logger("summary")

    try:
        transcript = TranscriptRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        log.warn("Rejected summary request: no messages")
        return PlainTextResponse("No messages to summarize", status_code=400)

    try:
        summary = await summarize(client, transcript.messages, log)
    except Exception as e:
        log.error("Summary generation failed", {"error": str(e)})
        return JSONResponse(ErrorResponse(error=str(e)).model_dump(), status_code=500)

    return JSONResponse(summary.to_wire())
