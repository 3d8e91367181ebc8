"""Status router for craftguided API.

Provides health check and status information.
"""

import time
from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends

from craftguide_library import __version__
from craftguide_library.config.settings import AssistantSettings

from ..dependencies import get_settings
from ..models import StatusResponse

router = APIRouter(prefix="/api", tags=["status"])

# Track service start time for uptime calculation
_start_time = time.time()


@router.get("/status", response_model=StatusResponse)
async def get_status(settings: Annotated[AssistantSettings, Depends(get_settings)]) -> StatusResponse:
    """Get service status.

    Returns:
        Service status including version, uptime and configured models
    """
    return StatusResponse(
        status="running",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        model_id=settings.model_id,
        router_model_id=settings.router_model_id,
    )


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Simple health status
    """
    return {"status": "healthy"}
