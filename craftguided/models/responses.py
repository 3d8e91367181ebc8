"""Response models for craftguided API.

Pydantic models for API responses.
"""

from pydantic import Field

from craftguide_library.models.base import CamelCaseModel


class TitleResponse(CamelCaseModel):
    """Generated session title."""

    title: str = Field(..., description="Short session title")


class ErrorResponse(CamelCaseModel):
    """Standard error response.

    Attributes:
        error: Error message
    """

    error: str = Field(..., description="Error message")


class StatusResponse(CamelCaseModel):
    """Service status response.

    Attributes:
        status: Service status
        version: Service version
        uptime_seconds: Seconds since the process started
        model_id: Primary conversational model
        router_model_id: Intent classification model
    """

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")
    uptime_seconds: float = Field(..., description="Uptime in seconds")
    model_id: str = Field(..., description="Primary model")
    router_model_id: str = Field(..., description="Router model")
