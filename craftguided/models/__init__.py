"""API models for craftguided."""

from .requests import ChatRequest
from .requests import TranscriptRequest
from .responses import ErrorResponse
from .responses import StatusResponse
from .responses import TitleResponse

__all__ = [
    "ChatRequest",
    "ErrorResponse",
    "StatusResponse",
    "TitleResponse",
    "TranscriptRequest",
]
