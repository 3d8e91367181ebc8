"""API routers for craftguided.

This module contains FastAPI routers for all API endpoints.
"""

from .chat import router as chat_router
from .status import router as status_router
from .summary import router as summary_router
from .titles import router as titles_router

__all__ = [
    "chat_router",
    "status_router",
    "summary_router",
    "titles_router",
]
