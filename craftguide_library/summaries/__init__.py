"""Session summarization service."""

from .service import coerce_summary
from .service import summarize

__all__ = ["coerce_summary", "summarize"]
