"""Session title generation service."""

from .service import clean_title
from .service import generate_title

__all__ = ["clean_title", "generate_title"]
