"""Shared utilities for craftguide_library."""

from .structured_log import configure_logging
from .structured_log import create_logger
from .structured_log import preview

__all__ = [
    "configure_logging",
    "create_logger",
    "preview",
]
