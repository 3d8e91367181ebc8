"""Structured, single-line JSON logging.

Each log call becomes exactly one JSON line so that hosted log viewers show
one row per call with the ``data`` payload expandable.

Public Interface:
    - create_logger: Logger scoped to an API route with optional context
    - preview: Truncate text for log previews
    - StructuredFormatter: logging.Formatter rendering JSON lines
    - configure_logging: Install the formatter on the root logger
"""

import json
import logging
import sys
import time
from datetime import UTC
from datetime import datetime
from pathlib import Path
from typing import Any

LOGGER_NAME = "craftguide"

PREVIEW_MARKER = "…"

# Attributes stashed on LogRecord by RouteLogger
_ROUTE_ATTR = "route"
_CONTEXT_ATTR = "ctx"
_DATA_ATTR = "data"
_DURATION_ATTR = "duration_ms"


def preview(text: str, max_len: int = 80) -> str:
    """Truncate a string for log previews.

    Args:
        text: Text to shorten
        max_len: Maximum characters kept before the marker

    Returns:
        The text unchanged when it fits, otherwise its first ``max_len``
        characters followed by a single ellipsis character

    Example:
        >>> preview("abcdef", 3)
        'abc…'
    """
    if len(text) <= max_len:
        return text
    return text[:max_len] + PREVIEW_MARKER


def severity_for(levelno: int) -> str:
    """Map a logging level onto the three output severities."""
    if levelno >= logging.ERROR:
        return "ERROR"
    if levelno >= logging.WARNING:
        return "WARNING"
    return "INFO"


class StructuredFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "severity": severity_for(record.levelno),
            "message": record.getMessage(),
        }

        route = getattr(record, _ROUTE_ATTR, None)
        if route is not None:
            entry["route"] = route
        context = getattr(record, _CONTEXT_ATTR, None)
        if context:
            entry["ctx"] = context
        duration = getattr(record, _DURATION_ATTR, None)
        if duration is not None:
            entry["durationMs"] = duration
        data = getattr(record, _DATA_ATTR, None)
        if data is not None:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry["timestamp"] = datetime.fromtimestamp(record.created, UTC).isoformat()

        # default=str keeps unserialisable payloads on a single line
        return json.dumps(entry, ensure_ascii=False, default=str)


class LogTimer:
    """Measures elapsed time and logs it once with ``done``."""

    def __init__(self, owner: "RouteLogger") -> None:
        self._owner = owner
        self._start = time.monotonic()

    def elapsed_ms(self) -> int:
        return max(0, int((time.monotonic() - self._start) * 1000))

    def done(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._owner._emit(logging.INFO, message, data, duration_ms=self.elapsed_ms())


class RouteLogger:
    """Logger bound to a route name and optional request context."""

    def __init__(
        self,
        route: str,
        context: dict[str, Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.route = route
        self.context = dict(context) if context else None
        self._logger = logger or logging.getLogger(f"{LOGGER_NAME}.{route}")

    def _emit(
        self,
        level: int,
        message: str,
        data: dict[str, Any] | None,
        duration_ms: int | None = None,
    ) -> None:
        extra: dict[str, Any] = {_ROUTE_ATTR: self.route, _CONTEXT_ATTR: self.context, _DATA_ATTR: data}
        if duration_ms is not None:
            extra[_DURATION_ATTR] = duration_ms
        self._logger.log(level, message, extra=extra)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._emit(logging.INFO, message, data)

    def warn(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._emit(logging.WARNING, message, data)

    def error(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._emit(logging.ERROR, message, data)

    def start_timer(self) -> LogTimer:
        """Start a timer. Call ``.done(message, data)`` to log the duration."""
        return LogTimer(self)


def create_logger(route: str, context: dict[str, Any] | None = None) -> RouteLogger:
    """Create a logger scoped to a specific API route with optional context.

    Example:
        >>> log = create_logger("chat", {"sessionId": "abc"})
        >>> timer = log.start_timer()
        >>> timer.done("reply finished", {"chunks": 3})
    """
    return RouteLogger(route, context)


def configure_logging(level: str = "info", log_format: str = "json", log_file: Path | None = None) -> None:
    """Configure the root logger for the service.

    Args:
        level: Logging level name (case-insensitive)
        log_format: "json" for StructuredFormatter, "text" for plain lines
        log_file: Also append records to this file when given
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        if log_format == "json":
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    root = logging.getLogger()
    root.handlers = handlers
    root.setLevel(level.upper())
