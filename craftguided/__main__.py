"""Entry point for running the craftguided service.

This module provides the CLI entry point for starting the service.
"""

import logging
import sys
from pathlib import Path

import uvicorn

from craftguide_library.config.loader import load_config
from craftguide_library.config.settings import AssistantSettings
from craftguide_library.storage.paths import get_log_dir
from craftguide_library.utils.structured_log import configure_logging

from .main import create_app

logger = logging.getLogger(__name__)

LOG_FILE_NAME = "craftguided.log"


def get_log_file() -> Path:
    """Path of the service log file inside the log directory."""
    return get_log_dir() / LOG_FILE_NAME


def run(config: AssistantSettings, log_file: Path | None = None) -> None:
    """Configure logging and serve the app with uvicorn until stopped.

    Args:
        config: Settings for host, port, workers and logging
        log_file: Also write log records to this file
    """
    configure_logging(config.log_level, config.log_format, log_file)

    if config.workers > 1:
        # Worker processes build their own app from config
        uvicorn.run(
            "craftguided.main:create_app",
            factory=True,
            host=config.host,
            port=config.port,
            log_level=config.log_level.lower(),
            workers=config.workers,
            log_config=None,
        )
    else:
        uvicorn.run(
            create_app(config),
            host=config.host,
            port=config.port,
            log_level=config.log_level.lower(),
            log_config=None,
        )


def main() -> None:
    """Run the craftguided service.

    Loads configuration and starts the uvicorn server.
    """
    try:
        config = load_config()
        run(config, get_log_file())

    except KeyboardInterrupt:
        logger.info("Received interrupt, shutting down")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Failed to start service: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
