"""Main FastAPI application for craftguided.

This module creates and configures the FastAPI application that exposes
the craftguide_library chat pipeline via REST API with SSE streaming.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from craftguide_library import __version__
from craftguide_library.config.loader import load_config
from craftguide_library.config.settings import AssistantSettings
from craftguide_library.llm.client import ModelClient

from .routers import chat_router
from .routers import status_router
from .routers import summary_router
from .routers import titles_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Resolves settings and the model client on startup unless they were
    supplied to create_app.

    Args:
        app: FastAPI application instance
    """
    # Startup
    if app.state.settings is None:
        app.state.settings = load_config()
    settings: AssistantSettings = app.state.settings

    if app.state.model_client is None:
        app.state.model_client = ModelClient.from_settings(settings)

    logger.info(f"Starting craftguided on {settings.host}:{settings.port}")
    logger.info(f"Reply model: {settings.model_id}, router model: {settings.router_model_id}")

    yield

    # Shutdown
    logger.info("Shutting down craftguided")


def create_app(
    settings: AssistantSettings | None = None,
    model_client: ModelClient | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to use; loaded from config on startup when None
        model_client: Model handle to use; built from settings when None

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="craftguided",
        description="Minecraft help assistant API with SSE streaming support",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.model_client = model_client

    # Origins are read at construction; env/YAML apply when settings are not passed
    origins = (settings or load_config()).cors_origins

    # Add CORS middleware for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(chat_router)
    app.include_router(summary_router)
    app.include_router(titles_router)
    app.include_router(status_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint.

        Returns:
            Welcome message with API information
        """
        return {
            "name": "craftguided",
            "version": __version__,
            "description": "Minecraft help assistant API",
            "docs": "/docs",
            "openapi": "/openapi.json",
        }

    return app
