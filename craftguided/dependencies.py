"""Shared dependency factories for FastAPI endpoints.

Handles are built once per application and kept on ``app.state``. Tests
either pass their own handles to ``create_app`` or override these
functions through ``app.dependency_overrides``.
"""

from fastapi import Request

from craftguide_library.config.loader import load_config
from craftguide_library.config.settings import AssistantSettings
from craftguide_library.llm.client import ModelClient


def get_settings(request: Request) -> AssistantSettings:
    """Get assistant settings, loading them on first use.

    Returns:
        AssistantSettings for this application
    """
    state = request.app.state
    if getattr(state, "settings", None) is None:
        state.settings = load_config()
    return state.settings


def get_model_client(request: Request) -> ModelClient:
    """Get the model provider handle, constructing it on first use.

    Returns:
        ModelClient for this application
    """
    state = request.app.state
    if getattr(state, "model_client", None) is None:
        state.model_client = ModelClient.from_settings(get_settings(request))
    return state.model_client
