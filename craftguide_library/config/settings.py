"""Settings models for the craftguide assistant.

This module defines the configuration for the HTTP service, the model
provider handle and the terminal client.

Contract:
- Inputs: Environment variables, YAML files
- Outputs: Validated settings objects
- Side Effects: None (read-only)
"""

from typing import Literal

from pydantic import AliasChoices
from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

ThinkingLevel = Literal["minimal", "low", "medium", "high"]


class AssistantSettings(BaseSettings):
    """Configuration for the craftguide service and client.

    Attributes:
        host: Listen address (default: 127.0.0.1)
        port: Listen port (default: 8430)
        log_level: Logging level (default: info)
        log_format: "json" for one structured line per record, "text" for plain lines
        workers: Number of uvicorn workers (default: 1)
        gemini_api_key: API key for the model provider (also read from GEMINI_API_KEY)
        api_version: Provider API version
        model_id: Primary conversational model
        router_model_id: Cheaper model used only for yes/no intent classification
        thinking_level: Thinking budget for conversational replies
        summary_thinking_level: Thinking budget for summary extraction
        default_edition: Edition used when a chat request does not name one
        preview_length: Max characters of user text echoed into logs
        title_context_messages: Number of leading messages sent for title generation
        cors_origins: Origins allowed by the CORS middleware
        server_url: Base URL the client and CLI talk to

    Example:
        >>> settings = AssistantSettings()
        >>> assert settings.port == 8430
        >>> assert settings.model_id != settings.router_model_id
    """

    model_config = SettingsConfigDict(
        env_prefix="CRAFTGUIDE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    host: str = "127.0.0.1"
    port: int = 8430
    log_level: str = "info"
    log_format: Literal["json", "text"] = "json"
    workers: int = 1

    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("CRAFTGUIDE_GEMINI_API_KEY", "GEMINI_API_KEY", "gemini_api_key"),
    )
    api_version: str = "v1alpha"
    model_id: str = "gemini-3-flash-preview"
    router_model_id: str = "gemini-2.5-flash-lite"
    thinking_level: ThinkingLevel = "medium"
    summary_thinking_level: ThinkingLevel = "low"

    default_edition: Literal["java", "bedrock"] = "java"
    preview_length: int = Field(default=80, gt=0)
    title_context_messages: int = Field(default=4, gt=0)

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    server_url: str = "http://127.0.0.1:8430"

    @field_validator("server_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalise the base URL so paths can be appended directly."""
        return v.rstrip("/")

    @model_validator(mode="after")
    def check_distinct_models(self) -> "AssistantSettings":
        if self.model_id == self.router_model_id:
            raise ValueError("router_model_id must differ from model_id")
        return self
