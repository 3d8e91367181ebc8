"""Configuration loading for craftguide.

This module handles loading assistant configuration from YAML files
and environment variables.

Contract:
- Inputs: Config file paths, environment variables
- Outputs: AssistantSettings objects
- Side Effects: Creates default config file if missing
"""

import logging
import os
from pathlib import Path

import yaml

from ..storage.paths import get_config_dir
from .settings import AssistantSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = """# craftguide configuration
# Environment variables prefixed with CRAFTGUIDE_ override these values.
# The provider key is read from GEMINI_API_KEY (or CRAFTGUIDE_GEMINI_API_KEY).

# Server settings
host: "127.0.0.1"
port: 8430
log_level: "info"
log_format: "json"
workers: 1

# Models
model_id: "gemini-3-flash-preview"
router_model_id: "gemini-2.5-flash-lite"
thinking_level: "medium"

# Chat defaults
default_edition: "java"

# Client
# server_url: "http://127.0.0.1:8430"
"""

# Keys whose env override does not follow the CRAFTGUIDE_<KEY> pattern
_EXTRA_ENV_KEYS = {"gemini_api_key": ("GEMINI_API_KEY",)}


def get_config_path() -> Path:
    """Get path to config file.

    Returns:
        Path to assistant.yaml in config directory

    Example:
        >>> config_path = get_config_path()
        >>> assert config_path.name == "assistant.yaml"
    """
    return get_config_dir() / "assistant.yaml"


def create_default_config() -> None:
    """Create default config file if it doesn't exist."""
    config_path = get_config_path()

    if config_path.exists():
        logger.debug(f"Config file already exists: {config_path}")
        return

    config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    logger.info(f"Created default config: {config_path}")


def _has_env_override(key: str) -> bool:
    if f"CRAFTGUIDE_{key.upper()}" in os.environ:
        return True
    return any(name in os.environ for name in _EXTRA_ENV_KEYS.get(key, ()))


def load_config(config_path: Path | None = None) -> AssistantSettings:
    """Load assistant configuration from YAML and environment.

    Environment variables take precedence over YAML settings.
    Variables should be prefixed with CRAFTGUIDE_ (e.g., CRAFTGUIDE_PORT).

    Args:
        config_path: Optional config file path (default: assistant.yaml in config dir)

    Returns:
        Validated assistant settings

    Example:
        >>> settings = load_config()
        >>> assert isinstance(settings, AssistantSettings)
    """
    if config_path is None:
        config_path = get_config_path()
        if not config_path.exists():
            create_default_config()

    yaml_settings = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                yaml_settings = yaml.safe_load(f) or {}
            logger.debug(f"Loaded config from {config_path}")
        except Exception as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            logger.info("Using default settings and environment variables")

    if not isinstance(yaml_settings, dict):
        logger.warning(f"Ignoring config at {config_path}: expected a mapping")
        yaml_settings = {}

    # Defaults < YAML < env vars: drop YAML values that an env var overrides
    filtered_yaml = {key: value for key, value in yaml_settings.items() if not _has_env_override(key)}

    settings = AssistantSettings(**filtered_yaml)

    logger.info(
        f"Assistant configuration loaded: host={settings.host}, port={settings.port}, "
        f"model={settings.model_id}, router={settings.router_model_id}"
    )

    return settings
