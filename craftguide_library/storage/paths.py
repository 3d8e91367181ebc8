"""Path resolution for craftguide storage locations.

This module provides path resolution based on CRAFTGUIDE_HOME environment variable,
following XDG-like directory structure within that root.

Contract:
- Inputs: Environment variables (CRAFTGUIDE_HOME and per-directory overrides)
- Outputs: Resolved Path objects
- Side Effects: Creates directories if they don't exist
"""

import os
from pathlib import Path


def get_home_dir() -> Path:
    """Get CRAFTGUIDE_HOME from environment.

    Returns:
        Path to root directory (default: .craftguide)
    """
    root = os.environ.get("CRAFTGUIDE_HOME", ".craftguide")
    return Path(root).resolve()


def _resolve_dir(name: str, env_var: str, create: bool = True) -> Path:
    directory: Path = get_home_dir() / name

    env_override: str | None = os.environ.get(env_var)
    if env_override is not None:
        directory = Path(env_override).resolve()

    if create:
        directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_config_dir() -> Path:
    """Get configuration directory.

    Returns:
        Path to config directory ($CRAFTGUIDE_HOME/config)
    """
    return _resolve_dir("config", "CRAFTGUIDE_CONFIG_DIR")


def get_state_dir(create: bool = True) -> Path:
    """Get state directory holding the local session store.

    Args:
        create: Create the directory if missing

    Returns:
        Path to state directory ($CRAFTGUIDE_HOME/state)

    Environment Variables:
        CRAFTGUIDE_STATE_DIR: Override state directory location
        (falls back to $CRAFTGUIDE_HOME/state if not set)

    Example:
        >>> state_dir = get_state_dir()
        >>> assert state_dir.name == "state" or "CRAFTGUIDE_STATE_DIR" in os.environ
    """
    return _resolve_dir("state", "CRAFTGUIDE_STATE_DIR", create)


def get_log_dir() -> Path:
    """Get log directory.

    Returns:
        Path to log directory ($CRAFTGUIDE_HOME/logs)
    """
    return _resolve_dir("logs", "CRAFTGUIDE_LOG_DIR")
