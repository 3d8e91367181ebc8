"""Storage module for craftguide_library.

Provides filesystem locations and the JSON-file key/value store.

Public Interface:
    - LocalStore: Key/value store with atomic writes
    - get_home_dir: Get CRAFTGUIDE_HOME
    - get_config_dir: Get config directory
    - get_state_dir: Get state directory
    - get_log_dir: Get log directory
"""

from .local_store import LocalStore
from .paths import get_config_dir
from .paths import get_home_dir
from .paths import get_log_dir
from .paths import get_state_dir

__all__ = [
    "LocalStore",
    "get_home_dir",
    "get_config_dir",
    "get_state_dir",
    "get_log_dir",
]
