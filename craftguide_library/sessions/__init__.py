"""Session persistence.

Public Interface:
    - SessionStore: Saved session list and active session pointer
"""

from .store import ACTIVE_SESSION_ID_KEY
from .store import SESSIONS_KEY
from .store import SessionStore

__all__ = [
    "ACTIVE_SESSION_ID_KEY",
    "SESSIONS_KEY",
    "SessionStore",
]
