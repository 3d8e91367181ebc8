"""Persisted chat sessions.

Two logical tables in the local key/value store: the list of ChatSession
records and a single active-session pointer. Failures are logged and the
caller keeps working without persistence.
"""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError

from ..models.messages import DEFAULT_SESSION_NAME
from ..models.messages import ChatSession
from ..storage.local_store import LocalStore
from ..storage.paths import get_state_dir

logger = logging.getLogger(__name__)

SESSIONS_KEY = "craftguide_chat_sessions"
ACTIVE_SESSION_ID_KEY = "craftguide_active_session_id"

_sessions_adapter: TypeAdapter[list[ChatSession]] = TypeAdapter(list[ChatSession])


class SessionStore:
    """Manages the saved session list and the active session pointer.

    Example:
        >>> store = SessionStore(LocalStore(get_state_dir()))
        >>> session = store.create_session()
        >>> store.get_active_session_id() == session.id
        True
    """

    def __init__(self, local_store: LocalStore) -> None:
        self.local_store = local_store

    @classmethod
    def at(cls, state_dir: Path) -> "SessionStore":
        return cls(LocalStore(state_dir))

    @classmethod
    def default(cls) -> "SessionStore":
        """Store under the configured state directory.

        The directory is created by LocalStore, so an unwritable location
        leaves a store that logs its failures instead of raising.
        """
        return cls.at(get_state_dir(create=False))

    # --- Sessions ---

    def get_sessions(self) -> list[ChatSession]:
        """All saved sessions, most recently updated first."""
        try:
            data = self.local_store.get_item(SESSIONS_KEY)
            if not data:
                return []
            sessions = _sessions_adapter.validate_json(data)
        except (OSError, ValidationError, ValueError) as e:
            logger.error(f"Failed to get sessions: {e}")
            return []
        return sorted(sessions, key=lambda s: s.last_updated, reverse=True)

    def get_session(self, session_id: str) -> ChatSession | None:
        return next((s for s in self.get_sessions() if s.id == session_id), None)

    def save_session(self, session: ChatSession) -> None:
        """Insert or replace a session, keeping the list sorted by lastUpdated desc."""
        try:
            sessions = self.get_sessions()
            index = next((i for i, s in enumerate(sessions) if s.id == session.id), None)

            if index is not None:
                sessions[index] = session
            else:
                sessions.insert(0, session)

            sessions.sort(key=lambda s: s.last_updated, reverse=True)
            self._write_sessions(sessions)
        except OSError as e:
            logger.error(f"Failed to save session {session.id}: {e}")

    def create_session(self, name: str = DEFAULT_SESSION_NAME) -> ChatSession:
        """Create, persist and activate a new empty session."""
        session = ChatSession(name=name)
        self.save_session(session)
        self.set_active_session_id(session.id)
        logger.info(f"Created session {session.id}")
        return session

    def delete_session(self, session_id: str) -> bool:
        """Delete a session; clears the active pointer if it pointed at it.

        Returns:
            True if a session was removed
        """
        try:
            sessions = self.get_sessions()
            remaining = [s for s in sessions if s.id != session_id]
            self._write_sessions(remaining)

            if self.get_active_session_id() == session_id:
                self.local_store.remove_item(ACTIVE_SESSION_ID_KEY)

            removed = len(remaining) != len(sessions)
            if removed:
                logger.info(f"Deleted session {session_id}")
            return removed
        except OSError as e:
            logger.error(f"Failed to delete session {session_id}: {e}")
            return False

    # --- Active session pointer ---

    def set_active_session_id(self, session_id: str) -> None:
        try:
            self.local_store.set_item(ACTIVE_SESSION_ID_KEY, session_id)
        except OSError as e:
            logger.error(f"Failed to set active session: {e}")

    def get_active_session_id(self) -> str | None:
        try:
            return self.local_store.get_item(ACTIVE_SESSION_ID_KEY)
        except OSError as e:
            logger.error(f"Failed to read active session: {e}")
            return None

    def clear_active_session_id(self) -> None:
        try:
            self.local_store.remove_item(ACTIVE_SESSION_ID_KEY)
        except OSError as e:
            logger.error(f"Failed to clear active session: {e}")

    # --- Helpers ---

    def _write_sessions(self, sessions: list[ChatSession]) -> None:
        payload = [s.model_dump(mode="json", by_alias=True, exclude_none=True) for s in sessions]
        self.local_store.set_item(SESSIONS_KEY, json.dumps(payload, ensure_ascii=False))
