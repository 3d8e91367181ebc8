"""Chat controller: the client-side state machine for one active session.

Owns the active ChatSession and drives everything that happens around a
turn: the busy gate, the streaming placeholder, autosave, title assignment
and the summarization trigger.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from datetime import UTC
from datetime import datetime
from pathlib import Path

import httpx

from ..models.messages import ChatMessage
from ..models.messages import ChatSession
from ..models.messages import now_ms
from ..models.summary import SessionSummary
from ..sessions.store import SessionStore
from .api import AssistantAPIClient
from .api import AssistantAPIError
from .conversation import Conversation
from .reassembler import StreamReassembler

logger = logging.getLogger(__name__)

SessionListener = Callable[[ChatSession, ChatMessage | None], None]

# Failures of the best-effort side calls
_SIDE_CALL_ERRORS = (AssistantAPIError, httpx.HTTPError)


def iso_now() -> str:
    return datetime.now(UTC).isoformat()


class ChatController:
    """Drives one session at a time against the service.

    Example:
        >>> controller = ChatController(api, SessionStore.default())
        >>> await controller.open()
        >>> reply = await controller.send("How do I craft a lantern?")
        >>> print(reply.text)
    """

    def __init__(
        self,
        api: AssistantAPIClient,
        store: SessionStore,
        edition: str = "java",
        on_change: SessionListener | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            api: Service client
            store: Session persistence
            edition: Game edition sent with every chat request
            on_change: Called after every state change with the session and
                the message that changed (None for session-level changes)
        """
        self.api = api
        self.store = store
        self.edition = edition
        self.on_change = on_change
        self.is_loading = False
        self.last_error: str | None = None
        self.session = ChatSession()
        self.conversation = Conversation(self.session.messages, on_change=self._on_message_change)
        # One-shot flag: state was just hydrated from storage, not changed by activity
        self._restored = False

    # --- Session lifecycle ---

    async def open(self) -> ChatSession:
        """Resume the active session, or start a new one if there is none."""
        active_id = self.store.get_active_session_id()
        if active_id is not None and self.store.get_session(active_id) is not None:
            return await self.load_session(active_id)
        return await self.new_session()

    async def new_session(self) -> ChatSession:
        session = self.store.create_session()
        self._hydrate(session)
        await self._after_change()
        return self.session

    async def load_session(self, session_id: str) -> ChatSession:
        """Replace the current state with a saved session.

        Raises:
            KeyError: If no saved session has that id
        """
        session = self.store.get_session(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found")
        self.store.set_active_session_id(session_id)
        self._hydrate(session)
        await self._after_change()
        return self.session

    def delete_session(self, session_id: str) -> bool:
        return self.store.delete_session(session_id)

    def _hydrate(self, session: ChatSession) -> None:
        self.session = session.model_copy(deep=True)
        # A message left streaming by an interrupted run can never finish now
        for message in self.session.messages:
            if message.is_streaming:
                message.is_streaming = False
        self.conversation = Conversation(self.session.messages, on_change=self._on_message_change)
        self._restored = True
        self._notify(None)

    # --- Turns ---

    async def send(self, text: str) -> ChatMessage | None:
        """Submit a user message and stream the model reply into the session.

        Ignored (returns None) while a turn is in flight or for blank input.

        Returns:
            The finalized model message
        """
        text = text.strip()
        if not text or self.is_loading:
            return None

        self.is_loading = True
        self._restored = False
        try:
            self.conversation.append(ChatMessage.user(text, timestamp=iso_now()))
            request_messages = self.conversation.messages

            placeholder = self.conversation.append(ChatMessage.placeholder(timestamp=iso_now()))
            reassembler = StreamReassembler(self.conversation, placeholder.id)

            try:
                async for event in self.api.stream_chat(request_messages, self.session.summary, self.edition):
                    reassembler.apply(event)
                reassembler.finish()
            except _SIDE_CALL_ERRORS as e:
                logger.error(f"Chat request failed: {e}")
                reassembler.fail(str(e))
        finally:
            self.is_loading = False

        self.last_error = reassembler.error
        await self._after_change()
        return reassembler.message

    # --- Summary ---

    def should_summarize(self) -> bool:
        """True after a completed model turn in a conversation of 2+ messages."""
        if self._restored:
            return False
        messages = self.session.messages
        if len(messages) < 2:
            return False
        last = messages[-1]
        return last.role == "model" and not last.is_streaming

    async def refresh_summary(self) -> SessionSummary | None:
        """Recompute the summary now. Keeps the previous one on failure."""
        if len(self.session.messages) < 2:
            return self.session.summary
        try:
            summary = await self.api.summarize(self.session.messages)
        except _SIDE_CALL_ERRORS as e:
            logger.warning(f"Summarization failed; keeping previous summary: {e}")
            return self.session.summary

        self.session.summary = summary
        self._persist()
        self._notify(None)
        return summary

    def import_summary(self, path: Path) -> SessionSummary:
        """Load and validate a summary exported earlier.

        Raises:
            OSError: If the file cannot be read
            pydantic.ValidationError: If the content is not a valid summary
        """
        summary = SessionSummary.model_validate_json(Path(path).read_text(encoding="utf-8"))
        self.session.summary = summary
        self._persist()
        self._notify(None)
        logger.info(f"Imported summary from {path}")
        return summary

    def export_summary(self, path: Path) -> Path:
        """Write the current summary as indented JSON.

        Raises:
            ValueError: If the session has no summary yet
        """
        if self.session.summary is None:
            raise ValueError("No summary to export")
        path = Path(path)
        path.write_text(
            json.dumps(self.session.summary.to_wire(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        return path

    # --- Effects ---

    def _on_message_change(self, message: ChatMessage) -> None:
        # Autosave on every change except while a reply is streaming
        if not self.session.is_streaming:
            self._persist()
        self._notify(message)

    async def _after_change(self) -> None:
        """Run the effects that follow a settled state change."""
        if self._restored:
            self._schedule_restore_clear()
            return

        await self._assign_title()
        self._persist()

        if self.should_summarize():
            await self.refresh_summary()

    def _schedule_restore_clear(self) -> None:
        # Cleared after everything scheduled for this update has run
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._restored = False
            return
        loop.call_soon(self._clear_restored)

    def _clear_restored(self) -> None:
        self._restored = False

    async def _assign_title(self) -> None:
        """Replace the placeholder name once there is a user message. Best-effort."""
        if not self.session.has_placeholder_name:
            return
        if not any(message.role == "user" for message in self.session.messages):
            return
        try:
            title = await self.api.generate_title(self.session.messages)
        except _SIDE_CALL_ERRORS as e:
            logger.warning(f"Title generation failed; keeping placeholder: {e}")
            return
        self.session.name = title
        self._notify(None)

    def _persist(self) -> None:
        self.session.last_updated = now_ms()
        self.store.save_session(self.session)

    def _notify(self, message: ChatMessage | None) -> None:
        if self.on_change is not None:
            self.on_change(self.session, message)
