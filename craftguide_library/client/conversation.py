"""Ordered message list addressed by stable message id."""

from collections.abc import Callable

from ..models.messages import ChatMessage
from ..models.messages import new_message_id

ChangeListener = Callable[[ChatMessage], None]


class Conversation:
    """Messages of one session, updated by id rather than by position.

    Every ``append`` or ``update`` is one state change and notifies the
    listener exactly once.
    """

    def __init__(
        self,
        messages: list[ChatMessage] | None = None,
        on_change: ChangeListener | None = None,
    ) -> None:
        self._messages: list[ChatMessage] = messages if messages is not None else []
        for message in self._messages:
            if message.id is None:
                message.id = new_message_id()
        self.on_change = on_change

    @property
    def messages(self) -> list[ChatMessage]:
        """Snapshot of the messages, oldest first."""
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, message: ChatMessage) -> ChatMessage:
        if message.id is None:
            message.id = new_message_id()
        self._messages.append(message)
        self._notify(message)
        return message

    def get(self, message_id: str) -> ChatMessage | None:
        return next((m for m in self._messages if m.id == message_id), None)

    def update(self, message_id: str, change: Callable[[ChatMessage], None]) -> ChatMessage:
        """Apply ``change`` to a copy of the message and swap it in.

        Raises:
            KeyError: If no message has that id
        """
        for index, message in enumerate(self._messages):
            if message.id == message_id:
                updated = message.model_copy(deep=True)
                change(updated)
                self._messages[index] = updated
                self._notify(updated)
                return updated
        raise KeyError(f"Message {message_id} not found")

    def _notify(self, message: ChatMessage) -> None:
        if self.on_change is not None:
            self.on_change(message)
