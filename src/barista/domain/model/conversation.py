"""Conversation aggregate — the transcript between a customer and the barista.

Keeps an append-only list of messages and a soft reference (by id) to the
order currently being built.  The order itself is a separate aggregate;
the application layer clears the reference once that order becomes
completed or cancelled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from barista.domain.exceptions import ValidationError
from barista.domain.model.value_objects import ConversationId, OrderId


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """An immutable record of what was said and by whom."""

    role: MessageRole
    content: str
    timestamp: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if not isinstance(self.role, MessageRole):
            raise ValidationError(f"Invalid message role: {self.role!r}")
        if not self.content or not self.content.strip():
            raise ValidationError("Message content cannot be empty")

    def __str__(self) -> str:
        return f"[{self.role.value}]: {self.content}"


@dataclass
class Conversation:
    """Aggregate root for a chat session.

    Invariant: ``messages`` only ever grows; entries are never edited or
    dropped by this class.
    """

    id: ConversationId
    messages: list[Message] = field(default_factory=list)
    current_order_id: OrderId | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @staticmethod
    def create(conversation_id: ConversationId | None = None) -> Conversation:
        now = _now()
        return Conversation(
            id=conversation_id or ConversationId.generate(),
            messages=[],
            current_order_id=None,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def reconstitute(
        conversation_id: ConversationId,
        messages: list[Message],
        current_order_id: OrderId | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> Conversation:
        return Conversation(
            id=conversation_id,
            messages=list(messages),
            current_order_id=current_order_id,
            created_at=created_at,
            updated_at=updated_at,
        )

    # --- Transcript -----------------------------------------------------------

    def add_user_message(self, content: str) -> Message:
        return self._append(Message(MessageRole.USER, content))

    def add_assistant_message(self, content: str) -> Message:
        return self._append(Message(MessageRole.ASSISTANT, content))

    def recent_messages(self, count: int) -> list[Message]:
        if count <= 0:
            return []
        return self.messages[-count:]

    def get_messages_for_context(self, limit: int = 10) -> str:
        """The last *limit* messages as ``[role]: content`` lines, oldest first."""
        return "\n".join(str(message) for message in self.recent_messages(limit))

    @property
    def message_count(self) -> int:
        return len(self.messages)

    # --- Order reference ------------------------------------------------------

    def set_current_order(self, order_id: OrderId) -> None:
        self.current_order_id = order_id
        self._touch()

    def clear_current_order(self) -> None:
        self.current_order_id = None
        self._touch()

    # --- Internal helpers -----------------------------------------------------

    def _append(self, message: Message) -> Message:
        self.messages.append(message)
        self._touch()
        return message

    def _touch(self) -> None:
        self.updated_at = _now()
