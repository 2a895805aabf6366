"""Abstract repository for Conversation aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from barista.domain.model.conversation import Conversation
from barista.domain.model.value_objects import ConversationId


class ConversationRepository(ABC):

    @abstractmethod
    async def get_by_id(self, conversation_id: ConversationId) -> Conversation | None:
        """Return a conversation by its ID, or None if not found."""

    @abstractmethod
    async def get_recent_history(
        self, conversation_id: ConversationId, limit: int
    ) -> Conversation | None:
        """Return a conversation holding only its *limit* most recent messages."""

    @abstractmethod
    async def exists(self, conversation_id: ConversationId) -> bool:
        """Return True if the conversation is stored."""

    @abstractmethod
    async def save(self, conversation: Conversation) -> None:
        """Persist a new or updated conversation (upsert by id)."""

    @abstractmethod
    async def delete(self, conversation_id: ConversationId) -> bool:
        """Delete a conversation; return False if it was not there."""
