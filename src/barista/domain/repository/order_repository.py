"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from barista.domain.model.order import Order
from barista.domain.model.value_objects import ConversationId, OrderId


class OrderRepository(ABC):

    @abstractmethod
    async def get_by_id(self, order_id: OrderId) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    async def get_active_by_conversation(
        self, conversation_id: ConversationId
    ) -> Order | None:
        """Return the pending or confirmed order linked to a conversation."""

    @abstractmethod
    async def save(self, order: Order) -> None:
        """Persist a new or updated order (upsert by id)."""

    @abstractmethod
    async def save_with_link(
        self, order: Order, conversation_id: ConversationId
    ) -> None:
        """Persist an order and record which conversation it belongs to."""
