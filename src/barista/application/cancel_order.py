"""Application service: Cancel Order use case.

Cancels a pending or confirmed order.  When the owning conversation is
given and still points at the order, its reference is cleared too.
"""

from __future__ import annotations

from barista.application.dto import OrderDTO, to_order_dto
from barista.domain.exceptions import EntityNotFoundError
from barista.domain.model.value_objects import ConversationId, OrderId
from barista.domain.repository.conversation_repository import ConversationRepository
from barista.domain.repository.order_repository import OrderRepository


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        conversation_repo: ConversationRepository,
    ) -> None:
        self._order_repo = order_repo
        self._conversation_repo = conversation_repo

    async def handle(self, order_id: str, conversation_id: str | None = None) -> OrderDTO:
        order = await self._order_repo.get_by_id(OrderId.parse(order_id))
        if order is None:
            raise EntityNotFoundError(f"Order '{order_id}' not found")

        order.cancel()
        await self._order_repo.save(order)

        if conversation_id:
            conversation = await self._conversation_repo.get_by_id(
                ConversationId.parse(conversation_id)
            )
            if conversation is not None and conversation.current_order_id == order.id:
                conversation.clear_current_order()
                await self._conversation_repo.save(conversation)

        return to_order_dto(order)
