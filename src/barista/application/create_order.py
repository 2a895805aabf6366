"""Application service: Create Order use case.

Adds a drink (by name) to a conversation's active order, starting a new
order when there is none.  This is the programmatic counterpart of the
``order_drink`` intent, useful for direct API/CLI calls and tests.
"""

from __future__ import annotations

from barista.application.dto import OrderDTO, to_order_dto
from barista.domain.exceptions import EntityNotFoundError, InvalidOrderState
from barista.domain.model.order import MAX_TOTAL_QUANTITY, LineItem, Order
from barista.domain.model.value_objects import ConversationId, DrinkSize, OrderId, Quantity
from barista.domain.repository.conversation_repository import ConversationRepository
from barista.domain.repository.drink_repository import DrinkRepository
from barista.domain.repository.order_repository import OrderRepository


class CreateOrderHandler:

    def __init__(
        self,
        conversation_repo: ConversationRepository,
        order_repo: OrderRepository,
        drink_repo: DrinkRepository,
        max_total_quantity: int = MAX_TOTAL_QUANTITY,
    ) -> None:
        self._conversation_repo = conversation_repo
        self._order_repo = order_repo
        self._drink_repo = drink_repo
        self._max_total_quantity = max_total_quantity

    async def handle(
        self,
        conversation_id: str,
        drink_name: str,
        quantity: int = 1,
        size: str | None = None,
        customizations: dict[str, str] | None = None,
    ) -> OrderDTO:
        """Add a drink to the conversation's order.

        Steps:
        1. Resolve the conversation and the drink (fail if either is missing).
        2. Build a LineItem with the drink's *current* price (snapshot).
        3. Add it to the active pending order, or to a brand new one.
        4. Persist the order with its link, then the conversation.
        """
        conv_id = ConversationId.parse(conversation_id)
        conversation = await self._conversation_repo.get_by_id(conv_id)
        if conversation is None:
            raise EntityNotFoundError(f"Conversation '{conversation_id}' not found")

        item = await _build_item(self._drink_repo, drink_name, quantity, size, customizations)

        order = await self._order_repo.get_active_by_conversation(conv_id)
        if order is None or not order.status.can_be_modified:
            order = Order.create()
        order.add_item(item, limit=self._max_total_quantity)

        await self._order_repo.save_with_link(order, conv_id)
        if conversation.current_order_id != order.id:
            conversation.set_current_order(order.id)
            await self._conversation_repo.save(conversation)

        return to_order_dto(order)


class AddItemHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        drink_repo: DrinkRepository,
        max_total_quantity: int = MAX_TOTAL_QUANTITY,
    ) -> None:
        self._order_repo = order_repo
        self._drink_repo = drink_repo
        self._max_total_quantity = max_total_quantity

    async def handle(
        self,
        order_id: str,
        drink_name: str,
        quantity: int = 1,
        size: str | None = None,
        customizations: dict[str, str] | None = None,
    ) -> OrderDTO:
        """Add a drink to an existing pending order."""
        order = await self._order_repo.get_by_id(OrderId.parse(order_id))
        if order is None:
            raise EntityNotFoundError(f"Order '{order_id}' not found")
        if not order.status.can_be_modified:
            raise InvalidOrderState(
                f"Cannot add items to order {order_id} in {order.status.value} status"
            )

        item = await _build_item(self._drink_repo, drink_name, quantity, size, customizations)
        order.add_item(item, limit=self._max_total_quantity)
        await self._order_repo.save(order)
        return to_order_dto(order)


async def _build_item(
    drink_repo: DrinkRepository,
    drink_name: str,
    quantity: int,
    size: str | None,
    customizations: dict[str, str] | None,
) -> LineItem:
    drink = await drink_repo.get_by_name(drink_name)
    if drink is None:
        raise EntityNotFoundError(f"Drink not found: '{drink_name}'")

    return LineItem(
        drink_id=drink.id,
        drink_name=drink.name,
        quantity=Quantity(quantity),
        unit_price=drink.base_price,  # <-- price snapshot
        size=DrinkSize.parse(size) if size else None,
        customizations=customizations or {},
    )
