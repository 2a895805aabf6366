"""Application service: Show Order use case (query)."""

from __future__ import annotations

from barista.application.dto import OrderDTO, to_order_dto
from barista.domain.exceptions import EntityNotFoundError
from barista.domain.model.value_objects import OrderId
from barista.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self, order_id: str) -> OrderDTO:
        order = await self._order_repo.get_by_id(OrderId.parse(order_id))
        if order is None:
            raise EntityNotFoundError(f"Order '{order_id}' not found")
        return to_order_dto(order)
