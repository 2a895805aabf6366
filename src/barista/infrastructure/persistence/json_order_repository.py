"""JSON-file-backed implementation of OrderRepository.

Each record also carries the id of the conversation it belongs to, so the
active order of a conversation can be found without embedding one aggregate
in the other.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from barista.domain.model.order import LineItem, Order, OrderStatus
from barista.domain.model.value_objects import (
    ConversationId,
    DrinkId,
    DrinkSize,
    Money,
    OrderId,
    Quantity,
)
from barista.domain.repository.order_repository import OrderRepository
from barista.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    async def get_by_id(self, order_id: OrderId) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == str(order_id):
                return self._to_domain(raw)
        return None

    async def get_active_by_conversation(
        self, conversation_id: ConversationId
    ) -> Order | None:
        active = [
            raw
            for raw in self._file.load()
            if raw.get("conversation_id") == str(conversation_id)
            and OrderStatus(raw["status"]).is_active
        ]
        if not active:
            return None
        latest = max(active, key=lambda raw: raw["updated_at"])
        return self._to_domain(latest)

    async def save(self, order: Order) -> None:
        # Keep whatever conversation link the record already had.
        link = None
        for raw in self._file.load():
            if raw["id"] == str(order.id):
                link = raw.get("conversation_id")
                break
        self._file.upsert(self._to_raw(order, link))

    async def save_with_link(
        self, order: Order, conversation_id: ConversationId
    ) -> None:
        self._file.upsert(self._to_raw(order, str(conversation_id)))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order, conversation_id: str | None) -> dict:
        return {
            "id": str(order.id),
            "conversation_id": conversation_id,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "items": [
                {
                    "drink_id": str(item.drink_id),
                    "drink_name": item.drink_name,
                    "size": item.size.value if item.size else None,
                    "quantity": item.quantity.value,
                    "unit_price_cents": item.unit_price.cents,
                    "currency": item.unit_price.currency,
                    "customizations": dict(item.customizations),
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            LineItem(
                drink_id=DrinkId.parse(i["drink_id"]),
                drink_name=i["drink_name"],
                size=DrinkSize(i["size"]) if i.get("size") else None,
                quantity=Quantity(i["quantity"]),
                unit_price=Money(i["unit_price_cents"], i.get("currency", "USD")),
                customizations=i.get("customizations") or {},
            )
            for i in raw["items"]
        ]
        return Order.reconstitute(
            order_id=OrderId.parse(raw["id"]),
            status=OrderStatus(raw["status"]),
            items=items,
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
