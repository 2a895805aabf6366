"""Integration tests for the direct order use cases.

Create / AddItem / Confirm / Complete / Cancel / Show, driven against
in-memory fake repositories.
"""

import asyncio

import pytest

from barista.application.cancel_order import CancelOrderHandler
from barista.application.confirm_order import CompleteOrderHandler, ConfirmOrderHandler
from barista.application.create_order import AddItemHandler, CreateOrderHandler
from barista.application.show_order import ShowOrderHandler
from barista.domain.exceptions import (
    EntityNotFoundError,
    InvalidOrderState,
    OrderLimitExceeded,
    ValidationError,
)
from barista.domain.model.conversation import Conversation
from barista.domain.model.value_objects import ConversationId, Money, OrderId
from tests.fakes import (
    FakeConversationRepository,
    FakeDrinkRepository,
    FakeOrderRepository,
    make_drink,
)


def _setup(max_total_quantity: int = 20):
    """Build the handlers over shared fakes plus one stored conversation."""
    conversations = FakeConversationRepository()
    orders = FakeOrderRepository()
    drinks = FakeDrinkRepository([make_drink("Latte", "4.50"), make_drink("Mocha", "5.25")])
    conversation = Conversation.create()
    asyncio.run(conversations.save(conversation))
    create = CreateOrderHandler(conversations, orders, drinks, max_total_quantity)
    return create, conversations, orders, drinks, str(conversation.id)


class TestCreateOrder:

    def test_creates_pending_order_and_links_it(self):
        create, conversations, orders, _, conv_id = _setup()

        dto = asyncio.run(create.handle(conv_id, "Latte", quantity=2, size="venti"))

        assert dto.status == "pending"
        assert dto.total_price == "$9.00"
        assert dto.items[0].size == "venti"
        conversation = asyncio.run(conversations.get_by_id(ConversationId(conv_id)))
        assert str(conversation.current_order_id) == dto.order_id
        assert orders.link_of(OrderId(dto.order_id)) == ConversationId(conv_id)

    def test_second_call_reuses_active_order(self):
        create, _, _, _, conv_id = _setup()
        first = asyncio.run(create.handle(conv_id, "Latte"))
        second = asyncio.run(create.handle(conv_id, "mocha"))
        assert second.order_id == first.order_id
        assert second.item_count == 2

    def test_price_snapshot_at_creation(self):
        create, _, orders, drinks, conv_id = _setup()
        dto = asyncio.run(create.handle(conv_id, "Latte"))

        latte = asyncio.run(drinks.get_by_name("Latte"))
        latte.base_price = Money.of("9.99")
        asyncio.run(drinks.save(latte))

        saved = asyncio.run(orders.get_by_id(OrderId(dto.order_id)))
        assert str(saved.total_price) == "$4.50"

    def test_unknown_drink(self):
        create, _, _, _, conv_id = _setup()
        with pytest.raises(EntityNotFoundError, match="Drink not found: 'Frappe'"):
            asyncio.run(create.handle(conv_id, "Frappe"))

    def test_unknown_conversation(self):
        create, _, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="conv_missing"):
            asyncio.run(create.handle("conv_missing", "Latte"))

    def test_invalid_size(self):
        create, _, _, _, conv_id = _setup()
        with pytest.raises(ValidationError, match="not a valid size"):
            asyncio.run(create.handle(conv_id, "Latte", size="huge"))

    def test_cap_enforced(self):
        create, _, _, _, conv_id = _setup(max_total_quantity=2)
        with pytest.raises(OrderLimitExceeded):
            asyncio.run(create.handle(conv_id, "Latte", quantity=3))


class TestAddItem:

    def test_adds_to_pending_order(self):
        create, _, orders, drinks, conv_id = _setup()
        dto = asyncio.run(create.handle(conv_id, "Latte"))
        add = AddItemHandler(orders, drinks)

        updated = asyncio.run(add.handle(dto.order_id, "Mocha", customizations={"milk": "oat"}))

        assert [i.drink_name for i in updated.items] == ["Latte", "Mocha"]
        assert updated.items[1].customizations == {"milk": "oat"}

    def test_rejects_non_pending_order(self):
        create, _, orders, drinks, conv_id = _setup()
        dto = asyncio.run(create.handle(conv_id, "Latte"))
        asyncio.run(ConfirmOrderHandler(orders).handle(dto.order_id))

        with pytest.raises(InvalidOrderState, match="confirmed status"):
            asyncio.run(AddItemHandler(orders, drinks).handle(dto.order_id, "Mocha"))

    def test_unknown_order(self):
        _, _, orders, drinks, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            asyncio.run(AddItemHandler(orders, drinks).handle("ord_missing", "Latte"))


class TestConfirmAndComplete:

    def test_confirm_then_complete(self):
        create, _, orders, _, conv_id = _setup()
        dto = asyncio.run(create.handle(conv_id, "Latte"))

        confirmed = asyncio.run(ConfirmOrderHandler(orders).handle(dto.order_id))
        assert confirmed.status == "confirmed"
        assert not confirmed.can_be_modified

        completed = asyncio.run(CompleteOrderHandler(orders).handle(dto.order_id))
        assert completed.status == "completed"

    def test_complete_requires_confirmation(self):
        create, _, orders, _, conv_id = _setup()
        dto = asyncio.run(create.handle(conv_id, "Latte"))
        with pytest.raises(InvalidOrderState, match="expected confirmed"):
            asyncio.run(CompleteOrderHandler(orders).handle(dto.order_id))

    def test_confirm_unknown_order(self):
        _, _, orders, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="ord_nope"):
            asyncio.run(ConfirmOrderHandler(orders).handle("ord_nope"))

    def test_malformed_order_id(self):
        _, _, orders, _, _ = _setup()
        with pytest.raises(ValidationError):
            asyncio.run(ConfirmOrderHandler(orders).handle("12"))


class TestCancel:

    def test_cancel_clears_conversation_link(self):
        create, conversations, orders, _, conv_id = _setup()
        dto = asyncio.run(create.handle(conv_id, "Latte"))

        cancelled = asyncio.run(
            CancelOrderHandler(orders, conversations).handle(dto.order_id, conv_id)
        )

        assert cancelled.status == "cancelled"
        conversation = asyncio.run(conversations.get_by_id(ConversationId(conv_id)))
        assert conversation.current_order_id is None

    def test_cancel_without_conversation_keeps_link(self):
        create, conversations, orders, _, conv_id = _setup()
        dto = asyncio.run(create.handle(conv_id, "Latte"))

        asyncio.run(CancelOrderHandler(orders, conversations).handle(dto.order_id))

        conversation = asyncio.run(conversations.get_by_id(ConversationId(conv_id)))
        assert str(conversation.current_order_id) == dto.order_id

    def test_cannot_cancel_twice(self):
        create, conversations, orders, _, conv_id = _setup()
        dto = asyncio.run(create.handle(conv_id, "Latte"))
        handler = CancelOrderHandler(orders, conversations)
        asyncio.run(handler.handle(dto.order_id))
        with pytest.raises(InvalidOrderState, match="already cancelled"):
            asyncio.run(handler.handle(dto.order_id))


class TestShowOrder:

    def test_show(self):
        create, _, orders, _, conv_id = _setup()
        dto = asyncio.run(create.handle(conv_id, "Mocha", quantity=2))
        shown = asyncio.run(ShowOrderHandler(orders).handle(dto.order_id))
        assert shown == dto
        assert shown.items[0].unit_price == "$5.25"
        assert shown.items[0].price == "$10.50"
        assert shown.can_confirm

    def test_show_unknown(self):
        _, _, orders, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            asyncio.run(ShowOrderHandler(orders).handle("ord_unknown"))
