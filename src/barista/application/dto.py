"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from barista.application.errors import OrchestratorError
from barista.application.interpretation import Intent
from barista.domain.model.order import Order


@dataclass(frozen=True)
class OrderLineDTO:
    """Output: a single line item as displayed to the user."""

    drink_name: str
    size: str | None
    quantity: int
    customizations: dict[str, str]
    unit_price: str  # formatted, e.g. "$4.50"
    price: str  # unit price x quantity


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    order_id: str
    status: str
    items: list[OrderLineDTO]
    total_price: str
    item_count: int
    can_be_modified: bool
    can_confirm: bool
    created_at: str
    updated_at: str


def to_order_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        order_id=str(order.id),
        status=order.status.value,
        items=[
            OrderLineDTO(
                drink_name=item.drink_name,
                size=item.size.value if item.size else None,
                quantity=item.quantity.value,
                customizations=dict(item.customizations),
                unit_price=str(item.unit_price),
                price=str(item.total_price),
            )
            for item in order.items
        ],
        total_price=str(order.total_price),
        item_count=order.total_quantity,
        can_be_modified=order.status.can_be_modified,
        can_confirm=order.can_be_confirmed(),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        updated_at=order.updated_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


@dataclass(frozen=True)
class TurnOutcome:
    """Output of one orchestrator turn."""

    reply: str
    conversation_id: str
    intent: Intent
    order: OrderDTO | None
    suggested_replies: list[str]
    suggested_actions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TurnResult:
    """Either a TurnOutcome or an OrchestratorError, never both."""

    outcome: TurnOutcome | None = None
    error: OrchestratorError | None = None

    @staticmethod
    def success(outcome: TurnOutcome) -> TurnResult:
        return TurnResult(outcome=outcome)

    @staticmethod
    def failure(error: OrchestratorError) -> TurnResult:
        return TurnResult(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class MessageDTO:
    role: str
    content: str
    timestamp: str


@dataclass(frozen=True)
class ConversationHistoryDTO:
    conversation_id: str
    messages: list[MessageDTO]
    current_order_id: str | None
    message_count: int
    created_at: str
    last_message_at: str


@dataclass(frozen=True)
class StartConversationDTO:
    conversation_id: str
    welcome_message: str
    suggested_prompts: list[str]


@dataclass(frozen=True)
class DrinkResultDTO:
    drink_id: str
    name: str
    description: str
    price: str
    relevance: float
    customizations: list[str]
