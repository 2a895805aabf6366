"""Order aggregate: line items, the quantity cap and the status lifecycle.

The Order is an aggregate root that owns its line items.
All business invariants are enforced here: items only change while the
order is pending, the total quantity is capped, duplicate selections
consolidate into one row, and status follows

    pending -> confirmed -> completed
    pending -> cancelled
    confirmed -> cancelled
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from barista.domain.exceptions import (
    InvalidOrderState,
    ItemNotFound,
    OrderLimitExceeded,
    ValidationError,
)
from barista.domain.model.value_objects import (
    DrinkId,
    DrinkSize,
    Money,
    OrderId,
    Quantity,
)

MAX_TOTAL_QUANTITY = 20


def _now() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def can_be_modified(self) -> bool:
        return self is OrderStatus.PENDING

    @property
    def is_active(self) -> bool:
        return self in (OrderStatus.PENDING, OrderStatus.CONFIRMED)

    @property
    def is_terminal(self) -> bool:
        return not self.is_active

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LineItem:
    """One drink selection with the price captured when it was ordered.

    Immutable: quantity changes go through ``with_quantity`` and the order
    swaps the row in place.
    """

    drink_id: DrinkId
    drink_name: str
    quantity: Quantity
    unit_price: Money  # locked at order time
    size: DrinkSize | None = None
    customizations: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.drink_name or not self.drink_name.strip():
            raise ValidationError("Line item drink name cannot be empty")
        cleaned = {
            str(key).strip().lower(): str(value).strip()
            for key, value in (self.customizations or {}).items()
            if value is not None and str(value).strip()
        }
        object.__setattr__(self, "customizations", cleaned)

    @property
    def merge_key(self) -> tuple:
        """Items with equal keys consolidate into a single row."""
        return (self.drink_id, self.size, tuple(sorted(self.customizations.items())))

    def __hash__(self) -> int:
        return hash(self.merge_key + (self.drink_name, self.quantity, self.unit_price))

    def is_mergeable_with(self, other: LineItem) -> bool:
        return self.merge_key == other.merge_key

    @property
    def total_price(self) -> Money:
        return self.unit_price * self.quantity.value

    def with_quantity(self, quantity: int) -> LineItem:
        return replace(self, quantity=Quantity(quantity))

    def to_summary(self) -> str:
        parts = [f"{self.quantity.value}x {self.drink_name}"]
        if self.size is not None:
            parts.append(f"({self.size.value})")
        if self.customizations:
            parts.append("with " + ", ".join(
                _describe_customization(key, value)
                for key, value in self.customizations.items()
            ))
        parts.append(f"- {self.total_price}")
        return " ".join(parts)


def _describe_customization(key: str, value: str) -> str:
    if key in ("milk", "syrup"):
        return f"{value} {key}"
    return value


@dataclass
class Order:
    """Aggregate root for drink orders.

    Use the ``Order.create()`` factory for new orders.  ``reconstitute`` is
    for the repositories: it accepts any status and existing items without
    re-running the business rules.
    """

    id: OrderId
    status: OrderStatus = OrderStatus.PENDING
    items: list[LineItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def create(order_id: OrderId | None = None) -> Order:
        now = _now()
        return Order(
            id=order_id or OrderId.generate(),
            status=OrderStatus.PENDING,
            items=[],
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def reconstitute(
        order_id: OrderId,
        status: OrderStatus,
        items: list[LineItem],
        created_at: datetime,
        updated_at: datetime,
    ) -> Order:
        return Order(
            id=order_id,
            status=status,
            items=list(items),
            created_at=created_at,
            updated_at=updated_at,
        )

    # --- Item management ------------------------------------------------------

    def add_item(self, item: LineItem, limit: int = MAX_TOTAL_QUANTITY) -> None:
        """Add a selection, merging it into an identical existing row."""
        self._ensure_can_be_modified("add items to")
        if self.items and item.unit_price.currency != self.currency:
            raise ValidationError(
                f"Cannot add {item.drink_name} priced in {item.unit_price.currency} "
                f"to an order priced in {self.currency}"
            )
        new_total = self.total_quantity + item.quantity.value
        if new_total > limit:
            raise OrderLimitExceeded(
                f"Cannot add {item.quantity.value}x {item.drink_name}: "
                f"maximum total quantity per order is {limit}"
            )

        for index, existing in enumerate(self.items):
            if existing.is_mergeable_with(item):
                self.items[index] = existing.with_quantity(
                    existing.quantity.value + item.quantity.value
                )
                break
        else:
            self.items.append(item)
        self._touch()

    def remove_item(self, drink_id: DrinkId | str) -> None:
        """Remove the first row for *drink_id* (size/customizations ignored)."""
        self._ensure_can_be_modified("remove items from")
        index = self._index_of(drink_id)
        del self.items[index]
        self._touch()

    def update_item_quantity(
        self,
        drink_id: DrinkId | str,
        new_quantity: int,
        limit: int = MAX_TOTAL_QUANTITY,
    ) -> None:
        """Replace the quantity of the first row for *drink_id*; 0 removes it."""
        self._ensure_can_be_modified("update items in")
        index = self._index_of(drink_id)

        if new_quantity == 0:
            del self.items[index]
            self._touch()
            return
        if new_quantity < 0:
            raise ValidationError("Quantity cannot be negative")

        current = self.items[index]
        new_total = self.total_quantity - current.quantity.value + new_quantity
        if new_total > limit:
            raise OrderLimitExceeded(
                f"Cannot set {current.drink_name} to {new_quantity}: "
                f"maximum total quantity per order is {limit}"
            )
        self.items[index] = current.with_quantity(new_quantity)
        self._touch()

    # --- State transitions ----------------------------------------------------

    def confirm(self) -> None:
        """Transition PENDING -> CONFIRMED. The order must have items."""
        if self.status is not OrderStatus.PENDING:
            raise InvalidOrderState(
                f"Cannot confirm order {self.id} — current status is "
                f"{self.status.value}, expected pending"
            )
        if not self.items:
            raise InvalidOrderState(f"Cannot confirm order {self.id} — it has no items")
        self.status = OrderStatus.CONFIRMED
        self._touch()

    def complete(self) -> None:
        """Transition CONFIRMED -> COMPLETED."""
        if self.status is not OrderStatus.CONFIRMED:
            raise InvalidOrderState(
                f"Cannot complete order {self.id} — current status is "
                f"{self.status.value}, expected confirmed"
            )
        self.status = OrderStatus.COMPLETED
        self._touch()

    def cancel(self) -> None:
        """Transition PENDING|CONFIRMED -> CANCELLED."""
        if self.status is OrderStatus.CANCELLED:
            raise InvalidOrderState(f"Order {self.id} is already cancelled")
        if self.status is OrderStatus.COMPLETED:
            raise InvalidOrderState(f"Cannot cancel order {self.id} — it is completed")
        self.status = OrderStatus.CANCELLED
        self._touch()

    # --- Queries --------------------------------------------------------------

    def can_be_confirmed(self) -> bool:
        return self.status is OrderStatus.PENDING and bool(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    @property
    def currency(self) -> str:
        """All rows share the currency of the first one added."""
        return self.items[0].unit_price.currency if self.items else "USD"

    @property
    def total_price(self) -> Money:
        result = Money.zero(self.currency)
        for item in self.items:
            result = result + item.total_price
        return result

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity.value for item in self.items)

    def to_summary(self) -> str:
        """Plain-text rendering handed to the interpreter as order context."""
        if self.is_empty:
            return "Empty order"
        lines = "\n".join(item.to_summary() for item in self.items)
        return f"Order {self.id} ({self.status.value}):\n{lines}\nTotal: {self.total_price}"

    # --- Internal helpers -----------------------------------------------------

    def _ensure_can_be_modified(self, action: str) -> None:
        if not self.status.can_be_modified:
            raise InvalidOrderState(
                f"Cannot {action} order {self.id} in {self.status.value} status"
            )

    def _index_of(self, drink_id: DrinkId | str) -> int:
        wanted = str(drink_id)
        for index, item in enumerate(self.items):
            if str(item.drink_id) == wanted:
                return index
        raise ItemNotFound(f"Drink '{wanted}' not found in order {self.id}")

    def _touch(self) -> None:
        self.updated_at = _now()
