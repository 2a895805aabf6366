"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import ClassVar

from barista.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Stored as an integer number of minor units (cents) so arithmetic never
    goes through floating point.
    """

    cents: int
    currency: str = "USD"

    def __post_init__(self) -> None:
        if isinstance(self.cents, bool) or not isinstance(self.cents, int):
            raise ValidationError(
                f"Money amount must be an integer number of cents, "
                f"got {type(self.cents).__name__}"
            )
        if self.cents < 0:
            raise ValidationError(
                f"Money amount cannot be negative, got {self.cents}"
            )
        if not isinstance(self.currency, str) or len(self.currency.strip()) != 3:
            raise ValidationError(
                f"Currency must be a 3-letter code, got {self.currency!r}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.cents + other.cents, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.cents - other.cents
        if result < 0:
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.cents * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents < other.cents

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents <= other.cents

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents > other.cents

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents >= other.cents

    # --- Display --------------------------------------------------------------

    @property
    def amount(self) -> Decimal:
        """Major-unit amount, e.g. Decimal('4.50') for 450 cents."""
        return (Decimal(self.cents) / 100).quantize(Decimal("0.01"))

    def format(self) -> str:
        symbol = "$" if self.currency == "USD" else self.currency
        return f"{symbol}{self.amount:.2f}"

    def __str__(self) -> str:
        return self.format()

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(0, currency)

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Convenient factory taking a major-unit amount ("4.50" -> 450 cents)."""
        try:
            cents = (Decimal(str(amount)) * 100).quantize(
                Decimal("1"), rounding=ROUND_HALF_UP
            )
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        return Money(int(cents), currency)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.value + other.value)

    def __str__(self) -> str:
        return str(self.value)


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------
_ID_SUFFIX = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class _Identifier:
    """Opaque typed identifier of the form ``<prefix>_<token>``."""

    value: str
    prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        name = type(self).__name__
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError(f"{name} cannot be empty")
        head = f"{self.prefix}_"
        suffix = self.value[len(head):]
        if not self.value.startswith(head) or not _ID_SUFFIX.match(suffix):
            raise ValidationError(f"Malformed {name}: {self.value!r}")

    @classmethod
    def generate(cls):
        return cls(f"{cls.prefix}_{uuid.uuid4().hex}")

    @classmethod
    def parse(cls, raw: str):
        """Validate a raw string coming from storage or the outside world."""
        if not isinstance(raw, str):
            raise ValidationError(f"{cls.__name__} must be a string")
        return cls(raw.strip())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ConversationId(_Identifier):
    prefix: ClassVar[str] = "conv"


@dataclass(frozen=True)
class OrderId(_Identifier):
    prefix: ClassVar[str] = "ord"


@dataclass(frozen=True)
class DrinkId(_Identifier):
    prefix: ClassVar[str] = "drk"


# ---------------------------------------------------------------------------
# Drink size
# ---------------------------------------------------------------------------


class DrinkSize(Enum):
    TALL = "tall"
    GRANDE = "grande"
    VENTI = "venti"

    @staticmethod
    def parse(raw: str) -> DrinkSize:
        """Parse a size name; generic small/medium/large are accepted too."""
        normalized = (raw or "").strip().lower()
        normalized = _SIZE_ALIASES.get(normalized, normalized)
        try:
            return DrinkSize(normalized)
        except ValueError:
            valid = ", ".join(s.value for s in DrinkSize)
            raise ValidationError(
                f"'{raw}' is not a valid size. Valid sizes: {valid}"
            ) from None

    def __str__(self) -> str:
        return self.value


_SIZE_ALIASES = {"small": "tall", "medium": "grande", "large": "venti"}
