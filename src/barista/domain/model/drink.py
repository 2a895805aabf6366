"""Drink aggregate.

Drinks live independently of orders. An order line captures the drink's
name and price at the time it was ordered, so catalog changes never
rewrite existing orders.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from barista.domain.exceptions import ValidationError
from barista.domain.model.value_objects import DrinkId, Money

CUSTOMIZATION_KINDS = ("milk", "syrup", "sweetener", "topping", "size")


@dataclass(frozen=True)
class CustomizationOptions:
    """Which customizations a drink supports."""

    milk: bool = False
    syrup: bool = False
    sweetener: bool = False
    topping: bool = False
    size: bool = False

    @staticmethod
    def all() -> CustomizationOptions:
        return CustomizationOptions(True, True, True, True, True)

    @staticmethod
    def none() -> CustomizationOptions:
        return CustomizationOptions()

    def supports(self, kind: str) -> bool:
        if kind not in CUSTOMIZATION_KINDS:
            return False
        return getattr(self, kind)


@dataclass
class Drink:
    """A drink in the catalog."""

    id: DrinkId
    name: str
    description: str
    base_price: Money
    customization_options: CustomizationOptions = field(
        default_factory=CustomizationOptions.none
    )

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Drink name cannot be empty")
        if not self.description or not self.description.strip():
            raise ValidationError("Drink description cannot be empty")

    def supports_customization(self, kind: str) -> bool:
        return self.customization_options.supports(kind)

    def to_summary(self) -> str:
        """One-line description used as retrieval context for the interpreter."""
        labels = {
            "milk": "milk options",
            "syrup": "syrup flavors",
            "sweetener": "sweeteners",
            "topping": "toppings",
            "size": "multiple sizes",
        }
        available = [
            label for kind, label in labels.items() if self.supports_customization(kind)
        ]
        if available:
            customization_text = f"Available customizations: {', '.join(available)}."
        else:
            customization_text = "No customizations available."
        return (
            f"{self.name}: {self.description} "
            f"Base price: {self.base_price}. {customization_text}"
        )
