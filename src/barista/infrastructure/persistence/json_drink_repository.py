"""JSON-file-backed implementation of DrinkRepository (the catalog)."""

from __future__ import annotations

from pathlib import Path

from barista.domain.model.drink import CustomizationOptions, Drink
from barista.domain.model.value_objects import DrinkId, Money
from barista.domain.repository.drink_repository import DrinkRepository
from barista.infrastructure.persistence.json_file import JsonFile


class JsonDrinkRepository(DrinkRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- DrinkRepository interface --------------------------------------------

    async def get_by_id(self, drink_id: DrinkId) -> Drink | None:
        for drink in self._load():
            if drink.id == drink_id:
                return drink
        return None

    async def get_by_name(self, name: str) -> Drink | None:
        wanted = name.strip().lower()
        for drink in self._load():
            if drink.name.lower() == wanted:
                return drink
        return None

    async def list_all(self) -> list[Drink]:
        return self._load()

    async def save(self, drink: Drink) -> None:
        self._file.upsert(self._to_raw(drink))

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> list[Drink]:
        return [self._to_domain(raw) for raw in self._file.load()]

    @staticmethod
    def _to_raw(drink: Drink) -> dict:
        options = drink.customization_options
        return {
            "id": str(drink.id),
            "name": drink.name,
            "description": drink.description,
            "price": str(drink.base_price.amount),
            "currency": drink.base_price.currency,
            "customizations": {
                "milk": options.milk,
                "syrup": options.syrup,
                "sweetener": options.sweetener,
                "topping": options.topping,
                "size": options.size,
            },
        }

    @staticmethod
    def _to_domain(raw: dict) -> Drink:
        currency = raw.get("currency", "USD")
        return Drink(
            id=DrinkId.parse(raw["id"]),
            name=raw["name"],
            description=raw["description"],
            base_price=Money.of(raw["price"], currency),
            customization_options=CustomizationOptions(**raw.get("customizations", {})),
        )
