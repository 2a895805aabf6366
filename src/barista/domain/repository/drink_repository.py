"""Abstract repository for the drink catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod

from barista.domain.model.drink import Drink
from barista.domain.model.value_objects import DrinkId


class DrinkRepository(ABC):

    @abstractmethod
    async def get_by_id(self, drink_id: DrinkId) -> Drink | None:
        """Return a drink by its ID, or None if not found."""

    @abstractmethod
    async def get_by_name(self, name: str) -> Drink | None:
        """Return a drink by its name (case-insensitive exact match)."""

    @abstractmethod
    async def list_all(self) -> list[Drink]:
        """Return every drink in the catalog."""

    @abstractmethod
    async def save(self, drink: Drink) -> None:
        """Persist a new or updated drink."""
