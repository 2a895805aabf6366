"""Abstract semantic search over the drink catalog (the retrieval half of RAG)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from barista.domain.model.drink import Drink


@dataclass(frozen=True)
class DrinkMatch:
    drink: Drink
    score: float  # relevance in [0, 1], higher is better


class DrinkSearcher(ABC):

    @abstractmethod
    async def find_similar(self, query: str, limit: int) -> list[DrinkMatch]:
        """Return up to *limit* drinks relevant to *query*, best first."""
