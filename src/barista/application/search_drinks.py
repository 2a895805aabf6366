"""Application service: Search Drinks use case (query).

Natural-language search over the catalog ("something sweet with caramel")
plus a plain listing of the whole menu.
"""

from __future__ import annotations

from barista.application.dto import DrinkResultDTO
from barista.domain.exceptions import ValidationError
from barista.domain.model.drink import CUSTOMIZATION_KINDS, Drink
from barista.domain.repository.drink_repository import DrinkRepository
from barista.domain.repository.drink_searcher import DrinkSearcher

MAX_SEARCH_LIMIT = 20


class SearchDrinksHandler:

    def __init__(self, drink_searcher: DrinkSearcher, drink_repo: DrinkRepository) -> None:
        self._drink_searcher = drink_searcher
        self._drink_repo = drink_repo

    async def search(self, query: str, limit: int = 5) -> list[DrinkResultDTO]:
        if not query or not query.strip():
            raise ValidationError("Search query is required")
        if not 1 <= limit <= MAX_SEARCH_LIMIT:
            raise ValidationError(f"Limit must be between 1 and {MAX_SEARCH_LIMIT}")

        matches = await self._drink_searcher.find_similar(query.strip(), limit)
        return [_to_dto(match.drink, match.score) for match in matches]

    async def list_all(self) -> list[DrinkResultDTO]:
        return [_to_dto(drink, 1.0) for drink in await self._drink_repo.list_all()]


def _to_dto(drink: Drink, relevance: float) -> DrinkResultDTO:
    return DrinkResultDTO(
        drink_id=str(drink.id),
        name=drink.name,
        description=drink.description,
        price=str(drink.base_price),
        relevance=round(relevance, 3),
        customizations=[
            kind for kind in CUSTOMIZATION_KINDS if drink.supports_customization(kind)
        ],
    )
