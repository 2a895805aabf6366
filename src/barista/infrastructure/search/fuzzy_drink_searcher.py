"""Catalog retrieval by fuzzy text similarity.

Scores each drink against the query with rapidfuzz: the drink name is
matched as a phrase inside the message ("a grande latte please" -> Latte),
the description by token overlap ("something sweet with caramel").
Scores are normalized to [0, 1].
"""

from __future__ import annotations

import logging

from rapidfuzz import fuzz, utils

from barista.domain.model.drink import Drink
from barista.domain.repository.drink_repository import DrinkRepository
from barista.domain.repository.drink_searcher import DrinkMatch, DrinkSearcher

logger = logging.getLogger(__name__)

MIN_SCORE = 0.45
DESCRIPTION_WEIGHT = 0.8


class FuzzyDrinkSearcher(DrinkSearcher):

    def __init__(self, drink_repo: DrinkRepository, min_score: float = MIN_SCORE) -> None:
        self._drink_repo = drink_repo
        self._min_score = min_score

    async def find_similar(self, query: str, limit: int) -> list[DrinkMatch]:
        if limit <= 0 or not query or not query.strip():
            return []

        drinks = await self._drink_repo.list_all()
        matches = [
            DrinkMatch(drink=drink, score=self.score(query, drink)) for drink in drinks
        ]
        matches = [m for m in matches if m.score >= self._min_score]
        matches.sort(key=lambda m: m.score, reverse=True)

        logger.debug(
            "Query %r matched %s",
            query,
            [(m.drink.name, round(m.score, 2)) for m in matches[:limit]],
        )
        return matches[:limit]

    @staticmethod
    def score(query: str, drink: Drink) -> float:
        name_score = fuzz.partial_ratio(
            drink.name, query, processor=utils.default_process
        )
        description_score = fuzz.token_set_ratio(
            query, drink.description, processor=utils.default_process
        )
        return max(name_score, description_score * DESCRIPTION_WEIGHT) / 100.0
