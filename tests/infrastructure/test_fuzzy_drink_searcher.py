"""Tests for rapidfuzz-based catalog retrieval."""

import asyncio

from barista.domain.model.drink import Drink
from barista.domain.model.value_objects import DrinkId, Money
from barista.infrastructure.search.fuzzy_drink_searcher import FuzzyDrinkSearcher
from tests.fakes import FakeDrinkRepository


def _drink(name: str, description: str) -> Drink:
    return Drink(
        id=DrinkId(f"drk_{name.lower().replace(' ', '_')}"),
        name=name,
        description=description,
        base_price=Money.of("4.00"),
    )


LATTE = _drink("Latte", "Espresso with steamed milk")
MOCHA = _drink("Mocha", "Espresso with chocolate and steamed milk")
COLD_BREW = _drink("Cold Brew", "Coffee steeped cold for twenty hours")


def _searcher() -> FuzzyDrinkSearcher:
    return FuzzyDrinkSearcher(FakeDrinkRepository([LATTE, MOCHA, COLD_BREW]))


class TestFindSimilar:

    def test_name_inside_sentence_ranks_first(self):
        matches = asyncio.run(_searcher().find_similar("a grande latte please", 5))
        assert matches[0].drink == LATTE
        assert matches[0].score == 1.0

    def test_description_overlap_is_found(self):
        matches = asyncio.run(_searcher().find_similar("chocolate", 5))
        by_name = {m.drink.name: m.score for m in matches}
        assert by_name["Mocha"] >= 0.8

    def test_results_are_sorted_and_limited(self):
        matches = asyncio.run(_searcher().find_similar("steamed milk", 1))
        assert len(matches) == 1

        everything = asyncio.run(_searcher().find_similar("steamed milk", 5))
        scores = [m.score for m in everything]
        assert scores == sorted(scores, reverse=True)

    def test_nonsense_matches_nothing(self):
        assert asyncio.run(_searcher().find_similar("zzzzqqqq", 5)) == []

    def test_blank_query_and_zero_limit(self):
        assert asyncio.run(_searcher().find_similar("   ", 5)) == []
        assert asyncio.run(_searcher().find_similar("latte", 0)) == []


class TestScore:

    def test_exact_name_scores_one(self):
        assert FuzzyDrinkSearcher.score("Cold Brew", COLD_BREW) == 1.0

    def test_scores_are_normalized(self):
        for drink in (LATTE, MOCHA, COLD_BREW):
            assert 0.0 <= FuzzyDrinkSearcher.score("iced caramel thing", drink) <= 1.0
