"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from barista.application.process_message import TurnOrchestrator
from barista.infrastructure.ai.llm_interpreter import LLMConversationInterpreter
from barista.infrastructure.config import Settings
from barista.infrastructure.persistence.json_conversation_repository import (
    JsonConversationRepository,
)
from barista.infrastructure.persistence.json_drink_repository import (
    JsonDrinkRepository,
)
from barista.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from barista.infrastructure.search.fuzzy_drink_searcher import FuzzyDrinkSearcher


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings()


def drink_repository() -> JsonDrinkRepository:
    return JsonDrinkRepository(settings().DATA_DIR / "drinks.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings().DATA_DIR / "orders.json")


def conversation_repository() -> JsonConversationRepository:
    return JsonConversationRepository(settings().DATA_DIR / "conversations.json")


def drink_searcher() -> FuzzyDrinkSearcher:
    return FuzzyDrinkSearcher(drink_repository())


def turn_orchestrator() -> TurnOrchestrator:
    config = settings()
    return TurnOrchestrator(
        conversation_repo=conversation_repository(),
        order_repo=order_repository(),
        drink_repo=drink_repository(),
        drink_searcher=drink_searcher(),
        interpreter=LLMConversationInterpreter.from_settings(config),
        policy=config.turn_policy(),
    )
