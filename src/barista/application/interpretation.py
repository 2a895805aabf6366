"""Port for the natural-language interpretation collaborator.

The interpreter turns one customer message (plus context) into a reply,
a classified intent and, optionally, the structured order it expresses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from enum import Enum

from barista.domain.model.drink import Drink


class Intent(Enum):
    ORDER_DRINK = "order_drink"
    MODIFY_ORDER = "modify_order"
    CONFIRM_ORDER = "confirm_order"
    CANCEL_ORDER = "cancel_order"
    ASK_QUESTION = "ask_question"
    GREETING = "greeting"
    UNKNOWN = "unknown"

    @staticmethod
    def from_label(label: str | None) -> Intent:
        """Parse a label coming from the outside; anything unrecognised is UNKNOWN."""
        normalized = (label or "").strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return Intent(normalized)
        except ValueError:
            return Intent.UNKNOWN


@dataclass(frozen=True)
class OrderExtraction:
    """The order details the interpreter read out of a message."""

    drink_name: str | None
    size: str | None = None
    quantity: int | None = None
    customizations: dict[str, str] = field(default_factory=dict)
    confidence: float = 0.0


@dataclass(frozen=True)
class InterpretationRequest:
    message: str
    transcript: str
    candidates: list[Drink]
    order_summary: str | None


@dataclass(frozen=True)
class Interpretation:
    reply: str
    intent: Intent
    extraction: OrderExtraction | None = None
    suggested_actions: list[str] = field(default_factory=list)


class ConversationInterpreter(ABC):

    @abstractmethod
    async def interpret(self, request: InterpretationRequest) -> Interpretation:
        """Produce the reply and structured reading of one message."""

    async def stream(
        self, request: InterpretationRequest
    ) -> AsyncIterator[str | Interpretation]:
        """Yield reply text as it becomes available, then the Interpretation.

        Interpreters that cannot stream deliver the whole reply as one chunk.
        """
        interpretation = await self.interpret(request)
        yield interpretation.reply
        yield interpretation
