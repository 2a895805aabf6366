"""Typed turn errors returned by the orchestrator.

Business-rule failures are expected outcomes of normal use, so the
orchestrator hands them back inside its result instead of raising.
Callers branch on ``kind`` to produce user-facing text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from barista.domain.exceptions import InvalidOrderState, ItemNotFound, OrderLimitExceeded


class ErrorKind(Enum):
    EMPTY_MESSAGE = "EMPTY_MESSAGE"
    CONVERSATION_NOT_FOUND = "CONVERSATION_NOT_FOUND"
    INVALID_ORDER_STATE = "INVALID_ORDER_STATE"
    ORDER_LIMIT_EXCEEDED = "ORDER_LIMIT_EXCEEDED"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


_KIND_BY_EXCEPTION: dict[type[Exception], ErrorKind] = {
    InvalidOrderState: ErrorKind.INVALID_ORDER_STATE,
    OrderLimitExceeded: ErrorKind.ORDER_LIMIT_EXCEEDED,
    ItemNotFound: ErrorKind.ITEM_NOT_FOUND,
}


@dataclass(frozen=True)
class OrchestratorError:
    kind: ErrorKind
    message: str

    @staticmethod
    def empty_message() -> OrchestratorError:
        return OrchestratorError(ErrorKind.EMPTY_MESSAGE, "Message cannot be empty")

    @staticmethod
    def conversation_not_found(conversation_id: str) -> OrchestratorError:
        return OrchestratorError(
            ErrorKind.CONVERSATION_NOT_FOUND,
            f"Conversation with ID '{conversation_id}' not found",
        )

    @staticmethod
    def from_exception(exc: Exception) -> OrchestratorError:
        """Map a raised exception onto the error taxonomy.

        Order rule violations keep their own kind; anything else is an
        internal error carrying only the cause's message.
        """
        for exc_type, kind in _KIND_BY_EXCEPTION.items():
            if isinstance(exc, exc_type):
                return OrchestratorError(kind, str(exc))
        reason = str(exc) or type(exc).__name__
        return OrchestratorError(
            ErrorKind.INTERNAL_ERROR, f"An unexpected error occurred: {reason}"
        )

    @property
    def is_internal(self) -> bool:
        return self.kind is ErrorKind.INTERNAL_ERROR

    def to_dict(self) -> dict[str, str]:
        return {"code": self.kind.value, "message": self.message}


class InterpretationError(Exception):
    """The interpretation collaborator returned something unusable."""
