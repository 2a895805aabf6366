"""Application service: Process Message use case (one conversational turn).

Drives retrieval -> interpretation -> order mutation -> transcript update
-> response assembly -> persistence for a single inbound message.

Every step runs sequentially inside one task.  Conversation and Order are
saved independently (order first, then conversation); both saves are
upserts, so a crash between them leaves a detectable, retryable gap rather
than a corrupted aggregate.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

from barista.application.dto import TurnOutcome, TurnResult, to_order_dto
from barista.application.errors import InterpretationError, OrchestratorError
from barista.application.interpretation import (
    ConversationInterpreter,
    Intent,
    Interpretation,
    InterpretationRequest,
    OrderExtraction,
)
from barista.domain.exceptions import ValidationError
from barista.domain.model.conversation import Conversation
from barista.domain.model.drink import Drink
from barista.domain.model.order import MAX_TOTAL_QUANTITY, LineItem, Order, OrderStatus
from barista.domain.model.value_objects import ConversationId, DrinkSize, Quantity
from barista.domain.repository.conversation_repository import ConversationRepository
from barista.domain.repository.drink_repository import DrinkRepository
from barista.domain.repository.drink_searcher import DrinkSearcher
from barista.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)

NO_ORDER_REPLIES = ["Browse our menu", "Ask about a specific drink", "Start an order"]
PENDING_ORDER_REPLIES = [
    "Add another drink",
    "Modify your order",
    "Confirm your order",
    "Cancel your order",
]
FINISHED_ORDER_REPLIES = ["Start a new order", "Browse our menu"]


@dataclass(frozen=True)
class TurnPolicy:
    """Tunable knobs of a turn, injected at construction."""

    max_total_quantity: int = MAX_TOTAL_QUANTITY
    retrieval_limit: int = 5
    confidence_threshold: float = 0.5
    context_messages: int = 10

    def __post_init__(self) -> None:
        if self.max_total_quantity < 1:
            raise ValidationError("max_total_quantity must be at least 1")
        if self.retrieval_limit < 0:
            raise ValidationError("retrieval_limit cannot be negative")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValidationError("confidence_threshold must be within [0, 1]")
        if self.context_messages < 0:
            raise ValidationError("context_messages cannot be negative")


@dataclass
class _Applied:
    order: Order | None  # the order as the conversation sees it after the intent
    persist: Order | None = None  # record touched by the intent, if any


class TurnOrchestrator:

    def __init__(
        self,
        conversation_repo: ConversationRepository,
        order_repo: OrderRepository,
        drink_repo: DrinkRepository,
        drink_searcher: DrinkSearcher,
        interpreter: ConversationInterpreter,
        policy: TurnPolicy | None = None,
    ) -> None:
        self._conversation_repo = conversation_repo
        self._order_repo = order_repo
        self._drink_repo = drink_repo
        self._drink_searcher = drink_searcher
        self._interpreter = interpreter
        self._policy = policy or TurnPolicy()

        self._intent_handlers = {
            Intent.ORDER_DRINK: self._handle_order_drink,
            Intent.MODIFY_ORDER: self._handle_modify_order,
            Intent.CONFIRM_ORDER: self._handle_confirm_order,
            Intent.CANCEL_ORDER: self._handle_cancel_order,
            Intent.ASK_QUESTION: self._keep_order,
            Intent.GREETING: self._keep_order,
            Intent.UNKNOWN: self._keep_order,
        }
        missing = set(Intent) - set(self._intent_handlers)
        if missing:
            raise TypeError(f"No handler for intents: {sorted(i.value for i in missing)}")

    @property
    def policy(self) -> TurnPolicy:
        return self._policy

    async def process(
        self, message: str, conversation_id: str | None = None
    ) -> TurnResult:
        """Handle one inbound message.

        Never raises: rule violations and unexpected faults come back as an
        ``OrchestratorError`` inside the result.
        """
        if not message or not message.strip():
            return TurnResult.failure(OrchestratorError.empty_message())

        try:
            conversation = await self._load_conversation(conversation_id)
            if conversation is None:
                return TurnResult.failure(
                    OrchestratorError.conversation_not_found(conversation_id or "")
                )
            candidates, order, request = await self._prepare(message, conversation)
            interpretation = await self._interpreter.interpret(request)
            outcome = await self._apply(
                message, conversation, order, candidates, interpretation
            )
        except Exception as exc:
            return self._failure(exc, conversation_id)

        return TurnResult.success(outcome)

    async def process_stream(
        self, message: str, conversation_id: str | None = None
    ) -> AsyncIterator[str | TurnResult]:
        """Streaming variant of :meth:`process`.

        Yields reply text chunks as the interpreter produces them, then
        exactly one ``TurnResult``.  The turn is applied and persisted only
        once the interpretation is complete.
        """
        if not message or not message.strip():
            yield TurnResult.failure(OrchestratorError.empty_message())
            return

        try:
            conversation = await self._load_conversation(conversation_id)
            if conversation is None:
                yield TurnResult.failure(
                    OrchestratorError.conversation_not_found(conversation_id or "")
                )
                return
            candidates, order, request = await self._prepare(message, conversation)

            interpretation = None
            async for item in self._interpreter.stream(request):
                if isinstance(item, Interpretation):
                    interpretation = item
                else:
                    yield item
            if interpretation is None:
                raise InterpretationError("Interpreter stream ended without a result")

            outcome = await self._apply(
                message, conversation, order, candidates, interpretation
            )
        except Exception as exc:
            yield self._failure(exc, conversation_id)
            return

        yield TurnResult.success(outcome)

    # --- Turn steps -----------------------------------------------------------

    async def _load_conversation(self, conversation_id: str | None) -> Conversation | None:
        if not conversation_id:
            return Conversation.create()
        try:
            parsed = ConversationId.parse(conversation_id)
        except ValidationError:
            logger.info("Malformed conversation id %r", conversation_id)
            return None
        return await self._conversation_repo.get_by_id(parsed)

    async def _prepare(
        self, message: str, conversation: Conversation
    ) -> tuple[list[Drink], Order | None, InterpretationRequest]:
        candidates = await self._retrieve_candidates(message)
        order = await self._order_repo.get_active_by_conversation(conversation.id)
        request = InterpretationRequest(
            message=message,
            transcript=conversation.get_messages_for_context(self._policy.context_messages),
            candidates=candidates,
            order_summary=order.to_summary() if order else None,
        )
        return candidates, order, request

    async def _apply(
        self,
        message: str,
        conversation: Conversation,
        order: Order | None,
        candidates: list[Drink],
        interpretation: Interpretation,
    ) -> TurnOutcome:
        logger.debug(
            "Conversation %s: intent=%s", conversation.id, interpretation.intent.value
        )

        handler = self._intent_handlers[interpretation.intent]
        applied = await handler(interpretation, conversation, order, candidates)

        conversation.add_user_message(message)
        conversation.add_assistant_message(interpretation.reply)
        self._reconcile_order_link(conversation, applied.order)

        # Assembled before any write so a rendering failure persists nothing.
        outcome = TurnOutcome(
            reply=interpretation.reply,
            conversation_id=str(conversation.id),
            intent=interpretation.intent,
            order=to_order_dto(applied.order) if applied.order else None,
            suggested_replies=self._suggested_replies(applied.order),
            suggested_actions=list(interpretation.suggested_actions),
        )

        to_save = applied.persist or order
        if to_save is not None:
            await self._order_repo.save_with_link(to_save, conversation.id)
        await self._conversation_repo.save(conversation)
        return outcome

    async def _retrieve_candidates(self, message: str) -> list[Drink]:
        """Retrieval never blocks a reply: any failure yields no candidates."""
        try:
            matches = await self._drink_searcher.find_similar(
                message, self._policy.retrieval_limit
            )
        except Exception:
            logger.warning("Drink retrieval failed; continuing without context", exc_info=True)
            return []
        return [match.drink for match in matches]

    @staticmethod
    def _failure(exc: Exception, conversation_id: str | None) -> TurnResult:
        error = OrchestratorError.from_exception(exc)
        if error.is_internal:
            logger.exception("Turn failed for conversation %s", conversation_id)
        else:
            logger.info("Turn rejected (%s): %s", error.kind.value, error.message)
        return TurnResult.failure(error)

    @staticmethod
    def _reconcile_order_link(conversation: Conversation, order: Order | None) -> None:
        if order is not None and order.is_active:
            if conversation.current_order_id != order.id:
                conversation.set_current_order(order.id)
        elif conversation.current_order_id is not None:
            conversation.clear_current_order()

    # --- Intent handlers ------------------------------------------------------

    async def _handle_order_drink(
        self,
        interpretation: Interpretation,
        conversation: Conversation,
        order: Order | None,
        candidates: list[Drink],
    ) -> _Applied:
        extraction = interpretation.extraction
        if extraction is not None and extraction.confidence < self._policy.confidence_threshold:
            logger.debug(
                "Ignoring extraction of %r (confidence %.2f)",
                extraction.drink_name,
                extraction.confidence,
            )
            return _Applied(order)

        item = await self._line_item_from(extraction, candidates)
        if item is None:
            return _Applied(order)

        if order is None or not order.status.can_be_modified:
            order = Order.create()
            logger.info("Starting order %s for conversation %s", order.id, conversation.id)
        order.add_item(item, limit=self._policy.max_total_quantity)
        return _Applied(order, persist=order)

    async def _handle_modify_order(
        self,
        interpretation: Interpretation,
        conversation: Conversation,
        order: Order | None,
        candidates: list[Drink],
    ) -> _Applied:
        # Modification is applied as an addition onto the existing order.
        if order is None or not order.status.can_be_modified:
            return _Applied(order)
        item = await self._line_item_from(interpretation.extraction, candidates)
        if item is None:
            return _Applied(order)
        order.add_item(item, limit=self._policy.max_total_quantity)
        return _Applied(order, persist=order)

    async def _handle_confirm_order(
        self,
        interpretation: Interpretation,
        conversation: Conversation,
        order: Order | None,
        candidates: list[Drink],
    ) -> _Applied:
        if order is None or not order.can_be_confirmed():
            return _Applied(order)
        order.confirm()
        order.complete()
        conversation.clear_current_order()
        logger.info("Order %s confirmed and completed", order.id)
        return _Applied(order, persist=order)

    async def _handle_cancel_order(
        self,
        interpretation: Interpretation,
        conversation: Conversation,
        order: Order | None,
        candidates: list[Drink],
    ) -> _Applied:
        if order is None:
            return _Applied(None)
        order.cancel()
        conversation.clear_current_order()
        logger.info("Order %s cancelled", order.id)
        return _Applied(None, persist=order)

    async def _keep_order(
        self,
        interpretation: Interpretation,
        conversation: Conversation,
        order: Order | None,
        candidates: list[Drink],
    ) -> _Applied:
        return _Applied(order)

    # --- Internal helpers -----------------------------------------------------

    async def _line_item_from(
        self, extraction: OrderExtraction | None, candidates: list[Drink]
    ) -> LineItem | None:
        if extraction is None or not extraction.drink_name:
            return None

        drink = await self._resolve_drink(extraction.drink_name, candidates)
        if drink is None:
            logger.info("Could not resolve drink %r", extraction.drink_name)
            return None

        return LineItem(
            drink_id=drink.id,
            drink_name=drink.name,
            quantity=Quantity(_quantity_or_default(extraction.quantity)),
            unit_price=drink.base_price,
            size=_parse_size(extraction.size),
            customizations=dict(extraction.customizations or {}),
        )

    async def _resolve_drink(self, name: str, candidates: list[Drink]) -> Drink | None:
        """Candidates first (already loaded), then the catalog."""
        wanted = name.strip().lower()
        for drink in candidates:
            if drink.name.lower() == wanted:
                return drink
        return await self._drink_repo.get_by_name(name.strip())

    @staticmethod
    def _suggested_replies(order: Order | None) -> list[str]:
        if order is None:
            return list(NO_ORDER_REPLIES)
        if order.status is OrderStatus.PENDING:
            return list(PENDING_ORDER_REPLIES)
        if order.status in (OrderStatus.CONFIRMED, OrderStatus.COMPLETED):
            return list(FINISHED_ORDER_REPLIES)
        return []


def _quantity_or_default(quantity: int | None) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        return 1
    return quantity


def _parse_size(raw: str | None) -> DrinkSize | None:
    if not raw:
        return None
    try:
        return DrinkSize.parse(raw)
    except ValidationError:
        logger.debug("Dropping unknown size %r", raw)
        return None
