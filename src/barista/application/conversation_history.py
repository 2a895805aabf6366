"""Application service: conversation history, start and delete.

Retrieves the transcript of an existing conversation, opens new ones with a
welcome message, and exposes deletion (which is a storage concern the core
only forwards).
"""

from __future__ import annotations

from datetime import datetime

from barista.application.dto import ConversationHistoryDTO, MessageDTO, StartConversationDTO
from barista.domain.exceptions import EntityNotFoundError, ValidationError
from barista.domain.model.conversation import Conversation
from barista.domain.model.value_objects import ConversationId
from barista.domain.repository.conversation_repository import ConversationRepository

DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 100

WELCOME_MESSAGE = (
    "Welcome! I'm your barista assistant. Ask me about the menu, get a "
    "recommendation, or place an order. What can I get started for you today?"
)

SUGGESTED_PROMPTS = [
    "What's your most popular drink?",
    "I'd like something sweet with caramel",
    "What iced drinks do you have?",
    "Can you recommend something with oat milk?",
    "I need something with lots of caffeine",
]


def _stamp(value: datetime) -> str:
    return value.isoformat()


class ConversationHistoryHandler:

    def __init__(self, conversation_repo: ConversationRepository) -> None:
        self._conversation_repo = conversation_repo

    async def get_history(
        self, conversation_id: str, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> ConversationHistoryDTO:
        if not conversation_id or not conversation_id.strip():
            raise ValidationError("Conversation ID is required")
        if not 1 <= limit <= MAX_HISTORY_LIMIT:
            raise ValidationError(f"Limit must be between 1 and {MAX_HISTORY_LIMIT}")

        conversation = await self._conversation_repo.get_recent_history(
            self._parse_id(conversation_id), limit
        )
        if conversation is None:
            raise EntityNotFoundError(f"Conversation '{conversation_id}' not found")

        messages = [
            MessageDTO(
                role=message.role.value,
                content=message.content,
                timestamp=_stamp(message.timestamp),
            )
            for message in conversation.messages
        ]
        last_message_at = messages[-1].timestamp if messages else _stamp(conversation.updated_at)

        return ConversationHistoryDTO(
            conversation_id=str(conversation.id),
            messages=messages,
            current_order_id=str(conversation.current_order_id)
            if conversation.current_order_id
            else None,
            message_count=conversation.message_count,
            created_at=_stamp(conversation.created_at),
            last_message_at=last_message_at,
        )

    async def start_conversation(
        self, initial_message: str | None = None
    ) -> StartConversationDTO:
        """Open a new conversation, optionally recording the customer's first line."""
        conversation = Conversation.create()
        if initial_message and initial_message.strip():
            conversation.add_user_message(initial_message.strip())
        await self._conversation_repo.save(conversation)

        return StartConversationDTO(
            conversation_id=str(conversation.id),
            welcome_message=WELCOME_MESSAGE,
            suggested_prompts=list(SUGGESTED_PROMPTS),
        )

    async def exists(self, conversation_id: str) -> bool:
        try:
            parsed = ConversationId.parse(conversation_id)
        except ValidationError:
            return False
        return await self._conversation_repo.exists(parsed)

    async def delete(self, conversation_id: str) -> bool:
        return await self._conversation_repo.delete(self._parse_id(conversation_id))

    @staticmethod
    def _parse_id(conversation_id: str) -> ConversationId:
        try:
            return ConversationId.parse(conversation_id)
        except ValidationError:
            raise EntityNotFoundError(
                f"Conversation '{conversation_id}' not found"
            ) from None
