"""JSON-file-backed implementation of ConversationRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from barista.domain.model.conversation import Conversation, Message, MessageRole
from barista.domain.model.value_objects import ConversationId, OrderId
from barista.domain.repository.conversation_repository import ConversationRepository
from barista.infrastructure.persistence.json_file import JsonFile


class JsonConversationRepository(ConversationRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ConversationRepository interface -------------------------------------

    async def get_by_id(self, conversation_id: ConversationId) -> Conversation | None:
        raw = self._find_raw(conversation_id)
        return self._to_domain(raw) if raw is not None else None

    async def get_recent_history(
        self, conversation_id: ConversationId, limit: int
    ) -> Conversation | None:
        raw = self._find_raw(conversation_id)
        if raw is None:
            return None
        return self._to_domain(raw, message_limit=limit)

    async def exists(self, conversation_id: ConversationId) -> bool:
        return self._find_raw(conversation_id) is not None

    async def save(self, conversation: Conversation) -> None:
        self._file.upsert(self._to_raw(conversation))

    async def delete(self, conversation_id: ConversationId) -> bool:
        records = self._file.load()
        kept = [raw for raw in records if raw["id"] != str(conversation_id)]
        if len(kept) == len(records):
            return False
        self._file.persist(kept)
        return True

    # --- Serialization --------------------------------------------------------

    def _find_raw(self, conversation_id: ConversationId) -> dict | None:
        for raw in self._file.load():
            if raw["id"] == str(conversation_id):
                return raw
        return None

    @staticmethod
    def _to_raw(conversation: Conversation) -> dict:
        return {
            "id": str(conversation.id),
            "current_order_id": str(conversation.current_order_id)
            if conversation.current_order_id
            else None,
            "created_at": conversation.created_at.isoformat(),
            "updated_at": conversation.updated_at.isoformat(),
            "messages": [
                {
                    "role": message.role.value,
                    "content": message.content,
                    "timestamp": message.timestamp.isoformat(),
                }
                for message in conversation.messages
            ],
        }

    @staticmethod
    def _to_domain(raw: dict, message_limit: int | None = None) -> Conversation:
        raw_messages = raw["messages"]
        if message_limit is not None:
            raw_messages = raw_messages[-message_limit:] if message_limit > 0 else []
        messages = [
            Message(
                role=MessageRole(m["role"]),
                content=m["content"],
                timestamp=datetime.fromisoformat(m["timestamp"]),
            )
            for m in raw_messages
        ]
        order_id = raw.get("current_order_id")
        return Conversation.reconstitute(
            conversation_id=ConversationId.parse(raw["id"]),
            messages=messages,
            current_order_id=OrderId.parse(order_id) if order_id else None,
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
