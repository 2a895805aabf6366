"""Tests for conversation history, start and delete."""

import asyncio

import pytest

from barista.application.conversation_history import (
    SUGGESTED_PROMPTS,
    WELCOME_MESSAGE,
    ConversationHistoryHandler,
)
from barista.domain.exceptions import EntityNotFoundError, ValidationError
from barista.domain.model.conversation import Conversation
from barista.domain.model.value_objects import OrderId
from tests.fakes import FakeConversationRepository


def _setup(messages: int = 0, order_id: str | None = None):
    repo = FakeConversationRepository()
    conversation = Conversation.create()
    if order_id:
        conversation.set_current_order(OrderId(order_id))
    for i in range(messages):
        if i % 2 == 0:
            conversation.add_user_message(f"user {i}")
        else:
            conversation.add_assistant_message(f"barista {i}")
    asyncio.run(repo.save(conversation))
    return ConversationHistoryHandler(repo), repo, str(conversation.id)


class TestGetHistory:

    def test_returns_messages_in_order(self):
        handler, _, conv_id = _setup(messages=4)
        history = asyncio.run(handler.get_history(conv_id))

        assert history.conversation_id == conv_id
        assert [m.role for m in history.messages] == ["user", "assistant", "user", "assistant"]
        assert history.messages[0].content == "user 0"
        assert history.message_count == 4
        assert history.last_message_at == history.messages[-1].timestamp
        assert history.current_order_id is None

    def test_limit_keeps_latest(self):
        handler, _, conv_id = _setup(messages=6)
        history = asyncio.run(handler.get_history(conv_id, limit=2))
        assert [m.content for m in history.messages] == ["user 4", "barista 5"]

    def test_current_order_is_reported(self):
        handler, _, conv_id = _setup(order_id="ord_abc")
        history = asyncio.run(handler.get_history(conv_id))
        assert history.current_order_id == "ord_abc"

    def test_empty_conversation_uses_updated_at(self):
        handler, _, conv_id = _setup()
        history = asyncio.run(handler.get_history(conv_id))
        assert history.messages == []
        assert history.last_message_at

    @pytest.mark.parametrize("limit", [0, 101, -5])
    def test_limit_out_of_range(self, limit):
        handler, _, conv_id = _setup()
        with pytest.raises(ValidationError, match="between 1 and 100"):
            asyncio.run(handler.get_history(conv_id, limit=limit))

    def test_blank_id(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="Conversation ID is required"):
            asyncio.run(handler.get_history("  "))

    def test_unknown_and_malformed_ids(self):
        handler, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            asyncio.run(handler.get_history("conv_unknown"))
        with pytest.raises(EntityNotFoundError):
            asyncio.run(handler.get_history("garbage id"))


class TestStartConversation:

    def test_start_without_message(self):
        handler, repo, _ = _setup()
        started = asyncio.run(handler.start_conversation())

        assert started.welcome_message == WELCOME_MESSAGE
        assert started.suggested_prompts == SUGGESTED_PROMPTS
        assert asyncio.run(handler.exists(started.conversation_id))
        history = asyncio.run(handler.get_history(started.conversation_id))
        assert history.messages == []

    def test_start_with_initial_message(self):
        handler, _, _ = _setup()
        started = asyncio.run(handler.start_conversation("  hello there  "))
        history = asyncio.run(handler.get_history(started.conversation_id))
        assert [m.content for m in history.messages] == ["hello there"]


class TestExistsAndDelete:

    def test_exists(self):
        handler, _, conv_id = _setup()
        assert asyncio.run(handler.exists(conv_id))
        assert not asyncio.run(handler.exists("conv_other"))
        assert not asyncio.run(handler.exists("bogus"))

    def test_delete(self):
        handler, _, conv_id = _setup()
        assert asyncio.run(handler.delete(conv_id)) is True
        assert asyncio.run(handler.delete(conv_id)) is False
        assert not asyncio.run(handler.exists(conv_id))
