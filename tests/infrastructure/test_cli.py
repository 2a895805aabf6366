"""CLI smoke tests with click's CliRunner over a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from barista.application.interpretation import Intent
from barista.application.process_message import TurnOrchestrator
from barista.infrastructure import bootstrap
from barista.infrastructure.cli import chat_commands
from barista.infrastructure.cli.main import cli
from tests.fakes import FakeDrinkSearcher, FakeInterpreter, order_reply, plain_reply

DRINKS = [
    {
        "id": "drk_latte",
        "name": "Latte",
        "description": "Espresso with steamed milk.",
        "price": "4.50",
        "customizations": {"milk": True, "size": True},
    },
    {
        "id": "drk_espresso",
        "name": "Espresso",
        "description": "A concentrated shot of coffee.",
        "price": "3.00",
        "customizations": {},
    },
]


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    (tmp_path / "drinks.json").write_text(json.dumps(DRINKS))
    monkeypatch.setenv("BARISTA_DATA_DIR", str(tmp_path))
    bootstrap.settings.cache_clear()
    yield tmp_path
    bootstrap.settings.cache_clear()


@pytest.fixture
def scripted_chat(data_dir, monkeypatch):
    """Replace the model-backed orchestrator with one driven by a script."""
    interpreter = FakeInterpreter()

    def _orchestrator():
        return TurnOrchestrator(
            conversation_repo=bootstrap.conversation_repository(),
            order_repo=bootstrap.order_repository(),
            drink_repo=bootstrap.drink_repository(),
            drink_searcher=FakeDrinkSearcher(),
            interpreter=interpreter,
        )

    monkeypatch.setattr(chat_commands, "turn_orchestrator", _orchestrator)
    return interpreter


class TestMenuCommands:

    def test_list(self, data_dir):
        result = CliRunner().invoke(cli, ["menu", "list"])
        assert result.exit_code == 0
        assert "Latte" in result.output
        assert "$4.50" in result.output
        assert "milk, size" in result.output

    def test_search(self, data_dir):
        result = CliRunner().invoke(cli, ["menu", "search", "latte please"])
        assert result.exit_code == 0
        assert "Latte" in result.output

    def test_search_rejects_bad_limit(self, data_dir):
        result = CliRunner().invoke(cli, ["menu", "search", "latte", "--limit", "50"])
        assert result.exit_code != 0
        assert "between 1 and 20" in result.output


class TestOrderCommands:

    def test_unknown_order(self, data_dir):
        result = CliRunner().invoke(cli, ["order", "show", "--id", "ord_missing"])
        assert result.exit_code != 0
        assert "not found" in result.output

    def test_add_to_conversation_then_by_id(self, scripted_chat, data_dir):
        scripted_chat.queue(plain_reply(Intent.GREETING, "Hi!"))
        runner = CliRunner()
        runner.invoke(cli, ["chat", "-m", "hello"])
        conv_id = json.loads((data_dir / "conversations.json").read_text())[0]["id"]

        created = runner.invoke(cli, [
            "order", "add", "--conversation", conv_id,
            "--drink", "latte", "--qty", "2", "--size", "venti", "--custom", "milk=oat",
        ])
        assert created.exit_code == 0, created.output
        assert "(milk: oat)" in created.output
        order_id = json.loads((data_dir / "orders.json").read_text())[0]["id"]

        added = runner.invoke(cli, ["order", "add", "--id", order_id, "--drink", "Espresso"])
        assert added.exit_code == 0, added.output
        assert "$12.00" in added.output
        conversations = json.loads((data_dir / "conversations.json").read_text())
        assert conversations[0]["current_order_id"] == order_id

    def test_add_needs_exactly_one_target(self, data_dir):
        result = CliRunner().invoke(cli, ["order", "add", "--drink", "Latte"])
        assert result.exit_code == 2
        assert "exactly one of --conversation or --id" in result.output

    def test_add_to_unknown_order(self, data_dir):
        result = CliRunner().invoke(
            cli, ["order", "add", "--id", "ord_missing", "--drink", "Latte"]
        )
        assert result.exit_code == 1
        assert "not found" in result.output


class TestChatCommand:

    def test_single_message_creates_order(self, scripted_chat, data_dir):
        scripted_chat.queue(order_reply("Latte", quantity=2))

        result = CliRunner().invoke(cli, ["chat", "-m", "two grande lattes"])

        assert result.exit_code == 0
        assert "barista> Coming right up!" in result.output
        assert "$9.00" in result.output
        orders = json.loads((data_dir / "orders.json").read_text())
        assert orders[0]["status"] == "pending"

    def test_confirm_then_show_history(self, scripted_chat, data_dir):
        scripted_chat.queue(
            order_reply("Latte"),
            plain_reply(Intent.CONFIRM_ORDER, "Enjoy your latte!"),
        )
        runner = CliRunner()
        runner.invoke(cli, ["chat", "-m", "a latte"])
        conversations = json.loads((data_dir / "conversations.json").read_text())
        conv_id = conversations[0]["id"]

        confirm = runner.invoke(cli, ["chat", "--conversation", conv_id, "-m", "that's it"])
        history = runner.invoke(cli, ["history", "show", "--id", conv_id])

        assert "status=completed" in confirm.output
        assert history.exit_code == 0
        assert "(4 messages)" in history.output
        assert "[assistant] Enjoy your latte!" in history.output

    def test_stream_flag_prints_reply_and_order(self, scripted_chat, data_dir):
        scripted_chat.queue(order_reply("Latte", quantity=2))

        result = CliRunner().invoke(cli, ["chat", "--stream", "-m", "two lattes"])

        assert result.exit_code == 0
        assert "barista> Coming right up!\n" in result.output
        assert "$9.00" in result.output
        assert "(conversation conv_" in result.output

    def test_stream_flag_reports_errors(self, scripted_chat):
        result = CliRunner().invoke(
            cli, ["chat", "--stream", "--conversation", "conv_nope", "-m", "hi"]
        )
        assert result.exit_code == 1
        assert "CONVERSATION_NOT_FOUND" in result.output

    def test_unknown_conversation_fails(self, scripted_chat):
        result = CliRunner().invoke(cli, ["chat", "--conversation", "conv_nope", "-m", "hi"])
        assert result.exit_code == 1
        assert "CONVERSATION_NOT_FOUND" in result.output

    def test_interactive_loop_ends_on_empty_line(self, scripted_chat):
        scripted_chat.queue(plain_reply(Intent.GREETING, "Hi there!"))
        result = CliRunner().invoke(cli, ["chat"], input="hello\n\n")
        assert result.exit_code == 0
        assert "barista> Hi there!" in result.output
        assert "(conversation conv_" in result.output
