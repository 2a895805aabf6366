import click

from barista.infrastructure.bootstrap import settings
from barista.infrastructure.cli.chat_commands import chat
from barista.infrastructure.cli.history_commands import history_delete, history_show
from barista.infrastructure.cli.menu_commands import menu_list, menu_search
from barista.infrastructure.cli.order_commands import (
    order_add,
    order_cancel,
    order_complete,
    order_confirm,
    order_show,
)
from barista.infrastructure.config import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override BARISTA_LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """Barista — conversational drink ordering"""
    configure_logging(log_level or settings().LOG_LEVEL)


@cli.group()
def menu() -> None:
    """Browse the drink catalog."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def history() -> None:
    """Inspect conversations."""


# Register subcommands
cli.add_command(chat)
menu.add_command(menu_list)
menu.add_command(menu_search)
order.add_command(order_add)
order.add_command(order_show)
order.add_command(order_confirm)
order.add_command(order_complete)
order.add_command(order_cancel)
history.add_command(history_show)
history.add_command(history_delete)
