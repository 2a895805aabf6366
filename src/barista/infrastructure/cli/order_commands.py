"""CLI commands for the Order aggregate."""

from __future__ import annotations

import asyncio

import click

from barista.application.cancel_order import CancelOrderHandler
from barista.application.confirm_order import CompleteOrderHandler, ConfirmOrderHandler
from barista.application.create_order import AddItemHandler, CreateOrderHandler
from barista.application.show_order import ShowOrderHandler
from barista.domain.exceptions import DomainException
from barista.infrastructure.bootstrap import (
    conversation_repository,
    drink_repository,
    order_repository,
    settings,
)
from barista.infrastructure.cli.display import display_order


@click.command("add")
@click.option(
    "--conversation", "conversation_id", default=None, help="Add to this conversation's order."
)
@click.option("--id", "order_id", default=None, help="Add to this pending order.")
@click.option("--drink", "drink_name", required=True, help="Drink name from the menu.")
@click.option("--qty", "quantity", default=1, show_default=True, type=int)
@click.option("--size", default=None, help="tall, grande or venti.")
@click.option("--custom", "custom", multiple=True, help="Customization as key=value.")
def order_add(
    conversation_id: str | None,
    order_id: str | None,
    drink_name: str,
    quantity: int,
    size: str | None,
    custom: tuple[str, ...],
) -> None:
    """Add a drink to an order without going through the chat."""
    if (conversation_id is None) == (order_id is None):
        raise click.UsageError("Pass exactly one of --conversation or --id.")

    customizations = {}
    for pair in custom:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--custom")
        customizations[key.strip()] = value.strip()

    limit = settings().MAX_ORDER_QUANTITY
    try:
        if order_id is not None:
            handler = AddItemHandler(
                order_repo=order_repository(),
                drink_repo=drink_repository(),
                max_total_quantity=limit,
            )
            dto = asyncio.run(
                handler.handle(order_id, drink_name, quantity, size, customizations)
            )
        else:
            handler = CreateOrderHandler(
                conversation_repo=conversation_repository(),
                order_repo=order_repository(),
                drink_repo=drink_repository(),
                max_total_quantity=limit,
            )
            dto = asyncio.run(
                handler.handle(conversation_id, drink_name, quantity, size, customizations)
            )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = asyncio.run(handler.handle(order_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("confirm")
@click.option("--id", "order_id", required=True, help="Order ID to confirm.")
def order_confirm(order_id: str) -> None:
    """Confirm a pending order."""
    handler = ConfirmOrderHandler(order_repo=order_repository())

    try:
        asyncio.run(handler.handle(order_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} confirmed.")


@click.command("complete")
@click.option("--id", "order_id", required=True, help="Order ID to complete.")
def order_complete(order_id: str) -> None:
    """Complete a confirmed order."""
    handler = CompleteOrderHandler(order_repo=order_repository())

    try:
        asyncio.run(handler.handle(order_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} completed.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
@click.option("--conversation", "conversation_id", default=None, help="Owning conversation.")
def order_cancel(order_id: str, conversation_id: str | None) -> None:
    """Cancel a pending or confirmed order."""
    handler = CancelOrderHandler(
        order_repo=order_repository(),
        conversation_repo=conversation_repository(),
    )

    try:
        asyncio.run(handler.handle(order_id, conversation_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} cancelled.")
