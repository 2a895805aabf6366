"""Shared formatting for CLI output."""

from __future__ import annotations

import click

from barista.application.dto import OrderDTO


def display_order(dto: OrderDTO) -> None:
    click.echo(f"Order {dto.order_id}  (status={dto.status})")
    click.echo()
    click.echo(f"  {'Drink':<24} {'Size':<7} {'Qty':>4} {'Price':>9}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.drink_name:<24} {item.size or '-':<7} {item.quantity:>4} {item.price:>9}"
        )
        if item.customizations:
            extras = ", ".join(f"{k}: {v}" for k, v in item.customizations.items())
            click.echo(f"    ({extras})")
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<36} {dto.total_price:>10}")
