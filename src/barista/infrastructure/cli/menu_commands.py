"""CLI commands for the drink catalog."""

from __future__ import annotations

import asyncio

import click

from barista.application.search_drinks import SearchDrinksHandler
from barista.domain.exceptions import DomainException
from barista.infrastructure.bootstrap import drink_repository, drink_searcher


def _handler() -> SearchDrinksHandler:
    return SearchDrinksHandler(drink_searcher=drink_searcher(), drink_repo=drink_repository())


@click.command("list")
def menu_list() -> None:
    """List all drinks in the catalog."""
    drinks = asyncio.run(_handler().list_all())

    if not drinks:
        click.echo("No drinks found.")
        return

    click.echo(f"{'Name':<24} {'Price':>8}  Customizations")
    click.echo("-" * 60)
    for d in drinks:
        click.echo(f"{d.name:<24} {d.price:>8}  {', '.join(d.customizations) or '-'}")


@click.command("search")
@click.argument("query")
@click.option("--limit", default=5, type=int, help="Maximum number of results.")
def menu_search(query: str, limit: int) -> None:
    """Search the menu in plain language."""
    try:
        results = asyncio.run(_handler().search(query, limit))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not results:
        click.echo(f"No drinks found matching '{query}'.")
        return

    for r in results:
        click.echo(f"{r.relevance:>5.2f}  {r.name:<24} {r.price:>8}  {r.description}")
