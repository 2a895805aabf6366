"""CLI commands for conversation history."""

from __future__ import annotations

import asyncio

import click

from barista.application.conversation_history import ConversationHistoryHandler
from barista.domain.exceptions import DomainException
from barista.infrastructure.bootstrap import conversation_repository


@click.command("show")
@click.option("--id", "conversation_id", required=True, help="Conversation ID.")
@click.option("--limit", default=50, type=int, help="Most recent messages to show.")
def history_show(conversation_id: str, limit: int) -> None:
    """Show the transcript of a conversation."""
    handler = ConversationHistoryHandler(conversation_repo=conversation_repository())

    try:
        dto = asyncio.run(handler.get_history(conversation_id, limit))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Conversation {dto.conversation_id}  ({dto.message_count} messages)")
    click.echo(f"Current order: {dto.current_order_id or '-'}")
    click.echo()
    for message in dto.messages:
        click.echo(f"[{message.role}] {message.content}")


@click.command("delete")
@click.option("--id", "conversation_id", required=True, help="Conversation ID.")
def history_delete(conversation_id: str) -> None:
    """Delete a conversation (its orders are kept)."""
    handler = ConversationHistoryHandler(conversation_repo=conversation_repository())

    try:
        deleted = asyncio.run(handler.delete(conversation_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not deleted:
        raise click.ClickException(f"Conversation '{conversation_id}' not found")
    click.echo(f"Conversation {conversation_id} deleted.")
