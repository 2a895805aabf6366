"""CLI command for chatting with the barista."""

from __future__ import annotations

import asyncio

import click

from barista.application.dto import TurnResult
from barista.application.process_message import TurnOrchestrator
from barista.infrastructure.bootstrap import turn_orchestrator
from barista.infrastructure.cli.display import display_order


def _render(result: TurnResult, show_reply: bool = True) -> str | None:
    """Print one turn; return the conversation id to continue with."""
    if not result.ok:
        error = result.error
        click.secho(f"[{error.kind.value}] {error.message}", fg="red", err=True)
        return None

    outcome = result.outcome
    if show_reply:
        click.echo(f"barista> {outcome.reply}")
    if outcome.order is not None:
        click.echo()
        display_order(outcome.order)
    if outcome.suggested_replies:
        click.echo(f"  try: {' | '.join(outcome.suggested_replies)}")
    return outcome.conversation_id


async def _stream_turn(
    orchestrator: TurnOrchestrator, message: str, conversation_id: str | None
) -> TurnResult:
    """Echo reply text as it arrives and hand back the final result."""
    started = False
    async for item in orchestrator.process_stream(message, conversation_id):
        if isinstance(item, TurnResult):
            if started:
                click.echo()
            return item
        if not started:
            click.echo("barista> ", nl=False)
            started = True
        click.echo(item, nl=False)
    raise RuntimeError("Turn stream ended without a result")


def _run_turn(
    orchestrator: TurnOrchestrator, message: str, conversation_id: str | None, stream: bool
) -> str | None:
    if stream:
        result = asyncio.run(_stream_turn(orchestrator, message, conversation_id))
        return _render(result, show_reply=False)
    return _render(asyncio.run(orchestrator.process(message, conversation_id)))


@click.command("chat")
@click.option("--conversation", "conversation_id", default=None, help="Resume a conversation.")
@click.option("--message", "-m", default=None, help="Send one message and exit.")
@click.option("--stream", is_flag=True, help="Print the reply as it is generated.")
def chat(conversation_id: str | None, message: str | None, stream: bool) -> None:
    """Talk to the barista (interactive unless --message is given)."""
    orchestrator = turn_orchestrator()

    if message is not None:
        resumed = _run_turn(orchestrator, message, conversation_id, stream)
        if resumed is None:
            raise click.exceptions.Exit(1)
        click.echo(f"(conversation {resumed})")
        return

    click.echo("Type your order. Empty line or Ctrl-D to quit.")
    while True:
        try:
            line = click.prompt("you", default="", show_default=False)
        except click.Abort:
            break
        if not line.strip():
            break
        conversation_id = _run_turn(orchestrator, line, conversation_id, stream) or conversation_id

    if conversation_id:
        click.echo(f"(conversation {conversation_id})")
