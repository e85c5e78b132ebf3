"""Chat CLI command."""

from __future__ import annotations

import asyncio

import typer
from rich.markup import escape

from gamebot import __logo__

from .core import app, console, enable_logs


def _print_turn(result) -> None:
    if result.status == "failed":
        console.print(f"[red]Error:[/red] {escape(str(result.error))}")
    elif result.status == "blocked":
        console.print(f"\n{__logo__} [yellow]{escape(result.reply.text)}[/yellow]\n")
    elif result.reply is not None:
        console.print(f"\n{__logo__} {escape(result.reply.text)}\n")


@app.command()
def chat(
    message: str = typer.Option(None, "--message", "-m", help="Message to send"),
    room_id: str = typer.Option(None, "--room", "-r", help="Room ID (default room when omitted)"),
    logs: bool = typer.Option(False, "--logs", help="Show gamebot debug logs"),
) -> None:
    """Chat with the game assistant."""
    from gamebot.app.bootstrap import build_runtime
    from gamebot.config.loader import load_config

    if logs:
        enable_logs()

    config = load_config()
    try:
        runtime = build_runtime(config, room_id=room_id)
    except KeyError:
        console.print(f"[red]Room not found: {room_id}[/red]")
        raise typer.Exit(1)

    orchestrator = runtime.orchestrator

    if message:
        try:
            result = asyncio.run(orchestrator.send_message(message))
        finally:
            runtime.close()
        _print_turn(result)
        if not result.ok:
            raise typer.Exit(1)
        return

    console.print(f"{__logo__} Interactive mode in [cyan]{orchestrator.room.title}[/cyan] (Ctrl+C to exit)\n")

    async def run_interactive() -> None:
        while True:
            try:
                user_input = console.input("[bold blue]You:[/bold blue] ")
            except (KeyboardInterrupt, EOFError):
                console.print("\nGoodbye!")
                break
            if not user_input.strip():
                continue
            if user_input.strip() == "/new":
                archived = runtime.rooms.start_new_conversation()
                orchestrator.reload(runtime.rooms.ensure_default_room())
                if archived is not None:
                    console.print(f"[dim]Archived previous chat as '{archived.title}'[/dim]")
                continue
            _print_turn(await orchestrator.send_message(user_input))

    try:
        asyncio.run(run_interactive())
    finally:
        runtime.close()
