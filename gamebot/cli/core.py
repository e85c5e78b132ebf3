"""Shared CLI application context and setup helpers."""

from __future__ import annotations

import sys

import typer
from dotenv import load_dotenv
from loguru import logger
from rich.console import Console

from gamebot import __logo__, __version__

app = typer.Typer(
    name="gamebot",
    help=f"{__logo__} gamebot - game discovery assistant gateway",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"{__logo__} gamebot v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(None, "--version", "-v", callback=version_callback, is_eager=True),
) -> None:
    """gamebot - game discovery assistant gateway."""
    from gamebot.utils.helpers import get_data_path

    # Existing environment variables take precedence over the .env file.
    load_dotenv(get_data_path() / ".env", override=False)


def enable_logs(level: str = "DEBUG") -> None:
    """Route gamebot's loguru output to stderr."""
    logger.remove()
    logger.add(sys.stderr, level=level)
    logger.enable("gamebot")


@app.command()
def onboard() -> None:
    """Initialize gamebot configuration."""
    from gamebot.config.loader import get_config_path, save_config
    from gamebot.config.schema import Config

    config_path = get_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config(), config_path)
    console.print(f"[green]✓[/green] Created config at {config_path}")

    console.print(f"\n{__logo__} gamebot is ready!")
    console.print("\nNext steps:")
    console.print(f"  1. Set [cyan]assistant.clientKey[/cyan] in [cyan]{config_path}[/cyan]")
    console.print('  2. Chat: [cyan]gamebot chat -m "추천할 만한 로그라이크 게임?"[/cyan]')
