"""Room management CLI commands."""

from __future__ import annotations

import json

import typer
from rich.table import Table

from .core import app, console

rooms_app = typer.Typer(help="Manage chat rooms")
app.add_typer(rooms_app, name="rooms")


def _open_rooms():
    from gamebot.config.loader import load_config
    from gamebot.storage import ChatStore, RoomDirectory

    config = load_config()
    store = ChatStore(config.storage.db_file)
    return store, RoomDirectory(store, config.storage)


@rooms_app.command("list")
def rooms_list(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List rooms, default room first."""
    from gamebot.utils.helpers import truncate_string

    store, rooms = _open_rooms()
    try:
        rooms.ensure_default_room()
        listed = [(room, len(store.load_messages(room.id))) for room in rooms.list_rooms()]
    finally:
        store.close()

    if json_output:
        payload = [
            {
                "id": room.id,
                "title": room.title,
                "isDefault": room.is_default,
                "messages": count,
                "updatedAt": room.updated_at.isoformat(),
            }
            for room, count in listed
        ]
        console.print(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    table = Table(title=f"Rooms ({len(listed)})")
    table.add_column("ID", style="green")
    table.add_column("Title", style="yellow")
    table.add_column("Default", style="magenta")
    table.add_column("Messages", style="blue")
    table.add_column("Updated", style="dim")
    for room, count in listed:
        table.add_row(
            room.id,
            truncate_string(room.title, 40),
            "✓" if room.is_default else "",
            str(count),
            room.updated_at.isoformat()[:19],
        )
    console.print(table)


@rooms_app.command("new")
def rooms_new() -> None:
    """Archive the default room and start a fresh conversation."""
    store, rooms = _open_rooms()
    try:
        archived = rooms.start_new_conversation()
    finally:
        store.close()

    if archived is None:
        console.print("[dim]Default room was empty; nothing archived.[/dim]")
    else:
        console.print(f"[green]✓[/green] Archived as [cyan]{archived.title}[/cyan] ({archived.id})")


@rooms_app.command("delete")
def rooms_delete(
    room_ids: list[str] = typer.Argument(..., help="Room IDs to delete"),
) -> None:
    """Delete archived rooms. The default room is kept."""
    store, rooms = _open_rooms()
    try:
        default = rooms.ensure_default_room()
        removed = rooms.delete_rooms(room_ids)
    finally:
        store.close()

    if default.id in room_ids:
        console.print("[yellow]The default room cannot be deleted; skipped.[/yellow]")
    console.print(f"[green]✓[/green] Deleted {removed} room(s)")
