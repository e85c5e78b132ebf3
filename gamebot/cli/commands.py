"""CLI entrypoint; importing the command modules registers them on ``app``."""

from . import chat_commands, room_commands  # noqa: F401
from .core import app

__all__ = ["app"]
