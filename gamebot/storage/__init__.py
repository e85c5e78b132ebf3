"""Persistent storage helpers."""

from gamebot.storage.chat_store import ChatStore
from gamebot.storage.rooms import RoomDirectory

__all__ = ["ChatStore", "RoomDirectory"]
