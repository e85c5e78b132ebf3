"""Room lifecycle: the default room, archiving and deletion."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from loguru import logger

from gamebot.config.schema import StorageConfig
from gamebot.core.models import Message, Room, RoomId, new_session_key, utc_now
from gamebot.storage.chat_store import ChatStore

ARCHIVE_TITLE_MAX_CHARS = 40
ARCHIVE_FALLBACK_TITLE = "Archived Chat"


def make_archive_title(messages: list[Message]) -> str | None:
    """Title an archived room after its first user message."""
    first_user = next((m for m in messages if m.author == "user"), None)
    if first_user is None:
        return None
    trimmed = first_user.text.strip().replace("\n", " ")
    if not trimmed:
        return None
    return trimmed[:ARCHIVE_TITLE_MAX_CHARS]


class RoomDirectory:
    """Owns the single default room and the archived rooms spun off from it.

    New conversations always happen in the default room; starting over moves
    its history into a fresh archived room and empties the default one.
    """

    def __init__(self, store: ChatStore, config: StorageConfig | None = None) -> None:
        self._store = store
        self._config = config or StorageConfig()

    def ensure_default_room(self) -> Room:
        for room in self._store.list_rooms():
            if room.is_default:
                return room
        room = Room(title=self._config.default_room_title, is_default=True)
        self._store.save_room(room)
        logger.debug("created default room {}", room.id)
        return room

    def list_rooms(self) -> list[Room]:
        """Default room first, then most recently updated."""
        rooms = self._store.list_rooms()
        return sorted(rooms, key=lambda r: (not r.is_default, -r.updated_at.timestamp()))

    def get_room(self, room_id: RoomId) -> Room | None:
        return self._store.get_room(room_id)

    def start_new_conversation(self) -> Room | None:
        """Archive the default room's history and reset it.

        Returns:
            The archived room, or None when the default room was already empty.
        """
        default = self.ensure_default_room()
        messages = self._store.load_messages(default.id)

        archived: Room | None = None
        if messages:
            archived = Room(
                title=make_archive_title(messages) or ARCHIVE_FALLBACK_TITLE,
                remote_session_key=default.remote_session_key,
                updated_at=utc_now(),
            )
            self._store.save_room(archived)
            self._store.save_messages(archived.id, messages)
            logger.info("archived {} message(s) from default room into {}", len(messages), archived.id)

        self._store.save_messages(default.id, [])
        self._store.save_room(
            replace(
                default,
                title=self._config.default_room_title,
                remote_session_key=new_session_key(),
                updated_at=utc_now(),
            )
        )
        return archived

    def auto_archive_if_needed(self, now: datetime | None = None) -> Room | None:
        """Start a new conversation when the default room is stale or overfull."""
        default = self.ensure_default_room()
        messages = self._store.load_messages(default.id)
        idle_seconds = ((now or utc_now()) - default.updated_at).total_seconds()

        by_idle = idle_seconds > self._config.default_room_max_idle_seconds and bool(messages)
        by_count = len(messages) > self._config.default_room_max_messages
        if not (by_idle or by_count):
            return None
        return self.start_new_conversation()

    def delete_rooms(self, room_ids: list[RoomId]) -> int:
        """Delete the given rooms; the default room is never removed."""
        default = self.ensure_default_room()
        targets = [rid for rid in room_ids if rid != default.id]
        return self._store.delete_rooms(targets)
