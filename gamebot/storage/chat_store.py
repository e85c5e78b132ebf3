"""SQLite-backed room and message storage."""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime
from pathlib import Path

from loguru import logger

from gamebot.core.models import Message, Room, RoomId, utc_now
from gamebot.utils.helpers import ensure_dir, get_data_path


class ChatStore:
    """Local persistence for rooms and their ordered message lists."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or get_data_path() / "data" / "chat.db"
        ensure_dir(self.db_path.parent)

        self._lock = threading.RLock()
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")
        self._create_schema()

    def _create_schema(self) -> None:
        with self._lock:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS rooms (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    is_default BOOLEAN NOT NULL DEFAULT 0,
                    remote_session_key TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS messages (
                    room_id TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    id TEXT NOT NULL,
                    author TEXT NOT NULL,
                    text TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    PRIMARY KEY (room_id, position)
                )
                """
            )
            self._conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_rooms_updated_at
                ON rooms (updated_at)
                """
            )
            self._conn.commit()

    # ── Rooms ────────────────────────────────────────────────────────────

    def save_room(self, room: Room) -> None:
        """Insert or replace room metadata."""
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO rooms (id, title, is_default, remote_session_key, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    is_default = excluded.is_default,
                    remote_session_key = excluded.remote_session_key,
                    updated_at = excluded.updated_at
                """,
                (
                    room.id,
                    room.title,
                    1 if room.is_default else 0,
                    room.remote_session_key,
                    room.updated_at.isoformat(),
                ),
            )
            self._conn.commit()

    def get_room(self, room_id: RoomId) -> Room | None:
        with self._lock:
            row = self._conn.execute(
                """
                SELECT id, title, is_default, remote_session_key, updated_at
                FROM rooms WHERE id = ? LIMIT 1
                """,
                (room_id,),
            ).fetchone()
        return _row_to_room(row) if row is not None else None

    def list_rooms(self) -> list[Room]:
        """All rooms, most recently updated first."""
        with self._lock:
            rows = self._conn.execute(
                """
                SELECT id, title, is_default, remote_session_key, updated_at
                FROM rooms ORDER BY updated_at DESC
                """
            ).fetchall()
        return [_row_to_room(row) for row in rows]

    def delete_rooms(self, room_ids: list[RoomId]) -> int:
        """Delete rooms and their messages. Returns number of rooms removed."""
        if not room_ids:
            return 0
        placeholders = ",".join("?" for _ in room_ids)
        with self._lock:
            self._conn.execute(f"DELETE FROM messages WHERE room_id IN ({placeholders})", tuple(room_ids))
            cur = self._conn.execute(f"DELETE FROM rooms WHERE id IN ({placeholders})", tuple(room_ids))
            self._conn.commit()
        if cur.rowcount:
            logger.debug("deleted {} room(s)", cur.rowcount)
        return int(cur.rowcount or 0)

    # ── Messages ─────────────────────────────────────────────────────────

    def load_messages(self, room_id: RoomId) -> list[Message]:
        with self._lock:
            rows = self._conn.execute(
                """
                SELECT id, author, text, created_at
                FROM messages WHERE room_id = ? ORDER BY position ASC
                """,
                (room_id,),
            ).fetchall()
        return [
            Message(
                id=row["id"],
                author=row["author"],
                text=row["text"],
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]

    def save_messages(self, room_id: RoomId, messages: list[Message]) -> None:
        """Replace the stored message list for ``room_id`` in one transaction."""
        with self._lock:
            try:
                self._conn.execute("DELETE FROM messages WHERE room_id = ?", (room_id,))
                self._conn.executemany(
                    """
                    INSERT INTO messages (room_id, position, id, author, text, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (room_id, idx, m.id, m.author, m.text, m.created_at.isoformat())
                        for idx, m in enumerate(messages)
                    ],
                )
                self._conn.commit()
            except sqlite3.Error:
                self._conn.rollback()
                raise

    def touch_room(self, room_id: RoomId) -> None:
        with self._lock:
            self._conn.execute(
                "UPDATE rooms SET updated_at = ? WHERE id = ?",
                (utc_now().isoformat(), room_id),
            )
            self._conn.commit()

    def close(self) -> None:
        """Close sqlite connection."""
        with self._lock:
            self._conn.close()


def _row_to_room(row: sqlite3.Row) -> Room:
    return Room(
        id=row["id"],
        title=row["title"],
        is_default=bool(row["is_default"]),
        remote_session_key=row["remote_session_key"],
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )
