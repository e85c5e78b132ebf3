from datetime import timedelta

import pytest

from gamebot.config.schema import StorageConfig
from gamebot.core.models import Message, Room, utc_now
from gamebot.storage import ChatStore, RoomDirectory
from gamebot.storage.rooms import ARCHIVE_FALLBACK_TITLE, make_archive_title


@pytest.fixture
def store(tmp_path):
    s = ChatStore(tmp_path / "chat.db")
    yield s
    s.close()


@pytest.fixture
def rooms(store: ChatStore) -> RoomDirectory:
    return RoomDirectory(store, StorageConfig())


def _conversation(n: int) -> list[Message]:
    return [Message(author="user" if i % 2 == 0 else "assistant", text=f"message {i}") for i in range(n)]


def test_store_round_trips_rooms_and_messages(store: ChatStore) -> None:
    room = Room(title="Elden Ring", is_default=False)
    store.save_room(room)
    messages = [Message(author="user", text="보스 공략"), Message(author="assistant", text="패링하세요")]
    store.save_messages(room.id, messages)

    assert store.get_room(room.id) == room
    assert store.load_messages(room.id) == messages
    assert store.get_room("missing") is None
    assert store.load_messages("missing") == []

    store.save_messages(room.id, messages[:1])
    assert store.load_messages(room.id) == messages[:1]


def test_touch_room_bumps_updated_at(store: ChatStore) -> None:
    room = Room(title="Old", updated_at=utc_now() - timedelta(days=1))
    store.save_room(room)

    store.touch_room(room.id)

    touched = store.get_room(room.id)
    assert touched is not None
    assert touched.updated_at > room.updated_at


def test_delete_rooms_removes_messages(store: ChatStore) -> None:
    room = Room(title="Doomed")
    store.save_room(room)
    store.save_messages(room.id, _conversation(2))

    assert store.delete_rooms([room.id, "missing"]) == 1
    assert store.get_room(room.id) is None
    assert store.load_messages(room.id) == []
    assert store.delete_rooms([]) == 0


def test_default_room_is_created_once(rooms: RoomDirectory) -> None:
    first = rooms.ensure_default_room()
    second = rooms.ensure_default_room()

    assert first.id == second.id
    assert first.is_default
    assert first.title == "New Chat"


def test_archive_title() -> None:
    long_text = "가" * 60
    assert make_archive_title([Message(author="assistant", text="hi"), Message(author="user", text="a\nb")]) == "a b"
    assert make_archive_title([Message(author="user", text=long_text)]) == "가" * 40
    assert make_archive_title([Message(author="assistant", text="only bot")]) is None


def test_start_new_conversation_archives_history(store: ChatStore, rooms: RoomDirectory) -> None:
    default = rooms.ensure_default_room()
    history = _conversation(4)
    store.save_messages(default.id, history)

    archived = rooms.start_new_conversation()

    assert archived is not None
    assert not archived.is_default
    assert archived.title == "message 0"
    assert archived.remote_session_key == default.remote_session_key
    assert store.load_messages(archived.id) == history

    reset = rooms.ensure_default_room()
    assert reset.id == default.id
    assert reset.remote_session_key != default.remote_session_key
    assert store.load_messages(default.id) == []


def test_start_new_conversation_on_empty_default(rooms: RoomDirectory, store: ChatStore) -> None:
    default = rooms.ensure_default_room()

    assert rooms.start_new_conversation() is None
    assert [r.id for r in store.list_rooms()] == [default.id]


def test_archive_falls_back_when_no_user_message(store: ChatStore, rooms: RoomDirectory) -> None:
    default = rooms.ensure_default_room()
    store.save_messages(default.id, [Message(author="assistant", text="welcome")])

    archived = rooms.start_new_conversation()

    assert archived is not None
    assert archived.title == ARCHIVE_FALLBACK_TITLE


def test_auto_archive_by_message_count(store: ChatStore, rooms: RoomDirectory) -> None:
    default = rooms.ensure_default_room()
    store.save_messages(default.id, _conversation(40))
    assert rooms.auto_archive_if_needed() is None

    store.save_messages(default.id, _conversation(41))
    assert rooms.auto_archive_if_needed() is not None
    assert store.load_messages(default.id) == []


def test_auto_archive_by_idle_time(store: ChatStore, rooms: RoomDirectory) -> None:
    default = rooms.ensure_default_room()
    later = default.updated_at + timedelta(seconds=1801)

    assert rooms.auto_archive_if_needed(now=later) is None

    store.save_messages(default.id, _conversation(2))
    assert rooms.auto_archive_if_needed(now=default.updated_at + timedelta(seconds=1800)) is None
    assert rooms.auto_archive_if_needed(now=later) is not None


def test_delete_never_removes_default_room(store: ChatStore, rooms: RoomDirectory) -> None:
    default = rooms.ensure_default_room()
    other = Room(title="Archived")
    store.save_room(other)

    assert rooms.delete_rooms([default.id, other.id]) == 1
    assert [r.id for r in rooms.list_rooms()] == [default.id]


def test_list_rooms_puts_default_first(store: ChatStore, rooms: RoomDirectory) -> None:
    default = rooms.ensure_default_room()
    older = Room(title="older", updated_at=utc_now() - timedelta(hours=2))
    newer = Room(title="newer", updated_at=utc_now() + timedelta(hours=1))
    store.save_room(older)
    store.save_room(newer)

    assert [r.id for r in rooms.list_rooms()] == [default.id, newer.id, older.id]
