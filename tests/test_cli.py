import json

import pytest
from typer.testing import CliRunner

from gamebot import __version__
from gamebot.cli.commands import app
from gamebot.gate.domain import NON_DOMAIN_REPLY
from gamebot.storage import ChatStore, RoomDirectory

runner = CliRunner()


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("GAMEBOT_HOME", str(tmp_path))
    monkeypatch.delenv("GAMEBOT_ASSISTANT__CLIENT_KEY", raising=False)
    (tmp_path / "config.json").write_text(
        json.dumps({"gate": {"replyDelayMin": 0, "replyDelayMax": 0}}),
        encoding="utf-8",
    )
    return tmp_path


def _default_room_messages(home):
    store = ChatStore(home / "data" / "chat.db")
    try:
        room = RoomDirectory(store).ensure_default_room()
        return store.load_messages(room.id)
    finally:
        store.close()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"gamebot v{__version__}" in result.stdout


def test_rooms_list_json_shows_default_room(home) -> None:
    result = runner.invoke(app, ["rooms", "list", "--json"])

    assert result.exit_code == 0
    rooms = json.loads(result.stdout)
    assert len(rooms) == 1
    assert rooms[0]["isDefault"] is True
    assert rooms[0]["messages"] == 0


def test_chat_blocks_off_topic_message(home) -> None:
    result = runner.invoke(app, ["chat", "-m", "오늘 날씨 어때"])

    assert result.exit_code == 0
    messages = _default_room_messages(home)
    assert [m.author for m in messages] == ["user", "assistant"]
    assert messages[1].text == NON_DOMAIN_REPLY


def test_chat_without_client_key_fails(home) -> None:
    result = runner.invoke(app, ["chat", "-m", "엘든 링 보스 공략"])

    assert result.exit_code == 1
    assert "client key" in result.stdout
    assert [m.author for m in _default_room_messages(home)] == ["user"]


def test_chat_unknown_room(home) -> None:
    result = runner.invoke(app, ["chat", "-m", "hi", "--room", "missing"])

    assert result.exit_code == 1
    assert "Room not found" in result.stdout


def test_rooms_new_archives_default_history(home) -> None:
    runner.invoke(app, ["chat", "-m", "오늘 날씨 어때"])

    result = runner.invoke(app, ["rooms", "new"])

    assert result.exit_code == 0
    assert "Archived" in result.stdout
    assert _default_room_messages(home) == []


def test_chat_blank_message_is_rejected(home) -> None:
    result = runner.invoke(app, ["chat", "-m", "   "])

    assert result.exit_code == 1
    assert _default_room_messages(home) == []


def test_chat_reads_dotenv_from_home(home, monkeypatch) -> None:
    name = "GAMEBOT_ASSISTANT__ENDPOINT"
    # Register the variable so whatever the .env file sets is undone afterwards.
    monkeypatch.setenv(name, "unset")
    monkeypatch.delenv(name)
    (home / ".env").write_text(f"{name}=ftp://assistant.test\n", encoding="utf-8")

    result = runner.invoke(app, ["chat", "-m", "엘든 링 보스 공략"])

    assert result.exit_code == 1
    assert "ftp://assistant.test" in result.stdout
