import json

import pytest

from gamebot.config import Config, get_config_path, load_config, save_config
from gamebot.config.defaults import DEFAULT_ASSISTANT_ENDPOINT
from gamebot.config.loader import camel_to_snake, snake_to_camel


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("GAMEBOT_HOME", str(tmp_path / "home"))
    for name in ("GAMEBOT_ASSISTANT__CLIENT_KEY", "GAMEBOT_ASSISTANT__ENDPOINT"):
        monkeypatch.delenv(name, raising=False)


def _write(path, payload) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_missing_file_gives_defaults(tmp_path) -> None:
    config = load_config(tmp_path / "missing.json")

    assert config.assistant.endpoint == DEFAULT_ASSISTANT_ENDPOINT
    assert config.assistant.client_key == ""
    assert config.gate.confidence_threshold == 0.70
    assert config.intent.confidence_threshold == 0.55
    assert config.storage.default_room_max_messages == 40


def test_save_writes_camel_case_and_round_trips(tmp_path) -> None:
    path = tmp_path / "config.json"
    config = Config()
    config.assistant.client_key = "client-1"
    config.gate.reply_delay_min = 0.0

    save_config(config, path)

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["assistant"]["clientKey"] == "client-1"
    assert "replyDelayMin" in on_disk["gate"]
    assert (path.stat().st_mode & 0o777) == 0o600

    loaded = load_config(path)
    assert loaded.assistant.client_key == "client-1"
    assert loaded.gate.reply_delay_min == 0.0
    assert list(tmp_path.glob("config.backup.*.json")) == []


def test_legacy_flat_layout_is_migrated_with_backup(tmp_path) -> None:
    path = tmp_path / "config.json"
    _write(path, {"endpoint": "https://assistant.test", "clientKey": "legacy-key"})

    config = load_config(path)

    assert config.assistant.endpoint == "https://assistant.test"
    assert config.assistant.client_key == "legacy-key"
    rewritten = json.loads(path.read_text(encoding="utf-8"))
    assert "endpoint" not in rewritten
    assert rewritten["assistant"]["clientKey"] == "legacy-key"
    assert rewritten["configVersion"] == 1
    assert len(list(tmp_path.glob("config.backup.*.json"))) == 1


def test_blank_endpoint_falls_back_to_default(tmp_path) -> None:
    path = tmp_path / "config.json"
    _write(path, {"assistant": {"endpoint": "  ", "clientKey": "k"}})

    assert load_config(path).assistant.endpoint == DEFAULT_ASSISTANT_ENDPOINT


def test_invalid_config_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "config.json"
    _write(path, {"gate": {"replyDelayMin": 3.0, "replyDelayMax": 1.0}})

    config = load_config(path)

    assert config.gate.reply_delay_min == 1.0
    assert config.gate.reply_delay_max == 2.0


def test_malformed_json_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_config(path).assistant.client_key == ""


def test_env_overrides_nested_settings(monkeypatch) -> None:
    monkeypatch.setenv("GAMEBOT_ASSISTANT__CLIENT_KEY", "from-env")

    assert Config().assistant.client_key == "from-env"


def test_home_controls_paths(tmp_path) -> None:
    home = tmp_path / "home"

    assert get_config_path() == home / "config.json"
    assert Config().storage.db_file == home / "data" / "chat.db"


def test_key_case_conversion() -> None:
    assert camel_to_snake("maxContextCharacters") == "max_context_characters"
    assert snake_to_camel("default_room_max_idle_seconds") == "defaultRoomMaxIdleSeconds"


def test_env_overrides_values_from_config_file(tmp_path, monkeypatch) -> None:
    path = tmp_path / "config.json"
    _write(path, {"assistant": {"endpoint": "https://assistant.test", "clientKey": ""}})
    monkeypatch.setenv("GAMEBOT_ASSISTANT__CLIENT_KEY", "from-env")

    config = load_config(path)

    assert config.assistant.client_key == "from-env"
    assert config.assistant.endpoint == "https://assistant.test"
    rewritten = json.loads(path.read_text(encoding="utf-8"))
    assert rewritten["assistant"]["clientKey"] == ""


def test_env_overrides_saved_complete_config(tmp_path, monkeypatch) -> None:
    path = tmp_path / "config.json"
    save_config(Config(), path)
    monkeypatch.setenv("GAMEBOT_ASSISTANT__CLIENT_KEY", "from-env")

    assert load_config(path).assistant.client_key == "from-env"
