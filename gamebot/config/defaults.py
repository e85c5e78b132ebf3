"""Centralized opinionated defaults for generated/migrated config files."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

DEFAULT_ASSISTANT_ENDPOINT = "https://kdt-api-function.azurewebsites.net"

DEFAULT_ASSISTANT: dict[str, Any] = {
    "endpoint": DEFAULT_ASSISTANT_ENDPOINT,
    "client_key": "",
    "include_local_context": True,
    "context_message_count": 8,
    "max_context_characters": 2500,
    "use_room_session_key": False,
    "timeout_seconds": 15.0,
    "max_query_chars": 1200,
}

DEFAULT_GATE: dict[str, Any] = {
    "confidence_threshold": 0.70,
    "domain_label": "game",
    "safety_rules": True,
    "keyword_admission": False,
    "reply_delay_min": 1.0,
    "reply_delay_max": 2.0,
}

DEFAULT_INTENT: dict[str, Any] = {
    "confidence_threshold": 0.55,
}

DEFAULT_STORAGE: dict[str, Any] = {
    "db_path": "data/chat.db",
    "default_room_title": "New Chat",
    "default_room_max_messages": 40,
    "default_room_max_idle_seconds": 30 * 60,
}

_SECTIONS: dict[str, dict[str, Any]] = {
    "assistant": DEFAULT_ASSISTANT,
    "gate": DEFAULT_GATE,
    "intent": DEFAULT_INTENT,
    "storage": DEFAULT_STORAGE,
}


def default_section(name: str) -> dict[str, Any]:
    """Return a deep-copied payload for one config section."""
    return deepcopy(_SECTIONS[name])


def apply_missing_defaults(snake_config: dict[str, Any]) -> None:
    """Inject missing config defaults without overriding existing user values."""
    if not isinstance(snake_config, dict):
        return

    for name in _SECTIONS:
        section = snake_config.get(name)
        if not isinstance(section, dict):
            section = {}
            snake_config[name] = section
        for k, v in default_section(name).items():
            section.setdefault(k, v)

    assistant = snake_config["assistant"]
    endpoint = assistant.get("endpoint")
    if not isinstance(endpoint, str) or not endpoint.strip():
        assistant["endpoint"] = DEFAULT_ASSISTANT_ENDPOINT
