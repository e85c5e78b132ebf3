"""Utility functions for gamebot."""

import os
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """Get the gamebot data directory.

    Respects GAMEBOT_HOME environment variable; falls back to ~/.gamebot.
    """
    gamebot_home = os.environ.get("GAMEBOT_HOME", "").strip()
    if gamebot_home:
        return ensure_dir(Path(gamebot_home).expanduser())
    return ensure_dir(Path.home() / ".gamebot")


def truncate_string(s: str, max_len: int = 100, suffix: str = "...") -> str:
    """Truncate a string to max length, adding suffix if truncated."""
    if len(s) <= max_len:
        return s
    return s[: max_len - len(suffix)] + suffix
