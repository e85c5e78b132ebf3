"""Application wiring."""

from gamebot.app.bootstrap import ChatRuntime, build_runtime

__all__ = ["ChatRuntime", "build_runtime"]
