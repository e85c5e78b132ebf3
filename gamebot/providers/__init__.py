"""Remote assistant providers."""

from gamebot.providers.assistant import RemoteAssistantClient

__all__ = ["RemoteAssistantClient"]
