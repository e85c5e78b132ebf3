"""Port interfaces for the conversational gateway."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from gamebot.core.models import AssistantSettings, ClassifierPrediction, Message, RoomId


@runtime_checkable
class TextClassifier(Protocol):
    """Capability interface over any text classification backend."""

    def predict(self, text: str) -> ClassifierPrediction | None:
        """Return a prediction, or None when the backend has no answer."""


class MessageStorePort(Protocol):
    """Local persistence for per-room message history."""

    def load_messages(self, room_id: RoomId) -> list[Message]:
        """Return the ordered message list for one room."""

    def save_messages(self, room_id: RoomId, messages: list[Message]) -> None:
        """Replace the stored message list for one room."""

    def touch_room(self, room_id: RoomId) -> None:
        """Bump the room's ``updated_at`` timestamp."""


class AssistantPort(Protocol):
    """Remote language-model backend bound to one endpoint."""

    async def ask(self, content: str, session_key: str) -> str:
        """Send one question and return the normalized answer text."""

    async def reset_state(self, session_key: str) -> str:
        """Drop the server-side conversation for ``session_key``."""


class TelemetryPort(Protocol):
    """Counter telemetry sink."""

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Increase named counter with optional labels."""


type SettingsProvider = Callable[[], AssistantSettings]
type AssistantFactory = Callable[[str], AssistantPort]
