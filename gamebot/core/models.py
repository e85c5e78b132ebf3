"""Domain models for the conversational gateway."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from gamebot.core.errors import GatewayError

type RoomId = str
type Author = Literal["user", "assistant"]
type TurnStatus = Literal["rejected", "blocked", "replied", "failed"]


def utc_now() -> datetime:
    return datetime.now(UTC)


def new_room_id() -> RoomId:
    return uuid.uuid4().hex


def new_session_key() -> str:
    """Fresh remote conversation key for a room."""
    return f"py-{uuid.uuid4()}"


@dataclass(frozen=True, slots=True, kw_only=True)
class Message:
    """One chat message. Immutable once created; rooms only ever append."""

    author: Author
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=utc_now)

    @property
    def role_name(self) -> str:
        """Speaker label used in context summaries."""
        return "User" if self.author == "user" else "Bot"


@dataclass(frozen=True, slots=True, kw_only=True)
class Room:
    """Chat room metadata. One room maps to one remote conversation context."""

    title: str
    id: RoomId = field(default_factory=new_room_id)
    is_default: bool = False
    remote_session_key: str = field(default_factory=new_session_key)
    updated_at: datetime = field(default_factory=utc_now)


class BlockReason(Enum):
    """Why the domain gate refused a message."""

    NON_DOMAIN = "non_domain"
    PROMPT_INJECTION = "prompt_injection"
    SECRET_REQUEST = "secret_request"
    PROFANITY = "profanity"


@dataclass(frozen=True, slots=True)
class Allow:
    """Gate admitted the message."""


@dataclass(frozen=True, slots=True, kw_only=True)
class Block:
    """Gate refused the message; ``reply_text`` is shown after ``delay_seconds``."""

    reason: BlockReason
    reply_text: str
    delay_seconds: float = 0.0


type GateDecision = Allow | Block


_MODEL_LABEL_ALIASES: dict[str, str] = {
    "guide": "game_guide",
    "info": "game_info",
    "recommend": "game_recommend",
    "non_domain": "non_game",
}


class IntentLabel(Enum):
    """Response-style label sent in the ``[Intent]`` header.

    ``NON_DOMAIN`` and ``UNKNOWN`` are internal sentinels; they never reach a
    payload because resolution folds them into ``INFO``.
    """

    GUIDE = "game_guide"
    INFO = "game_info"
    RECOMMEND = "game_recommend"
    NON_DOMAIN = "non_game"
    UNKNOWN = "unknown"

    @classmethod
    def from_model_label(cls, label: str) -> IntentLabel:
        """Map a raw classifier label to an intent; unrecognized labels become UNKNOWN."""
        key = label.strip().lower()
        key = _MODEL_LABEL_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_in_domain(self) -> bool:
        return self in (IntentLabel.GUIDE, IntentLabel.INFO, IntentLabel.RECOMMEND)


@dataclass(frozen=True, slots=True, kw_only=True)
class ClassifierPrediction:
    """Raw classifier output.

    ``confidence < 0`` is a sentinel: the backend exposes no calibrated
    probability, so only the label can be trusted.
    """

    label: str
    confidence: float

    @property
    def is_calibrated(self) -> bool:
        return self.confidence >= 0


@dataclass(frozen=True, slots=True, kw_only=True)
class AssistantSettings:
    """Per-turn configuration snapshot consumed by the orchestrator."""

    endpoint: str
    client_key: str
    include_local_context: bool = True
    context_message_count: int = 8
    max_context_characters: int = 2500
    use_room_session_key: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class TurnResult:
    """Outcome of one ``send_message`` call."""

    status: TurnStatus
    reply: Message | None = None
    error: GatewayError | None = None
    block_reason: BlockReason | None = None

    @property
    def ok(self) -> bool:
        return self.status in ("blocked", "replied")
