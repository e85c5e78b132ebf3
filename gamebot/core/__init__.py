"""Typed core domain primitives."""

from gamebot.core.errors import (
    BadStatus,
    ClassifierUnavailable,
    ConfigurationError,
    DecodingFailed,
    EmptyResponse,
    GatewayError,
    InvalidRequest,
    TransportError,
)
from gamebot.core.models import (
    Allow,
    AssistantSettings,
    Block,
    BlockReason,
    ClassifierPrediction,
    IntentLabel,
    Message,
    Room,
    TurnResult,
)

__all__ = [
    "Allow",
    "AssistantSettings",
    "BadStatus",
    "Block",
    "BlockReason",
    "ClassifierPrediction",
    "ClassifierUnavailable",
    "ConfigurationError",
    "DecodingFailed",
    "EmptyResponse",
    "GatewayError",
    "IntentLabel",
    "InvalidRequest",
    "Message",
    "Room",
    "TransportError",
    "TurnResult",
]
