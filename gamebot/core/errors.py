"""Error taxonomy for the conversational gateway.

Every failure that can end a turn derives from :class:`GatewayError`; the
orchestrator surfaces ``str(exc)`` through its single ``error_message`` field.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for gateway failures."""


class ConfigurationError(GatewayError):
    """Endpoint or client key missing/invalid. Fatal to the turn, not the session."""


class TransportError(GatewayError):
    """Remote assistant call failed. Never retried."""


class InvalidRequest(TransportError):
    """Request could not be constructed (bad base URL, unencodable parameters)."""

    def __init__(self, detail: str = "") -> None:
        message = "Invalid assistant API URL."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)


class BadStatus(TransportError):
    """Non-2xx response; carries the status code and raw body text."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Assistant API failed. status={status_code}, body={body}")


class EmptyResponse(TransportError):
    """Response parsed but yielded no non-empty text."""

    def __init__(self) -> None:
        super().__init__("Assistant API returned empty response.")


class DecodingFailed(TransportError):
    """Response body could not be decoded at all."""

    def __init__(self) -> None:
        super().__init__("Failed to decode assistant API response.")


class ClassifierUnavailable(GatewayError):
    """Classifier backend could not produce a prediction.

    Raised by classifier adapters; callers degrade to a default decision and
    never show it to the user.
    """
