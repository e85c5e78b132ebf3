"""HTTP client for the remote game assistant API."""

from __future__ import annotations

import json
import re
from typing import Any

import httpx
from loguru import logger

from gamebot.core.errors import (
    BadStatus,
    DecodingFailed,
    EmptyResponse,
    InvalidRequest,
    TransportError,
)

QUESTION_PATH = "/api/v1/question"
RESET_PATH = "/api/v1/reset-state"
DEFAULT_MAX_QUERY_CHARS = 1200

# Envelope keys some deployments answer with instead of ``content``.
_LEGACY_TEXT_KEYS = ("answer", "text", "result", "message", "output")

_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_for_query(content: str, max_chars: int = DEFAULT_MAX_QUERY_CHARS) -> str:
    """Collapse whitespace and cap length so the question fits in a query string."""
    collapsed = _WHITESPACE_RE.sub(" ", content).strip()
    return collapsed[:max_chars]


def _text_from_envelope(data: Any) -> str:
    if isinstance(data, str):
        return data.strip()
    if isinstance(data, list):
        return _text_from_envelope(data[0]) if data else ""
    if not isinstance(data, dict):
        return ""

    content = data.get("content")
    if isinstance(content, str) and content.strip():
        return content.strip()

    action = data.get("action")
    if isinstance(action, dict):
        speak = action.get("speak")
        if isinstance(speak, str) and speak.strip():
            return speak.strip()

    for key in _LEGACY_TEXT_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def parse_response(body: bytes) -> str:
    """Normalize a 2xx response body to display text.

    Precedence: bare JSON string, ``content``, ``action.speak``, then the raw
    text when the body is not JSON at all.
    """
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodingFailed() from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        result = text.strip()
    else:
        if isinstance(data, (bool, int, float)):
            result = text.strip()
        else:
            result = _text_from_envelope(data)

    if not result:
        raise EmptyResponse()
    return result


def build_url(endpoint: str, path: str) -> httpx.URL:
    """Resolve an API path against the configured base endpoint."""
    try:
        base = httpx.URL(endpoint.strip())
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidRequest(str(e)) from e
    if base.scheme not in ("http", "https") or not base.host:
        raise InvalidRequest(f"endpoint={endpoint!r}")
    return base.copy_with(path=path, query=None, fragment=None)


class RemoteAssistantClient:
    """Stateless wrapper around the question and reset-state endpoints.

    The remote side keeps conversation state per ``client_id``; this class
    only builds requests and normalizes answers. One ``httpx.AsyncClient`` is
    opened per call.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        timeout_seconds: float = 15.0,
        max_query_chars: int = DEFAULT_MAX_QUERY_CHARS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds
        self.max_query_chars = max_query_chars
        self._transport = transport

    async def ask(self, content: str, session_key: str) -> str:
        """
        Send one question and return the normalized answer.

        Args:
            content: Prompt or payload text; sanitized before sending.
            session_key: Remote conversation identifier (``client_id``).

        Returns:
            Non-empty answer text.
        """
        url = build_url(self.endpoint, QUESTION_PATH)
        params = {
            "content": sanitize_for_query(content, self.max_query_chars),
            "client_id": session_key,
        }
        response = await self._send("GET", url, params=params, headers={"Accept": "application/json"})
        return parse_response(response.content)

    async def reset_state(self, session_key: str) -> str:
        """Clear the remote conversation for ``session_key``.

        Resetting an unknown or already-empty conversation is not an error; an
        empty body yields an empty string.
        """
        url = build_url(self.endpoint, RESET_PATH)
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        response = await self._send(
            "DELETE",
            url,
            content=json.dumps({"client_id": session_key}).encode("utf-8"),
            headers=headers,
        )
        try:
            return parse_response(response.content)
        except EmptyResponse:
            return ""

    async def _send(self, method: str, url: httpx.URL, **kwargs: Any) -> httpx.Response:
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_seconds) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.InvalidURL as e:
            raise InvalidRequest(str(e)) from e
        except httpx.HTTPError as e:
            logger.error("assistant_transport_error method={} path={} error={}", method, url.path, e)
            raise TransportError(f"Assistant API request failed: {e}") from e

        if not response.is_success:
            body = response.content.decode("utf-8", errors="replace")
            logger.error("assistant_bad_status method={} path={} status={}", method, url.path, response.status_code)
            raise BadStatus(response.status_code, body)
        return response
