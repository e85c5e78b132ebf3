"""Per-room conversation turn pipeline."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from urllib.parse import urlparse

from loguru import logger

from gamebot.classifiers.intent import IntentClassifier
from gamebot.core.context import (
    STALE,
    ContextState,
    is_first_turn,
    mark_replied,
    mark_synced,
    needs_sync,
)
from gamebot.core.errors import ConfigurationError, EmptyResponse, GatewayError
from gamebot.core.models import (
    AssistantSettings,
    Block,
    IntentLabel,
    Message,
    Room,
    RoomId,
    TurnResult,
)
from gamebot.core.ports import (
    AssistantFactory,
    AssistantPort,
    MessageStorePort,
    SettingsProvider,
    TelemetryPort,
)
from gamebot.gate.domain import DomainGate
from gamebot.prompts.builder import build_system_prompt, build_user_payload, summarize_context
from gamebot.telemetry.inmemory import NoopTelemetry
from gamebot.utils.text import strip_source_markers, unquote_display

type Listener = Callable[[], None]


def _default_assistant_factory(endpoint: str) -> AssistantPort:
    from gamebot.providers.assistant import RemoteAssistantClient
    return RemoteAssistantClient(endpoint)


class ConversationOrchestrator:
    """Runs one chat turn at a time for the bound room.

    A turn is: persist the user message, gate it, sync the remote context if
    the bound room changed, resolve intent, ask, then persist the cleaned
    answer. Blocked messages never touch settings or the network.
    """

    def __init__(
        self,
        *,
        room: Room,
        store: MessageStorePort,
        gate: DomainGate,
        intent_classifier: IntentClassifier,
        settings_provider: SettingsProvider,
        assistant_factory: AssistantFactory | None = None,
        telemetry: TelemetryPort | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._room = room
        self._store = store
        self._gate = gate
        self._intent = intent_classifier
        self._settings_provider = settings_provider
        self._assistant_factory = assistant_factory or _default_assistant_factory
        self._telemetry = telemetry or NoopTelemetry()
        self._sleep = sleep
        self._context: ContextState = STALE
        self._redirects: dict[RoomId, RoomId] = {}
        self._listeners: list[Listener] = []

        self.messages: list[Message] = store.load_messages(room.id)
        self.is_sending = False
        self.error_message: str | None = None

    @property
    def room(self) -> Room:
        return self._room

    @property
    def context_state(self) -> ContextState:
        return self._context

    # ── Observers ────────────────────────────────────────────────────────

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("orchestrator listener failed")

    # ── Room binding ─────────────────────────────────────────────────────

    def reload(self, room: Room) -> None:
        """Bind to ``room``; the next admitted turn resets the remote context."""
        self._room = room
        self.messages = self._store.load_messages(room.id)
        self.error_message = None
        self._context = STALE
        self._notify()

    def mark_needs_server_reset(self) -> None:
        self._context = STALE

    def redirect_completions(self, source_room_id: RoomId, target_room_id: RoomId) -> None:
        """Deliver replies of an in-flight turn for ``source_room_id`` to another room."""
        self._redirects[source_room_id] = target_room_id

    # ── Turn pipeline ────────────────────────────────────────────────────

    async def send_message(self, text: str) -> TurnResult:
        """Process one user message and return the turn outcome."""
        if self.is_sending:
            self._telemetry.incr("turn_rejected_busy")
            return TurnResult(status="rejected")
        trimmed = (text or "").strip()
        if not trimmed:
            return TurnResult(status="rejected")

        room_id = self._room.id
        with self._turn_guard():
            try:
                return await self._run_turn(trimmed, room_id)
            finally:
                self._redirects.pop(room_id, None)

    @contextmanager
    def _turn_guard(self) -> Iterator[None]:
        self.is_sending = True
        self.error_message = None
        self._notify()
        try:
            yield
        finally:
            self.is_sending = False
            self._notify()

    async def _run_turn(self, text: str, room_id: RoomId) -> TurnResult:
        before = self._store.load_messages(room_id)
        self._append(Message(author="user", text=text), room_id)

        decision = self._gate.evaluate(text)
        if isinstance(decision, Block):
            self._telemetry.incr("gate_blocked", labels=(("reason", decision.reason.value),))
            await self._sleep(decision.delay_seconds)
            reply = Message(author="assistant", text=decision.reply_text)
            self._append(reply, self._target_room(room_id))
            return TurnResult(status="blocked", reply=reply, block_reason=decision.reason)

        try:
            settings = self._resolve_settings()
            assistant = self._assistant_factory(settings.endpoint)
            session_key = self._session_key(settings)
            await self._ensure_context(assistant, session_key, room_id)

            intent = self._intent.resolve(text)
            payload = self._build_payload(intent, text, before, settings)
            raw = await assistant.ask(payload, session_key)
            answer = strip_source_markers(unquote_display(raw.strip()))
            if not answer:
                raise EmptyResponse()
        except GatewayError as e:
            return self._fail(e)

        reply = Message(author="assistant", text=answer)
        self._append(reply, self._target_room(room_id))
        self._context = mark_replied(self._context)
        self._telemetry.incr("assistant_reply", labels=(("intent", intent.value),))
        return TurnResult(status="replied", reply=reply)

    def _resolve_settings(self) -> AssistantSettings:
        settings = self._settings_provider()
        endpoint = settings.endpoint.strip()
        if not endpoint:
            raise ConfigurationError("Assistant endpoint is missing.")
        parsed = urlparse(endpoint)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(f"Assistant endpoint is invalid: {endpoint}")
        if not settings.client_key.strip():
            raise ConfigurationError("Assistant client key is missing.")
        return settings

    def _session_key(self, settings: AssistantSettings) -> str:
        if settings.use_room_session_key:
            return self._room.remote_session_key
        return settings.client_key.strip()

    async def _ensure_context(self, assistant: AssistantPort, session_key: str, room_id: RoomId) -> None:
        # reset → system prompt → ask stay strictly sequential
        if not needs_sync(self._context, room_id):
            return
        logger.info("context_sync room={}", room_id)
        await assistant.reset_state(session_key)
        await assistant.ask(build_system_prompt(), session_key)
        self._context = mark_synced(room_id)
        self._telemetry.incr("context_sync")

    def _build_payload(
        self,
        intent: IntentLabel,
        text: str,
        before: list[Message],
        settings: AssistantSettings,
    ) -> str:
        summary = None
        if settings.include_local_context and is_first_turn(self._context) and before:
            summary = summarize_context(
                before,
                message_count=settings.context_message_count,
                max_characters=settings.max_context_characters,
            )
        return build_user_payload(intent, text, summary)

    def _fail(self, error: GatewayError) -> TurnResult:
        if isinstance(error, ConfigurationError):
            logger.warning("turn_failed config error={}", error)
        else:
            logger.error("turn_failed error_type={} error={}", type(error).__name__, error)
        self._telemetry.incr("turn_failed", labels=(("error", type(error).__name__),))
        self.error_message = str(error)
        self._notify()
        return TurnResult(status="failed", error=error)

    # ── Persistence ──────────────────────────────────────────────────────

    def _target_room(self, source_room_id: RoomId) -> RoomId:
        return self._redirects.get(source_room_id, source_room_id)

    def _append(self, message: Message, room_id: RoomId) -> None:
        # Re-read from the store: the room may have been archived or edited mid-turn.
        updated = [*self._store.load_messages(room_id), message]
        self._store.save_messages(room_id, updated)
        self._store.touch_room(room_id)
        if room_id == self._room.id:
            self.messages = updated
            self._notify()
