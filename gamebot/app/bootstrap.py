"""Application bootstrap: wire config, storage, classifiers and the orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from gamebot.classifiers import IntentClassifier, KeywordDomainClassifier, KeywordIntentClassifier
from gamebot.core.models import AssistantSettings, RoomId
from gamebot.core.orchestrator import ConversationOrchestrator
from gamebot.gate import DomainGate
from gamebot.providers.assistant import RemoteAssistantClient
from gamebot.storage import ChatStore, RoomDirectory
from gamebot.telemetry import InMemoryTelemetry

if TYPE_CHECKING:
    from gamebot.config.schema import Config
    from gamebot.core.ports import AssistantFactory, AssistantPort, TextClassifier


@dataclass(slots=True)
class ChatRuntime:
    """Everything one CLI session needs, owned together so it closes together."""

    config: "Config"
    store: ChatStore
    rooms: RoomDirectory
    orchestrator: ConversationOrchestrator
    telemetry: InMemoryTelemetry

    def close(self) -> None:
        logger.debug("session counters {}", self.telemetry.snapshot())
        self.store.close()


def make_assistant_factory(config: "Config") -> "AssistantFactory":
    """Build remote clients with the configured timeout and query cap."""

    def factory(endpoint: str) -> "AssistantPort":
        return RemoteAssistantClient(
            endpoint,
            timeout_seconds=config.assistant.timeout_seconds,
            max_query_chars=config.assistant.max_query_chars,
        )

    return factory


def build_runtime(
    config: "Config",
    *,
    room_id: RoomId | None = None,
    store: ChatStore | None = None,
    domain_classifier: "TextClassifier | None" = None,
    intent_classifier: "TextClassifier | None" = None,
    assistant_factory: "AssistantFactory | None" = None,
) -> ChatRuntime:
    """
    Wire a chat runtime from config.

    Args:
        config: Loaded configuration.
        room_id: Room to bind; the default room (after auto-archiving) when omitted.
        store: Optional pre-opened store; opened from ``config.storage`` otherwise.
        domain_classifier: Gate backend; keyword heuristics when omitted.
        intent_classifier: Intent backend; keyword heuristics when omitted.
        assistant_factory: Remote client factory; HTTP client when omitted.

    Returns:
        Ready-to-use runtime.
    """
    store = store or ChatStore(config.storage.db_file)
    rooms = RoomDirectory(store, config.storage)
    telemetry = InMemoryTelemetry()

    if room_id is None:
        archived = rooms.auto_archive_if_needed()
        if archived is not None:
            logger.info("auto-archived default room into {}", archived.id)
        room = rooms.ensure_default_room()
    else:
        room = rooms.get_room(room_id)
        if room is None:
            store.close()
            raise KeyError(room_id)

    gate = DomainGate(
        domain_classifier or KeywordDomainClassifier(domain_label=config.gate.domain_label),
        config.gate,
    )
    intent = IntentClassifier(
        intent_classifier or KeywordIntentClassifier(),
        threshold=config.intent.confidence_threshold,
    )

    def settings_provider() -> AssistantSettings:
        return config.assistant.to_settings()

    orchestrator = ConversationOrchestrator(
        room=room,
        store=store,
        gate=gate,
        intent_classifier=intent,
        settings_provider=settings_provider,
        assistant_factory=assistant_factory or make_assistant_factory(config),
        telemetry=telemetry,
    )
    return ChatRuntime(
        config=config,
        store=store,
        rooms=rooms,
        orchestrator=orchestrator,
        telemetry=telemetry,
    )
