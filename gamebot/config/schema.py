"""Configuration schema using Pydantic."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from gamebot.config.defaults import (
    DEFAULT_ASSISTANT,
    DEFAULT_GATE,
    DEFAULT_INTENT,
    DEFAULT_STORAGE,
)
from gamebot.core.models import AssistantSettings


class AssistantConfig(BaseModel):
    """Remote assistant endpoint and prompt-context settings."""

    model_config = ConfigDict(extra="ignore")

    endpoint: str = str(DEFAULT_ASSISTANT["endpoint"])
    client_key: str = str(DEFAULT_ASSISTANT["client_key"])
    include_local_context: bool = bool(DEFAULT_ASSISTANT["include_local_context"])
    context_message_count: int = Field(default=int(DEFAULT_ASSISTANT["context_message_count"]), ge=1)
    max_context_characters: int = Field(default=int(DEFAULT_ASSISTANT["max_context_characters"]), ge=1)
    use_room_session_key: bool = bool(DEFAULT_ASSISTANT["use_room_session_key"])
    timeout_seconds: float = Field(default=float(DEFAULT_ASSISTANT["timeout_seconds"]), gt=0)
    max_query_chars: int = Field(default=int(DEFAULT_ASSISTANT["max_query_chars"]), ge=1)

    def to_settings(self) -> AssistantSettings:
        """Snapshot the values one turn needs."""
        return AssistantSettings(
            endpoint=self.endpoint.strip(),
            client_key=self.client_key.strip(),
            include_local_context=self.include_local_context,
            context_message_count=self.context_message_count,
            max_context_characters=self.max_context_characters,
            use_room_session_key=self.use_room_session_key,
        )


class GateConfig(BaseModel):
    """Domain gate thresholds and rule toggles."""

    model_config = ConfigDict(extra="ignore")

    confidence_threshold: float = Field(default=float(DEFAULT_GATE["confidence_threshold"]), ge=0.0, le=1.0)
    domain_label: str = str(DEFAULT_GATE["domain_label"])
    safety_rules: bool = bool(DEFAULT_GATE["safety_rules"])
    keyword_admission: bool = bool(DEFAULT_GATE["keyword_admission"])
    reply_delay_min: float = Field(default=float(DEFAULT_GATE["reply_delay_min"]), ge=0.0)
    reply_delay_max: float = Field(default=float(DEFAULT_GATE["reply_delay_max"]), ge=0.0)

    @model_validator(mode="after")
    def _validate_delay(self) -> "GateConfig":
        if self.reply_delay_max < self.reply_delay_min:
            raise ValueError("gate.replyDelayMax must be >= gate.replyDelayMin")
        return self


class IntentConfig(BaseModel):
    """Intent classifier acceptance threshold."""

    model_config = ConfigDict(extra="ignore")

    confidence_threshold: float = Field(default=float(DEFAULT_INTENT["confidence_threshold"]), ge=0.0, le=1.0)


class StorageConfig(BaseModel):
    """Local chat history storage and default-room housekeeping."""

    model_config = ConfigDict(extra="ignore")

    db_path: str = str(DEFAULT_STORAGE["db_path"])
    default_room_title: str = str(DEFAULT_STORAGE["default_room_title"])
    default_room_max_messages: int = Field(default=int(DEFAULT_STORAGE["default_room_max_messages"]), ge=1)
    default_room_max_idle_seconds: int = Field(default=int(DEFAULT_STORAGE["default_room_max_idle_seconds"]), ge=1)

    @property
    def db_file(self) -> Path:
        """Get expanded database path; relative paths live under the data directory."""
        from gamebot.utils.helpers import get_data_path
        candidate = Path(self.db_path).expanduser()
        return candidate if candidate.is_absolute() else get_data_path() / candidate


class Config(BaseSettings):
    """Root configuration for gamebot."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True, env_prefix="GAMEBOT_", env_nested_delimiter="__")

    config_version: int = 1
    assistant: AssistantConfig = Field(default_factory=AssistantConfig)
    gate: GateConfig = Field(default_factory=GateConfig)
    intent: IntentConfig = Field(default_factory=IntentConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # GAMEBOT_* variables win over values loaded from config.json.
        return env_settings, init_settings, dotenv_settings, file_secret_settings
