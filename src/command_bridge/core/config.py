"""Configuration management for the command bridge.

This module provides centralized configuration using pydantic-settings,
supporting environment variables, .env files and runtime reloads. API keys
are held as SecretStr so they never appear in logs or reprs.

Example:
    >>> from command_bridge.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.trigger.marker)
    'gpt,'

Environment Variables:
    COMMAND_BRIDGE_PROVIDER: LLM provider (OPENAI, ANTHROPIC, GROQ, OLLAMA, OPENROUTER, GEMINI, CUSTOM)
    COMMAND_BRIDGE_API_KEY: Provider API key
    COMMAND_BRIDGE_MODEL: Model identifier
    COMMAND_BRIDGE_BASE_URL: Optional endpoint override
    COMMAND_BRIDGE_TRIGGER_MARKER: Chat prefix that triggers a request
    COMMAND_BRIDGE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from command_bridge.core.constants import (
    DEFAULT_OPENROUTER_REFERER,
    ERROR_DETAIL_MAX_LENGTH,
    ERROR_KEYWORDS,
    HISTORY_LIMIT,
    HISTORY_TAIL,
    MAX_ATTEMPTS,
    MAX_CONNECT_TIMEOUT_SECONDS,
    MAX_READ_TIMEOUT_SECONDS,
    POSITION_THRESHOLD,
    SETTLE_DELAY_SECONDS,
)
from command_bridge.core.exceptions import ConfigurationError
from command_bridge.models.enums import MessageType, PromptVersion, Provider


class ProviderSettings(BaseSettings):
    """Configuration for the LLM provider connection.

    Attributes:
        provider: Which provider (and therefore which wire shape) to use.
        api_key: Provider API key.
        model: Model identifier sent with every request.
        max_tokens: Maximum tokens the model may generate.
        temperature: Sampling temperature.
        base_url: Optional endpoint override.
        connect_timeout_seconds: TCP connect timeout.
        read_timeout_seconds: Response read timeout.
        openrouter_referer: Referer header sent to OpenRouter.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMMAND_BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: Provider = Field(default=Provider.OPENAI, description="LLM provider")
    api_key: SecretStr | None = Field(default=None, description="Provider API key")
    model: str = Field(default="gpt-4", description="Model identifier")
    max_tokens: int = Field(default=500, ge=1, le=32000, description="Max generated tokens")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    base_url: str | None = Field(default=None, description="Endpoint override")
    connect_timeout_seconds: float = Field(
        default=MAX_CONNECT_TIMEOUT_SECONDS,
        gt=0,
        le=MAX_CONNECT_TIMEOUT_SECONDS,
        description="Connect timeout",
    )
    read_timeout_seconds: float = Field(
        default=MAX_READ_TIMEOUT_SECONDS,
        gt=0,
        le=MAX_READ_TIMEOUT_SECONDS,
        description="Read timeout",
    )
    openrouter_referer: str = Field(
        default=DEFAULT_OPENROUTER_REFERER,
        description="HTTP-Referer sent to OpenRouter",
    )

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, value: object) -> object:
        """Accept provider names in any case."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("base_url", mode="before")
    @classmethod
    def blank_base_url_is_none(cls, value: object) -> object:
        """Treat an empty base URL as no override."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def validate_credentials(self) -> "ProviderSettings":
        """Ensure the selected provider can actually be called.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the API key or base URL is missing.
        """
        if self.provider.requires_api_key and not self.api_key:
            raise ConfigurationError(
                f"{self.provider.value} is selected but no API key is configured",
                config_key="api_key",
            )
        if self.provider is Provider.CUSTOM and not self.base_url:
            raise ConfigurationError(
                "CUSTOM provider requires a base_url",
                config_key="base_url",
            )
        return self


class TriggerSettings(BaseSettings):
    """Configuration for the inbound chat trigger.

    Attributes:
        marker: Chat prefix that turns a message into a request.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMMAND_BRIDGE_TRIGGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    marker: str = Field(default="gpt,", min_length=1, description="Trigger marker")


class ExecutionSettings(BaseSettings):
    """Configuration for command execution and the retry loop.

    Attributes:
        max_attempts: Failed classifications allowed per request.
        settle_delay_seconds: Pause after dispatch before classification.
        position_threshold: Movement below this counts as "no change".
        error_detail_max_length: Truncation length for captured log lines.
        error_keywords: Fragments marking a log line as a failure.
        history_limit: Turns kept per actor.
        history_tail: Turns sent to the provider.
        worker_threads: Size of the blocking I/O worker pool.
        plugin_cache_ttl_seconds: How long the plugin inventory is reused.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMMAND_BRIDGE_EXECUTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_attempts: int = Field(default=MAX_ATTEMPTS, ge=1, le=10)
    settle_delay_seconds: float = Field(default=SETTLE_DELAY_SECONDS, ge=0, le=10)
    position_threshold: float = Field(default=POSITION_THRESHOLD, ge=0)
    error_detail_max_length: int = Field(default=ERROR_DETAIL_MAX_LENGTH, ge=10)
    error_keywords: list[str] = Field(default_factory=lambda: list(ERROR_KEYWORDS))
    history_limit: int = Field(default=HISTORY_LIMIT, ge=1)
    history_tail: int = Field(default=HISTORY_TAIL, ge=1)
    worker_threads: int = Field(default=4, ge=1, le=64)
    plugin_cache_ttl_seconds: float = Field(default=30.0, ge=0)

    @model_validator(mode="after")
    def validate_history_window(self) -> "ExecutionSettings":
        """Ensure the provider tail fits inside the stored history.

        Raises:
            ConfigurationError: If history_tail > history_limit.
        """
        if self.history_tail > self.history_limit:
            raise ConfigurationError(
                f"history_tail ({self.history_tail}) must not exceed "
                f"history_limit ({self.history_limit})",
                config_key="history_tail",
            )
        return self


class PromptSettings(BaseSettings):
    """Selects the system prompt generation.

    Attributes:
        version: Prompt generation (v1, v2 or v3).
    """

    model_config = SettingsConfigDict(
        env_prefix="COMMAND_BRIDGE_PROMPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    version: PromptVersion = Field(default=PromptVersion.V3, description="Prompt generation")


class Notification(BaseModel):
    """A configurable message shown to an actor.

    Attributes:
        type: Delivery channel.
        content: Chat or action bar text.
        title: Title text (TITLE only).
        subtitle: Subtitle text (TITLE only).
    """

    type: MessageType = MessageType.CHAT
    content: str = ""
    title: str = ""
    subtitle: str = ""


class MessageSettings(BaseSettings):
    """Notifications sent by the trigger listener and admin command."""

    model_config = SettingsConfigDict(
        env_prefix="COMMAND_BRIDGE_MESSAGES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    request_sent: Notification = Field(
        default_factory=lambda: Notification(content="§a[MatrixGPT] Request sent to the AI...")
    )
    gpt_enabled: Notification = Field(
        default_factory=lambda: Notification(content="§a[MatrixGPT] AI assistant enabled!")
    )
    gpt_disabled: Notification = Field(
        default_factory=lambda: Notification(content="§c[MatrixGPT] AI assistant disabled!")
    )
    reload_success: Notification = Field(
        default_factory=lambda: Notification(content="§a[MatrixGPT] Configuration reloaded!")
    )


class StorageSettings(BaseSettings):
    """Configuration for the interaction database.

    Attributes:
        database_path: Path to the SQLite database file.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMMAND_BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/command_bridge.db"),
        description="Path to SQLite database",
    )


class Settings(BaseSettings):
    """Main bridge settings aggregating all configuration domains.

    Attributes:
        debug: Enable debug mode.
        log_level: Application logging level.
        log_json: Emit JSON logs instead of console output.
        llm: LLM provider settings.
        trigger: Chat trigger settings.
        execution: Execution and retry settings.
        prompt: Prompt generation settings.
        messages: Notification settings.
        storage: Database settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMMAND_BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(default=False, description="JSON log output")

    llm: ProviderSettings = Field(default_factory=ProviderSettings)
    trigger: TriggerSettings = Field(default_factory=TriggerSettings)
    execution: ExecutionSettings = Field(default_factory=ExecutionSettings)
    prompt: PromptSettings = Field(default_factory=PromptSettings)
    messages: MessageSettings = Field(default_factory=MessageSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the bridge settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If required configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load bridge settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    The admin ``reload`` command calls this; the next request rebuilds
    its ProviderConfig from the fresh settings.
    """
    get_settings.cache_clear()


__all__ = [
    "ProviderSettings",
    "TriggerSettings",
    "ExecutionSettings",
    "PromptSettings",
    "Notification",
    "MessageSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
