"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from command_bridge.core.config import (
    ExecutionSettings,
    MessageSettings,
    PromptSettings,
    ProviderSettings,
    Settings,
    StorageSettings,
    TriggerSettings,
    clear_settings_cache,
    get_settings,
)
from command_bridge.core.exceptions import ConfigurationError
from command_bridge.models.enums import MessageType, PromptVersion, Provider


class TestProviderSettings:
    """Tests for ProviderSettings configuration."""

    def test_default_values(self) -> None:
        """Test defaults once a key is supplied."""
        settings = ProviderSettings(api_key="sk-test")

        assert settings.provider is Provider.OPENAI
        assert settings.model == "gpt-4"
        assert settings.max_tokens == 500
        assert settings.temperature == 0.7
        assert settings.base_url is None
        assert settings.connect_timeout_seconds == 30.0
        assert settings.read_timeout_seconds == 60.0

    def test_api_key_is_secret(self) -> None:
        """Test the key never shows up in the repr."""
        settings = ProviderSettings(api_key="sk-very-secret")

        assert "sk-very-secret" not in repr(settings)
        assert settings.api_key.get_secret_value() == "sk-very-secret"

    def test_missing_key_rejected(self) -> None:
        """Test providers that need a key refuse to load without one."""
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderSettings(provider="GROQ")

        assert exc_info.value.details["config_key"] == "api_key"

    def test_ollama_needs_no_key(self) -> None:
        """Test the local provider loads without a key."""
        settings = ProviderSettings(provider="ollama")

        assert settings.provider is Provider.OLLAMA
        assert settings.api_key is None

    def test_custom_requires_base_url(self) -> None:
        """Test CUSTOM cannot be selected without an endpoint."""
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderSettings(provider="CUSTOM", api_key="k")

        assert "base_url" in str(exc_info.value)

    def test_blank_base_url_is_none(self) -> None:
        """Test an empty override means no override."""
        settings = ProviderSettings(api_key="k", base_url="   ")

        assert settings.base_url is None

    def test_provider_name_case_insensitive(self) -> None:
        """Test provider names are normalised."""
        settings = ProviderSettings(provider="  gemini ", api_key="k")

        assert settings.provider is Provider.GEMINI

    def test_timeouts_are_bounded(self) -> None:
        """Test timeouts above the ceilings are rejected."""
        with pytest.raises(Exception):
            ProviderSettings(api_key="k", connect_timeout_seconds=45)
        with pytest.raises(Exception):
            ProviderSettings(api_key="k", read_timeout_seconds=120)

    def test_from_environment(self, mock_env_vars: dict[str, str]) -> None:
        """Test values are read from prefixed environment variables."""
        settings = ProviderSettings()

        assert settings.provider is Provider.ANTHROPIC
        assert settings.model == "claude-test"
        assert settings.api_key.get_secret_value() == "test-anthropic-key"


class TestExecutionSettings:
    """Tests for ExecutionSettings configuration."""

    def test_default_values(self) -> None:
        """Test default execution settings."""
        settings = ExecutionSettings()

        assert settings.max_attempts == 3
        assert settings.settle_delay_seconds == 0.25
        assert settings.position_threshold == 1.0
        assert settings.error_detail_max_length == 200
        assert settings.history_limit == 20
        assert settings.history_tail == 10
        assert "unknown command" in settings.error_keywords

    def test_tail_must_fit_history(self) -> None:
        """Test history_tail cannot exceed history_limit."""
        with pytest.raises(ConfigurationError) as exc_info:
            ExecutionSettings(history_limit=5, history_tail=10)

        assert "history_tail" in str(exc_info.value)


class TestSmallSettings:
    """Tests for the trigger, prompt, message and storage settings."""

    def test_trigger_marker_default(self) -> None:
        assert TriggerSettings().marker == "gpt,"

    def test_trigger_marker_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COMMAND_BRIDGE_TRIGGER_MARKER", "ai:")

        assert TriggerSettings().marker == "ai:"

    def test_prompt_version_default(self) -> None:
        assert PromptSettings().version is PromptVersion.V3

    def test_prompt_version_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COMMAND_BRIDGE_PROMPT_VERSION", "v1")

        assert PromptSettings().version is PromptVersion.V1

    def test_message_defaults_are_chat(self) -> None:
        messages = MessageSettings()

        assert messages.request_sent.type is MessageType.CHAT
        assert "Request sent" in messages.request_sent.content

    def test_storage_path(self, tmp_path: Path) -> None:
        settings = StorageSettings(database_path=tmp_path / "x.db")

        assert settings.database_path == tmp_path / "x.db"


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default settings initialization."""
        monkeypatch.setenv("COMMAND_BRIDGE_API_KEY", "test-key")

        settings = Settings()

        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.llm.api_key.get_secret_value() == "test-key"
        assert settings.trigger.marker == "gpt,"

    def test_debug_mode(self, mock_env_vars: dict[str, str]) -> None:
        """Test debug mode from environment."""
        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"

    def test_only_read_fields_declared(self) -> None:
        """Test that no unused top-level fields are declared."""
        assert set(Settings.model_fields) == {
            "debug",
            "log_level",
            "log_json",
            "llm",
            "trigger",
            "execution",
            "prompt",
            "messages",
            "storage",
        }


class TestSettingsSingleton:
    """Tests for settings singleton behavior."""

    def test_get_settings_returns_same_instance(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that get_settings returns cached instance."""
        monkeypatch.setenv("COMMAND_BRIDGE_API_KEY", "test-key")

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_clear_cache_reloads(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that clearing the cache picks up changed variables."""
        monkeypatch.setenv("COMMAND_BRIDGE_API_KEY", "test-key")
        monkeypatch.setenv("COMMAND_BRIDGE_MODEL", "gpt-4")
        settings1 = get_settings()

        monkeypatch.setenv("COMMAND_BRIDGE_MODEL", "gpt-4o-mini")
        clear_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2
        assert settings2.llm.model == "gpt-4o-mini"

    def test_missing_key_surfaces_configuration_error(self) -> None:
        """Test the singleton reports missing credentials clearly."""
        with pytest.raises(ConfigurationError):
            get_settings()
