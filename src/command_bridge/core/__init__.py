"""Core module providing configuration, logging, and base exceptions.

This module serves as the foundation for the command bridge, providing
the infrastructure used by the engine, the provider gateway and storage.

Exports:
    Exceptions:
        BridgeError: Base exception for all bridge errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Data validation errors.
        ProviderGatewayError: Base for provider call failures.

    Configuration:
        Settings: Main bridge settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from command_bridge.core.config import (
    ExecutionSettings,
    MessageSettings,
    Notification,
    PromptSettings,
    ProviderSettings,
    Settings,
    StorageSettings,
    TriggerSettings,
    clear_settings_cache,
    get_settings,
)
from command_bridge.core.exceptions import (
    BridgeError,
    CommandExecutionFailure,
    ConfigurationError,
    NetworkError,
    ParseError,
    PersistenceError,
    ProviderError,
    ProviderGatewayError,
    ValidationError,
)
from command_bridge.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "BridgeError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Provider exceptions
    "ProviderGatewayError",
    "NetworkError",
    "ProviderError",
    "ParseError",
    # Execution and storage exceptions
    "CommandExecutionFailure",
    "PersistenceError",
    # Configuration
    "Settings",
    "ProviderSettings",
    "TriggerSettings",
    "ExecutionSettings",
    "PromptSettings",
    "MessageSettings",
    "Notification",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
