"""Custom exception hierarchy for the command bridge.

This module defines the exception hierarchy used across the bridge. All
exceptions inherit from BridgeError, enabling unified error handling at the
orchestrator boundary while preserving domain-specific context.

Example:
    >>> from command_bridge.core.exceptions import ProviderError
    >>> raise ProviderError("Provider rejected the request", provider="openai", status_code=401)
"""

from __future__ import annotations

from typing import Any


class BridgeError(Exception):
    """Base exception for all command bridge errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Provider Gateway Exceptions
# =============================================================================


class ProviderGatewayError(BridgeError):
    """Base exception for all LLM provider interactions.

    Raised when a request to a remote LLM provider cannot be completed
    or its reply cannot be turned into text.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize gateway error with provider context.

        Args:
            message: Human-readable error description.
            provider: Name of the provider (e.g., 'openai', 'anthropic').
            model: Name of the model involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if provider:
            combined_details["provider"] = provider
        if model:
            combined_details["model"] = model
        self.provider = provider
        self.model = model
        super().__init__(message, details=combined_details)


class NetworkError(ProviderGatewayError):
    """Raised when the provider cannot be reached.

    Covers connect/read timeouts, DNS failures and refused connections.
    """


class ProviderError(ProviderGatewayError):
    """Raised when the provider answers with a non-2xx HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        provider: str | None = None,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize provider error with HTTP status context.

        Args:
            message: Human-readable error description.
            status_code: HTTP status code returned by the provider.
            provider: Name of the provider.
            model: Name of the model involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if status_code is not None:
            combined_details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, provider=provider, model=model, details=combined_details)


class ParseError(ProviderGatewayError):
    """Raised when a provider reply has an unexpected shape.

    This includes empty bodies, invalid JSON and replies missing the
    text field expected for that provider's wire format.
    """


# =============================================================================
# Execution Exceptions
# =============================================================================


class CommandExecutionFailure(BridgeError):
    """Raised when a dispatched command is classified as failed."""

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        attempt: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize execution failure with command context.

        Args:
            message: Human-readable error description.
            command: The command text that failed.
            attempt: Attempt number at which the failure occurred.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if command:
            combined_details["command"] = command
        if attempt is not None:
            combined_details["attempt"] = attempt
        super().__init__(message, details=combined_details)


class PersistenceError(BridgeError):
    """Raised when the interaction database cannot be read or written."""


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(BridgeError):
    """Raised when bridge configuration is invalid.

    This includes an unknown provider, a missing API key or a custom
    provider without a base URL.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(BridgeError):
    """Raised when inbound data fails validation."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "BridgeError",
    # Provider exceptions
    "ProviderGatewayError",
    "NetworkError",
    "ProviderError",
    "ParseError",
    # Execution exceptions
    "CommandExecutionFailure",
    "PersistenceError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
