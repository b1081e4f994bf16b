"""Per-request provider configuration and conversation turns."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from command_bridge.core.constants import (
    ANTHROPIC_URL,
    GEMINI_URL_TEMPLATE,
    GROQ_URL,
    OLLAMA_URL,
    OPENAI_URL,
    OPENROUTER_URL,
)
from command_bridge.models.enums import Provider, Role


if TYPE_CHECKING:
    from command_bridge.core.config import Settings


DEFAULT_URLS: dict[Provider, str] = {
    Provider.OPENAI: OPENAI_URL,
    Provider.ANTHROPIC: ANTHROPIC_URL,
    Provider.GROQ: GROQ_URL,
    Provider.OLLAMA: OLLAMA_URL,
    Provider.OPENROUTER: OPENROUTER_URL,
    Provider.GEMINI: GEMINI_URL_TEMPLATE,
}


class Turn(BaseModel):
    """One conversation turn."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    def as_message(self) -> dict[str, str]:
        """Render as an OpenAI/Anthropic style message dict."""
        return {"role": self.role.value, "content": self.content}


class ProviderConfig(BaseModel):
    """Immutable provider settings for a single LLM call.

    Built from the current settings on every call so a configuration
    reload applies to the next request.

    Attributes:
        provider: Provider to call.
        api_key: Provider credential (absent for Ollama).
        model: Model identifier.
        max_tokens: Maximum generated tokens.
        temperature: Sampling temperature.
        base_url_override: Endpoint replacing the provider default.
        connect_timeout: Connect timeout in seconds.
        read_timeout: Read timeout in seconds.
        referer: Referer header for OpenRouter.
    """

    model_config = ConfigDict(frozen=True)

    provider: Provider
    api_key: SecretStr | None = None
    model: str
    max_tokens: int = 500
    temperature: float = 0.7
    base_url_override: str | None = None
    connect_timeout: float = Field(default=30.0, gt=0, le=30.0)
    read_timeout: float = Field(default=60.0, gt=0, le=60.0)
    referer: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ProviderConfig:
        """Build the config for one call from the current settings."""
        llm = settings.llm
        return cls(
            provider=llm.provider,
            api_key=llm.api_key,
            model=llm.model,
            max_tokens=llm.max_tokens,
            temperature=llm.temperature,
            base_url_override=llm.base_url,
            connect_timeout=llm.connect_timeout_seconds,
            read_timeout=llm.read_timeout_seconds,
            referer=llm.openrouter_referer,
        )

    @property
    def url(self) -> str:
        """Endpoint for this call, with the model filled in for Gemini."""
        if self.base_url_override:
            template = self.base_url_override
        else:
            template = DEFAULT_URLS[self.provider]
        if self.provider is Provider.GEMINI:
            return template.replace("{model}", self.model)
        return template

    @property
    def secret(self) -> str:
        """The API key in clear text, or an empty string."""
        return self.api_key.get_secret_value() if self.api_key else ""


__all__ = [
    "DEFAULT_URLS",
    "Turn",
    "ProviderConfig",
]
