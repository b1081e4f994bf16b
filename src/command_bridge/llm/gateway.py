"""Provider gateway for LLM chat calls.

This module turns a system prompt and a conversation tail into the wire
request a provider expects, performs the HTTP call and decodes the reply
into plain text. Three wire shapes are supported:

1. OpenAI chat completions (OpenAI, Groq, Ollama, OpenRouter, custom URLs)
2. Anthropic messages
3. Gemini generateContent (model in the URL path, key as query parameter)

The gateway never retries. Retrying is driven by the execution supervisor,
which feeds failure context back into a fresh request.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import requests

from command_bridge.core.constants import ANTHROPIC_VERSION, HISTORY_TAIL
from command_bridge.core.exceptions import NetworkError, ParseError, ProviderError
from command_bridge.core.logging import get_logger
from command_bridge.models.enums import Provider, Role, WireShape
from command_bridge.models.provider import ProviderConfig, Turn

logger = get_logger(__name__)


# =============================================================================
# Wire Requests
# =============================================================================


@dataclass
class WireRequest:
    """A fully prepared HTTP request for one provider call."""

    url: str
    headers: dict[str, str]
    body: dict[str, Any]
    params: dict[str, str] = field(default_factory=dict)


def build_openai_request(
    config: ProviderConfig,
    system_prompt: str,
    turns: Sequence[Turn],
) -> WireRequest:
    """Build a chat-completions request with a leading system message."""
    messages = [{"role": "system", "content": system_prompt}]
    messages.extend(turn.as_message() for turn in turns)

    headers = {"Content-Type": "application/json"}
    if config.provider is not Provider.OLLAMA:
        headers["Authorization"] = f"Bearer {config.secret}"
    if config.provider is Provider.OPENROUTER and config.referer:
        headers["HTTP-Referer"] = config.referer

    return WireRequest(
        url=config.url,
        headers=headers,
        body={
            "model": config.model,
            "messages": messages,
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
        },
    )


def build_anthropic_request(
    config: ProviderConfig,
    system_prompt: str,
    turns: Sequence[Turn],
) -> WireRequest:
    """Build a messages request with the prompt in the ``system`` field."""
    return WireRequest(
        url=config.url,
        headers={
            "x-api-key": config.secret,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        },
        body={
            "model": config.model,
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
            "system": system_prompt,
            "messages": [turn.as_message() for turn in turns],
        },
    )


def build_gemini_request(
    config: ProviderConfig,
    system_prompt: str,
    turns: Sequence[Turn],
) -> WireRequest:
    """Build a generateContent request.

    Gemini has no system slot, so the prompt becomes a leading user turn,
    and assistant turns are relabelled ``model``.
    """
    contents = [{"role": "user", "parts": [{"text": system_prompt}]}]
    for turn in turns:
        role = "model" if turn.role is Role.ASSISTANT else "user"
        contents.append({"role": role, "parts": [{"text": turn.content}]})

    return WireRequest(
        url=config.url,
        headers={"Content-Type": "application/json"},
        params={"key": config.secret},
        body={
            "contents": contents,
            "generationConfig": {
                "temperature": config.temperature,
                "maxOutputTokens": config.max_tokens,
            },
        },
    )


_BUILDERS = {
    WireShape.OPENAI: build_openai_request,
    WireShape.ANTHROPIC: build_anthropic_request,
    WireShape.GEMINI: build_gemini_request,
}


def build_request(
    config: ProviderConfig,
    system_prompt: str,
    turns: Sequence[Turn],
) -> WireRequest:
    """Build the wire request for the configured provider."""
    return _BUILDERS[config.provider.wire_shape](config, system_prompt, turns)


# =============================================================================
# Wire Responses
# =============================================================================


def extract_text(shape: WireShape, payload: Any) -> str:
    """Pull the reply text out of a decoded provider response.

    Args:
        shape: Wire shape the response was produced with.
        payload: Decoded JSON body.

    Returns:
        The model's reply text.

    Raises:
        KeyError, IndexError, TypeError: If the expected path is missing.
    """
    if shape is WireShape.ANTHROPIC:
        text = payload["content"][0]["text"]
    elif shape is WireShape.GEMINI:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    else:
        text = payload["choices"][0]["message"]["content"]
    if not isinstance(text, str):
        raise TypeError(f"reply text is {type(text).__name__}, not str")
    return text


# =============================================================================
# Gateway
# =============================================================================


class ProviderGateway:
    """Sends one chat request to an LLM provider and returns its text.

    The gateway is stateless per call; the only thing it keeps is a
    ``requests.Session`` for connection reuse.

    Usage:
        >>> gateway = ProviderGateway()
        >>> text = gateway.send(config, system_prompt, history)
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        tail_length: int = HISTORY_TAIL,
    ) -> None:
        """Initialize the gateway.

        Args:
            session: HTTP session to use. A new one is created if omitted.
            tail_length: Number of most recent turns sent to the provider.
        """
        self.session = session or requests.Session()
        self.tail_length = tail_length

    def send(
        self,
        config: ProviderConfig,
        system_prompt: str,
        conversation: Sequence[Turn],
    ) -> str:
        """Send the conversation to the provider and return the reply text.

        Args:
            config: Provider settings for this call.
            system_prompt: Instructions placed in the provider's system slot.
            conversation: Conversation history; only the tail is sent.

        Returns:
            The reply text.

        Raises:
            NetworkError: On timeouts and connection failures.
            ProviderError: On a non-2xx HTTP status.
            ParseError: On an empty, non-JSON or wrongly shaped body.
        """
        provider = config.provider.value
        tail = list(conversation)[-self.tail_length:] if self.tail_length else []
        wire = build_request(config, system_prompt, tail)

        logger.debug(
            "Calling provider",
            provider=provider,
            model=config.model,
            turns=len(tail),
        )

        try:
            response = self.session.post(
                wire.url,
                headers=wire.headers,
                params=wire.params or None,
                json=wire.body,
                timeout=(config.connect_timeout, config.read_timeout),
            )
        except requests.Timeout as exc:
            raise NetworkError(
                f"Provider timed out: {exc}",
                provider=provider,
                model=config.model,
            ) from exc
        except requests.RequestException as exc:
            raise NetworkError(
                f"Provider unreachable: {exc}",
                provider=provider,
                model=config.model,
            ) from exc

        if not 200 <= response.status_code < 300:
            raise ProviderError(
                f"API error ({provider}): {response.status_code}",
                status_code=response.status_code,
                provider=provider,
                model=config.model,
            )

        body = response.text
        if not body or not body.strip():
            raise ParseError("Empty response", provider=provider, model=config.model)

        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise ParseError(
                f"Response is not valid JSON: {exc}",
                provider=provider,
                model=config.model,
            ) from exc

        try:
            text = extract_text(config.provider.wire_shape, payload)
        except (KeyError, IndexError, TypeError) as exc:
            raise ParseError(
                f"Response missing reply text: {exc}",
                provider=provider,
                model=config.model,
            ) from exc

        logger.info(
            "Provider replied",
            provider=provider,
            model=config.model,
            status=response.status_code,
            chars=len(text),
        )
        return text

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()


__all__ = [
    "WireRequest",
    "build_openai_request",
    "build_anthropic_request",
    "build_gemini_request",
    "build_request",
    "extract_text",
    "ProviderGateway",
]
