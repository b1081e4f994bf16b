"""Enumeration types for the command bridge.

This module defines the provider registry, conversation roles, directive
kinds, execution outcomes and notification types shared by the engine,
the gateway and the host boundary.
"""

from __future__ import annotations

from enum import StrEnum


class Provider(StrEnum):
    """Supported LLM providers.

    Each provider maps onto one of three wire shapes: the OpenAI-style
    chat completions shape, the Anthropic messages shape or the Gemini
    generateContent shape.
    """

    OPENAI = "OPENAI"
    ANTHROPIC = "ANTHROPIC"
    GROQ = "GROQ"
    OLLAMA = "OLLAMA"
    OPENROUTER = "OPENROUTER"
    GEMINI = "GEMINI"
    CUSTOM = "CUSTOM"

    @property
    def wire_shape(self) -> WireShape:
        """Get the wire shape this provider speaks.

        Returns:
            The WireShape used to encode requests and decode replies.
        """
        if self is Provider.ANTHROPIC:
            return WireShape.ANTHROPIC
        if self is Provider.GEMINI:
            return WireShape.GEMINI
        return WireShape.OPENAI

    @property
    def requires_api_key(self) -> bool:
        """Whether the provider needs an API key (the local Ollama does not)."""
        return self is not Provider.OLLAMA


class WireShape(StrEnum):
    """Request/response wire formats understood by the gateway."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


class Role(StrEnum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class DirectiveKind(StrEnum):
    """Kinds of instruction a model reply can carry."""

    MESSAGE = "message"
    IMMEDIATE_COMMAND = "immediate_command"
    DELAYED_COMMAND = "delayed_command"


class Outcome(StrEnum):
    """Classification of a single command execution attempt."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    EXHAUSTED = "exhausted"
    DROPPED = "dropped"


class Executor(StrEnum):
    """Identity a command is dispatched under."""

    CONSOLE = "console"
    ACTOR = "actor"


class MessageType(StrEnum):
    """How a configured notification is shown to an actor."""

    CHAT = "CHAT"
    TITLE = "TITLE"
    ACTIONBAR = "ACTIONBAR"


class PromptVersion(StrEnum):
    """Generations of the system prompt.

    v1 is the base administrator prompt, v2 adds abbreviation guidance
    and v3 adds strict plugin awareness.
    """

    V1 = "v1"
    V2 = "v2"
    V3 = "v3"


__all__ = [
    "Provider",
    "WireShape",
    "Role",
    "DirectiveKind",
    "Outcome",
    "Executor",
    "MessageType",
    "PromptVersion",
]
