"""Application-wide constants for the command bridge.

This module defines provider endpoints, protocol constants and the
defaults used by the execution supervisor.
"""

from __future__ import annotations

# =============================================================================
# Provider Endpoints
# =============================================================================

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"
OLLAMA_URL = "http://localhost:11434/v1/chat/completions"
OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
GEMINI_URL_TEMPLATE = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

ANTHROPIC_VERSION = "2023-06-01"
"""Value sent in the ``anthropic-version`` header."""

DEFAULT_OPENROUTER_REFERER = "https://github.com/m4trixdev/matrixgpt"
"""Referer header OpenRouter uses to attribute traffic."""

# =============================================================================
# Network Limits
# =============================================================================

MAX_CONNECT_TIMEOUT_SECONDS = 30.0
"""Upper bound for the provider connect timeout."""

MAX_READ_TIMEOUT_SECONDS = 60.0
"""Upper bound for the provider read timeout."""

# =============================================================================
# Conversation Limits
# =============================================================================

HISTORY_LIMIT = 20
"""Maximum turns kept per actor before the oldest is evicted."""

HISTORY_TAIL = 10
"""Number of most recent turns sent to the provider."""

# =============================================================================
# Execution Defaults
# =============================================================================

MAX_ATTEMPTS = 3
"""Failed classifications allowed per request before giving up."""

SETTLE_DELAY_SECONDS = 0.25
"""Pause after dispatch before classifying the outcome (five host ticks)."""

POSITION_THRESHOLD = 1.0
"""Distance in blocks below which an actor is considered not to have moved."""

ERROR_DETAIL_MAX_LENGTH = 200
"""Captured log lines are truncated to this many characters."""

ERROR_KEYWORDS: tuple[str, ...] = (
    "error",
    "expected",
    "invalid",
    "unknown",
    "incorrect",
    "failed",
    "cannot",
    "unable",
    "no player",
    "not found",
    "syntax",
    "usage",
    "whitespace",
    "trailing",
    "argument",
    "there is no",
    "does not exist",
    "could not",
    "exception",
)
"""Lowercase fragments that mark a host log line as a command failure."""

# =============================================================================
# Chat Presentation
# =============================================================================

ASSISTANT_PREFIX = "§d[IA] §f"
"""Prefix prepended to every line the model sends to an actor."""

BRIDGE_PREFIX = "[MatrixGPT]"
"""Prefix for bridge-originated status and error messages."""

FALLBACK_COLOR = "&7"
"""Neutral colour marker used when the model reply has no MSG line."""

LITERAL_NEWLINE = "\\n"
"""Two-character sequence models use to break a message into lines."""
