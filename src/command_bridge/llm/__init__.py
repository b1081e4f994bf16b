"""LLM provider access: wire formats, the gateway and system prompts."""

from __future__ import annotations

from command_bridge.llm.gateway import ProviderGateway, WireRequest, build_request, extract_text
from command_bridge.llm.prompts import PromptProfile, build_retry_request, get_profile


__all__ = [
    "ProviderGateway",
    "WireRequest",
    "build_request",
    "extract_text",
    "PromptProfile",
    "get_profile",
    "build_retry_request",
]
