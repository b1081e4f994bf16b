"""Pydantic models shared across the command bridge.

Exports:
    Enums: Provider, WireShape, Role, DirectiveKind, Outcome, Executor,
        MessageType, PromptVersion.
    Directives: Message, ImmediateCommand, DelayedCommand, Directive.
    Host state: Actor, Location, PlayerState, StateSnapshot, ServerVitals,
        PluginCommand, PluginInfo, WorldInfo, DispatchResult.
    Provider: Turn, ProviderConfig.
"""

from __future__ import annotations

from command_bridge.models.directives import (
    DelayedCommand,
    Directive,
    ImmediateCommand,
    Message,
)
from command_bridge.models.enums import (
    DirectiveKind,
    Executor,
    MessageType,
    Outcome,
    PromptVersion,
    Provider,
    Role,
    WireShape,
)
from command_bridge.models.host import (
    Actor,
    DispatchResult,
    Location,
    PlayerState,
    PluginCommand,
    PluginInfo,
    ServerVitals,
    StateSnapshot,
    WorldInfo,
)
from command_bridge.models.provider import ProviderConfig, Turn


__all__ = [
    # Enums
    "Provider",
    "WireShape",
    "Role",
    "DirectiveKind",
    "Outcome",
    "Executor",
    "MessageType",
    "PromptVersion",
    # Directives
    "Message",
    "ImmediateCommand",
    "DelayedCommand",
    "Directive",
    # Host state
    "Actor",
    "Location",
    "PlayerState",
    "StateSnapshot",
    "ServerVitals",
    "PluginCommand",
    "PluginInfo",
    "WorldInfo",
    "DispatchResult",
    # Provider
    "Turn",
    "ProviderConfig",
]
