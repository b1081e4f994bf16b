"""Command Bridge - chat-triggered LLM assistant for game servers.

A player types a marked chat line; the bridge snapshots the server, asks a
configurable LLM provider what to do, and runs the commands it answers
with. Commands that fail are fed back to the model for correction, up to a
fixed number of attempts.

Example:
    >>> from command_bridge import BridgeRuntime, configure_logging
    >>>
    >>> configure_logging(level="INFO")
    >>> runtime = BridgeRuntime(host)  # host implements GameHost
    >>> runtime.start()
    >>>
    >>> # From the host's chat event
    >>> cancelled = runtime.on_chat(actor, "gpt, give me a diamond sword")

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas for directives, host state and providers.
    llm: Provider wire formats, the gateway and system prompts.
    engine: Context, history, parsing, execution and retries.
    host: The GameHost boundary, chat trigger and admin command.
    storage: SQLite enable flags and interaction history.
    runtime: Component wiring, threads and shutdown.
"""

from __future__ import annotations

# Core
from command_bridge.core.config import Settings, get_settings
from command_bridge.core.exceptions import BridgeError
from command_bridge.core.logging import configure_logging, get_logger

# Models
from command_bridge.models import (
    Actor,
    DelayedCommand,
    DispatchResult,
    ImmediateCommand,
    Message,
    Outcome,
    PlayerState,
    ProviderConfig,
)

# Engine
from command_bridge.engine import (
    CommandExecutionSupervisor,
    RequestOrchestrator,
    ResponseParser,
)

# Host boundary and runtime
from command_bridge.host import GameHost
from command_bridge.runtime import BridgeRuntime


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "BridgeError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Actor",
    "PlayerState",
    "DispatchResult",
    "Message",
    "ImmediateCommand",
    "DelayedCommand",
    "Outcome",
    "ProviderConfig",
    # Engine
    "ResponseParser",
    "CommandExecutionSupervisor",
    "RequestOrchestrator",
    # Host
    "GameHost",
    "BridgeRuntime",
]
