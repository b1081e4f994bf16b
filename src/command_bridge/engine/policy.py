"""Who a model-issued command runs as.

The requesting actor is treated as the server administrator and commands
run with console privileges regardless of the actor's own permissions.
This is the only place that decision is made; tightening it means changing
``resolve_executor`` and nothing in the execution state machine.
"""

from __future__ import annotations

from command_bridge.models.enums import Executor
from command_bridge.models.host import Actor


def resolve_executor(actor: Actor, command: str) -> Executor:
    """Choose the identity ``command`` is dispatched under for ``actor``."""
    return Executor.CONSOLE


__all__ = ["resolve_executor"]
