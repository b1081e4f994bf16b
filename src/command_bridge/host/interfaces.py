"""Abstract boundary between the bridge and the game host.

The host owns the world: it dispatches commands, delivers messages and
reports state. Everything that touches host objects must run on the host's
main thread, so the bridge hands work over through ``run_on_main_thread``
and awaits the returned future.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Future
from typing import TypeVar
from uuid import UUID

from command_bridge.models.enums import Executor
from command_bridge.models.host import (
    DispatchResult,
    PlayerState,
    PluginInfo,
    ServerVitals,
    WorldInfo,
)

T = TypeVar("T")


class GameHost(ABC):
    """Operations the bridge needs from the game server.

    Implementations adapt a concrete server runtime. Every method other
    than ``run_on_main_thread`` is only called from inside a callable
    handed to ``run_on_main_thread``.
    """

    # -------------------------------------------------------------------------
    # Threading
    # -------------------------------------------------------------------------

    @abstractmethod
    def run_on_main_thread(self, fn: Callable[[], T]) -> Future[T]:
        """Schedule ``fn`` on the host's main thread.

        Returns:
            A future resolved with ``fn``'s result or exception.
        """

    # -------------------------------------------------------------------------
    # Side effects (main thread only)
    # -------------------------------------------------------------------------

    @abstractmethod
    def dispatch_command(self, command: str, executor: Executor) -> bool | DispatchResult:
        """Dispatch ``command`` (no leading slash) as ``executor``.

        Returns:
            Whether the dispatcher accepted the command, or a
            DispatchResult when the host can say why it failed.
        """

    @abstractmethod
    def send_message(self, actor_id: UUID, text: str) -> None:
        """Send a chat line to one actor."""

    def send_title(self, actor_id: UUID, title: str, subtitle: str) -> None:
        """Show an on-screen title; hosts without titles fall back to chat."""
        self.send_message(actor_id, f"{title} {subtitle}".strip())

    def send_action_bar(self, actor_id: UUID, text: str) -> None:
        """Show an action bar line; hosts without one fall back to chat."""
        self.send_message(actor_id, text)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @abstractmethod
    def is_online(self, actor_id: UUID) -> bool:
        """Whether the actor is still connected."""

    @abstractmethod
    def player_state(self, actor_id: UUID) -> PlayerState | None:
        """Live attributes of a connected actor, or None if offline."""

    def statistic(self, actor_id: UUID, name: str) -> int:
        """Read a play statistic (PLAY_ONE_MINUTE, DEATHS, MOB_KILLS).

        Raises:
            LookupError: If the host does not track the statistic.
        """
        raise LookupError(name)

    @abstractmethod
    def server_vitals(self) -> ServerVitals:
        """Identity and performance figures of the server."""

    @abstractmethod
    def plugins(self) -> list[PluginInfo]:
        """Every installed plugin, enabled or not."""

    @abstractmethod
    def online_players(self) -> list[PlayerState]:
        """Every connected actor."""

    @abstractmethod
    def worlds(self) -> list[WorldInfo]:
        """Every loaded world."""

    def log_sources(self) -> list[str]:
        """Names of stdlib loggers that carry command output.

        The default is the root logger, which sees every record that
        propagates.
        """
        return [""]


async def call_on_main(host: GameHost, fn: Callable[[], T]) -> T:
    """Run ``fn`` on the host's main thread and await its result."""
    return await asyncio.wrap_future(host.run_on_main_thread(fn))


__all__ = ["GameHost", "call_on_main"]
