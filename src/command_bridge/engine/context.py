"""Server snapshot text sent with every request.

The context is rebuilt from the host on every request, in a fixed order:

1. Server vitals
2. Plugin inventory (anything absent must be treated as not installed)
3. The requesting actor's live attributes
4. Every connected actor
5. Loaded worlds with time of day and weather
6. Learned command feedback

Only the plugin inventory is cached, and only for a short TTL. Nothing in
here raises: missing data renders as neutral defaults.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from uuid import UUID

from command_bridge.core.logging import get_logger
from command_bridge.engine.ledger import CommandFeedbackLedger
from command_bridge.host.interfaces import GameHost
from command_bridge.models.host import Actor, PlayerState, PluginInfo, ServerVitals, WorldInfo

logger = get_logger(__name__)

TICKS_PER_MINUTE = 20 * 60


# =============================================================================
# Plugin Inventory Cache
# =============================================================================


class PluginInventory:
    """Read-through cache of the host's plugin list.

    A failed refresh keeps the previous inventory and is only logged.
    """

    def __init__(
        self,
        host: GameHost,
        *,
        ttl_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.host = host
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._plugins: list[PluginInfo] = []
        self._loaded_at: float | None = None
        self._lock = threading.Lock()

    def get(self) -> list[PluginInfo]:
        with self._lock:
            now = self._clock()
            stale = self._loaded_at is None or now - self._loaded_at >= self.ttl_seconds
            if stale:
                try:
                    self._plugins = list(self.host.plugins())
                    self._loaded_at = now
                except Exception as exc:
                    logger.warning("Plugin inventory refresh failed", error=str(exc))
            return list(self._plugins)

    def invalidate(self) -> None:
        with self._lock:
            self._loaded_at = None


# =============================================================================
# Section Renderers
# =============================================================================


def render_server(vitals: ServerVitals) -> str:
    return "\n".join(
        [
            "=== SERVER ===",
            f"Name: {vitals.name}",
            f"MC Version: {vitals.version}",
            f"Full Version: {vitals.full_version}",
            f"MOTD: {vitals.motd}",
            f"Max Players: {vitals.max_players}",
            f"Online: {vitals.online_players}",
            f"TPS: {vitals.tps:.2f}",
            f"Memory: {vitals.used_memory_mb}MB / {vitals.max_memory_mb}MB",
            f"Online Mode: {vitals.online_mode}",
            f"Port: {vitals.port}",
        ]
    )


def render_plugins(plugins: list[PluginInfo]) -> str:
    lines = [
        f"=== PLUGINS ({len(plugins)}) ===",
        "Only these plugins are installed. Anything not listed here is NOT installed.",
    ]
    for plugin in plugins:
        status = "[ON]" if plugin.enabled else "[OFF]"
        header = f"{status} {plugin.name}"
        if plugin.version:
            header += f" v{plugin.version}"
        if plugin.authors:
            header += f" by {', '.join(plugin.authors)}"
        lines.append(header)
        for command in plugin.commands:
            entry = f"  /{command.name}"
            if command.aliases:
                entry += f" (aliases: {', '.join(command.aliases)})"
            if command.usage:
                entry += f" usage: {command.usage}"
            if command.permission:
                entry += f" permission: {command.permission}"
            lines.append(entry)
    return "\n".join(lines)


def render_player(state: PlayerState, statistics: dict[str, int]) -> str:
    x, y, z = state.location.block
    armor = ", ".join(state.armor) or "None"
    return "\n".join(
        [
            f"=== CURRENT PLAYER: {state.actor.name} ===",
            f"UUID: {state.actor.id}",
            f"Health: {int(state.health)}/{int(state.max_health)}",
            f"Hunger: {state.food_level}/20",
            f"XP Level: {state.level}",
            f"Gamemode: {state.gamemode}",
            f"Op: {state.is_op}",
            f"Flying: {state.flying}",
            f"Ping: {state.ping_ms}ms",
            "",
            "=== LOCATION ===",
            f"World: {state.location.world} ({state.environment})",
            f"Coordinates: X={x}, Y={y}, Z={z}",
            f"Biome: {state.biome}",
            "",
            "=== INVENTORY ===",
            f"Main hand: {state.main_hand}",
            f"Armor: {armor}",
            "",
            "=== STATISTICS ===",
            f"Play time: {statistics['play_minutes']} minutes",
            f"Deaths: {statistics['deaths']}",
            f"Mob kills: {statistics['mob_kills']}",
        ]
    )


def render_roster(players: list[PlayerState]) -> str:
    if not players:
        return "=== NO PLAYERS ONLINE ==="
    lines = [f"=== ALL ONLINE PLAYERS ({len(players)}) ==="]
    for player in players:
        x, y, z = player.location.block
        lines.append(
            f"{player.actor.name}: Health={int(player.health)} | {player.gamemode} | "
            f"{player.location.world} {x},{y},{z} | Ping={player.ping_ms}ms"
        )
    return "\n".join(lines)


def render_worlds(worlds: list[WorldInfo]) -> str:
    lines = [f"=== WORLDS ({len(worlds)}) ==="]
    for world in worlds:
        lines.append(
            f"{world.name}: {world.environment} | {'DAY' if world.is_day else 'NIGHT'} | "
            f"{'STORM' if world.storm else 'CLEAR'} | Players: {world.player_count}"
        )
    return "\n".join(lines)


# =============================================================================
# Builder
# =============================================================================


class ContextSnapshotBuilder:
    """Assembles the per-request server snapshot.

    Must be called on the host's main thread, since it reads live host
    objects.
    """

    def __init__(
        self,
        host: GameHost,
        ledger: CommandFeedbackLedger,
        plugins: PluginInventory | None = None,
    ) -> None:
        self.host = host
        self.ledger = ledger
        self.plugins = plugins or PluginInventory(host)

    def _stat(self, actor_id: UUID, name: str) -> int:
        try:
            return int(self.host.statistic(actor_id, name))
        except Exception:
            return 0

    def _statistics(self, actor_id: UUID) -> dict[str, int]:
        return {
            "play_minutes": self._stat(actor_id, "PLAY_ONE_MINUTE") // TICKS_PER_MINUTE,
            "deaths": self._stat(actor_id, "DEATHS"),
            "mob_kills": self._stat(actor_id, "MOB_KILLS"),
        }

    def build_context(self, actor: Actor) -> str:
        """Render the full snapshot for ``actor``."""
        state = self.host.player_state(actor.id) or PlayerState(actor=actor)
        sections = [
            render_server(self.host.server_vitals()),
            render_plugins(self.plugins.get()),
            render_player(state, self._statistics(actor.id)),
            render_roster(self.host.online_players()),
            render_worlds(self.host.worlds()),
            self.ledger.render(),
        ]
        return "\n\n".join(sections)


__all__ = [
    "PluginInventory",
    "ContextSnapshotBuilder",
    "render_server",
    "render_plugins",
    "render_player",
    "render_roster",
    "render_worlds",
]
