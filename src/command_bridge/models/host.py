"""Host state models for the command bridge.

These models describe what the game host exposes to the bridge: the
requesting actor, live player attributes, the plugin inventory, loaded
worlds and server vitals. They are plain read-only snapshots; the bridge
never mutates host objects through them.

Models:
    Actor: The connected user that triggered a request.
    Location: A world position.
    PlayerState: Live attributes of a connected player.
    StateSnapshot: Before/after capture used to detect silent failures.
    ServerVitals: Identity and performance figures of the server.
    PluginCommand: A sub-command registered by a plugin.
    PluginInfo: One installed plugin.
    WorldInfo: One loaded world/zone.
    DispatchResult: Explicit outcome reported by a command dispatch.
"""

from __future__ import annotations

import math
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Actors
# =============================================================================


class Actor(BaseModel):
    """The connected user that triggered a request.

    Attributes:
        id: Stable unique identifier.
        name: Display name used in prompts and command examples.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str


class Location(BaseModel):
    """A position inside a world."""

    model_config = ConfigDict(frozen=True)

    world: str = "world"
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @property
    def block(self) -> tuple[int, int, int]:
        """Integer block coordinates."""
        return math.floor(self.x), math.floor(self.y), math.floor(self.z)

    def distance(self, other: Location) -> float:
        """Euclidean distance to another location.

        Locations in different worlds are infinitely far apart.
        """
        if self.world != other.world:
            return math.inf
        return math.dist((self.x, self.y, self.z), (other.x, other.y, other.z))


class PlayerState(BaseModel):
    """Live attributes of a connected player.

    Attributes:
        actor: The player identity.
        health: Current health.
        max_health: Maximum health.
        food_level: Hunger bar (0-20).
        level: Experience level.
        gamemode: Current game mode name.
        is_op: Whether the player is a server operator.
        flying: Whether the player is flying.
        ping_ms: Network latency.
        location: Current position.
        environment: World environment (NORMAL, NETHER, THE_END).
        biome: Biome key at the player's position.
        main_hand: Item in the main hand with its amount.
        armor: Names of equipped armour pieces.
    """

    model_config = ConfigDict(frozen=True)

    actor: Actor
    health: float = 20.0
    max_health: float = 20.0
    food_level: int = 20
    level: int = 0
    gamemode: str = "SURVIVAL"
    is_op: bool = False
    flying: bool = False
    ping_ms: int = 0
    location: Location = Field(default_factory=Location)
    environment: str = "NORMAL"
    biome: str = "plains"
    main_hand: str = "AIR x0"
    armor: list[str] = Field(default_factory=list)

    def snapshot(self) -> StateSnapshot:
        """Capture the attributes used for change detection."""
        return StateSnapshot(
            health=self.health,
            location=self.location,
            gamemode=self.gamemode,
            level=self.level,
        )


class StateSnapshot(BaseModel):
    """Observable actor attributes captured around a dispatch.

    Only lives across one execution attempt.
    """

    model_config = ConfigDict(frozen=True)

    health: float
    location: Location
    gamemode: str
    level: int

    def changed_since(self, before: StateSnapshot, *, position_threshold: float) -> bool:
        """Whether this snapshot differs meaningfully from ``before``.

        Args:
            before: Snapshot taken before the dispatch.
            position_threshold: Movement at or below this is ignored.

        Returns:
            True if health, game mode or level changed, or the actor
            moved further than the threshold.
        """
        return (
            self.health != before.health
            or self.location.distance(before.location) > position_threshold
            or self.gamemode != before.gamemode
            or self.level != before.level
        )


# =============================================================================
# Server Inventory
# =============================================================================


class ServerVitals(BaseModel):
    """Identity and performance figures of the server."""

    model_config = ConfigDict(frozen=True)

    name: str = "server"
    version: str = "unknown"
    full_version: str = "unknown"
    motd: str = ""
    max_players: int = 0
    online_players: int = 0
    tps: float = 20.0
    used_memory_mb: int = 0
    max_memory_mb: int = 0
    online_mode: bool = True
    port: int = 25565


class PluginCommand(BaseModel):
    """A sub-command registered by a plugin."""

    model_config = ConfigDict(frozen=True)

    name: str
    aliases: list[str] = Field(default_factory=list)
    usage: str = ""
    permission: str | None = None
    description: str = ""


class PluginInfo(BaseModel):
    """One installed plugin as reported by the host."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str = ""
    enabled: bool = True
    authors: list[str] = Field(default_factory=list)
    commands: list[PluginCommand] = Field(default_factory=list)


class WorldInfo(BaseModel):
    """One loaded world/zone."""

    model_config = ConfigDict(frozen=True)

    name: str
    environment: str = "NORMAL"
    time: int = 0
    storm: bool = False
    player_count: int = 0

    @property
    def is_day(self) -> bool:
        """Day spans ticks 0 through 12000."""
        return 0 <= self.time <= 12000


# =============================================================================
# Dispatch
# =============================================================================


class DispatchResult(BaseModel):
    """Outcome a host reports for a dispatched command.

    Hosts that only know whether the dispatcher accepted the command
    return a plain bool instead; hosts that can tell why a command
    failed fill in ``error`` so log scanning is not needed.
    """

    model_config = ConfigDict(frozen=True)

    accepted: bool
    error: str | None = None


__all__ = [
    "Actor",
    "Location",
    "PlayerState",
    "StateSnapshot",
    "ServerVitals",
    "PluginCommand",
    "PluginInfo",
    "WorldInfo",
    "DispatchResult",
]
