"""Tests for host state models."""

from __future__ import annotations

import math
from uuid import uuid4

import pytest

from command_bridge.models.host import (
    Actor,
    DispatchResult,
    Location,
    PlayerState,
    StateSnapshot,
    WorldInfo,
)


@pytest.fixture
def steve() -> Actor:
    return Actor(id=uuid4(), name="Steve")


class TestLocation:
    """Tests for Location."""

    def test_block_coordinates_floor(self) -> None:
        """Test negative coordinates floor rather than truncate."""
        location = Location(x=-0.5, y=64.9, z=10.2)

        assert location.block == (-1, 64, 10)

    def test_distance_same_world(self) -> None:
        a = Location(x=0, y=0, z=0)
        b = Location(x=3, y=4, z=0)

        assert a.distance(b) == 5.0

    def test_distance_across_worlds_is_infinite(self) -> None:
        a = Location(world="world")
        b = Location(world="world_nether")

        assert math.isinf(a.distance(b))


class TestStateSnapshot:
    """Tests for before/after change detection."""

    def test_identical_snapshots_unchanged(self, steve: Actor) -> None:
        state = PlayerState(actor=steve)

        assert not state.snapshot().changed_since(state.snapshot(), position_threshold=1.0)

    @pytest.mark.parametrize(
        "changes",
        [
            {"health": 10.0},
            {"gamemode": "CREATIVE"},
            {"level": 5},
            {"location": Location(x=2.0)},
            {"location": Location(world="world_nether")},
        ],
    )
    def test_meaningful_changes_detected(self, steve: Actor, changes: dict) -> None:
        before = PlayerState(actor=steve).snapshot()
        after = PlayerState(actor=steve, **changes).snapshot()

        assert after.changed_since(before, position_threshold=1.0)

    def test_small_movement_ignored(self, steve: Actor) -> None:
        """Test movement within the threshold does not count."""
        before = PlayerState(actor=steve, location=Location(x=0.0)).snapshot()
        after = PlayerState(actor=steve, location=Location(x=0.9)).snapshot()

        assert not after.changed_since(before, position_threshold=1.0)

    def test_snapshot_fields(self, steve: Actor) -> None:
        state = PlayerState(actor=steve, health=7.5, level=3, gamemode="ADVENTURE")

        assert state.snapshot() == StateSnapshot(
            health=7.5,
            location=Location(),
            gamemode="ADVENTURE",
            level=3,
        )


class TestWorldInfo:
    """Tests for WorldInfo."""

    @pytest.mark.parametrize(("time", "is_day"), [(0, True), (12000, True), (12001, False), (18000, False)])
    def test_day_window(self, time: int, is_day: bool) -> None:
        assert WorldInfo(name="world", time=time).is_day is is_day


class TestDispatchResult:
    """Tests for DispatchResult."""

    def test_defaults_to_no_error(self) -> None:
        result = DispatchResult(accepted=True)

        assert result.error is None

    def test_is_immutable(self) -> None:
        result = DispatchResult(accepted=False, error="Unknown command")

        with pytest.raises(Exception):
            result.accepted = True  # type: ignore[misc]
