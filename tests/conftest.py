"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the command bridge test suite: a fake game host, a scripted provider
gateway and explicit settings that never touch the real environment.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

import pytest

from command_bridge.core.config import (
    ExecutionSettings,
    ProviderSettings,
    Settings,
    StorageSettings,
)
from command_bridge.host.interfaces import GameHost
from command_bridge.models.enums import Executor
from command_bridge.models.host import (
    Actor,
    DispatchResult,
    Location,
    PlayerState,
    PluginInfo,
    ServerVitals,
    WorldInfo,
)
from command_bridge.models.provider import ProviderConfig, Turn


if TYPE_CHECKING:
    from collections.abc import Generator


CONSOLE_LOGGER = "tests.host.console"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from command_bridge.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test away from any real .env file or bridge variables."""
    import os

    for key in list(os.environ):
        if key.startswith("COMMAND_BRIDGE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "COMMAND_BRIDGE_PROVIDER": "anthropic",
        "COMMAND_BRIDGE_API_KEY": "test-anthropic-key",
        "COMMAND_BRIDGE_MODEL": "claude-test",
        "COMMAND_BRIDGE_DEBUG": "true",
        "COMMAND_BRIDGE_LOG_LEVEL": "DEBUG",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Explicit settings with a test key, no settle delay and a temp database."""
    return Settings(
        llm=ProviderSettings(api_key="test-key", model="gpt-test"),
        execution=ExecutionSettings(settle_delay_seconds=0),
        storage=StorageSettings(database_path=tmp_path / "bridge.db"),
    )


@pytest.fixture
def provider_config() -> ProviderConfig:
    """OpenAI-shaped provider config with a test key."""
    return ProviderConfig(provider="OPENAI", api_key="sk-test", model="gpt-test")


# =============================================================================
# Host Fixtures
# =============================================================================


class FakeHost(GameHost):
    """In-memory GameHost.

    ``run_on_main_thread`` runs the callable immediately on the calling
    thread. Command handling is scripted through ``handler``, which gets
    the command text and may log to the console logger, mutate
    ``states`` or return a DispatchResult.
    """

    def __init__(self) -> None:
        self.states: dict[UUID, PlayerState] = {}
        self.online: set[UUID] = set()
        self.messages: list[tuple[UUID, str]] = []
        self.titles: list[tuple[UUID, str, str]] = []
        self.action_bars: list[tuple[UUID, str]] = []
        self.dispatched: list[tuple[str, Executor]] = []
        self.plugin_list: list[PluginInfo] = []
        self.world_list: list[WorldInfo] = [WorldInfo(name="world", time=1000)]
        self.stats: dict[str, int] = {}
        self.vitals = ServerVitals(name="Test Server", version="1.20.4")
        self.handler: Callable[[str], bool | DispatchResult] = lambda command: True
        self.console = logging.getLogger(CONSOLE_LOGGER)
        self.plugin_calls = 0

    def join(self, actor: Actor, **state: Any) -> PlayerState:
        player = PlayerState(actor=actor, **state)
        self.states[actor.id] = player
        self.online.add(actor.id)
        return player

    def leave(self, actor_id: UUID) -> None:
        self.online.discard(actor_id)
        self.states.pop(actor_id, None)

    def run_on_main_thread(self, fn: Callable[[], Any]) -> Future[Any]:
        future: Future[Any] = Future()
        try:
            future.set_result(fn())
        except Exception as exc:
            future.set_exception(exc)
        return future

    def dispatch_command(self, command: str, executor: Executor) -> bool | DispatchResult:
        self.dispatched.append((command, executor))
        return self.handler(command)

    def send_message(self, actor_id: UUID, text: str) -> None:
        self.messages.append((actor_id, text))

    def send_title(self, actor_id: UUID, title: str, subtitle: str) -> None:
        self.titles.append((actor_id, title, subtitle))

    def send_action_bar(self, actor_id: UUID, text: str) -> None:
        self.action_bars.append((actor_id, text))

    def is_online(self, actor_id: UUID) -> bool:
        return actor_id in self.online

    def player_state(self, actor_id: UUID) -> PlayerState | None:
        return self.states.get(actor_id) if actor_id in self.online else None

    def statistic(self, actor_id: UUID, name: str) -> int:
        if name not in self.stats:
            raise LookupError(name)
        return self.stats[name]

    def server_vitals(self) -> ServerVitals:
        return self.vitals

    def plugins(self) -> list[PluginInfo]:
        self.plugin_calls += 1
        return list(self.plugin_list)

    def online_players(self) -> list[PlayerState]:
        return [self.states[actor_id] for actor_id in self.online if actor_id in self.states]

    def worlds(self) -> list[WorldInfo]:
        return list(self.world_list)

    def log_sources(self) -> list[str]:
        return [CONSOLE_LOGGER]

    def texts(self, actor_id: UUID) -> list[str]:
        return [text for target, text in self.messages if target == actor_id]


class FakeGateway:
    """Provider gateway that replays scripted replies.

    Each call consumes the next reply; the last reply repeats once the
    script runs out. A reply that is an exception instance is raised.
    """

    def __init__(self, *replies: str | Exception) -> None:
        self.replies = list(replies)
        self.calls: list[tuple[ProviderConfig, str, list[Turn]]] = []
        self.closed = False

    def send(self, config: ProviderConfig, system_prompt: str, conversation: list[Turn]) -> str:
        self.calls.append((config, system_prompt, list(conversation)))
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def actor() -> Actor:
    """The requesting player."""
    return Actor(id=uuid4(), name="Steve")


@pytest.fixture
def empty_host() -> FakeHost:
    """A fake host with nobody online."""
    return FakeHost()


@pytest.fixture
def host(actor: Actor) -> FakeHost:
    """A fake host with ``actor`` online at the origin."""
    fake = FakeHost()
    fake.join(actor, location=Location(world="world", x=0.5, y=64.0, z=0.5))
    return fake


@pytest.fixture
def fake_gateway() -> FakeGateway:
    """A gateway that answers with one message."""
    return FakeGateway("MSG: Hello!")


@pytest.fixture
def make_gateway() -> Callable[..., FakeGateway]:
    """Factory for gateways replaying the given replies."""
    return FakeGateway
