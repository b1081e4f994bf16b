"""Tests for CommandExecutionSupervisor."""

from __future__ import annotations

from typing import Any

import pytest

from command_bridge.engine.ledger import CommandFeedbackLedger
from command_bridge.engine.observers import LogKeywordObserver
from command_bridge.engine.retry import Attempt, RetryTable
from command_bridge.engine.supervisor import CommandExecutionSupervisor
from command_bridge.engine.tasks import TaskTracker
from command_bridge.models.directives import DelayedCommand
from command_bridge.models.enums import Executor, Outcome
from command_bridge.models.host import Actor, DispatchResult

TERMINAL = "§d[IA] §f&cCould not execute after 3 attempts."


class Harness:
    """Supervisor wired to a fake host with its resubmissions recorded."""

    def __init__(self, host: Any, **kwargs: Any) -> None:
        self.host = host
        self.ledger = CommandFeedbackLedger()
        self.retries = RetryTable(max_attempts=3)
        self.tracker = TaskTracker()
        self.resubmitted: list[tuple[str, str]] = []
        self.follow_ups: list[Attempt] = []
        self.supervisor = CommandExecutionSupervisor(
            host,
            self.ledger,
            self.retries,
            LogKeywordObserver(host.log_sources()),
            self.tracker,
            settle_delay=0,
            resubmit=self._resubmit,
            **kwargs,
        )

    def _resubmit(self, actor: Actor, request: str, context: str, attempt: Attempt) -> None:
        self.resubmitted.append((request, context))
        self.follow_ups.append(attempt)


@pytest.fixture
def harness(host: Any) -> Harness:
    return Harness(host)


class TestExecute:
    """Tests for single commands."""

    @pytest.mark.asyncio
    async def test_success(self, harness: Harness, actor: Actor) -> None:
        outcome = await harness.supervisor.execute(actor, "heal Steve", Attempt(actor.id, "heal me"))

        assert outcome is Outcome.SUCCEEDED
        assert harness.host.dispatched == [("heal Steve", Executor.CONSOLE)]
        assert harness.ledger.get("heal").success_count == 1
        assert harness.resubmitted == []
        assert len(harness.retries) == 0

    @pytest.mark.asyncio
    async def test_logged_error_is_failure(self, harness: Harness, actor: Actor) -> None:
        def handler(command: str) -> bool:
            harness.host.console.warning('Unknown command. Type "/help" for help.')
            return True

        harness.host.handler = handler

        outcome = await harness.supervisor.execute(actor, "fly Steve", Attempt(actor.id, "let me fly"))

        assert outcome is Outcome.FAILED
        assert harness.resubmitted == [
            ("let me fly", 'Error: Unknown command. Type "/help" for help. | Command: /fly Steve')
        ]
        assert [attempt.number for attempt in harness.follow_ups] == [2]
        assert harness.retries.attempts((actor.id, "let me fly")) == 1
        assert harness.ledger.get("fly").fail_count == 1

    @pytest.mark.asyncio
    async def test_reported_error_is_failure(self, harness: Harness, actor: Actor) -> None:
        harness.host.handler = lambda command: DispatchResult(accepted=True, error="No player was found")

        outcome = await harness.supervisor.execute(actor, "tp Notch", Attempt(actor.id, "tp to notch"))

        assert outcome is Outcome.FAILED
        assert harness.resubmitted[0][1] == "Error: No player was found | Command: /tp Notch"

    @pytest.mark.asyncio
    async def test_rejected_without_change_is_failure(self, harness: Harness, actor: Actor) -> None:
        harness.host.handler = lambda command: False

        outcome = await harness.supervisor.execute(actor, "frobnicate", Attempt(actor.id, "do the thing"))

        assert outcome is Outcome.FAILED
        assert harness.resubmitted == [("do the thing", "Command failed: /frobnicate")]
        assert harness.ledger.get("frobnicate").last_error == "Command not executed"

    @pytest.mark.asyncio
    async def test_rejected_but_state_changed_is_success(self, harness: Harness, actor: Actor) -> None:
        def handler(command: str) -> bool:
            harness.host.join(actor, health=20.0, gamemode="CREATIVE")
            return False

        harness.host.handler = handler

        outcome = await harness.supervisor.execute(actor, "gmc", Attempt(actor.id, "creative please"))

        assert outcome is Outcome.SUCCEEDED

    @pytest.mark.asyncio
    async def test_dispatch_exception_is_failure(self, harness: Harness, actor: Actor) -> None:
        def handler(command: str) -> bool:
            raise RuntimeError("boom")

        harness.host.handler = handler

        outcome = await harness.supervisor.execute(actor, "explode", Attempt(actor.id, "explode"))

        assert outcome is Outcome.FAILED
        assert harness.resubmitted == [("explode", "Exception: boom")]

    @pytest.mark.asyncio
    async def test_actor_leaving_drops_attempt(self, harness: Harness, actor: Actor) -> None:
        first = Attempt(actor.id, "kick me")
        harness.retries.record_failure(first)

        def handler(command: str) -> bool:
            harness.host.leave(actor.id)
            return True

        harness.host.handler = handler

        outcome = await harness.supervisor.execute(actor, "kick Steve", first.next())

        assert outcome is Outcome.DROPPED
        assert first.key not in harness.retries
        assert harness.resubmitted == []

    @pytest.mark.asyncio
    async def test_authorization_policy_chooses_executor(self, host: Any, actor: Actor) -> None:
        harness = Harness(host, authorize=lambda actor, command: Executor.ACTOR)

        await harness.supervisor.execute(actor, "spawn", Attempt(actor.id, "spawn"))

        assert host.dispatched == [("spawn", Executor.ACTOR)]


class TestRetryCeiling:
    """Tests for the attempt ceiling."""

    @pytest.mark.asyncio
    async def test_third_failure_exhausts(self, harness: Harness, actor: Actor) -> None:
        harness.host.handler = lambda command: DispatchResult(accepted=False, error="Unknown command")

        attempt = Attempt(actor.id, "let me fly")
        outcomes = [await harness.supervisor.execute(actor, "fly Steve", attempt)]
        for _ in range(2):
            attempt = harness.follow_ups[-1]
            outcomes.append(await harness.supervisor.execute(actor, "fly Steve", attempt))

        assert outcomes == [Outcome.FAILED, Outcome.FAILED, Outcome.EXHAUSTED]
        assert len(harness.resubmitted) == 2
        assert harness.host.texts(actor.id)[-1] == TERMINAL
        assert len(harness.retries) == 0

    @pytest.mark.asyncio
    async def test_success_resets_count(self, harness: Harness, actor: Actor) -> None:
        harness.host.handler = lambda command: False
        await harness.supervisor.execute(actor, "fly Steve", Attempt(actor.id, "let me fly"))

        harness.host.handler = lambda command: True
        await harness.supervisor.execute(actor, "fly Steve", harness.follow_ups[-1])

        assert harness.retries.attempts((actor.id, "let me fly")) == 0


class TestReplyWithSeveralFailures:
    """Tests for replies where more than one command fails."""

    @pytest.mark.asyncio
    async def test_reply_resubmits_once(self, harness: Harness, actor: Actor) -> None:
        harness.host.handler = lambda command: DispatchResult(accepted=False, error="Unknown command")
        attempt = Attempt(actor.id, "do two things")

        outcomes = [
            await harness.supervisor.execute(actor, "bad1 x", attempt),
            await harness.supervisor.execute(actor, "bad2 y", attempt),
        ]

        assert outcomes == [Outcome.FAILED, Outcome.FAILED]
        assert harness.resubmitted == [("do two things", "Error: Unknown command | Command: /bad1 x")]
        assert harness.retries.attempts(attempt.key) == 1
        assert harness.ledger.get("bad2").fail_count == 1

    @pytest.mark.asyncio
    async def test_final_reply_sends_one_terminal_message(self, harness: Harness, actor: Actor) -> None:
        harness.host.handler = lambda command: DispatchResult(accepted=False, error="Unknown command")
        attempt = Attempt(actor.id, "do two things", number=3)

        outcomes = [
            await harness.supervisor.execute(actor, "bad1 x", attempt),
            await harness.supervisor.execute(actor, "bad2 y", attempt),
        ]

        assert outcomes == [Outcome.EXHAUSTED, Outcome.FAILED]
        assert harness.resubmitted == []
        assert harness.host.texts(actor.id).count(TERMINAL) == 1
        assert len(harness.retries) == 0

    @pytest.mark.asyncio
    async def test_sibling_success_keeps_pending_retry(self, harness: Harness, actor: Actor) -> None:
        harness.host.handler = lambda command: command != "bad1 x"
        attempt = Attempt(actor.id, "do two things")

        await harness.supervisor.execute(actor, "bad1 x", attempt)
        await harness.supervisor.execute(actor, "heal Steve", attempt)

        assert harness.supervisor.is_current(harness.follow_ups[-1]) is True

    @pytest.mark.asyncio
    async def test_settle_forgets_clean_reply(self, harness: Harness, actor: Actor) -> None:
        first = Attempt(actor.id, "let me fly")
        harness.retries.record_failure(first)

        harness.supervisor.settle(first.next())

        assert len(harness.retries) == 0


class TestDelayedCommands:
    """Tests for scheduled commands."""

    @pytest.mark.asyncio
    async def test_runs_after_delay(self, harness: Harness, actor: Actor) -> None:
        task = harness.supervisor.schedule(
            actor, DelayedCommand(text="kill Steve", delay_seconds=0), Attempt(actor.id, "kill me")
        )

        assert await task is Outcome.SUCCEEDED
        assert harness.host.dispatched == [("kill Steve", Executor.CONSOLE)]

    @pytest.mark.asyncio
    async def test_dropped_when_actor_left(self, harness: Harness, actor: Actor) -> None:
        harness.host.leave(actor.id)

        task = harness.supervisor.schedule(
            actor, DelayedCommand(text="kill Steve", delay_seconds=0), Attempt(actor.id, "kill me")
        )

        assert await task is Outcome.DROPPED
        assert harness.host.dispatched == []

    @pytest.mark.asyncio
    async def test_delayed_failure_shares_reply_escalation(self, harness: Harness, actor: Actor) -> None:
        harness.host.handler = lambda command: False
        attempt = Attempt(actor.id, "kill me")

        await harness.supervisor.execute(actor, "smite Steve", attempt)
        task = harness.supervisor.schedule(actor, DelayedCommand(text="kill Steve", delay_seconds=0), attempt)

        assert await task is Outcome.FAILED
        assert len(harness.resubmitted) == 1

    @pytest.mark.asyncio
    async def test_cancelled_on_shutdown(self, harness: Harness, actor: Actor) -> None:
        harness.supervisor.schedule(
            actor, DelayedCommand(text="kill Steve", delay_seconds=60), Attempt(actor.id, "kill me")
        )

        await harness.tracker.cancel_all()

        assert len(harness.tracker) == 0
        assert harness.host.dispatched == []
