"""Command execution with outcome detection and self-correcting retries.

For every command a model asks for, the supervisor:

1. Captures a StateSnapshot of the requesting actor and opens an
   observation window for failure output.
2. Dispatches the command on the host's main thread with the identity
   chosen by the authorization policy.
3. Waits a short settle delay so deferred output and side effects land.
4. Classifies the attempt:
   - a failure reported by the host or seen in its log output -> FAILED
   - dispatcher refused the command and nothing changed -> FAILED
   - otherwise -> SUCCEEDED
5. On FAILED, records the failure. The first failure of a reply either
   re-submits the original request with the error context (a new LLM
   round-trip numbered one higher, asking for a correction) or, once the
   attempt ceiling is reached, tells the actor it gave up. Later failures
   in the same reply are only recorded.

State per (actor, request): Idle -> Attempting -> Succeeded | Failed ->
Attempting | Exhausted.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from command_bridge.core.constants import POSITION_THRESHOLD, SETTLE_DELAY_SECONDS
from command_bridge.core.exceptions import CommandExecutionFailure
from command_bridge.core.logging import get_logger
from command_bridge.engine.ledger import CommandFeedbackLedger
from command_bridge.engine.observers import Observation, OutcomeObserver
from command_bridge.engine.policy import resolve_executor
from command_bridge.engine.retry import Attempt, RetryTable
from command_bridge.engine.tasks import TaskTracker
from command_bridge.host.delivery import deliver_message
from command_bridge.host.interfaces import GameHost, call_on_main
from command_bridge.models.directives import DelayedCommand
from command_bridge.models.enums import Executor, Outcome
from command_bridge.models.host import Actor, DispatchResult, StateSnapshot

logger = get_logger(__name__)

Resubmit = Callable[[Actor, str, str, Attempt], Any]
"""Callback re-entering the orchestrator: (actor, request, error context, next attempt)."""


@dataclass
class _Dispatched:
    before: StateSnapshot | None
    observation: Observation
    accepted: bool
    reported_error: str | None


@dataclass
class _Inspected:
    online: bool
    captured_error: str | None
    changed: bool


class CommandExecutionSupervisor:
    """Executes commands and drives the retry/feedback loop."""

    def __init__(
        self,
        host: GameHost,
        ledger: CommandFeedbackLedger,
        retries: RetryTable,
        observer: OutcomeObserver,
        tracker: TaskTracker,
        *,
        settle_delay: float = SETTLE_DELAY_SECONDS,
        position_threshold: float = POSITION_THRESHOLD,
        authorize: Callable[[Actor, str], Executor] = resolve_executor,
        resubmit: Resubmit | None = None,
    ) -> None:
        self.host = host
        self.ledger = ledger
        self.retries = retries
        self.observer = observer
        self.tracker = tracker
        self.settle_delay = settle_delay
        self.position_threshold = position_threshold
        self.authorize = authorize
        self.resubmit = resubmit

    # -------------------------------------------------------------------------
    # Main-thread steps
    # -------------------------------------------------------------------------

    def _dispatch(self, actor: Actor, command: str) -> _Dispatched:
        state = self.host.player_state(actor.id)
        before = state.snapshot() if state else None
        executor = self.authorize(actor, command)
        observation = self.observer.start()
        try:
            result = self.host.dispatch_command(command, executor)
        except BaseException:
            observation.stop()
            raise
        if isinstance(result, DispatchResult):
            return _Dispatched(before, observation, result.accepted, result.error)
        return _Dispatched(before, observation, bool(result), None)

    def _inspect(self, actor: Actor, dispatched: _Dispatched) -> _Inspected:
        captured = dispatched.observation.stop()
        if not self.host.is_online(actor.id):
            return _Inspected(online=False, captured_error=captured, changed=False)
        state = self.host.player_state(actor.id)
        changed = False
        if state is not None and dispatched.before is not None:
            changed = state.snapshot().changed_since(
                dispatched.before,
                position_threshold=self.position_threshold,
            )
        return _Inspected(online=True, captured_error=captured, changed=changed)

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def is_current(self, attempt: Attempt) -> bool:
        """Whether a retry round-trip for ``attempt`` should still run."""
        return self.retries.is_current(attempt)

    def settle(self, attempt: Attempt) -> None:
        """Forget the request unless a command of ``attempt`` queued a retry."""
        if not attempt.escalated:
            self.retries.clear(attempt.key)

    async def execute(self, actor: Actor, command: str, attempt: Attempt) -> Outcome:
        """Run ``command`` as part of the provider reply ``attempt``.

        Args:
            actor: The requesting actor.
            command: Command text without the leading slash.
            attempt: The round-trip the command came from, shared by every
                command of the same reply.

        Returns:
            The classification of this command.
        """
        dispatched: _Dispatched | None = None
        try:
            dispatched = await call_on_main(self.host, lambda: self._dispatch(actor, command))
            await asyncio.sleep(self.settle_delay)
            observed = dispatched
            inspected = await call_on_main(self.host, lambda: self._inspect(actor, observed))
        except asyncio.CancelledError:
            if dispatched is not None:
                dispatched.observation.stop()
            raise
        except Exception as exc:
            if dispatched is not None:
                dispatched.observation.stop()
            detail = str(exc) or type(exc).__name__
            logger.warning("Command raised during dispatch", command=command, error=detail)
            return await self._fail(actor, command, attempt, detail, f"Exception: {detail}")

        if not inspected.online:
            self.retries.clear(attempt.key)
            logger.info("Actor left before outcome was known", command=command)
            return Outcome.DROPPED

        error = dispatched.reported_error or inspected.captured_error
        if error:
            return await self._fail(
                actor, command, attempt, error, f"Error: {error} | Command: /{command}"
            )
        if not dispatched.accepted and not inspected.changed:
            return await self._fail(
                actor, command, attempt, "Command not executed", f"Command failed: /{command}"
            )

        self.settle(attempt)
        self.ledger.record_success(command)
        logger.info("Command succeeded", command=command)
        return Outcome.SUCCEEDED

    async def _fail(
        self,
        actor: Actor,
        command: str,
        attempt: Attempt,
        detail: str,
        error_context: str,
    ) -> Outcome:
        self.ledger.record_failure(command, detail)
        failure = CommandExecutionFailure(detail, command=command, attempt=attempt.number)

        if attempt.escalated:
            logger.info("Further command failed in a reply already retried", error=str(failure))
            return Outcome.FAILED
        attempt.escalated = True

        if self.retries.record_failure(attempt):
            logger.warning("Command attempts exhausted", error=str(failure))
            await deliver_message(
                self.host,
                actor.id,
                f"&cCould not execute after {self.retries.max_attempts} attempts.",
            )
            return Outcome.EXHAUSTED

        logger.info("Command failed, asking model to correct it", error=str(failure))
        if self.resubmit is not None:
            self.resubmit(actor, attempt.request, error_context, attempt.next())
        return Outcome.FAILED

    # -------------------------------------------------------------------------
    # Delayed commands
    # -------------------------------------------------------------------------

    async def _run_delayed(self, actor: Actor, directive: DelayedCommand, attempt: Attempt) -> Outcome:
        await asyncio.sleep(directive.delay_seconds)
        online = await call_on_main(self.host, lambda: self.host.is_online(actor.id))
        if not online:
            return Outcome.DROPPED
        return await self.execute(actor, directive.text, attempt)

    def schedule(self, actor: Actor, directive: DelayedCommand, attempt: Attempt) -> asyncio.Task[Outcome]:
        """Run ``directive`` after its delay if the actor is still online."""
        logger.debug(
            "Scheduling delayed command",
            command=directive.text,
            delay_seconds=directive.delay_seconds,
        )
        return self.tracker.spawn(
            self._run_delayed(actor, directive, attempt),
            name=f"delayed:{directive.text}",
        )


__all__ = [
    "CommandExecutionSupervisor",
    "Resubmit",
]
