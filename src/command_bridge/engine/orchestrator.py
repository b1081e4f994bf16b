"""Request orchestration for chat-triggered LLM calls.

One request flows through:

    context snapshot -> history append -> abbreviation notes
    -> provider call -> history append -> parse -> execute directives

Failed commands come back in through ``submit`` with error context and the
next Attempt, which turns into a fresh provider call asking the model to
correct itself. Attempt numbers only grow, so a chain of corrections ends at
the attempt ceiling. Every
exception stops at ``handle`` and becomes a single chat message; nothing
propagates into the host.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from concurrent.futures import Executor
from typing import Protocol
from uuid import UUID

from command_bridge.core.config import Settings, get_settings
from command_bridge.core.exceptions import BridgeError
from command_bridge.core.logging import bind_context, clear_context, get_logger
from command_bridge.engine.abbreviations import AbbreviationExpander
from command_bridge.engine.context import ContextSnapshotBuilder
from command_bridge.engine.history import ConversationStore
from command_bridge.engine.parser import ResponseParser
from command_bridge.engine.retry import Attempt
from command_bridge.engine.supervisor import CommandExecutionSupervisor
from command_bridge.engine.tasks import TaskTracker
from command_bridge.host.delivery import deliver_message, deliver_raw, error_line
from command_bridge.host.interfaces import GameHost, call_on_main
from command_bridge.llm.gateway import ProviderGateway
from command_bridge.llm.prompts import build_retry_request, get_profile
from command_bridge.models.directives import DelayedCommand, Directive, ImmediateCommand, Message
from command_bridge.models.enums import Role
from command_bridge.models.host import Actor
from command_bridge.models.provider import ProviderConfig

logger = get_logger(__name__)


class InteractionLog(Protocol):
    """Durable record of completed round-trips."""

    def save_interaction(self, actor_id: UUID, request: str, response: str) -> None: ...


class RequestOrchestrator:
    """Sequences context, provider call, parsing and execution per request."""

    def __init__(
        self,
        host: GameHost,
        gateway: ProviderGateway,
        context_builder: ContextSnapshotBuilder,
        history: ConversationStore,
        parser: ResponseParser,
        supervisor: CommandExecutionSupervisor,
        tracker: TaskTracker,
        *,
        expander: AbbreviationExpander | None = None,
        interaction_log: InteractionLog | None = None,
        executor: Executor | None = None,
        settings_provider: Callable[[], Settings] = get_settings,
    ) -> None:
        self.host = host
        self.gateway = gateway
        self.context_builder = context_builder
        self.history = history
        self.parser = parser
        self.supervisor = supervisor
        self.tracker = tracker
        self.expander = expander or AbbreviationExpander()
        self.interaction_log = interaction_log
        self.executor = executor
        self.settings_provider = settings_provider
        self.supervisor.resubmit = self.submit

    def submit(
        self,
        actor: Actor,
        request: str,
        error_context: str | None = None,
        attempt: Attempt | None = None,
    ) -> asyncio.Task[None]:
        """Start a request as a tracked task. Must be called on the loop."""
        return self.tracker.spawn(
            self.handle(actor, request, error_context, attempt=attempt),
            name=f"request:{actor.id}",
        )

    async def handle(
        self,
        actor: Actor,
        request: str,
        error_context: str | None = None,
        *,
        attempt: Attempt | None = None,
    ) -> None:
        """Run one request, turning any failure into a chat message.

        ``attempt`` is None for a new request and the follow-up Attempt when
        a failed command is being corrected.
        """
        attempt = attempt or Attempt(actor.id, request)
        bind_context(actor_id=str(actor.id), actor=actor.name, attempt=attempt.number)
        try:
            if not self.supervisor.is_current(attempt):
                logger.info("Retry abandoned", request=request)
                return
            await self._process(actor, request, error_context, attempt)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Request failed", request=request)
            self.supervisor.settle(attempt)
            detail = exc.message if isinstance(exc, BridgeError) else str(exc)
            try:
                await deliver_raw(self.host, actor.id, error_line(detail or type(exc).__name__))
            except Exception:
                logger.exception("Could not deliver error message")
        finally:
            clear_context()

    async def _process(
        self,
        actor: Actor,
        request: str,
        error_context: str | None,
        attempt: Attempt,
    ) -> None:
        loop = asyncio.get_running_loop()
        settings = self.settings_provider()
        profile = get_profile(settings.prompt.version)

        context = await call_on_main(self.host, lambda: self.context_builder.build_context(actor))

        message = build_retry_request(request, error_context) if error_context else request
        if profile.expand_abbreviations:
            message = self.expander.expand(message)
        self.history.append(actor.id, Role.USER, message)

        config = ProviderConfig.from_settings(settings)
        system_prompt = profile.render(actor.name, context)
        turns = self.history.turns(actor.id)

        logger.info(
            "Sending request",
            provider=config.provider.value,
            model=config.model,
            retry=error_context is not None,
        )
        response = await loop.run_in_executor(
            self.executor,
            self.gateway.send,
            config,
            system_prompt,
            turns,
        )
        self.history.append(actor.id, Role.ASSISTANT, response)

        directives = self.parser.parse(response)
        self.tracker.spawn(self._persist(actor.id, request, response), name="persist")
        await self._execute(actor, directives, attempt)

    async def _execute(self, actor: Actor, directives: list[Directive], attempt: Attempt) -> None:
        for directive in directives:
            if isinstance(directive, Message):
                await deliver_message(self.host, actor.id, directive.text)
            elif isinstance(directive, ImmediateCommand):
                await self.supervisor.execute(actor, directive.text, attempt)
            elif isinstance(directive, DelayedCommand):
                self.supervisor.schedule(actor, directive, attempt)
        self.supervisor.settle(attempt)

    async def _persist(self, actor_id: UUID, request: str, response: str) -> None:
        if self.interaction_log is None:
            return
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(
                self.executor,
                self.interaction_log.save_interaction,
                actor_id,
                request,
                response,
            )
        except Exception as exc:
            logger.warning("Could not save interaction", error=str(exc))


__all__ = [
    "InteractionLog",
    "RequestOrchestrator",
]
