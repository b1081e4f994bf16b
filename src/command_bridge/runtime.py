"""Bridge runtime: wiring, threads and shutdown.

The host calls into the runtime from its own threads. The runtime owns:

- one asyncio event loop running in a daemon thread, on which every
  request, retry and delayed command is a task;
- a thread pool for blocking provider and SQLite calls;
- the in-memory stores (history, retry table, feedback ledger).

Example:
    >>> runtime = BridgeRuntime(host)
    >>> runtime.start()
    >>> cancelled = runtime.on_chat(actor, "gpt, make it day")
    >>> runtime.shutdown()
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any
from uuid import UUID

from command_bridge.core.config import Settings, get_settings
from command_bridge.core.logging import configure_from_settings, get_logger
from command_bridge.engine import (
    AbbreviationExpander,
    CommandExecutionSupervisor,
    CommandFeedbackLedger,
    ContextSnapshotBuilder,
    ConversationStore,
    LogKeywordObserver,
    OutcomeObserver,
    PluginInventory,
    RequestOrchestrator,
    ResponseParser,
    RetryTable,
    TaskTracker,
)
from command_bridge.host import AdminCommand, ChatTriggerListener, GameHost
from command_bridge.llm import ProviderGateway
from command_bridge.models.host import Actor
from command_bridge.storage import Database

logger = get_logger(__name__)


class BridgeRuntime:
    """Owns the bridge's components and threads for one host."""

    def __init__(
        self,
        host: GameHost,
        *,
        settings_provider: Callable[[], Settings] = get_settings,
        database: Database | None = None,
        gateway: ProviderGateway | None = None,
        observer: OutcomeObserver | None = None,
        configure_logs: bool = False,
        log_file: str | Path | None = None,
    ) -> None:
        self.host = host
        self.settings_provider = settings_provider
        self.database = database
        self.gateway = gateway
        self.observer = observer
        self.configure_logs = configure_logs
        self.log_file = log_file

        self.loop: asyncio.AbstractEventLoop | None = None
        self.executor: ThreadPoolExecutor | None = None
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self.loop is not None and self.loop.is_running()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Build every component and start the loop thread."""
        if self.loop is not None:
            raise RuntimeError("Bridge runtime already started")

        settings = self.settings_provider()
        if self.configure_logs:
            configure_from_settings(settings, self.log_file)
        execution = settings.execution

        self.executor = ThreadPoolExecutor(
            max_workers=execution.worker_threads,
            thread_name_prefix="command-bridge-io",
        )
        if self.database is None:
            self.database = Database(settings.storage.database_path)
        if self.gateway is None:
            self.gateway = ProviderGateway(tail_length=execution.history_tail)
        if self.observer is None:
            self.observer = LogKeywordObserver(
                self.host.log_sources(),
                keywords=execution.error_keywords,
                max_length=execution.error_detail_max_length,
            )

        self.ledger = CommandFeedbackLedger()
        self.retries = RetryTable(max_attempts=execution.max_attempts)
        self.history = ConversationStore(limit=execution.history_limit)
        self.tracker = TaskTracker()
        self.plugins = PluginInventory(self.host, ttl_seconds=execution.plugin_cache_ttl_seconds)

        self.supervisor = CommandExecutionSupervisor(
            self.host,
            self.ledger,
            self.retries,
            self.observer,
            self.tracker,
            settle_delay=execution.settle_delay_seconds,
            position_threshold=execution.position_threshold,
        )
        self.orchestrator = RequestOrchestrator(
            self.host,
            self.gateway,
            ContextSnapshotBuilder(self.host, self.ledger, self.plugins),
            self.history,
            ResponseParser(),
            self.supervisor,
            self.tracker,
            expander=AbbreviationExpander(),
            interaction_log=self.database,
            executor=self.executor,
            settings_provider=self.settings_provider,
        )
        self.chat = ChatTriggerListener(
            self.host,
            self.database,
            self.submit,
            settings_provider=self.settings_provider,
        )
        self.admin = AdminCommand(
            self.host,
            self.database,
            on_reload=self.reload,
            settings_provider=self.settings_provider,
        )

        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="command-bridge-loop",
            daemon=True,
        )
        self._thread.start()

        logger.info(
            "Bridge runtime started",
            provider=settings.llm.provider.value,
            model=settings.llm.model,
            prompt_version=settings.prompt.version.value,
        )

    def _run_loop(self) -> None:
        assert self.loop is not None
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def shutdown(self, timeout: float = 5.0) -> None:
        """Cancel pending work, stop the threads and drop in-memory state."""
        if self.loop is None:
            return

        loop = self.loop
        if loop.is_running():
            try:
                asyncio.run_coroutine_threadsafe(self.tracker.cancel_all(), loop).result(timeout)
            except TimeoutError:
                logger.warning("Timed out cancelling background tasks")
            loop.call_soon_threadsafe(loop.stop)
        if self._thread is not None:
            self._thread.join(timeout)
        if not loop.is_running():
            loop.close()

        if self.executor is not None:
            self.executor.shutdown(wait=False, cancel_futures=True)
        self.history.clear_all()
        self.retries.clear_all()
        self.ledger.clear()
        if self.gateway is not None:
            self.gateway.close()

        self.loop = None
        self._thread = None
        self.executor = None
        logger.info("Bridge runtime stopped")

    def reload(self) -> None:
        """Drop caches derived from host state or settings."""
        self.plugins.invalidate()
        if self.database is not None:
            self.database.clear_cache()

    # =========================================================================
    # Host entry points
    # =========================================================================

    def submit(self, actor: Actor, request: str) -> Future[Any]:
        """Queue a request from any thread.

        Returns:
            A future that resolves once the request task has been created.
        """
        if self.loop is None:
            raise RuntimeError("Bridge runtime is not started")

        async def enqueue() -> None:
            self.orchestrator.submit(actor, request)

        return asyncio.run_coroutine_threadsafe(enqueue(), self.loop)

    def on_chat(self, actor: Actor, message: str) -> bool:
        """Chat event hook; True means the event should be cancelled."""
        return self.chat.on_chat(actor, message)

    def on_command(self, actor: Actor, args: Sequence[str]) -> bool:
        """``/gpt`` command hook."""
        return self.admin.execute(actor, args)

    def on_tab_complete(self, args: Sequence[str]) -> list[str]:
        return self.admin.complete(args)

    def on_quit(self, actor_id: UUID) -> None:
        """Forget conversation and retry state for a departing actor."""
        self.history.clear(actor_id)
        self.retries.clear_actor(actor_id)

    def drain(self, timeout: float | None = None) -> None:
        """Block until every in-flight request, retry and delayed command is done."""
        if self.loop is None:
            return
        asyncio.run_coroutine_threadsafe(self.tracker.drain(), self.loop).result(timeout)


__all__ = ["BridgeRuntime"]
