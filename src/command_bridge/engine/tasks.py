"""Tracking of background pipeline tasks.

Every request, retry, delayed command and persistence write runs as its
own asyncio task. The tracker keeps strong references so tasks are not
garbage collected mid-flight, and lets shutdown cancel all of them.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any

from command_bridge.core.logging import get_logger

logger = get_logger(__name__)


class TaskTracker:
    """Set of live tasks with spawn, drain and cancel."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task[Any]:
        """Start ``coro`` as a tracked task on the running loop."""
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait until no tracked task is left, including ones spawned meanwhile."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> None:
        """Cancel every tracked task and wait for them to finish."""
        tasks = list(self._tasks)
        if tasks:
            logger.info("Cancelling background tasks", count=len(tasks))
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    def __len__(self) -> int:
        return len(self._tasks)


__all__ = ["TaskTracker"]
