"""Retry state for in-flight requests.

A request is identified by (actor id, original request text). Every
provider reply for it is one Attempt; the commands of a reply share that
Attempt, so however many of them fail the reply escalates only once,
either to a new round-trip numbered one higher or, at the ceiling, to a
terminal message. The table holds the attempt number a request is waiting
on and drops the entry on success, exhaustion or logout.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from uuid import UUID

from command_bridge.core.constants import MAX_ATTEMPTS

RetryKey = tuple[UUID, str]


@dataclass(eq=False)
class Attempt:
    """One provider round-trip for a request.

    Attributes:
        actor_id: Requesting actor.
        request: Original request text.
        number: 1 for the first round-trip, 2 for the first retry, ...
        escalated: Set once a failed command of this reply was acted on.
    """

    actor_id: UUID
    request: str
    number: int = 1
    escalated: bool = False

    @property
    def key(self) -> RetryKey:
        return (self.actor_id, self.request)

    def next(self) -> Attempt:
        """The round-trip that retries this one."""
        return Attempt(self.actor_id, self.request, self.number + 1)


class RetryTable:
    """Thread-safe pending attempt numbers keyed by (actor id, request text)."""

    def __init__(self, max_attempts: int = MAX_ATTEMPTS) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self._pending: dict[RetryKey, int] = {}
        self._lock = threading.Lock()

    def attempts(self, key: RetryKey) -> int:
        """Failed attempts recorded so far for ``key``."""
        with self._lock:
            pending = self._pending.get(key)
        return pending - 1 if pending else 0

    def record_failure(self, attempt: Attempt) -> bool:
        """Record that ``attempt`` failed.

        Returns:
            True if the ceiling is reached (the entry is removed), False if
            a retry numbered ``attempt.number + 1`` is now pending.
        """
        with self._lock:
            if attempt.number >= self.max_attempts:
                self._pending.pop(attempt.key, None)
                return True
            self._pending[attempt.key] = attempt.number + 1
            return False

    def is_current(self, attempt: Attempt) -> bool:
        """Whether ``attempt`` may still run.

        First attempts always may. A retry may only while its number is the
        one pending, so retries for actors who left, or superseded by a
        newer chain, are abandoned.
        """
        if attempt.number == 1:
            return True
        with self._lock:
            return self._pending.get(attempt.key) == attempt.number

    def clear(self, key: RetryKey) -> None:
        """Forget ``key`` after a success."""
        with self._lock:
            self._pending.pop(key, None)

    def clear_actor(self, actor_id: UUID) -> None:
        """Forget every entry belonging to one actor."""
        with self._lock:
            for key in [key for key in self._pending if key[0] == actor_id]:
                del self._pending[key]

    def clear_all(self) -> None:
        with self._lock:
            self._pending.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._pending

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


__all__ = [
    "Attempt",
    "RetryKey",
    "RetryTable",
]
