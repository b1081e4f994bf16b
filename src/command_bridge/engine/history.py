"""Bounded per-actor conversation history.

Each actor keeps at most ``limit`` turns; appending past the limit evicts
the oldest turn first. History lives only in memory and is dropped when the
actor logs out or the bridge shuts down.
"""

from __future__ import annotations

import threading
from collections import deque
from uuid import UUID

from command_bridge.core.constants import HISTORY_LIMIT
from command_bridge.models.enums import Role
from command_bridge.models.provider import Turn


class _ActorHistory:
    __slots__ = ("lock", "turns")

    def __init__(self, limit: int) -> None:
        self.lock = threading.Lock()
        self.turns: deque[Turn] = deque(maxlen=limit)


class ConversationStore:
    """Thread-safe map of actor id to bounded turn history.

    Each actor has its own lock, so appends for different actors never
    contend with each other.
    """

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("history limit must be positive")
        self.limit = limit
        self._histories: dict[UUID, _ActorHistory] = {}
        self._registry_lock = threading.Lock()

    def _history(self, actor_id: UUID) -> _ActorHistory:
        history = self._histories.get(actor_id)
        if history is None:
            with self._registry_lock:
                history = self._histories.setdefault(actor_id, _ActorHistory(self.limit))
        return history

    def append(self, actor_id: UUID, role: Role, content: str) -> None:
        """Append a turn, evicting the oldest when full."""
        history = self._history(actor_id)
        with history.lock:
            history.turns.append(Turn(role=role, content=content))

    def turns(self, actor_id: UUID) -> list[Turn]:
        """Return a copy of the actor's history, oldest first."""
        history = self._histories.get(actor_id)
        if history is None:
            return []
        with history.lock:
            return list(history.turns)

    def tail(self, actor_id: UUID, count: int) -> list[Turn]:
        """Return the ``count`` most recent turns."""
        turns = self.turns(actor_id)
        return turns[-count:] if count > 0 else []

    def clear(self, actor_id: UUID) -> None:
        """Forget one actor's history."""
        with self._registry_lock:
            self._histories.pop(actor_id, None)

    def clear_all(self) -> None:
        """Forget every actor's history."""
        with self._registry_lock:
            self._histories.clear()

    def __len__(self) -> int:
        return len(self._histories)


__all__ = ["ConversationStore"]
