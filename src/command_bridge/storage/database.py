"""SQLite persistence layer for the command bridge.

Provides persistent storage for:
- The per-actor enable flag (whether chat triggers are accepted)
- The interaction history (request/response pairs)

The interaction history is written fire-and-forget by the orchestrator;
failures here never abort a request.
"""

from __future__ import annotations

import sqlite3
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generator
from uuid import UUID

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from command_bridge.core.exceptions import PersistenceError
from command_bridge.core.logging import get_logger

logger = get_logger(__name__)


def _now_millis() -> int:
    return int(time.time() * 1000)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class InteractionRecord:
    """One completed request/response round-trip.

    Attributes:
        id: Autoincrement row id.
        actor_id: Requesting actor.
        request: Request text as typed (without the marker).
        response: Raw model reply.
        timestamp: Epoch milliseconds when it was saved.
    """

    id: int
    actor_id: UUID
    request: str
    response: str
    timestamp: int

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> InteractionRecord:
        """Create from database row."""
        return cls(
            id=row[0],
            actor_id=UUID(row[1]),
            request=row[2],
            response=row[3],
            timestamp=row[4],
        )


# =============================================================================
# Database Class
# =============================================================================


_write_retry = retry(
    retry=retry_if_exception_type(sqlite3.OperationalError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)


class Database:
    """SQLite database for bridge persistence.

    Manages storage of:
    - bridge_users: the enable flag per actor
    - bridge_history: completed interactions
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path) -> None:
        """Initialize database.

        Args:
            db_path: Path to the database file.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._enabled_cache: dict[UUID, bool] = {}
        self._cache_lock = threading.Lock()

        self._init_schema()

        logger.info("Database initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.db_path), timeout=5.0)
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS bridge_users (
                    actor_id TEXT PRIMARY KEY,
                    enabled INTEGER NOT NULL DEFAULT 0,
                    last_updated INTEGER NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS bridge_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    actor_id TEXT NOT NULL,
                    request TEXT NOT NULL,
                    response TEXT NOT NULL,
                    timestamp INTEGER NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_history_actor
                ON bridge_history(actor_id, timestamp DESC)
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    # =========================================================================
    # Enable Flag
    # =========================================================================

    def is_enabled(self, actor_id: UUID) -> bool:
        """Whether chat triggers are accepted for ``actor_id``.

        Read through an in-memory cache; actors never seen are disabled.
        """
        with self._cache_lock:
            cached = self._enabled_cache.get(actor_id)
        if cached is not None:
            return cached

        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT enabled FROM bridge_users WHERE actor_id = ?",
                    (str(actor_id),),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(
                "Could not read enable flag",
                details={"actor_id": str(actor_id), "error": str(exc)},
            ) from exc

        enabled = bool(row[0]) if row else False
        with self._cache_lock:
            self._enabled_cache[actor_id] = enabled
        return enabled

    @_write_retry
    def _write_enabled(self, actor_id: UUID, enabled: bool) -> None:
        with self._get_connection() as conn:
            conn.execute("""
                INSERT INTO bridge_users (actor_id, enabled, last_updated)
                VALUES (?, ?, ?)
                ON CONFLICT(actor_id) DO UPDATE SET
                    enabled = excluded.enabled,
                    last_updated = excluded.last_updated
            """, (str(actor_id), int(enabled), _now_millis()))

    def set_enabled(self, actor_id: UUID, enabled: bool) -> None:
        """Turn chat triggers on or off for ``actor_id``.

        Raises:
            PersistenceError: If the flag cannot be written.
        """
        with self._cache_lock:
            self._enabled_cache[actor_id] = enabled
        try:
            self._write_enabled(actor_id, enabled)
        except sqlite3.Error as exc:
            raise PersistenceError(
                "Could not write enable flag",
                details={"actor_id": str(actor_id), "error": str(exc)},
            ) from exc
        logger.info("Enable flag updated", actor_id=str(actor_id), enabled=enabled)

    def clear_cache(self) -> None:
        """Drop cached enable flags so the next read hits the database."""
        with self._cache_lock:
            self._enabled_cache.clear()

    # =========================================================================
    # Interaction History
    # =========================================================================

    @_write_retry
    def _insert_interaction(self, actor_id: UUID, request: str, response: str) -> None:
        with self._get_connection() as conn:
            conn.execute("""
                INSERT INTO bridge_history (actor_id, request, response, timestamp)
                VALUES (?, ?, ?, ?)
            """, (str(actor_id), request, response, _now_millis()))

    def save_interaction(self, actor_id: UUID, request: str, response: str) -> None:
        """Append a completed round-trip.

        Raises:
            PersistenceError: If the row cannot be written.
        """
        try:
            self._insert_interaction(actor_id, request, response)
        except sqlite3.Error as exc:
            raise PersistenceError(
                "Could not save interaction",
                details={"actor_id": str(actor_id), "error": str(exc)},
            ) from exc

    def recent_interactions(self, actor_id: UUID, limit: int = 10) -> list[InteractionRecord]:
        """Most recent interactions for an actor, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute("""
                SELECT id, actor_id, request, response, timestamp
                FROM bridge_history WHERE actor_id = ?
                ORDER BY timestamp DESC, id DESC LIMIT ?
            """, (str(actor_id), limit)).fetchall()
        return [InteractionRecord.from_row(tuple(row)) for row in rows]


__all__ = [
    "Database",
    "InteractionRecord",
]
