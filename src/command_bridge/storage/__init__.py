"""Storage module for bridge persistence.

Provides SQLite-based storage for:
- The per-actor enable flag
- The interaction history
"""

from command_bridge.storage.database import Database, InteractionRecord

__all__ = [
    "Database",
    "InteractionRecord",
]
