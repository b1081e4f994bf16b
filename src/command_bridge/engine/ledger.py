"""Learned command feedback.

The ledger counts successes and failures per base command (the first word
of the command line). It only ever grows during the process lifetime and
is rendered into every request context so the model can favour commands
that worked and avoid ones that failed.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class CommandFeedback:
    """Accumulated outcome of one base command.

    Attributes:
        success_count: Number of successful executions.
        fail_count: Number of failed executions.
        last_error: Detail of the most recent failure.
        last_full_command: Most recent complete command that succeeded.
    """

    success_count: int = 0
    fail_count: int = 0
    last_error: str | None = None
    last_full_command: str | None = None

    @property
    def net_positive(self) -> bool:
        return self.success_count > self.fail_count

    @property
    def net_negative(self) -> bool:
        return self.fail_count > self.success_count


def base_command(command: str) -> str | None:
    """First whitespace-delimited word of ``command``, lowercased."""
    parts = command.split()
    return parts[0].lower() if parts else None


class CommandFeedbackLedger:
    """Striped-lock map of base command to CommandFeedback.

    Entries are immutable and replaced under the stripe lock that owns
    their token, so concurrent increments on the same token never lose
    updates while different tokens rarely contend.
    """

    def __init__(self, stripes: int = 16) -> None:
        self._entries: dict[str, CommandFeedback] = {}
        self._locks = [threading.Lock() for _ in range(max(1, stripes))]

    def _lock_for(self, token: str) -> threading.Lock:
        return self._locks[hash(token) % len(self._locks)]

    def record_success(self, command: str) -> CommandFeedback | None:
        """Count a success and remember the full command."""
        token = base_command(command)
        if token is None:
            return None
        with self._lock_for(token):
            current = self._entries.get(token, CommandFeedback())
            updated = replace(
                current,
                success_count=current.success_count + 1,
                last_full_command=command.strip(),
            )
            self._entries[token] = updated
        return updated

    def record_failure(self, command: str, error: str) -> CommandFeedback | None:
        """Count a failure and remember its error detail."""
        token = base_command(command)
        if token is None:
            return None
        with self._lock_for(token):
            current = self._entries.get(token, CommandFeedback())
            updated = replace(current, fail_count=current.fail_count + 1, last_error=error)
            self._entries[token] = updated
        return updated

    def get(self, token: str) -> CommandFeedback | None:
        return self._entries.get(token.lower())

    def snapshot(self) -> dict[str, CommandFeedback]:
        """Point-in-time copy of all entries."""
        return dict(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def render(self) -> str:
        """Render the ledger as the LEARNED context block."""
        entries = self.snapshot()
        if not entries:
            return "=== LEARNED ===\nNo commands recorded."

        lines = ["=== LEARNED ===", "Commands that work:"]
        for token, fb in sorted(entries.items()):
            if fb.net_positive:
                example = f" e.g. /{fb.last_full_command}" if fb.last_full_command else ""
                lines.append(f"  /{token} ({fb.success_count}x success){example}")
        lines.append("Commands with problems:")
        for token, fb in sorted(entries.items()):
            if fb.net_negative:
                lines.append(f"  /{token} ({fb.fail_count}x failed) - {fb.last_error}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = [
    "CommandFeedback",
    "CommandFeedbackLedger",
    "base_command",
]
