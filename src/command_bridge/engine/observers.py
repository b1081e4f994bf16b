"""Failure signals gathered while a command runs.

Hosts that can report why a command failed do so through DispatchResult.
For opaque command handlers the only signal is what they log, so the
LogKeywordObserver attaches a temporary handler to the host's loggers and
keeps the first line containing a failure keyword.

Keyword matching on log output is a heuristic: unrelated log lines emitted
during the settle window can be mistaken for failures, and handlers that
fail silently are missed. It sits behind OutcomeObserver so a better signal
can replace it without touching the supervisor.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from command_bridge.core.constants import ERROR_DETAIL_MAX_LENGTH, ERROR_KEYWORDS


class Observation(ABC):
    """An active observation window around one dispatch."""

    @abstractmethod
    def stop(self) -> str | None:
        """Close the window.

        Returns:
            The captured failure detail, or None if nothing was seen.
        """


class OutcomeObserver(ABC):
    """Factory for observation windows."""

    @abstractmethod
    def start(self) -> Observation:
        """Open a window immediately before dispatch."""


# =============================================================================
# Log Keyword Observer
# =============================================================================


class _KeywordHandler(logging.Handler):
    """Keeps the first log message that contains a failure keyword."""

    def __init__(self, keywords: Sequence[str], max_length: int) -> None:
        super().__init__(level=logging.NOTSET)
        self.keywords = tuple(keyword.lower() for keyword in keywords)
        self.max_length = max_length
        self._captured: str | None = None
        self._captured_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
        except Exception:
            self.handleError(record)
            return
        lowered = message.lower()
        if any(keyword in lowered for keyword in self.keywords):
            with self._captured_lock:
                if self._captured is None:
                    self._captured = message[: self.max_length]

    @property
    def captured(self) -> str | None:
        with self._captured_lock:
            return self._captured


class _LogObservation(Observation):
    def __init__(self, handler: _KeywordHandler, loggers: list[logging.Logger]) -> None:
        self._handler = handler
        self._loggers = loggers
        for target in loggers:
            target.addHandler(handler)

    def stop(self) -> str | None:
        for target in self._loggers:
            target.removeHandler(self._handler)
        return self._handler.captured


class LogKeywordObserver(OutcomeObserver):
    """Watches stdlib loggers for failure keywords during dispatch.

    Usage:
        >>> observer = LogKeywordObserver(["minecraft.console"])
        >>> window = observer.start()
        >>> ...dispatch...
        >>> error = window.stop()
    """

    def __init__(
        self,
        logger_names: Iterable[str] = ("",),
        *,
        keywords: Sequence[str] = ERROR_KEYWORDS,
        max_length: int = ERROR_DETAIL_MAX_LENGTH,
    ) -> None:
        self.logger_names = list(logger_names)
        self.keywords = list(keywords)
        self.max_length = max_length

    def start(self) -> Observation:
        handler = _KeywordHandler(self.keywords, self.max_length)
        loggers = [logging.getLogger(name or None) for name in self.logger_names]
        return _LogObservation(handler, loggers)


class NullObserver(OutcomeObserver):
    """Observer for hosts that report every failure through DispatchResult."""

    class _Empty(Observation):
        def stop(self) -> str | None:
            return None

    def start(self) -> Observation:
        return self._Empty()


__all__ = [
    "Observation",
    "OutcomeObserver",
    "LogKeywordObserver",
    "NullObserver",
]
