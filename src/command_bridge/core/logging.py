"""Structured logging for the command bridge.

Bridge events are emitted through structlog straight to a stream or file,
never through the standard library's handlers. The host's stdlib loggers
are what the log-keyword observer scans for command failures, so the
bridge keeps its own output out of them and leaves the root logger alone.

Example:
    >>> from command_bridge.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Command dispatched", command="time set day", attempt=1)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from command_bridge.core.config import Settings


SECRET_KEYS = frozenset({"api_key", "authorization", "x-api-key", "key"})
"""Event keys whose values are masked before rendering."""

MAX_VALUE_LENGTH = 500
"""String values longer than this are clipped (model replies can be long)."""

QUIET_LOGGERS = ("urllib3", "requests")
"""Third-party stdlib loggers held at WARNING."""

_log_stream: TextIO | None = None


# =============================================================================
# Processors
# =============================================================================


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every log entry with the application name."""
    event_dict["app"] = "command_bridge"
    return event_dict


def redact_secrets(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask provider credentials, including inside header dicts."""
    for key, value in event_dict.items():
        if key.lower() in SECRET_KEYS and value:
            event_dict[key] = "***"
        elif isinstance(value, dict):
            event_dict[key] = {
                name: "***" if str(name).lower() in SECRET_KEYS and item else item
                for name, item in value.items()
            }
    return event_dict


def clip_long_values(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Shorten oversized string values such as raw provider replies."""
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_VALUE_LENGTH:
            event_dict[key] = f"{value[:MAX_VALUE_LENGTH]}... ({len(value)} chars)"
    return event_dict


# =============================================================================
# Configuration
# =============================================================================


def _open_stream(log_file: str | Path | None) -> TextIO:
    global _log_stream

    if _log_stream is not None and _log_stream not in (sys.stdout, sys.stderr):
        _log_stream.close()
    if log_file is None:
        _log_stream = sys.stdout
    else:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        _log_stream = path.open("a", encoding="utf-8")
    return _log_stream


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """Configure bridge logging.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render JSON lines instead of console output.
        log_file: Append to this file instead of writing to stdout.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    stream = _open_stream(log_file)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        redact_secrets,
        clip_long_values,
    ]

    if json_format or log_file is not None:
        renderer: Processor = structlog.processors.JSONRenderer()
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            renderer,
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=stream.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_from_settings(settings: Settings, log_file: str | Path | None = None) -> None:
    """Configure logging from the ``log_level``, ``log_json`` and ``debug`` settings."""
    level = "DEBUG" if settings.debug else settings.log_level
    configure_logging(level=level, json_format=settings.log_json, log_file=log_file)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Optional name for the logger (typically __name__).

    Returns:
        A configured structlog BoundLogger instance.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in every log entry of this task.

    The orchestrator binds the actor at the start of each request so
    provider, parser and supervisor logs can be correlated.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "redact_secrets",
    "clip_long_values",
]
