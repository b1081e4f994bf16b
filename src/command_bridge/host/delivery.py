"""Actor-facing message delivery.

Model messages may contain the two-character sequence ``\\n`` to break
lines; each piece becomes its own chat line with the assistant prefix.
Colour codes are passed through for the host to render.
"""

from __future__ import annotations

from uuid import UUID

from command_bridge.core.config import Notification
from command_bridge.core.constants import ASSISTANT_PREFIX, BRIDGE_PREFIX, LITERAL_NEWLINE
from command_bridge.host.interfaces import GameHost, call_on_main
from command_bridge.models.enums import MessageType


def split_message(text: str) -> list[str]:
    """Split a model message on literal ``\\n`` sequences."""
    return text.split(LITERAL_NEWLINE)


def assistant_lines(text: str) -> list[str]:
    """Prefixed chat lines for one model message."""
    return [f"{ASSISTANT_PREFIX}{line}" for line in split_message(text)]


def error_line(detail: str) -> str:
    """Chat line reporting a pipeline failure."""
    return f"§c{BRIDGE_PREFIX} §7Error: §f{detail}"


async def deliver_message(host: GameHost, actor_id: UUID, text: str) -> None:
    """Send a model message to an actor from the main thread."""
    lines = assistant_lines(text)

    def send() -> None:
        for line in lines:
            host.send_message(actor_id, line)

    await call_on_main(host, send)


async def deliver_raw(host: GameHost, actor_id: UUID, line: str) -> None:
    """Send one unprefixed line to an actor from the main thread."""
    await call_on_main(host, lambda: host.send_message(actor_id, line))


def show_notification(host: GameHost, actor_id: UUID, notification: Notification) -> None:
    """Show a configured notification. Must run on the main thread."""
    if notification.type is MessageType.TITLE:
        if notification.title or notification.subtitle:
            host.send_title(actor_id, notification.title, notification.subtitle)
    elif notification.type is MessageType.ACTIONBAR:
        if notification.content:
            host.send_action_bar(actor_id, notification.content)
    elif notification.content:
        host.send_message(actor_id, notification.content)


__all__ = [
    "split_message",
    "assistant_lines",
    "error_line",
    "deliver_message",
    "deliver_raw",
    "show_notification",
]
