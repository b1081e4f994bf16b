"""Inbound chat trigger.

The host forwards every chat line here. A line is a request when the actor
has the bridge enabled and the line starts with the trigger marker; such
lines are consumed so other players never see them.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol
from uuid import UUID

from command_bridge.core.config import Settings, get_settings
from command_bridge.core.constants import BRIDGE_PREFIX
from command_bridge.core.exceptions import BridgeError
from command_bridge.core.logging import get_logger
from command_bridge.host.delivery import show_notification
from command_bridge.host.interfaces import GameHost
from command_bridge.models.host import Actor

logger = get_logger(__name__)


class EnableFlags(Protocol):
    """Per-actor on/off switch for the chat trigger."""

    def is_enabled(self, actor_id: UUID) -> bool: ...

    def set_enabled(self, actor_id: UUID, enabled: bool) -> None: ...


class ChatTriggerListener:
    """Turns marked chat lines into bridge requests."""

    def __init__(
        self,
        host: GameHost,
        flags: EnableFlags,
        submit: Callable[[Actor, str], Any],
        settings_provider: Callable[[], Settings] = get_settings,
    ) -> None:
        self.host = host
        self.flags = flags
        self.submit = submit
        self.settings_provider = settings_provider

    def on_chat(self, actor: Actor, message: str) -> bool:
        """Handle one chat line.

        May be called from any thread; replies to the actor are scheduled
        on the main thread.

        Returns:
            True when the line was a request and the chat event should be
            cancelled.
        """
        try:
            enabled = self.flags.is_enabled(actor.id)
        except BridgeError as exc:
            logger.error("Could not read enable flag", actor=actor.name, error=str(exc))
            return False
        if not enabled:
            return False

        settings = self.settings_provider()
        marker = settings.trigger.marker
        if not message.startswith(marker):
            return False

        request = message[len(marker):].strip()
        if not request:
            self.host.run_on_main_thread(
                lambda: self.host.send_message(
                    actor.id,
                    f"§c{BRIDGE_PREFIX} Usage: {marker} <your request>",
                )
            )
            return True

        logger.info("Trigger accepted", actor=actor.name, request=request)
        notification = settings.messages.request_sent
        self.host.run_on_main_thread(
            lambda: show_notification(self.host, actor.id, notification)
        )
        self.submit(actor, request)
        return True


__all__ = [
    "ChatTriggerListener",
    "EnableFlags",
]
