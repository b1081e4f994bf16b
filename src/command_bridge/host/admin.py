"""The ``/gpt on|off|reload`` command.

Permission checks belong to the host; by the time ``execute`` runs the
sender is allowed to use it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from command_bridge.core.config import Settings, clear_settings_cache, get_settings
from command_bridge.core.constants import BRIDGE_PREFIX
from command_bridge.core.exceptions import PersistenceError
from command_bridge.core.logging import get_logger
from command_bridge.host.chat import EnableFlags
from command_bridge.host.delivery import show_notification
from command_bridge.host.interfaces import GameHost
from command_bridge.models.host import Actor

logger = get_logger(__name__)

USAGE = f"{BRIDGE_PREFIX} Usage: /gpt <on|off|reload>"
VERBS = ("on", "off", "reload")


class AdminCommand:
    """Toggles the per-actor enable flag and reloads configuration.

    Must be called on the host's main thread, as command handlers are.
    """

    def __init__(
        self,
        host: GameHost,
        flags: EnableFlags,
        *,
        on_reload: Callable[[], None] | None = None,
        settings_provider: Callable[[], Settings] = get_settings,
    ) -> None:
        self.host = host
        self.flags = flags
        self.on_reload = on_reload
        self.settings_provider = settings_provider

    def execute(self, actor: Actor, args: Sequence[str]) -> bool:
        """Run the command.

        Returns:
            True if the arguments were understood.
        """
        verb = args[0].lower() if args else ""

        if verb in ("on", "off"):
            enabled = verb == "on"
            try:
                self.flags.set_enabled(actor.id, enabled)
            except PersistenceError as exc:
                logger.error("Could not toggle bridge", actor=actor.name, error=str(exc))
                self.host.send_message(actor.id, f"§c{BRIDGE_PREFIX} Could not save setting.")
                return True
            messages = self.settings_provider().messages
            show_notification(
                self.host,
                actor.id,
                messages.gpt_enabled if enabled else messages.gpt_disabled,
            )
            return True

        if verb == "reload":
            clear_settings_cache()
            if self.on_reload is not None:
                self.on_reload()
            logger.info("Configuration reloaded", actor=actor.name)
            show_notification(self.host, actor.id, self.settings_provider().messages.reload_success)
            return True

        self.host.send_message(actor.id, USAGE)
        return False

    def complete(self, args: Sequence[str]) -> list[str]:
        """Tab-completion candidates for the first argument."""
        if len(args) > 1:
            return []
        prefix = args[0].lower() if args else ""
        return [verb for verb in VERBS if verb.startswith(prefix)]


__all__ = [
    "AdminCommand",
    "USAGE",
    "VERBS",
]
