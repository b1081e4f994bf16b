"""Game host boundary.

Exports:
    GameHost: Abstract host the bridge runs against.
    call_on_main: Await a callable on the host's main thread.
    ChatTriggerListener: Inbound chat trigger.
    AdminCommand: ``/gpt on|off|reload``.
"""

from __future__ import annotations

from command_bridge.host.admin import AdminCommand
from command_bridge.host.chat import ChatTriggerListener, EnableFlags
from command_bridge.host.delivery import (
    assistant_lines,
    deliver_message,
    deliver_raw,
    error_line,
    show_notification,
    split_message,
)
from command_bridge.host.interfaces import GameHost, call_on_main


__all__ = [
    "GameHost",
    "call_on_main",
    "ChatTriggerListener",
    "EnableFlags",
    "AdminCommand",
    "split_message",
    "assistant_lines",
    "error_line",
    "deliver_message",
    "deliver_raw",
    "show_notification",
]
