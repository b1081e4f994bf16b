"""Line-oriented parser for model replies.

Replies use three line prefixes (matched case-insensitively):

    MSG: text for the player
    CMD: /command
    DELAY:<seconds>: /command

Everything else is ignored. Parsing never fails; a reply without any MSG
line is shown to the player verbatim so they always get feedback.
"""

from __future__ import annotations

import re

from command_bridge.core.constants import FALLBACK_COLOR
from command_bridge.core.logging import get_logger
from command_bridge.models.directives import DelayedCommand, Directive, ImmediateCommand, Message

logger = get_logger(__name__)

_DELAY_PATTERN = re.compile(r"^DELAY:(\d+):(.*)$", re.IGNORECASE | re.DOTALL)


def strip_slash(command: str) -> str:
    """Trim a command and drop a single leading slash."""
    command = command.strip()
    return command[1:] if command.startswith("/") else command


def _after_colon(line: str) -> str:
    return line.split(":", 1)[1].strip()


class ResponseParser:
    """Turns a model reply into an ordered list of directives."""

    def __init__(self, fallback_color: str = FALLBACK_COLOR) -> None:
        self.fallback_color = fallback_color

    def parse(self, response: str) -> list[Directive]:
        """Parse ``response`` line by line.

        Args:
            response: Raw reply text from the provider.

        Returns:
            Directives in reply order. Contains at least one Message.
        """
        directives: list[Directive] = []
        has_message = False

        for line in response.splitlines():
            trimmed = line.strip()
            upper = trimmed.upper()

            if upper.startswith("MSG:"):
                directives.append(Message(text=_after_colon(trimmed)))
                has_message = True
            elif upper.startswith("CMD:"):
                directives.append(ImmediateCommand(text=strip_slash(_after_colon(trimmed))))
            elif upper.startswith("DELAY:"):
                match = _DELAY_PATTERN.match(trimmed)
                if match is None:
                    continue
                try:
                    seconds = int(match.group(1))
                except ValueError:
                    seconds = 0
                directives.append(
                    DelayedCommand(text=strip_slash(match.group(2)), delay_seconds=seconds)
                )

        if not has_message:
            directives.append(Message(text=f"{self.fallback_color}{response}"))

        logger.debug(
            "Parsed reply",
            directives=len(directives),
            fallback=not has_message,
        )
        return directives


__all__ = [
    "ResponseParser",
    "strip_slash",
]
