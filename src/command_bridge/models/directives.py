"""Directive models produced from a model reply.

A reply is turned into an ordered list of directives. Messages are shown
to the actor, immediate commands are dispatched at once and delayed
commands are scheduled after a number of seconds.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from command_bridge.models.enums import DirectiveKind


class Message(BaseModel):
    """Text delivered to the requesting actor."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[DirectiveKind.MESSAGE] = DirectiveKind.MESSAGE
    text: str


class ImmediateCommand(BaseModel):
    """A command dispatched as soon as it is reached."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[DirectiveKind.IMMEDIATE_COMMAND] = DirectiveKind.IMMEDIATE_COMMAND
    text: str = Field(description="Command without the leading slash")


class DelayedCommand(BaseModel):
    """A command dispatched after ``delay_seconds``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[DirectiveKind.DELAYED_COMMAND] = DirectiveKind.DELAYED_COMMAND
    text: str = Field(description="Command without the leading slash")
    delay_seconds: int = Field(default=0, ge=0)


Directive = Annotated[
    Message | ImmediateCommand | DelayedCommand,
    Field(discriminator="kind"),
]


__all__ = [
    "Message",
    "ImmediateCommand",
    "DelayedCommand",
    "Directive",
]
