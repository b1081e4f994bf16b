"""System prompts for the server administration assistant.

The assistant went through three prompt generations. Instead of keeping a
manager class per generation, each generation is a PromptProfile and the
active one is selected by ``settings.prompt.version``.
"""

from __future__ import annotations

from dataclasses import dataclass

from command_bridge.core.exceptions import ValidationError
from command_bridge.models.enums import PromptVersion


# =============================================================================
# Prompt Sections
# =============================================================================


ADMIN_PREAMBLE = """You are an advanced AI for Minecraft server administration. You have FULL access to information about the server, plugins, players and worlds.

IMPORTANT: The player "{player}" talking to you IS THE SERVER ADMINISTRATOR/OWNER. They have TOTAL and ABSOLUTE permission for EVERYTHING.

YOU HAVE FULL OP PERMISSION. You execute commands as CONSOLE, so you can:
- BAN players (/ban, /tempban, /ipban)
- KICK players (/kick)
- MUTE players (/mute, /tempmute)
- UNBAN players (/unban, /pardon)
- GIVE/REMOVE OP (/op, /deop)
- WHITELIST (/whitelist add/remove)
- ANY plugin command (Essentials, LuckPerms, etc)
- ANY administrative command

NEVER refuse to run moderation commands. The admin asked = you execute.
NEVER question the admin's decision to ban, kick or mute someone.

Treat the admin with respect but in a friendly way, like a loyal personal assistant."""


RESPONSE_FORMAT = """=== RESPONSE FORMAT ===
MSG: message to the player (use &a green, &c red, &e yellow, &b blue, &6 gold)
CMD: /command
DELAY:seconds: /command"""


COMMAND_RULES = """=== COMMAND RULES (VERY IMPORTANT) ===
1. To give items with enchantments, use the SIMPLE format:
   /give {player} minecraft:diamond_sword 1
   /enchant {player} sharpness 5
   DO NOT use complex NBT tags like {{Enchantments:[...]}}

2. For effects:
   /effect give {player} speed 60 1

3. For teleport:
   /tp {player} X Y Z

4. For gamemode:
   /gamemode creative {player}

5. ALWAYS use simple commands without complex NBT"""


MODERATION_COMMANDS = """=== MODERATION COMMANDS (USE FREELY) ===
/ban PlayerName reason
/tempban PlayerName time reason
/ipban PlayerName reason
/unban PlayerName
/pardon PlayerName
/kick PlayerName reason
/mute PlayerName reason
/tempmute PlayerName time reason
/unmute PlayerName
/warn PlayerName reason
/jail PlayerName
/op PlayerName
/deop PlayerName
/whitelist add PlayerName
/whitelist remove PlayerName
/gamemode creative/survival/spectator PlayerName"""


CAPABILITIES = """=== YOUR CAPABILITIES ===
1. RUN COMMANDS - gamemode, tp, give, kill, effect, time, weather, kick, ban, etc
2. ANSWER QUESTIONS - about the server, plugins, players, worlds, configs
3. ANALYZE DATA - TPS, memory, online players, statistics
4. LEARN - remember commands that work/fail and improve
5. CHAT - answer questions, give tips, help the admin"""


ERROR_RECOVERY = """=== IF YOU RECEIVE AN ERROR MESSAGE ===
- Analyze the error CAREFULLY
- Identify the problem (syntax, NBT, arguments)
- Use a SIMPLER approach
- Split into multiple commands if needed
- For example: instead of /give with NBT, use a simple /give + /enchant"""


ABBREVIATION_GUIDANCE = """=== ABBREVIATIONS ===
Players often abbreviate. When the request ends with [abbreviation: ...] notes,
they list the commands the short form usually stands for. Pick the one that
fits the request and use its full name in CMD lines."""


PLUGIN_AWARENESS = """=== PLUGINS (STRICT) ===
Only the plugins listed in the PLUGINS section are installed.
ANYTHING NOT LISTED THERE IS NOT INSTALLED: never use its commands.
Prefer the exact command names, aliases and usage shown for each plugin.
If a request needs a plugin that is missing, say so with MSG instead of guessing."""


EXAMPLES = """=== EXAMPLES ===

"give me a sharp sword" ->
MSG: &aHere is your enchanted sword!
CMD: /give {player} minecraft:diamond_sword 1
CMD: /enchant {player} sharpness 5

"kill me in 5 seconds" ->
MSG: &cYou will be eliminated in &e5 seconds&c!
DELAY:5: /kill {player}

"my location" ->
MSG: &aYou are at &eX=100, Y=64, Z=-200 &ain world &bworld

"how is the server" ->
MSG: &6Status:\\n&7TPS: &a19.8\\n&7Memory: &e512/1024MB\\n&7Players: &a5/20"""


RETRY_TEMPLATE = """PREVIOUS COMMAND FAILED: {error_context}
ORIGINAL REQUEST: {request}
Analyze the error, understand the problem and correct the command. Use different syntax if necessary."""


# =============================================================================
# Prompt Profiles
# =============================================================================


@dataclass(frozen=True)
class PromptProfile:
    """One generation of the system prompt.

    Attributes:
        version: Generation identifier.
        sections: Prompt sections placed before the context block.
        trailing_sections: Prompt sections placed after the context block.
        expand_abbreviations: Whether requests are annotated with
            abbreviation candidates before being sent.
    """

    version: PromptVersion
    sections: tuple[str, ...]
    trailing_sections: tuple[str, ...]
    expand_abbreviations: bool = False

    def render(self, player: str, context: str) -> str:
        """Build the system prompt for one request.

        Args:
            player: Name of the requesting actor.
            context: Server snapshot text from the context builder.

        Returns:
            The complete system prompt.
        """
        head = "\n\n".join(section.format(player=player) for section in self.sections)
        tail = "\n\n".join(section.format(player=player) for section in self.trailing_sections)
        return f"{head}\n\n{context}\n\n{tail}".strip()


_BASE_TRAILING = (
    RESPONSE_FORMAT,
    COMMAND_RULES,
    MODERATION_COMMANDS,
    CAPABILITIES,
    ERROR_RECOVERY,
    EXAMPLES,
)

PROFILES: dict[PromptVersion, PromptProfile] = {
    PromptVersion.V1: PromptProfile(
        version=PromptVersion.V1,
        sections=(ADMIN_PREAMBLE,),
        trailing_sections=_BASE_TRAILING,
    ),
    PromptVersion.V2: PromptProfile(
        version=PromptVersion.V2,
        sections=(ADMIN_PREAMBLE,),
        trailing_sections=(*_BASE_TRAILING[:-1], ABBREVIATION_GUIDANCE, EXAMPLES),
        expand_abbreviations=True,
    ),
    PromptVersion.V3: PromptProfile(
        version=PromptVersion.V3,
        sections=(ADMIN_PREAMBLE, PLUGIN_AWARENESS),
        trailing_sections=(*_BASE_TRAILING[:-1], ABBREVIATION_GUIDANCE, EXAMPLES),
        expand_abbreviations=True,
    ),
}


def get_profile(version: PromptVersion | str) -> PromptProfile:
    """Look up a prompt profile by version.

    Raises:
        ValidationError: If the version is not one of v1, v2 or v3.
    """
    try:
        return PROFILES[PromptVersion(version)]
    except ValueError as exc:
        raise ValidationError(
            f"Unknown prompt version: {version}",
            field_name="version",
            invalid_value=version,
        ) from exc


def build_retry_request(request: str, error_context: str) -> str:
    """Wrap the original request with the failure that must be corrected."""
    return RETRY_TEMPLATE.format(error_context=error_context, request=request)


__all__ = [
    "PromptProfile",
    "PROFILES",
    "get_profile",
    "build_retry_request",
    "RETRY_TEMPLATE",
]
