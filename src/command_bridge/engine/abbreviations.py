"""Abbreviation hints for player requests.

Players type short forms ("gmc", "tp", "ench"). Rather than rewriting the
request, every known short form gets an annotation appended to the end of
the text listing the commands it usually stands for. The original wording
is left untouched.
"""

from __future__ import annotations

from collections.abc import Mapping

ABBREVIATIONS: dict[str, tuple[str, ...]] = {
    "gm": ("gamemode",),
    "gmc": ("gamemode creative",),
    "gms": ("gamemode survival",),
    "gma": ("gamemode adventure",),
    "gmsp": ("gamemode spectator",),
    "tp": ("tp", "teleport"),
    "tphere": ("tp <player> <you>", "tphere"),
    "tpa": ("tpa", "tpaccept"),
    "inv": ("invsee", "clear"),
    "ench": ("enchant",),
    "eff": ("effect give",),
    "xp": ("xp add", "experience"),
    "lvl": ("xp add <player> <n> levels",),
    "wl": ("whitelist",),
    "hp": ("effect give <player> instant_health", "heal"),
    "heal": ("heal", "effect give <player> instant_health"),
    "feed": ("feed", "effect give <player> saturation"),
    "fly": ("fly", "ability <player> mayfly true"),
    "god": ("god", "effect give <player> resistance 1000000 255"),
    "ipban": ("ban-ip", "ipban"),
    "tm": ("time set",),
    "day": ("time set day",),
    "night": ("time set night",),
    "rain": ("weather rain",),
    "sun": ("weather clear",),
    "clr": ("clear",),
    "spawn": ("spawn", "tp <player> <world spawn>"),
    "lp": ("luckperms", "lp"),
}

_STRIP = ".,!?;:"


class AbbreviationExpander:
    """Appends candidate expansions for known short forms.

    Usage:
        >>> AbbreviationExpander().expand("gmc please")
        'gmc please [abbreviation: gmc = gamemode creative]'
    """

    def __init__(self, mapping: Mapping[str, tuple[str, ...]] | None = None) -> None:
        self.mapping = dict(mapping if mapping is not None else ABBREVIATIONS)

    def expand(self, text: str) -> str:
        """Annotate ``text`` with one note per known-token occurrence.

        Args:
            text: The raw request.

        Returns:
            The text unchanged when no token is known; otherwise the text
            followed by one bracketed note for each occurrence.
        """
        notes = []
        for raw in text.split():
            token = raw.lower().strip(_STRIP)
            candidates = self.mapping.get(token)
            if candidates:
                notes.append(f"[abbreviation: {token} = {' | '.join(candidates)}]")
        if not notes:
            return text
        return f"{text} {' '.join(notes)}"


__all__ = [
    "ABBREVIATIONS",
    "AbbreviationExpander",
]
