"""Symbolic names for background and UI effect textures.

``background`` accepts an item type name and ``ui_effect`` accepts an effect
name, both case-insensitive, as an alternative to a texture identifier. The
token ``random`` picks uniformly among a table's entries.
"""

from __future__ import annotations

import random
from typing import Mapping

from .core.errors import InvalidIdentifier, InvalidSymbolicName
from .core.ids import resolve

RANDOM_TOKEN = "random"

TRANSPARENT_EFFECT = 0x060011C5

# Item type -> background texture
BACKGROUNDS: dict[str, int] = {
    "melee_weapon": 0x060011CB,
    "armor": 0x060011CF,
    "clothing": 0x060011F3,
    "jewelry": 0x060011D5,
    "creature": 0x060011D1,
    "food": 0x060011CC,
    "money": 0x060011F4,
    "misc": 0x060011D0,
    "missile_weapon": 0x060011D2,
    "container": 0x060011CE,
    "gem": 0x060011D3,
    "spell_components": 0x060011CD,
    "key": 0x060011D6,
    "caster": 0x06001A3B,
    "portal": 0x060011D4,
    "promissory_note": 0x060011D7,
    "mana_stone": 0x060011D8,
    "service": 0x060011D9,
}

UI_EFFECTS: dict[str, int] = {
    "undef": TRANSPARENT_EFFECT,
    "magical": 0x060011CA,
    "poisoned": 0x060011C6,
    "boost_health": 0x06001B05,
    "boost_mana": 0x06001B06,
    "boost_stamina": 0x06001B04,
    "fire": 0x06001B2E,
    "lightning": 0x06001B2F,
    "frost": 0x06001B2D,
    "acid": 0x06001B2C,
    "bludgeoning": 0x060033C3,
    "slashing": 0x060033C2,
    "piercing": 0x060033C4,
    "nether": 0x06005DB7,
    # fire+magical; the element texture wins
    "default": 0x06001B2E,
    "reversed": TRANSPARENT_EFFECT,
}


def resolve_named(
    text: str,
    table: Mapping[str, int],
    *,
    kind: str,
    rng: random.Random | None = None,
) -> int:
    """Resolve an identifier, a table name, or ``random`` to a canonical ID.

    Identifier syntax is tried first so that numeric spellings never collide
    with names.

    Raises:
        InvalidSymbolicName: If *text* is neither an identifier nor a known
            name in *table*.
    """
    try:
        return resolve(text)
    except InvalidIdentifier:
        pass

    name = text.strip().lower()
    if name == RANDOM_TOKEN:
        if not table:
            raise InvalidSymbolicName(f"No {kind} names configured for `random`")
        choice = (rng or random).choice(sorted(table))
        return table[choice]

    try:
        return table[name]
    except KeyError:
        raise InvalidSymbolicName(
            f"Unknown {kind} `{text}`. Expected an ID, `random`, or one of: "
            + ", ".join(table)
        ) from None
