"""
Expansion classification.

Maps a set to the expansion ("era") it belongs to, for grouping in set
pickers. classify() is total and pure: it always returns a label and
never does I/O.

Resolution order:
1. Set code: special-case table, then ordered code patterns.
2. Set name: direct lookup table, then "name contains an expansion label",
   then substring overlap with any lookup-table key (either direction).
3. FALLBACK_EXPANSION.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from pokeprice.models.set import PokemonSet, sort_sets_by_release_date

FALLBACK_EXPANSION = "Other"

# First match wins. Patterns are case-sensitive: lowercase prefixes match
# Pokemon TCG API ids ("sv8pt5"), uppercase ones match PokeData codes.
EXPANSION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^sv|^JTG|^PRE|^SSP"), "Scarlet & Violet"),
    (re.compile(r"^swsh"), "Sword & Shield"),
    (re.compile(r"^sm|^SMP"), "Sun & Moon"),
    (re.compile(r"^xy|^XYP"), "XY"),
    (re.compile(r"^bw|^BWP"), "Black & White"),
    (re.compile(r"^hgss|^hs|^HSP"), "HeartGold & SoulSilver"),
    (re.compile(r"^dp|^DPP"), "Diamond & Pearl"),
    (re.compile(r"^ex"), "EX"),
    (re.compile(r"^PL|^SV|^RR|^SF|^LA|^MD"), "Platinum"),
    (re.compile(r"^CL|^TM|^UD|^UL"), "Call of Legends"),
    (re.compile(r"^N\d"), "Neo"),
    (re.compile(r"^G\d"), "Gym"),
    (re.compile(r"^BS|^B2|^JU|^FO|^RO"), "Base Set"),
]

# Codes that the patterns above would misfile or miss
SPECIAL_CASES: dict[str, str] = {
    "CRZ": "Sword & Shield",
    "SIT": "Sword & Shield",
    "LOR": "Sword & Shield",
    "PGO": "Sword & Shield",
    "ASR": "Sword & Shield",
    "BRS": "Sword & Shield",
    "FST": "Sword & Shield",
    "CEL": "Sword & Shield",
    "EVS": "Sword & Shield",
    "CRE": "Sword & Shield",
    "BST": "Sword & Shield",
    "SHF": "Sword & Shield",
    "VIV": "Sword & Shield",
    "CPA": "Sword & Shield",
    "DAA": "Sword & Shield",
    "RCL": "Sword & Shield",
    "SSH": "Sword & Shield",
    "SWSHP": "Sword & Shield",
    "DRI": "Scarlet & Violet",
    "JOT": "Scarlet & Violet",
    "SCR": "Scarlet & Violet",
    "SFA": "Scarlet & Violet",
    "TWM": "Scarlet & Violet",
    "TEF": "Scarlet & Violet",
    "PAF": "Scarlet & Violet",
    "PAR": "Scarlet & Violet",
    "MEW": "Scarlet & Violet",
    "OBF": "Scarlet & Violet",
    "PAL": "Scarlet & Violet",
    "SVE": "Scarlet & Violet",
    "SVI": "Scarlet & Violet",
    "SVP": "Scarlet & Violet",
}


def _names(expansion: str, *names: str) -> dict[str, str]:
    return {name: expansion for name in names}


# PokeData ships many sets without a code; these are classified by name.
NAME_TO_EXPANSION: dict[str, str] = {
    **_names(
        "Scarlet & Violet",
        "Scarlet & Violet Base",
        "Paldea Evolved",
        "Obsidian Flames",
        "Pokemon Card 151",
        "151",
        "Paradox Rift",
        "Paldean Fates",
        "Temporal Forces",
        "Twilight Masquerade",
        "Shrouded Fable",
        "Stellar Crown",
        "Surging Sparks",
        "Prismatic Evolutions",
        "Journey Together",
        "Destined Rivals",
        "Black Bolt",
        "White Flare",
    ),
    **_names(
        "Sword & Shield",
        "Sword & Shield Base",
        "Rebel Clash",
        "Darkness Ablaze",
        "Champion's Path",
        "Vivid Voltage",
        "Shining Fates",
        "Battle Styles",
        "Chilling Reign",
        "Evolving Skies",
        "Celebrations",
        "Fusion Strike",
        "Brilliant Stars",
        "Astral Radiance",
        "Pokemon GO",
        "Lost Origin",
        "Silver Tempest",
        "Crown Zenith",
    ),
    **_names(
        "Sun & Moon",
        "Sun & Moon Base",
        "Guardians Rising",
        "Burning Shadows",
        "Shining Legends",
        "Crimson Invasion",
        "Ultra Prism",
        "Forbidden Light",
        "Celestial Storm",
        "Dragon Majesty",
        "Lost Thunder",
        "Team Up",
        "Detective Pikachu",
        "Unbroken Bonds",
        "Unified Minds",
        "Hidden Fates",
        "Cosmic Eclipse",
    ),
    **_names(
        "XY",
        "XY Base",
        "Flashfire",
        "Furious Fists",
        "Phantom Forces",
        "Primal Clash",
        "Double Crisis",
        "Roaring Skies",
        "Ancient Origins",
        "BREAKthrough",
        "BREAKpoint",
        "Generations",
        "Fates Collide",
        "Steam Siege",
        "Evolutions",
    ),
    **_names(
        "Black & White",
        "Emerging Powers",
        "Noble Victories",
        "Next Destinies",
        "Dark Explorers",
        "Dragons Exalted",
        "Dragon Vault",
        "Boundaries Crossed",
        "Plasma Storm",
        "Plasma Freeze",
        "Plasma Blast",
        "Legendary Treasures",
    ),
    **_names("HeartGold & SoulSilver", "Unleashed", "Undaunted", "Triumphant"),
    **_names("Platinum", "Rising Rivals", "Supreme Victors", "Arceus"),
    **_names(
        "Diamond & Pearl",
        "Mysterious Treasures",
        "Secret Wonders",
        "Great Encounters",
        "Majestic Dawn",
        "Legends Awakened",
        "Stormfront",
    ),
    **_names("Base Set", "Jungle", "Fossil", "Base Set 2", "Team Rocket"),
}

# Display order for grouped set lists, newest era first
EXPANSION_PRIORITY: list[str] = [
    "Scarlet & Violet",
    "Sword & Shield",
    "Sun & Moon",
    "XY",
    "Black & White",
    "HeartGold & SoulSilver",
    "Call of Legends",
    "Platinum",
    "Diamond & Pearl",
    "EX",
    "Neo",
    "Gym",
    "Base Set",
    FALLBACK_EXPANSION,
]

# Labels a set name may spell out verbatim ("Scarlet & Violet Base")
_EXPANSION_LABELS: list[str] = list(dict.fromkeys(label for _, label in EXPANSION_PATTERNS))


def classify_code(code: str) -> str | None:
    """Classify by set code alone. Returns None if no rule matches."""
    special = SPECIAL_CASES.get(code)
    if special:
        return special

    for pattern, expansion in EXPANSION_PATTERNS:
        if pattern.search(code):
            return expansion

    return None


def classify_name(name: str) -> str | None:
    """Classify by set name alone. Returns None if no rule matches."""
    if not name:
        return None

    direct = NAME_TO_EXPANSION.get(name)
    if direct:
        return direct

    for label in _EXPANSION_LABELS:
        if label in name:
            return label

    lowered = name.lower()
    for known_name, expansion in NAME_TO_EXPANSION.items():
        known = known_name.lower()
        if known in lowered or lowered in known:
            return expansion

    return None


def classify(pokemon_set: PokemonSet) -> str:
    """
    Determine the expansion label for a set.

    Always returns a label; FALLBACK_EXPANSION when nothing matches.
    """
    if pokemon_set.code:
        by_code = classify_code(pokemon_set.code)
        if by_code:
            return by_code

    return classify_name(pokemon_set.name) or FALLBACK_EXPANSION


@dataclass
class ExpansionGroup:
    """One expansion and its sets, newest first."""

    label: str
    items: list[PokemonSet] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "group",
            "label": self.label,
            "items": [item.to_dict() for item in self.items],
        }


def group_sets_by_expansion(sets: list[PokemonSet]) -> dict[str, list[PokemonSet]]:
    """
    Group sets by expansion label.

    Labels appear in discovery order; sets within a label are sorted by
    release date descending.
    """
    grouped: dict[str, list[PokemonSet]] = {}
    for pokemon_set in sets:
        grouped.setdefault(classify(pokemon_set), []).append(pokemon_set)

    return {label: sort_sets_by_release_date(members) for label, members in grouped.items()}


def prepare_grouped_sets(grouped: dict[str, list[PokemonSet]]) -> list[ExpansionGroup]:
    """
    Order groups for display.

    Labels in EXPANSION_PRIORITY come first in that order, then any other
    labels in discovery order. Empty groups are dropped.
    """
    result: list[ExpansionGroup] = []

    for label in EXPANSION_PRIORITY:
        if grouped.get(label):
            result.append(ExpansionGroup(label=label, items=grouped[label]))

    for label, members in grouped.items():
        if label not in EXPANSION_PRIORITY and members:
            result.append(ExpansionGroup(label=label, items=members))

    return result
