"""
Seed variation tag decoding.

Variation tags are colon-delimited facts about a seed:

    biome:<fortress|bastion|structure>:<biome_key>
    bastion:<subtype>:<count>
    end_spawn:buried:<height>
    end_tower:<...>          (recognized, carries no category)

Anything else is kept verbatim in ``raw`` and contributes to no category.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

BIOME_DIMENSIONS = ("fortress", "bastion", "structure")


@dataclass(frozen=True)
class VariationCategories:
    """Decoded view of a seed's variation tags."""

    structures: frozenset[str] = frozenset()
    fortress_biomes: frozenset[str] = frozenset()
    bastion_biomes: frozenset[str] = frozenset()
    bastion_type: str | None = None
    end_spawn_buried: int | float | None = None
    raw: tuple[str, ...] = field(default_factory=tuple)


def _parse_number(text: str) -> int | float | None:
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


def parse_variations(tags: Iterable[str] | None) -> VariationCategories:
    """
    Decode raw variation tags into category sets.

    Never raises: non-string entries are dropped, malformed tags are kept in
    ``raw`` only.

    Args:
        tags: Raw tag strings from ``Seed.variations`` (may be None)

    Returns:
        VariationCategories with the original tags preserved in order
    """
    structures: set[str] = set()
    fortress_biomes: set[str] = set()
    bastion_biomes: set[str] = set()
    bastion_type: str | None = None
    end_spawn_buried: int | float | None = None
    raw: list[str] = []

    for tag in tags or ():
        if not isinstance(tag, str):
            continue
        raw.append(tag)
        parts = tag.split(":")
        prefix = parts[0]
        second = parts[1] if len(parts) > 1 else ""
        third = parts[2] if len(parts) > 2 else ""

        if prefix == "biome":
            if not third:
                continue
            if second == "fortress":
                fortress_biomes.add(third)
            elif second == "bastion":
                bastion_biomes.add(third)
            elif second == "structure":
                structures.add(third)
        elif prefix == "bastion":
            if second:
                bastion_type = second
        elif prefix == "end_spawn" and second == "buried":
            number = _parse_number(third)
            if number is not None:
                end_spawn_buried = number
        elif prefix == "end_tower":
            # tower heights come from Seed.end_towers
            continue

    return VariationCategories(
        structures=frozenset(structures),
        fortress_biomes=frozenset(fortress_biomes),
        bastion_biomes=frozenset(bastion_biomes),
        bastion_type=bastion_type,
        end_spawn_buried=end_spawn_buried,
        raw=tuple(raw),
    )


def bastion_type_from_variations(tags: Iterable[str] | None) -> str | None:
    """Return just the bastion subtype encoded in the tags, if any."""
    return parse_variations(tags).bastion_type


# ============================================================================
# Display helpers
# ============================================================================

VARIATION_LABELS: dict[str, str] = {
    "bastion:good_gap:1": "Right Good Gap",
    "bastion:good_gap:2": "Left Good Gap",
    "bastion:single:1": "1 Single Chest",
    "bastion:single:2": "2 Single Chests",
    "bastion:single:3": "3 Single Chests",
    "bastion:triple:1": "1 Triple Chest",
    "bastion:triple:2": "2 Triple Chests",
    "bastion:triple:3": "3 Triple Chests",
    "bastion:small_single:1": "1 Small Single Chest",
    "bastion:small_single:2": "2 Small Single Chests",
    "chest:structure:carrot": "Chest (Carrot)",
    "chest:structure:diamond": "Diamond",
    "chest:structure:egap": "Enchanted Golden Apple",
    "chest:structure:looting_sword": "Looting Sword",
    "chest:structure:shield": "Chest (Shield)",
}

# Variations that imply a seed-level filter value (good gaps only exist in stables)
VARIATION_AUTO_LINKS: dict[str, dict[str, str]] = {
    "bastion:good_gap:1": {"bastion": "STABLES"},
    "bastion:good_gap:2": {"bastion": "STABLES"},
}

_WORD_START = re.compile(r"\b(\w)")


def humanize_variation(tag: str) -> str:
    """Readable label for a variation tag."""
    if not tag:
        return tag
    if tag in VARIATION_LABELS:
        return VARIATION_LABELS[tag]
    text = tag.replace(":", " ").replace("_", " ")
    return _WORD_START.sub(lambda m: m.group(1).upper(), text)


def implied_filters(tags: Iterable[str]) -> dict[str, set[str]]:
    """Collect the seed-level filter values implied by selected variations."""
    implied: dict[str, set[str]] = {}
    for tag in tags:
        for dimension, value in VARIATION_AUTO_LINKS.get(tag, {}).items():
            implied.setdefault(dimension, set()).add(value)
    return implied
