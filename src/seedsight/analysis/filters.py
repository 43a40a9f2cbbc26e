"""
Match filtering.

Semantics per dimension:
- Every configured dimension must pass (AND across dimensions).
- Set-valued seed dimensions pass when the match has any selected value
  (OR within the dimension).
- ``variations`` is the exception: every selected raw tag must be present,
  since tags describe co-occurring seed facts rather than alternatives.

An unset dimension (None) never constrains. Empty collections are normalized
to None when the spec is built, so "nothing selected" also means unconstrained.
A match without a seed fails every configured seed dimension.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, fields

from seedsight.analysis.variations import parse_variations
from seedsight.core.schemas import Match

_SET_FIELDS = (
    "types",
    "overworld",
    "bastion",
    "bastion_types",
    "fortress_biomes",
    "bastion_biomes",
    "structures",
    "variations",
    "end_tower_heights",
)


@dataclass(frozen=True)
class FilterSpec:
    """Optional constraints over a match list. None means unconstrained."""

    types: frozenset[int] | None = None
    start_date_sec: int | None = None
    end_date_sec: int | None = None
    overworld: frozenset[str] | None = None
    bastion: frozenset[str] | None = None
    bastion_types: frozenset[str] | None = None
    fortress_biomes: frozenset[str] | None = None
    bastion_biomes: frozenset[str] | None = None
    structures: frozenset[str] | None = None
    variations: frozenset[str] | None = None
    end_tower_heights: frozenset[int] | None = None
    hide_decayed: bool = False
    hide_forfeits: bool = False
    beginner_only: bool = False

    def __post_init__(self):
        for name in _SET_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            normalized = frozenset(value)
            object.__setattr__(self, name, normalized or None)

    @property
    def is_empty(self) -> bool:
        """True when no field constrains anything."""
        return all(
            not getattr(self, f.name) if f.type == "bool" else getattr(self, f.name) is None
            for f in fields(self)
        )


def bastion_key(match: Match) -> str | None:
    """
    The bastion category of a match.

    Ordered fallback: the seed's explicit ``bastion`` key, then the legacy
    ``nether`` key, then the subtype decoded from the variation tags. Every
    bastion lookup goes through here.
    """
    seed = match.seed
    if seed is None:
        return None
    return seed.bastion or seed.nether or parse_variations(seed.variations).bastion_type


def _any_in(values: Iterable, selected: frozenset) -> bool:
    return any(value in selected for value in values)


def match_passes(match: Match, spec: FilterSpec) -> bool:
    """Evaluate every configured constraint of ``spec`` against one match."""
    if spec.types is not None and match.type not in spec.types:
        return False
    if spec.start_date_sec is not None and match.date < spec.start_date_sec:
        return False
    if spec.end_date_sec is not None and match.date > spec.end_date_sec:
        return False
    if spec.hide_decayed and match.decayed:
        return False
    # Only decisive forfeits are hidden; forfeit draws stay
    if spec.hide_forfeits and match.forfeited and match.has_winner:
        return False
    if spec.beginner_only and not match.beginner:
        return False

    seed = match.seed
    if spec.overworld is not None:
        if seed is None or seed.overworld not in spec.overworld:
            return False
    if spec.bastion is not None:
        if bastion_key(match) not in spec.bastion:
            return False
    if spec.end_tower_heights is not None:
        if seed is None or not _any_in(seed.end_towers, spec.end_tower_heights):
            return False

    needs_categories = any(
        dim is not None
        for dim in (spec.bastion_types, spec.fortress_biomes, spec.bastion_biomes, spec.structures)
    )
    if needs_categories or spec.variations is not None:
        if seed is None:
            return False
        categories = parse_variations(seed.variations)
        if spec.bastion_types is not None and categories.bastion_type not in spec.bastion_types:
            return False
        if spec.fortress_biomes is not None and not _any_in(
            categories.fortress_biomes, spec.fortress_biomes
        ):
            return False
        if spec.bastion_biomes is not None and not _any_in(
            categories.bastion_biomes, spec.bastion_biomes
        ):
            return False
        if spec.structures is not None and not _any_in(categories.structures, spec.structures):
            return False
        if spec.variations is not None and not spec.variations.issubset(categories.raw):
            return False

    return True


def apply_filters(matches: Iterable[Match], spec: FilterSpec | None) -> list[Match]:
    """Return the matches passing ``spec``, in input order."""
    if spec is None:
        return list(matches)
    return [m for m in matches if match_passes(m, spec)]


@dataclass(frozen=True)
class FilterOptions:
    """Distinct values present in a match list, per filter dimension."""

    types: list[int]
    overworld: list[str]
    bastion: list[str]
    bastion_types: list[str]
    fortress_biomes: list[str]
    bastion_biomes: list[str]
    structures: list[str]
    variations: list[str]
    end_tower_heights: list[int]


def filter_options(matches: Iterable[Match]) -> FilterOptions:
    """Collect the selectable values for each dimension, sorted."""
    types: set[int] = set()
    overworld: set[str] = set()
    bastion: set[str] = set()
    bastion_types: set[str] = set()
    fortress_biomes: set[str] = set()
    bastion_biomes: set[str] = set()
    structures: set[str] = set()
    variations: set[str] = set()
    towers: set[int] = set()

    for match in matches:
        types.add(match.type)
        seed = match.seed
        if seed is None:
            continue
        if seed.overworld:
            overworld.add(seed.overworld)
        if key := bastion_key(match):
            bastion.add(key)
        categories = parse_variations(seed.variations)
        if categories.bastion_type:
            bastion_types.add(categories.bastion_type)
        fortress_biomes.update(categories.fortress_biomes)
        bastion_biomes.update(categories.bastion_biomes)
        structures.update(categories.structures)
        variations.update(categories.raw)
        towers.update(seed.end_towers)

    return FilterOptions(
        types=sorted(types),
        overworld=sorted(overworld),
        bastion=sorted(bastion),
        bastion_types=sorted(bastion_types),
        fortress_biomes=sorted(fortress_biomes),
        bastion_biomes=sorted(bastion_biomes),
        structures=sorted(structures),
        variations=sorted(variations),
        end_tower_heights=sorted(towers),
    )
