"""Tests for multi-dimension match filtering."""

from __future__ import annotations

from seedsight.analysis.filters import (
    FilterSpec,
    apply_filters,
    bastion_key,
    filter_options,
    match_passes,
)
from seedsight.core.schemas import Match

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _match(
    match_id: str,
    *,
    match_type: int = 2,
    date: int = 1000,
    winner: str | None = "uuid-a",
    forfeited: bool = False,
    decayed: bool = False,
    beginner: bool = False,
    seed: dict | None = None,
) -> Match:
    return Match.from_dict(
        {
            "id": match_id,
            "type": match_type,
            "date": date,
            "players": [{"uuid": "uuid-a", "nickname": "A"}, {"uuid": "uuid-b", "nickname": "B"}],
            "result": {"uuid": winner, "time": 500000},
            "forfeited": forfeited,
            "decayed": decayed,
            "beginner": beginner,
            "seed": seed,
        }
    )


def _seed(overworld="VILLAGE", bastion="BRIDGE", variations=(), end_towers=(), nether=None) -> dict:
    return {
        "id": "s",
        "overworld": overworld,
        "bastion": bastion,
        "nether": nether,
        "endTowers": list(end_towers),
        "variations": list(variations),
    }


def _ids(matches: list[Match]) -> list[str]:
    return [m.id for m in matches]


MATCHES = [
    _match("1", seed=_seed("VILLAGE", "BRIDGE", ["biome:fortress:crimson_forest", "bastion:triple:1"])),
    _match("2", match_type=1, date=2000, seed=_seed("SHIPWRECK", "STABLES", ["bastion:good_gap:1"])),
    _match("3", date=3000, forfeited=True, winner=None, seed=_seed("VILLAGE", "HOUSING")),
    _match("4", date=4000, forfeited=True, winner="uuid-b", decayed=True),
    _match(
        "5",
        date=5000,
        beginner=True,
        seed=_seed(
            "RUINED_PORTAL",
            None,
            ["biome:fortress:crimson_forest", "biome:structure:plains", "bastion:single:2"],
            end_towers=[76, 82],
        ),
    ),
]


class TestFilterSpec:
    """Test spec normalization."""

    def test_empty_sets_normalize_to_unconstrained(self):
        spec = FilterSpec(types=set(), overworld=[], variations=frozenset())
        assert spec.types is None
        assert spec.overworld is None
        assert spec.variations is None
        assert spec.is_empty

    def test_iterables_become_frozensets(self):
        spec = FilterSpec(types=[2, 2, 1], overworld=("VILLAGE",))
        assert spec.types == frozenset({1, 2})
        assert spec.overworld == frozenset({"VILLAGE"})
        assert not spec.is_empty

    def test_toggle_makes_spec_non_empty(self):
        assert not FilterSpec(hide_decayed=True).is_empty


class TestApplyFilters:
    """Test per-dimension semantics."""

    def test_identity_for_empty_spec(self):
        assert apply_filters(MATCHES, FilterSpec()) == MATCHES
        assert apply_filters(MATCHES, None) == MATCHES

    def test_idempotent(self):
        spec = FilterSpec(types={2}, overworld={"VILLAGE", "RUINED_PORTAL"})
        once = apply_filters(MATCHES, spec)
        assert apply_filters(once, spec) == once

    def test_types(self):
        assert _ids(apply_filters(MATCHES, FilterSpec(types={1}))) == ["2"]

    def test_date_bounds_inclusive(self):
        spec = FilterSpec(start_date_sec=2000, end_date_sec=4000)
        assert _ids(apply_filters(MATCHES, spec)) == ["2", "3", "4"]

    def test_hide_decayed(self):
        assert "4" not in _ids(apply_filters(MATCHES, FilterSpec(hide_decayed=True)))

    def test_hide_forfeits_keeps_draws(self):
        """Only forfeits with a winner are hidden."""
        ids = _ids(apply_filters(MATCHES, FilterSpec(hide_forfeits=True)))
        assert "3" in ids
        assert "4" not in ids

    def test_beginner_only(self):
        assert _ids(apply_filters(MATCHES, FilterSpec(beginner_only=True))) == ["5"]

    def test_overworld_is_or_within_dimension(self):
        spec = FilterSpec(overworld={"VILLAGE", "SHIPWRECK"})
        assert _ids(apply_filters(MATCHES, spec)) == ["1", "2", "3"]

    def test_dimensions_combine_with_and(self):
        spec = FilterSpec(overworld={"VILLAGE", "SHIPWRECK"}, types={2})
        assert _ids(apply_filters(MATCHES, spec)) == ["1", "3"]

    def test_bastion_uses_fallback_chain(self):
        """Match 5 has no bastion key; its parsed subtype stands in."""
        assert _ids(apply_filters(MATCHES, FilterSpec(bastion={"single"}))) == ["5"]
        assert _ids(apply_filters(MATCHES, FilterSpec(bastion={"STABLES"}))) == ["2"]

    def test_bastion_types_use_parsed_subtype(self):
        assert _ids(apply_filters(MATCHES, FilterSpec(bastion_types={"triple", "good_gap"}))) == ["1", "2"]

    def test_fortress_biomes(self):
        assert _ids(apply_filters(MATCHES, FilterSpec(fortress_biomes={"crimson_forest"}))) == ["1", "5"]

    def test_structures(self):
        assert _ids(apply_filters(MATCHES, FilterSpec(structures={"plains"}))) == ["5"]

    def test_bastion_biomes_no_match(self):
        assert apply_filters(MATCHES, FilterSpec(bastion_biomes={"basalts"})) == []

    def test_end_tower_heights(self):
        assert _ids(apply_filters(MATCHES, FilterSpec(end_tower_heights={82, 100}))) == ["5"]

    def test_variations_require_all_tags(self):
        a = "biome:fortress:crimson_forest"
        b = "bastion:triple:1"
        both = apply_filters(MATCHES, FilterSpec(variations={a, b}))
        only_a = apply_filters(MATCHES, FilterSpec(variations={a}))
        only_b = apply_filters(MATCHES, FilterSpec(variations={b}))
        assert _ids(both) == ["1"]
        assert _ids(only_a) == ["1", "5"]
        assert set(_ids(both)) <= set(_ids(only_a)) & set(_ids(only_b))

    def test_missing_seed_fails_configured_seed_dimensions(self):
        seedless = [MATCHES[3]]
        for spec in (
            FilterSpec(overworld={"VILLAGE"}),
            FilterSpec(bastion={"BRIDGE"}),
            FilterSpec(bastion_types={"triple"}),
            FilterSpec(fortress_biomes={"crimson_forest"}),
            FilterSpec(bastion_biomes={"basalts"}),
            FilterSpec(structures={"plains"}),
            FilterSpec(variations={"bastion:triple:1"}),
            FilterSpec(end_tower_heights={76}),
        ):
            assert apply_filters(seedless, spec) == []

    def test_missing_seed_passes_unconfigured_dimensions(self):
        assert match_passes(MATCHES[3], FilterSpec(types={2}))

    def test_order_preserved(self):
        reversed_matches = list(reversed(MATCHES))
        assert _ids(apply_filters(reversed_matches, FilterSpec(types={2}))) == ["5", "4", "3", "1"]


class TestBastionKey:
    """Test the bastion fallback chain."""

    def test_explicit_key_first(self):
        match = _match("x", seed=_seed(bastion="BRIDGE", nether="TREASURE", variations=["bastion:triple:1"]))
        assert bastion_key(match) == "BRIDGE"

    def test_legacy_nether_key(self):
        match = _match("x", seed=_seed(bastion=None, nether="TREASURE", variations=["bastion:triple:1"]))
        assert bastion_key(match) == "TREASURE"

    def test_parsed_subtype_last(self):
        match = _match("x", seed=_seed(bastion=None, variations=["bastion:triple:1"]))
        assert bastion_key(match) == "triple"

    def test_no_seed(self):
        assert bastion_key(_match("x")) is None


class TestFilterOptions:
    """Test option collection for each dimension."""

    def test_distinct_sorted_values(self):
        options = filter_options(MATCHES)
        assert options.types == [1, 2]
        assert options.overworld == ["RUINED_PORTAL", "SHIPWRECK", "VILLAGE"]
        assert options.bastion == ["BRIDGE", "HOUSING", "STABLES", "single"]
        assert options.fortress_biomes == ["crimson_forest"]
        assert options.end_tower_heights == [76, 82]
        assert "bastion:good_gap:1" in options.variations
