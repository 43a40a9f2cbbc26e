"""Tests for display formatting helpers."""

from seedsight.core.formatting import (
    format_date_sec,
    format_duration_ms,
    format_percent,
    format_seconds_compact,
    format_seconds_short,
    humanize_biome,
    humanize_structure,
    type_label,
)


class TestLabels:
    def test_structure_known_and_fallback(self):
        assert humanize_structure("RUINED_PORTAL") == "Ruined Portal"
        assert humanize_structure("DESERT_TEMPLE") == "Desert Temple"
        assert humanize_structure(None) == "—"

    def test_biome_known_and_fallback(self):
        assert humanize_biome("basalts") == "Basalt Deltas"
        assert humanize_biome("soul_sand_valley") == "Soul Sand Valley"
        assert humanize_biome("") == "Any"

    def test_type_label(self):
        assert type_label(2) == "Ranked"
        assert type_label(99) == "Unknown"


class TestDates:
    def test_ordinal_suffixes(self):
        assert format_date_sec(1741132800) == "Mar. 5th, 2025"
        assert format_date_sec(1741651200) == "Mar. 11th, 2025"
        assert format_date_sec(1742601600) == "Mar. 22nd, 2025"
        assert format_date_sec(1740787200) == "Mar. 1st, 2025"


class TestDurations:
    def test_duration_ms(self):
        assert format_duration_ms(3723004) == "01:02:03:004"
        assert format_duration_ms(-5) == "00:00:00:000"

    def test_seconds_short(self):
        assert format_seconds_short(1.234) == "1:234"
        assert format_seconds_short(61.5) == "1:01:500"
        assert format_seconds_short(3661.5) == "1:01:01:500"

    def test_seconds_compact(self):
        assert format_seconds_compact(45) == "45s"
        assert format_seconds_compact(75) == "1m15s"
        assert format_seconds_compact(720) == "12m"
        assert format_seconds_compact(3600) == "1h"
        assert format_seconds_compact(3660) == "1h1m"
        assert format_seconds_compact(3661) == "1h1m1s"

    def test_percent(self):
        assert format_percent(0.5) == "50.0%"
        assert format_percent(None) == "—"
