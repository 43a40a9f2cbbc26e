"""
Display formatting for durations, dates and seed keys.
"""

import re
from datetime import datetime, timezone

from seedsight.core.constants import MATCH_TYPE_LABELS

STRUCTURE_LABELS: dict[str, str] = {
    "RUINED_PORTAL": "Ruined Portal",
    "SHIPWRECK": "Shipwreck",
    "VILLAGE": "Village",
    "STRONGHOLD": "Stronghold",
}

BIOME_LABELS: dict[str, str] = {
    "basalts": "Basalt Deltas",
    "CRIMSON_FOREST": "Crimson Forest",
    "warped_forest": "Warped Forest",
    "plains": "Plains",
}

_WORD_START = re.compile(r"(^|\s)(\w)")


def _title_words(key: str) -> str:
    text = key.replace("_", " ").lower()
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), text)


def humanize_structure(key: str | None) -> str:
    if not key:
        return "—"
    return STRUCTURE_LABELS.get(key) or _title_words(key)


def humanize_biome(key: str | None) -> str:
    if not key:
        return "Any"
    return BIOME_LABELS.get(key) or _title_words(key)


def type_label(match_type: int) -> str:
    return MATCH_TYPE_LABELS.get(match_type, "Unknown")


def format_date_sec(epoch_sec: int) -> str:
    """Format an epoch-second date as e.g. 'Mar. 5th, 2025' (UTC)."""
    dt = datetime.fromtimestamp(epoch_sec, tz=timezone.utc)
    day = dt.day
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{dt.strftime('%b')}. {day}{suffix}, {dt.year}"


def format_duration_ms(ms: float) -> str:
    """Format milliseconds as HH:MM:SS:mmm."""
    total = max(0, int(ms))
    hours, rem = divmod(total, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    seconds, millis = divmod(rem, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}:{millis:03d}"


def format_seconds_short(seconds: float) -> str:
    """
    Format seconds as H:MM:SS:mmm, dropping leading zero components.

    Examples:
        1.234 -> "1:234"
        61.5 -> "1:01:500"
        3661.005 -> "1:01:01:005"
    """
    total = max(0, round(seconds * 1000))
    hours, rem = divmod(total, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}:{millis:03d}"
    if minutes > 0:
        return f"{minutes}:{secs:02d}:{millis:03d}"
    return f"{secs}:{millis:03d}"


def format_seconds_compact(seconds: float) -> str:
    """
    Compact label for axes and buckets.

    Examples:
        75 -> "1m15s"
        720 -> "12m"
        3660 -> "1h1m"
    """
    s = max(0, round(seconds))
    hours, rem = divmod(s, 3600)
    minutes, secs = divmod(rem, 60)

    if hours > 0:
        if minutes > 0 and secs > 0:
            return f"{hours}h{minutes}m{secs}s"
        if minutes > 0:
            return f"{hours}h{minutes}m"
        return f"{hours}h"
    if minutes > 0:
        return f"{minutes}m{secs}s" if secs > 0 else f"{minutes}m"
    return f"{s}s"


def format_percent(ratio: float | None) -> str:
    if ratio is None:
        return "—"
    return f"{ratio * 100:.1f}%"
