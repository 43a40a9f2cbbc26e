"""
Summary counts and chart-ready series over an already filtered match list.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from seedsight.analysis.outcome import classify
from seedsight.core.constants import OutcomeKind
from seedsight.core.formatting import format_seconds_compact
from seedsight.core.schemas import Match


@dataclass(frozen=True)
class Overview:
    """Headline statistics for a match list."""

    total: int
    completions: int
    wins: int
    losses: int | None
    draws: int
    forfeits: int
    user_forfeits: int
    opponent_forfeits: int
    decays: int
    avg_time_ms: float | None
    win_rate: float | None

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "completions": self.completions,
            "wins": self.wins,
            "losses": self.losses,
            "draws": self.draws,
            "forfeits": self.forfeits,
            "userForfeits": self.user_forfeits,
            "opponentForfeits": self.opponent_forfeits,
            "decays": self.decays,
            "avgTimeMs": self.avg_time_ms,
            "winRate": self.win_rate,
        }


@dataclass(frozen=True)
class BreakdownRow:
    name: str
    count: int


@dataclass(frozen=True)
class TimeSeriesPoint:
    date_sec: int
    time_ms: float | None
    type: int


@dataclass(frozen=True)
class HistogramBucket:
    """Count of values in [start_s, end_s)."""

    start_s: int
    end_s: int
    count: int

    @property
    def label(self) -> str:
        return f"{format_seconds_compact(self.start_s)}-{format_seconds_compact(self.end_s)}"


def compute_overview(matches: Sequence[Match], viewpoint: str | None = None) -> Overview:
    """
    Classify every match for ``viewpoint`` and tally the results.

    Only completion wins feed ``completions``, ``wins`` and the average time.
    ``losses`` is None without a viewpoint; ``win_rate`` is None when no
    decisive match could be attributed to the viewpoint.
    ``forfeits`` counts every decisive forfeit; the user/opponent split only
    covers forfeits that resolved to the viewpoint.
    """
    total = len(matches)
    completions = wins = draws = decays = 0
    forfeits = user_forfeits = opponent_forfeits = 0
    resolved = 0
    times: list[float] = []

    for match in matches:
        outcome = classify(match, viewpoint)
        if match.decayed:
            decays += 1

        kind = outcome.kind
        if outcome.forfeited and kind != OutcomeKind.DRAW:
            forfeits += 1
        if kind == OutcomeKind.DRAW:
            draws += 1
        elif kind == OutcomeKind.COMPLETION_WIN:
            completions += 1
            wins += 1
            if match.result.time_ms is not None:
                times.append(match.result.time_ms)
        elif kind == OutcomeKind.FORFEIT_LOSS:
            user_forfeits += 1
        elif kind == OutcomeKind.FORFEIT_WIN:
            opponent_forfeits += 1

        if kind not in (OutcomeKind.DRAW, OutcomeKind.UNKNOWN):
            resolved += 1

    decided = total - draws
    if viewpoint:
        losses = decided - wins
        win_rate = wins / decided if decided > 0 and resolved > 0 else None
    else:
        losses = None
        win_rate = None

    return Overview(
        total=total,
        completions=completions,
        wins=wins,
        losses=losses,
        draws=draws,
        forfeits=forfeits,
        user_forfeits=user_forfeits,
        opponent_forfeits=opponent_forfeits,
        decays=decays,
        avg_time_ms=sum(times) / len(times) if times else None,
        win_rate=win_rate,
    )


def breakdown_by_key(
    matches: Iterable[Match], key_fn: Callable[[Match], str | None]
) -> list[BreakdownRow]:
    """
    Count matches per key, most common first.

    Empty keys are dropped. Equal counts keep first-seen order.
    """
    counts: dict[str, int] = {}
    for match in matches:
        key = key_fn(match)
        if not key:
            continue
        counts[key] = counts.get(key, 0) + 1
    rows = [BreakdownRow(name=name, count=count) for name, count in counts.items()]
    rows.sort(key=lambda row: row.count, reverse=True)
    return rows


def time_series(matches: Iterable[Match]) -> list[TimeSeriesPoint]:
    """Match times by date; forfeits carry None so chart lines break there."""
    ordered = sorted(matches, key=lambda m: m.date)
    return [
        TimeSeriesPoint(
            date_sec=m.date,
            time_ms=None if m.forfeited else m.result.time_ms,
            type=m.type,
        )
        for m in ordered
    ]


def completion_times(matches: Iterable[Match], viewpoint: str | None) -> list[float]:
    """Finishing times (ms) of the viewpoint's completion wins."""
    times = []
    for match in matches:
        if classify(match, viewpoint).kind != OutcomeKind.COMPLETION_WIN:
            continue
        if match.result.time_ms is not None:
            times.append(match.result.time_ms)
    return times


def histogram(
    times_ms: Iterable[float], target_buckets: int = 10, step_seconds: int = 10
) -> list[HistogramBucket]:
    """
    Bucket durations into fixed-width second ranges.

    The width aims for ``target_buckets`` buckets across the observed range,
    rounded up to a multiple of ``step_seconds``. Only non-empty buckets are
    returned, in ascending order.
    """
    seconds = [t / 1000 for t in times_ms]
    if not seconds:
        return []

    spread = max(seconds) - min(seconds)
    width = math.ceil(spread / max(target_buckets, 1))
    width = max(step_seconds, math.ceil(width / step_seconds) * step_seconds)

    counts: dict[int, int] = {}
    for value in seconds:
        start = math.floor(value / width) * width
        counts[start] = counts.get(start, 0) + 1

    return [
        HistogramBucket(start_s=start, end_s=start + width, count=count)
        for start, count in sorted(counts.items())
    ]
