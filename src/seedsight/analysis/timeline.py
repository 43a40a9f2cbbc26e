"""
Run phase segmentation from per-player timeline events.

A run is cut into seven phases by chained milestone boundaries:

    start(0) -> enter nether -> find bastion -> find fortress
             -> blind travel -> follow eye -> enter end -> dragon death

Each boundary time is the earliest event among its accepted tags. A phase is
recorded only when both of its boundaries were reached and the end is not
before the start, so missing or out-of-order telemetry is skipped rather than
producing zero or negative durations.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import numpy as np

from seedsight.analysis.outcome import resolve_viewpoint
from seedsight.core.constants import BOUNDARY_ALIASES, PHASES, PHASE_NAMES, RUN_START
from seedsight.core.schemas import Match, TimelineEvent


@dataclass(frozen=True)
class PhaseSample:
    """One phase duration placed on the date axis."""

    date_sec: int
    duration_ms: float
    match_type: int


@dataclass(frozen=True)
class PhaseStats:
    """Summary of a phase's durations. Values are None when count is 0."""

    count: int
    mean_ms: float | None = None
    median_ms: float | None = None
    best_ms: float | None = None
    worst_ms: float | None = None
    p90_ms: float | None = None


@dataclass
class PhaseSeries:
    """Durations of one phase across matches, plus a chronological series."""

    name: str
    durations_ms: list[float] = field(default_factory=list)
    samples: list[PhaseSample] = field(default_factory=list)

    def add(self, match: Match, duration_ms: float) -> None:
        self.durations_ms.append(duration_ms)
        self.samples.append(
            PhaseSample(date_sec=match.date, duration_ms=duration_ms, match_type=match.type)
        )

    def stats(self) -> PhaseStats:
        if not self.durations_ms:
            return PhaseStats(count=0)
        values = np.asarray(self.durations_ms, dtype=float)
        return PhaseStats(
            count=len(values),
            mean_ms=float(np.mean(values)),
            median_ms=float(np.median(values)),
            best_ms=float(np.min(values)),
            worst_ms=float(np.max(values)),
            p90_ms=float(np.percentile(values, 90)),
        )


def earliest_time(events: Iterable[TimelineEvent], aliases: Iterable[str]) -> float | None:
    """Earliest elapsed time among events whose type is one of ``aliases``."""
    accepted = set(aliases)
    best: float | None = None
    for event in events:
        if event.type in accepted and (best is None or event.time_ms < best):
            best = event.time_ms
    return best


def boundary_times(events: list[TimelineEvent]) -> dict[str, float | None]:
    """Resolve every phase boundary for one player's events."""
    times: dict[str, float | None] = {RUN_START: 0}
    for boundary, aliases in BOUNDARY_ALIASES.items():
        times[boundary] = earliest_time(events, aliases)
    return times


def segment_match(events: list[TimelineEvent]) -> dict[str, float]:
    """
    Phase durations for one player's events.

    Phases whose boundaries are missing or inverted are left out.
    """
    times = boundary_times(events)
    durations: dict[str, float] = {}
    for phase, start_key, end_key in PHASES:
        start = times[start_key]
        end = times[end_key]
        if start is None or end is None or end < start:
            continue
        durations[phase] = end - start
    return durations


def segment_timelines(
    matches: Iterable[Match],
    details: Mapping[str, Match | None],
    viewpoint: str | None,
) -> dict[str, PhaseSeries]:
    """
    Build the seven phase series for the viewpoint player.

    Args:
        matches: Filtered match list (list-endpoint records)
        details: Match id -> detail record carrying ``timelines``
        viewpoint: Nickname or uuid of the player to segment

    Returns:
        Phase name -> PhaseSeries, samples sorted by date ascending
    """
    sections = {name: PhaseSeries(name=name) for name in PHASE_NAMES}

    for match in matches:
        detail = details.get(match.id)
        if detail is None or not detail.timelines:
            continue
        uuid = resolve_viewpoint(match, viewpoint) or resolve_viewpoint(detail, viewpoint)
        if uuid is None:
            continue
        events = [e for e in detail.timelines if e.uuid == uuid]
        if not events:
            continue
        for phase, duration in segment_match(events).items():
            sections[phase].add(match, duration)

    for series in sections.values():
        series.samples.sort(key=lambda s: s.date_sec)
    return sections
