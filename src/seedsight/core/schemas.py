"""
SeedSight Data Contracts

Every match-level structure that crosses a module boundary is defined here.
Records arrive as JSON already decoded into dicts; ``from_dict`` constructors
are total: missing or wrongly typed fields become None/False/empty rather
than raising.

Producers: integrations/mcsr.py, cli.py (file input)
Consumers: analysis/*, infra/fetcher.py, export.py
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from seedsight.core.constants import MATCH_TYPE_LABELS

# ============================================================
# Field coercion helpers
# ============================================================


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_number(value: Any) -> float | int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value
    return None


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


# ============================================================
# Records
# ============================================================


@dataclass(frozen=True)
class Player:
    """A player profile as embedded in a match record."""

    uuid: str
    nickname: str
    elo_rate: int | None = None
    elo_rank: int | None = None
    country: str | None = None
    role_type: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Player | None:
        data = _as_dict(data)
        uuid = _as_str(data.get("uuid"))
        nickname = _as_str(data.get("nickname"))
        if uuid is None and nickname is None:
            return None
        return cls(
            uuid=uuid or "",
            nickname=nickname or "",
            elo_rate=_as_int(data.get("eloRate")),
            elo_rank=_as_int(data.get("eloRank")),
            country=_as_str(data.get("country")),
            role_type=_as_int(data.get("roleType")),
        )


@dataclass(frozen=True)
class Seed:
    """Structural parameters of the generated run."""

    id: str | None = None
    overworld: str | None = None
    bastion: str | None = None
    nether: str | None = None  # legacy bastion key
    end_towers: tuple[int, ...] = ()
    variations: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> Seed | None:
        if not isinstance(data, dict):
            return None
        towers = tuple(
            height for height in (_as_int(h) for h in _as_list(data.get("endTowers")))
            if height is not None
        )
        variations = tuple(v for v in _as_list(data.get("variations")) if isinstance(v, str))
        return cls(
            id=_as_str(data.get("id")),
            overworld=_as_str(data.get("overworld")),
            bastion=_as_str(data.get("bastion")),
            nether=_as_str(data.get("nether")),
            end_towers=towers,
            variations=variations,
        )


@dataclass(frozen=True)
class MatchResult:
    """Winner uuid and completion time (ms), both optional."""

    winner: str | None = None
    time_ms: float | int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> MatchResult:
        data = _as_dict(data)
        return cls(winner=_as_str(data.get("uuid")) or None, time_ms=_as_number(data.get("time")))


@dataclass(frozen=True)
class TimelineEvent:
    """One milestone reached by a player, in ms from run start."""

    uuid: str
    type: str
    time_ms: float | int

    @classmethod
    def from_dict(cls, data: Any) -> TimelineEvent | None:
        data = _as_dict(data)
        uuid = _as_str(data.get("uuid"))
        event_type = _as_str(data.get("type"))
        time_ms = _as_number(data.get("time"))
        if uuid is None or event_type is None or time_ms is None:
            return None
        return cls(uuid=uuid, type=event_type, time_ms=time_ms)


@dataclass(frozen=True)
class Completion:
    """A player's finishing time inside a match detail record."""

    uuid: str
    time_ms: float | int

    @classmethod
    def from_dict(cls, data: Any) -> Completion | None:
        data = _as_dict(data)
        uuid = _as_str(data.get("uuid"))
        time_ms = _as_number(data.get("time"))
        if uuid is None or time_ms is None:
            return None
        return cls(uuid=uuid, time_ms=time_ms)


@dataclass(frozen=True)
class Match:
    """
    A match record as returned by the ranked API.

    The list endpoint omits ``timelines`` and ``completions``; the detail
    endpoint includes them, so a detail record is simply a fuller Match.
    """

    id: str
    type: int
    date: int  # epoch seconds
    players: tuple[Player, ...] = ()
    result: MatchResult = field(default_factory=MatchResult)
    forfeited: bool = False
    decayed: bool = False
    beginner: bool = False
    seed: Seed | None = None
    timelines: tuple[TimelineEvent, ...] | None = None
    completions: tuple[Completion, ...] | None = None
    season: int | None = None
    category: str | None = None

    @property
    def type_label(self) -> str:
        return MATCH_TYPE_LABELS.get(self.type, "Unknown")

    @property
    def has_winner(self) -> bool:
        return bool(self.result.winner)

    @classmethod
    def from_dict(cls, data: Any) -> Match:
        data = _as_dict(data)
        players = tuple(
            p for p in (Player.from_dict(raw) for raw in _as_list(data.get("players"))) if p
        )

        timelines = None
        if isinstance(data.get("timelines"), list):
            timelines = tuple(
                e for e in (TimelineEvent.from_dict(raw) for raw in data["timelines"]) if e
            )

        completions = None
        if isinstance(data.get("completions"), list):
            completions = tuple(
                c for c in (Completion.from_dict(raw) for raw in data["completions"]) if c
            )

        return cls(
            id=_as_str(data.get("id")) or "",
            type=_as_int(data.get("type")) or 0,
            date=_as_int(data.get("date")) or 0,
            players=players,
            result=MatchResult.from_dict(data.get("result")),
            forfeited=data.get("forfeited") is True,
            decayed=data.get("decayed") is True,
            beginner=data.get("beginner") is True,
            seed=Seed.from_dict(data.get("seed")),
            timelines=timelines,
            completions=completions,
            season=_as_int(data.get("season")),
            category=_as_str(data.get("category")),
        )


def parse_matches(items: Any) -> list[Match]:
    """Parse a decoded JSON array into Match records, skipping non-objects."""
    return [Match.from_dict(item) for item in _as_list(items) if isinstance(item, dict)]
