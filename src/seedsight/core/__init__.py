"""
SeedSight Core - Foundation modules shared by analysis and infrastructure.

This module contains:
- constants: Match types, outcome kinds, timeline milestone table
- schemas: Match record data contracts
- config: Application configuration management
- formatting: Display helpers for durations, dates and seed keys
"""

from seedsight.core.constants import (
    BOUNDARY_ALIASES,
    DETAIL_CACHE_TTL_SECONDS,
    MATCH_TYPE_LABELS,
    PHASE_NAMES,
    PHASES,
    MatchType,
    OutcomeKind,
)
from seedsight.core.schemas import (
    Completion,
    Match,
    MatchResult,
    Player,
    Seed,
    TimelineEvent,
    parse_matches,
)

__all__ = [
    # Enums
    "MatchType",
    "OutcomeKind",
    # Constants
    "BOUNDARY_ALIASES",
    "DETAIL_CACHE_TTL_SECONDS",
    "MATCH_TYPE_LABELS",
    "PHASE_NAMES",
    "PHASES",
    # Schemas (data contracts)
    "Completion",
    "Match",
    "MatchResult",
    "Player",
    "Seed",
    "TimelineEvent",
    "parse_matches",
]
