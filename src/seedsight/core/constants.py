"""
SeedSight - Constants

Match types, outcome kinds and the timeline milestone table shared by the
analysis modules. Timeline tags follow the upstream ranked API's advancement
names.
"""

from enum import IntEnum, StrEnum


class MatchType(IntEnum):
    """Upstream match type codes."""

    CASUAL = 1
    RANKED = 2
    PRIVATE_ROOM = 3
    EVENT = 4


MATCH_TYPE_LABELS: dict[int, str] = {
    MatchType.CASUAL: "Casual",
    MatchType.RANKED: "Ranked",
    MatchType.PRIVATE_ROOM: "Private Room",
    MatchType.EVENT: "Event",
}


class OutcomeKind(StrEnum):
    """Result of a match relative to a viewpoint player."""

    DRAW = "draw"
    FORFEIT_WIN = "forfeit-win"
    FORFEIT_LOSS = "forfeit-loss"
    COMPLETION_WIN = "completion-win"
    COMPLETION_LOSS = "completion-loss"
    UNKNOWN = "unknown"


# ============================================================================
# Timeline milestones
# ============================================================================

EVENT_ENTER_NETHER = "story.enter_the_nether"
EVENT_FIND_BASTION = "nether.find_bastion"
EVENT_FIND_FORTRESS = "nether.find_fortress"
EVENT_BLIND_TRAVEL = "projectelo.timeline.blind_travel"
EVENT_FOLLOW_EYE = "story.follow_ender_eye"
EVENT_ENTER_END = "story.enter_the_end"
EVENT_END_ROOT = "end.root"  # older spelling of the end entry advancement
EVENT_DRAGON_DEATH = "projectelo.timeline.dragon_death"

# Boundary name -> accepted event tags. The run start boundary is implicit (0).
BOUNDARY_ALIASES: dict[str, tuple[str, ...]] = {
    "enter_nether": (EVENT_ENTER_NETHER,),
    "find_bastion": (EVENT_FIND_BASTION,),
    "find_fortress": (EVENT_FIND_FORTRESS,),
    "blind_travel": (EVENT_BLIND_TRAVEL,),
    "follow_eye": (EVENT_FOLLOW_EYE,),
    "enter_end": (EVENT_ENTER_END, EVENT_END_ROOT),
    "dragon_death": (EVENT_DRAGON_DEATH,),
}

RUN_START = "start"

# (phase, start boundary, end boundary) in run order
PHASES: tuple[tuple[str, str, str], ...] = (
    ("overworld", RUN_START, "enter_nether"),
    ("terrainToBastion", "enter_nether", "find_bastion"),
    ("bastion", "find_bastion", "find_fortress"),
    ("fortress", "find_fortress", "blind_travel"),
    ("blind", "blind_travel", "follow_eye"),
    ("strongholdNav", "follow_eye", "enter_end"),
    ("endFight", "enter_end", "dragon_death"),
)

PHASE_NAMES: tuple[str, ...] = tuple(name for name, _, _ in PHASES)

PHASE_LABELS: dict[str, str] = {
    "overworld": "Overworld",
    "terrainToBastion": "Terrain to Bastion",
    "bastion": "Bastion",
    "fortress": "Fortress",
    "blind": "Blind",
    "strongholdNav": "Stronghold Nav",
    "endFight": "End Fight",
}

# Detail cache freshness window
DETAIL_CACHE_TTL_SECONDS = 5 * 60
DEFAULT_FETCH_CONCURRENCY = 5
