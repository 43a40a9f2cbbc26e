"""
Match outcome classification relative to a viewpoint player.

The viewpoint is a nickname or uuid. Nicknames are matched case-insensitively
and take priority over uuids, so a nickname that equals another player's uuid
resolves to the nickname's owner. That collision is left as-is.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from seedsight.core.constants import OutcomeKind
from seedsight.core.schemas import Match


@dataclass(frozen=True)
class Outcome:
    """Classified result plus the source match's forfeited flag."""

    kind: OutcomeKind
    forfeited: bool

    @property
    def is_win(self) -> bool:
        return self.kind in (OutcomeKind.COMPLETION_WIN, OutcomeKind.FORFEIT_WIN)

    @property
    def is_loss(self) -> bool:
        return self.kind in (OutcomeKind.COMPLETION_LOSS, OutcomeKind.FORFEIT_LOSS)


def resolve_viewpoint(match: Match, identifier: str | None) -> str | None:
    """
    Resolve a viewpoint identifier to a player uuid within one match.

    Args:
        match: Match whose players are searched
        identifier: Nickname (case-insensitive) or uuid

    Returns:
        The player's uuid, or None when nobody in the match matches
    """
    if not identifier:
        return None

    lowered = identifier.lower()
    for player in match.players:
        if player.nickname and player.nickname.lower() == lowered:
            return player.uuid or None
    for player in match.players:
        if player.uuid and player.uuid == identifier:
            return player.uuid
    return None


def derive_viewpoint_uuid(matches: Iterable[Match], identifier: str | None) -> str | None:
    """First uuid the identifier resolves to across a list of matches."""
    for match in matches:
        uuid = resolve_viewpoint(match, identifier)
        if uuid:
            return uuid
    return None


def classify(match: Match, viewpoint: str | None = None) -> Outcome:
    """
    Classify a match for the given viewpoint.

    A forfeit without a winner is a draw whatever the viewpoint. Decisive
    results need the viewpoint to resolve; otherwise they are UNKNOWN.
    """
    winner = match.result.winner
    forfeited = match.forfeited

    if not winner:
        kind = OutcomeKind.DRAW if forfeited else OutcomeKind.UNKNOWN
        return Outcome(kind=kind, forfeited=forfeited)

    uuid = resolve_viewpoint(match, viewpoint)
    if uuid is None:
        return Outcome(kind=OutcomeKind.UNKNOWN, forfeited=forfeited)

    won = winner == uuid
    if forfeited:
        kind = OutcomeKind.FORFEIT_WIN if won else OutcomeKind.FORFEIT_LOSS
    else:
        kind = OutcomeKind.COMPLETION_WIN if won else OutcomeKind.COMPLETION_LOSS
    return Outcome(kind=kind, forfeited=forfeited)
