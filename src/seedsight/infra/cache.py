"""
In-memory cache of match detail records.

Entries are immutable snapshots keyed by match id. An entry is fresh while
``clock() - fetched_at <= ttl_seconds``; stale entries are evicted lazily when
read. The clock is injectable so expiry can be driven deterministically.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from seedsight.core.constants import DETAIL_CACHE_TTL_SECONDS
from seedsight.core.schemas import Match

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached detail record."""

    match_id: str
    fetched_at: float
    detail: Match


@dataclass
class CacheStats:
    """Cache statistics."""

    total_entries: int
    hit_count: int = 0
    miss_count: int = 0
    expired_count: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hit_count + self.miss_count
        return (self.hit_count / total * 100) if total > 0 else 0.0

    def to_dict(self) -> dict:
        return {
            "total_entries": self.total_entries,
            "hit_count": self.hit_count,
            "miss_count": self.miss_count,
            "expired_count": self.expired_count,
            "hit_rate_pct": round(self.hit_rate, 1),
        }


class DetailCache:
    """
    Time-bounded cache for match detail records.

    Writes replace whole entries, so concurrent writers for the same id
    resolve as last-writer-wins.
    """

    def __init__(
        self,
        ttl_seconds: float = DETAIL_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl_seconds: Freshness window for an entry
            clock: Returns the current time in seconds
        """
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be >= 0, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._expired = 0

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.fetched_at <= self.ttl_seconds

    def get(self, match_id: str) -> Match | None:
        """Return the fresh detail for ``match_id``, evicting it if stale."""
        entry = self._entries.get(match_id)
        if entry is None:
            self._misses += 1
            return None
        if not self._is_fresh(entry):
            del self._entries[match_id]
            self._expired += 1
            self._misses += 1
            logger.debug(f"Cache entry expired: {match_id}")
            return None
        self._hits += 1
        return entry.detail

    def put(self, match_id: str, detail: Match) -> CacheEntry:
        """Store a freshly fetched detail, replacing any previous entry."""
        entry = CacheEntry(match_id=match_id, fetched_at=self._clock(), detail=detail)
        self._entries[match_id] = entry
        return entry

    def invalidate(self, match_id: str) -> bool:
        """Drop one entry. Returns True if it existed."""
        return self._entries.pop(match_id, None) is not None

    def clear(self) -> int:
        """Drop every entry. Returns how many were removed."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared {count} detail cache entries")
        return count

    def __contains__(self, match_id: object) -> bool:
        entry = self._entries.get(match_id)  # type: ignore[arg-type]
        return entry is not None and self._is_fresh(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> CacheStats:
        return CacheStats(
            total_entries=len(self._entries),
            hit_count=self._hits,
            miss_count=self._misses,
            expired_count=self._expired,
        )
