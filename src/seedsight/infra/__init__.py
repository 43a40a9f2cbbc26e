"""
SeedSight Infrastructure - Fetching and caching.

This module contains:
- cache: Time-bounded in-memory cache of match details
- fetcher: Bounded-parallelism detail fetch coordinator
"""

__all__: list[str] = []
