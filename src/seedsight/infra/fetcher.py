"""
Bounded-parallelism fetching of match detail records.

``fetch_details`` starts ``min(limit, len(ids))`` workers over a shared queue.
Each id is claimed by exactly one worker, which serves it from the cache when
fresh or fetches it otherwise. The call returns once every worker has drained
the queue. A failed id is reported in ``FetchResult.errors`` and does not stop
the others; nothing is retried.

Each network fetch runs in its own task that writes the cache on success. If
the caller abandons the call, those tasks still finish and populate the cache.
An id already being fetched by an overlapping call is awaited, not refetched.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field

from seedsight.core.constants import DEFAULT_FETCH_CONCURRENCY
from seedsight.core.schemas import Match
from seedsight.infra.cache import DetailCache

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], Awaitable[Match]]


def _retrieve_exception(task: asyncio.Task) -> None:
    # Marks the error as seen when the awaiting caller has gone away
    if not task.cancelled() and task.exception() is not None:
        logger.debug(f"Background detail fetch ended with: {task.exception()}")


@dataclass
class FetchResult:
    """Details that were obtained and the ids that failed."""

    details: dict[str, Match] = field(default_factory=dict)
    errors: dict[str, Exception] = field(default_factory=dict)
    cache_hits: int = 0
    fetched: int = 0

    @property
    def failed_ids(self) -> list[str]:
        return list(self.errors)


class DetailFetchCoordinator:
    """
    Fetch-and-cache coordinator for match details.

    Example:
        >>> cache = DetailCache(ttl_seconds=300)
        >>> coordinator = DetailFetchCoordinator(client.fetch_match_detail, cache)
        >>> result = await coordinator.fetch_details(["123", "456"])
        >>> result.details["123"].timelines
    """

    def __init__(
        self,
        fetch: FetchFn,
        cache: DetailCache | None = None,
        concurrency_limit: int = DEFAULT_FETCH_CONCURRENCY,
    ):
        self._fetch = fetch
        self.cache = cache if cache is not None else DetailCache()
        self.concurrency_limit = concurrency_limit
        self._inflight: dict[str, asyncio.Task[Match]] = {}

    def _start_fetch(self, match_id: str) -> asyncio.Task[Match]:
        task = self._inflight.get(match_id)
        if task is not None:
            return task

        async def fetch_and_store() -> Match:
            try:
                detail = await self._fetch(match_id)
                self.cache.put(match_id, detail)
                return detail
            finally:
                self._inflight.pop(match_id, None)

        task = asyncio.get_running_loop().create_task(fetch_and_store())
        task.add_done_callback(_retrieve_exception)
        self._inflight[match_id] = task
        return task

    async def fetch_details(
        self, ids: Iterable[str], concurrency_limit: int | None = None
    ) -> FetchResult:
        """
        Fetch details for ``ids`` with at most ``concurrency_limit`` in flight.

        Args:
            ids: Match ids; duplicates are collapsed
            concurrency_limit: Worker count, defaults to the coordinator's

        Returns:
            FetchResult with per-id details and errors

        Raises:
            ValueError: If the limit is below 1 and there is work to do
        """
        unique_ids = list(dict.fromkeys(str(i) for i in ids))
        result = FetchResult()
        if not unique_ids:
            return result

        limit = self.concurrency_limit if concurrency_limit is None else concurrency_limit
        if limit < 1:
            raise ValueError(f"concurrency_limit must be >= 1, got {limit}")

        queue: asyncio.Queue[str] = asyncio.Queue()
        for match_id in unique_ids:
            queue.put_nowait(match_id)

        started = time.perf_counter()

        async def worker() -> None:
            while True:
                try:
                    match_id = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return

                cached = self.cache.get(match_id)
                if cached is not None:
                    logger.debug(f"Detail cache hit: {match_id}")
                    result.details[match_id] = cached
                    result.cache_hits += 1
                    continue

                try:
                    detail = await asyncio.shield(self._start_fetch(match_id))
                except Exception as e:
                    logger.warning(f"Detail fetch failed for match {match_id}: {e}")
                    result.errors[match_id] = e
                    continue
                result.details[match_id] = detail
                result.fetched += 1

        workers = min(limit, len(unique_ids))
        await asyncio.gather(*(worker() for _ in range(workers)))
        result.details = {i: result.details[i] for i in unique_ids if i in result.details}

        elapsed = time.perf_counter() - started
        logger.info(
            f"Fetched details for {len(result.details)}/{len(unique_ids)} matches "
            f"({result.cache_hits} cached, {len(result.errors)} failed) in {elapsed:.2f}s"
        )
        return result
