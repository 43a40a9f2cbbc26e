"""
SeedSight MCSR Ranked API Integration

Thin async client over the ranked API's match endpoints:
- /users/{identifier}/matches  basic match list (no timelines)
- /matches/{id}                full match detail (timelines, completions)

Responses wrap their payload in a ``data`` field.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from urllib.parse import quote

import httpx

from seedsight.core.config import ApiConfig
from seedsight.core.schemas import Match, parse_matches

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """The ranked API could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MCSRClient:
    """
    Client for the MCSR Ranked API.

    Example:
        >>> async with MCSRClient(ApiConfig()) as client:
        ...     matches = await client.fetch_user_matches("someplayer", types=[2])
        ...     detail = await client.fetch_match_detail(matches[0].id)
    """

    def __init__(self, config: ApiConfig | None = None, transport: httpx.AsyncBaseTransport | None = None):
        """
        Args:
            config: Base URL, API key, timeout and page size
            transport: Optional httpx transport (used by tests)
        """
        self.config = config or ApiConfig()
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["x-api-key"] = self.config.api_key
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            headers=headers,
            timeout=self.config.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> MCSRClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_data(self, path: str, params: list[tuple[str, str]] | None = None):
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Request to {path} failed: {e}") from e

        if response.is_error:
            raise UpstreamError(
                f"Request to {path} failed with status {response.status_code}",
                status_code=response.status_code,
            )
        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {path}", status_code=response.status_code) from e
        return body.get("data") if isinstance(body, dict) else None

    async def fetch_match_detail(self, match_id: str) -> Match:
        """
        Fetch the full record for one match, including timelines.

        Raises:
            UpstreamError: On transport failure, error status or empty payload
        """
        data = await self._get_data(f"/matches/{quote(str(match_id), safe='')}")
        if not isinstance(data, dict):
            raise UpstreamError(f"Match {match_id} returned no data")
        logger.debug(f"Fetched detail for match {match_id}")
        return Match.from_dict(data)

    async def fetch_user_matches(
        self, identifier: str, types: Iterable[int] | None = None, count: int | None = None
    ) -> list[Match]:
        """
        Fetch the most recent matches of a player.

        Args:
            identifier: Nickname, uuid or Discord id
            types: Optional match type codes to restrict to
            count: Page size, defaults to the configured ``match_count``

        Raises:
            UpstreamError: On transport failure or error status
        """
        params = [("count", str(count or self.config.match_count))]
        params.extend(("type", str(t)) for t in types or ())
        data = await self._get_data(f"/users/{quote(identifier, safe='')}/matches", params=params)
        matches = parse_matches(data)
        logger.info(f"Fetched {len(matches)} matches for {identifier}")
        return matches
