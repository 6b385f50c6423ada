"""GBFS feed client.

Fetches one feed document per call and decodes it into the typed envelope
for that feed. There are no retries: the next scheduled pass is the retry.

Every failure surfaces as a ``FeedError`` subclass, so callers only need a
single ``except FeedError`` to isolate a feed:

- ``FeedTransportError``: host unreachable, connection reset, timeout
- ``FeedStatusError``: status code above 299
- ``FeedReadError``: body could not be read
- ``FeedDecodeError``: body is not JSON or does not match the schema

Example:
    >>> from gbfsexporter.http import GBFSClient
    >>>
    >>> async with GBFSClient("https://gbfs.baywheels.com/gbfs/en") as client:
    ...     response = await client.fetch_station_status()
    ...     print(len(response.stations))
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from gbfsexporter import __version__
from gbfsexporter.core.exceptions import (
    FeedDecodeError,
    FeedReadError,
    FeedStatusError,
    FeedTransportError,
)
from gbfsexporter.models import (
    Feed,
    FeedEnvelope,
    FreeBikeStatusResponse,
    StationInformationResponse,
    StationStatusResponse,
)

logger = logging.getLogger("gbfsexporter.http")

EnvelopeT = TypeVar("EnvelopeT", bound=FeedEnvelope)


class GBFSClient:
    """Async client for the three GBFS documents the exporter samples.

    Example:
        >>> client = GBFSClient("https://example.com/gbfs/en/", timeout=5.0)
        >>> client.feed_url(Feed.FREE_BIKE_STATUS)
        'https://example.com/gbfs/en/free_bike_status.json'

    Attributes:
        base_url: Feed base URL without trailing slash
        timeout: Per-request timeout in seconds
        user_agent: User-Agent header value
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        user_agent: str = f"gbfs-exporter/{__version__}",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Feed base URL, e.g. ``https://gbfs.baywheels.com/gbfs/en``
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Any, **kwargs: Any) -> GBFSClient:
        """Build a client from ``Settings``."""
        return cls(
            settings.base_url,
            timeout=settings.request_timeout,
            user_agent=settings.user_agent,
            **kwargs,
        )

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    def feed_url(self, feed: Feed) -> str:
        return f"{self.base_url}/{feed.filename}"

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=self.headers,
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> GBFSClient:
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def fetch_station_information(self) -> StationInformationResponse:
        """Fetch station_information.json."""
        return await self._fetch(Feed.STATION_INFORMATION, StationInformationResponse)

    async def fetch_station_status(self) -> StationStatusResponse:
        """Fetch station_status.json."""
        return await self._fetch(Feed.STATION_STATUS, StationStatusResponse)

    async def fetch_free_bike_status(self) -> FreeBikeStatusResponse:
        """Fetch free_bike_status.json."""
        return await self._fetch(Feed.FREE_BIKE_STATUS, FreeBikeStatusResponse)

    async def _fetch(self, feed: Feed, model: type[EnvelopeT]) -> EnvelopeT:
        body = await self._get(feed)
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            raise FeedDecodeError(
                f"{feed.value}: invalid document ({e.error_count()} errors)",
                feed=feed.value,
                cause=e,
            ) from e

    async def _get(self, feed: Feed) -> bytes:
        """Perform one GET and return the raw body.

        Raises:
            FeedTransportError: If the request could not be completed
            FeedStatusError: If the status code is above 299
            FeedReadError: If the body could not be read
        """
        client = await self._ensure_client()
        url = self.feed_url(feed)
        logger.debug("GET %s", url)

        try:
            async with client.stream("GET", url) as response:
                if response.status_code > 299:
                    raise FeedStatusError(
                        feed.value, response.status_code, response.reason_phrase
                    )
                try:
                    return await response.aread()
                except httpx.HTTPError as e:
                    raise FeedReadError(
                        f"{feed.value}: failed to read body: {e}",
                        feed=feed.value,
                        cause=e,
                    ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FeedTransportError(
                f"{feed.value}: request failed: {e!r}",
                feed=feed.value,
                cause=e,
            ) from e


__all__ = [
    "GBFSClient",
]
