"""Sampling pass over the three GBFS feeds.

A pass runs three steps in order:

1. station_information: identity map and ``station_capacity``
2. station_status: nine per-station gauges labeled with the pass's names
3. free_bike_status: ``bike_disabled`` and ``bike_reserved`` per bike

Steps are isolated. A failed step leaves its gauges at their previous
values and the remaining steps still run; a failed first step only
degrades station names to ``unknown``.

Example:
    >>> from gbfsexporter.http import GBFSClient
    >>> from gbfsexporter.metrics import MetricSet
    >>> from gbfsexporter.sampling import Sampler
    >>>
    >>> async with GBFSClient("https://gbfs.baywheels.com/gbfs/en") as client:
    ...     sampler = Sampler(client, MetricSet())
    ...     report = await sampler.sample()
    ...     print(report.ok)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from gbfsexporter.core.exceptions import FeedError
from gbfsexporter.http import GBFSClient
from gbfsexporter.metrics import MetricSet
from gbfsexporter.models import BikeStatus, Feed, StationStatus
from gbfsexporter.sampling.fetch import StepResult, fetch_feed
from gbfsexporter.sampling.identity import IdentityMap, resolve_identities

logger = logging.getLogger("gbfsexporter.sampling")


@dataclass
class SampleReport:
    """Summary of one sampling pass.

    Attributes:
        started_at: When the pass started (UTC)
        duration: Wall time of the pass in seconds
        steps: Result of each step in execution order
    """

    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    duration: float = 0.0
    steps: list[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(step.ok for step in self.steps)

    @property
    def failed_feeds(self) -> list[Feed]:
        return [step.feed for step in self.steps if not step.ok]

    def step(self, feed: Feed) -> StepResult | None:
        for result in self.steps:
            if result.feed is feed:
                return result
        return None

    def __str__(self) -> str:
        parts = [
            f"{step.feed.value}={step.records}" if step.ok else f"{step.feed.value}=failed"
            for step in self.steps
        ]
        return f"sampled in {self.duration:.2f}s: " + ", ".join(parts)


def apply_station_status(
    stations: Iterable[StationStatus],
    identities: IdentityMap,
    metric_set: MetricSet,
) -> int:
    """Set the per-station status gauges. Returns the number of stations."""
    count = 0
    for station in stations:
        labels = (station.station_id, identities.resolve(station.station_id))

        # station stats
        metric_set.set("station_last_report", labels, station.last_reported)
        metric_set.set("station_is_returning", labels, station.is_returning)
        metric_set.set("station_is_renting", labels, station.is_renting)
        metric_set.set("station_is_installed", labels, station.is_installed)

        # pedal bikes
        metric_set.set("station_bikes_available", labels, station.num_bikes_available)
        metric_set.set("station_bikes_disabled", labels, station.num_bikes_disabled)

        # docks
        metric_set.set("station_docks_available", labels, station.num_docks_available)
        metric_set.set("station_docks_disabled", labels, station.num_docks_disabled)

        # e-bikes
        metric_set.set("station_ebikes_available", labels, station.num_ebikes_available)
        count += 1
    return count


def apply_free_bike_status(bikes: Iterable[BikeStatus], metric_set: MetricSet) -> int:
    """Set the per-bike gauges. Bikes are labeled by id only."""
    count = 0
    for bike in bikes:
        metric_set.set("bike_disabled", (bike.bike_id,), bike.is_disabled)
        metric_set.set("bike_reserved", (bike.bike_id,), bike.is_reserved)
        count += 1
    return count


class Sampler:
    """Runs sampling passes against one feed client and metric set.

    Passes are serialized: ``sample`` waits for a running pass to finish,
    ``sample_if_idle`` skips instead.

    Attributes:
        client: Feed client used for every fetch
        metric_set: Destination of every gauge write
        last_report: Report of the most recent completed pass
    """

    def __init__(self, client: GBFSClient, metric_set: MetricSet) -> None:
        self.client = client
        self.metric_set = metric_set
        self.last_report: SampleReport | None = None
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def sample(self) -> SampleReport:
        """Run one full pass. Never raises for feed failures."""
        async with self._lock:
            return await self._sample()

    async def sample_if_idle(self) -> SampleReport | None:
        """Run a pass unless one is already in progress."""
        if self._lock.locked():
            logger.info("Sampling pass already running, skipping")
            return None
        return await self.sample()

    async def sample_station_status(self, identities: IdentityMap) -> StepResult:
        feed = Feed.STATION_STATUS
        response = await fetch_feed(self.metric_set, feed, self.client.fetch_station_status)
        if isinstance(response, FeedError):
            return StepResult(feed, error=response)
        count = apply_station_status(response.stations, identities, self.metric_set)
        return StepResult(feed, records=count)

    async def sample_free_bike_status(self) -> StepResult:
        feed = Feed.FREE_BIKE_STATUS
        response = await fetch_feed(
            self.metric_set, feed, self.client.fetch_free_bike_status
        )
        if isinstance(response, FeedError):
            return StepResult(feed, error=response)
        count = apply_free_bike_status(response.bikes, self.metric_set)
        return StepResult(feed, records=count)

    async def _sample(self) -> SampleReport:
        logger.info("Sampling GBFS API")
        report = SampleReport()
        start = time.perf_counter()

        identities, result = await resolve_identities(self.client, self.metric_set)
        report.steps.append(result)
        report.steps.append(await self.sample_station_status(identities))
        report.steps.append(await self.sample_free_bike_status())

        report.duration = time.perf_counter() - start
        self.metric_set.mark_sample_complete()
        self.last_report = report
        logger.info("%s", report)
        return report
