"""Station identity resolution.

Station status records only carry an id; the human-readable name comes
from station_information. The mapping is rebuilt on every pass and never
carried over, so a failed information fetch labels that pass's stations
as ``unknown``.

Resolving also records ``station_capacity``: names only mean something
relative to the pass that produced them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from gbfsexporter.core.exceptions import FeedError
from gbfsexporter.http import GBFSClient
from gbfsexporter.metrics import MetricSet
from gbfsexporter.models import Feed, StationInformation
from gbfsexporter.sampling.fetch import StepResult, fetch_feed

UNKNOWN_NAME = "unknown"


class IdentityMap(Mapping[str, str]):
    """Read-only station id to name mapping for one pass.

    Example:
        >>> names = IdentityMap({"1": "Main St"})
        >>> names.resolve("1"), names.resolve("2")
        ('Main St', 'unknown')
    """

    def __init__(self, names: Mapping[str, str] | None = None) -> None:
        self._names = dict(names or {})

    def __getitem__(self, station_id: str) -> str:
        return self._names[station_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"IdentityMap({len(self._names)} stations)"

    def resolve(self, station_id: str) -> str:
        return self._names.get(station_id, UNKNOWN_NAME)


def build_identities(
    stations: Iterable[StationInformation],
    metric_set: MetricSet,
) -> IdentityMap:
    """Record capacity for each station and map its id to its name.

    A station listed twice keeps the name of its last occurrence.
    """
    names: dict[str, str] = {}
    for station in stations:
        metric_set.set(
            "station_capacity", (station.station_id, station.name), station.capacity
        )
        names[station.station_id] = station.name
    return IdentityMap(names)


async def resolve_identities(
    client: GBFSClient,
    metric_set: MetricSet,
) -> tuple[IdentityMap, StepResult]:
    """Fetch station_information and build this pass's identity map.

    On failure the map is empty and no capacity gauge is touched.
    """
    feed = Feed.STATION_INFORMATION
    response = await fetch_feed(metric_set, feed, client.fetch_station_information)
    if isinstance(response, FeedError):
        return IdentityMap(), StepResult(feed, error=response)

    identities = build_identities(response.stations, metric_set)
    return identities, StepResult(feed, records=len(response.stations))
