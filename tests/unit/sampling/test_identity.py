"""Tests for gbfsexporter.sampling.identity - station id to name resolution."""

from __future__ import annotations

from conftest import FakeGBFS, station_information

from gbfsexporter.http import GBFSClient
from gbfsexporter.metrics import MetricSet
from gbfsexporter.models import Feed, StationInformation
from gbfsexporter.sampling import (
    UNKNOWN_NAME,
    IdentityMap,
    build_identities,
    resolve_identities,
)


class TestIdentityMap:
    """Tests for IdentityMap lookups."""

    def test_resolve_known(self) -> None:
        assert IdentityMap({"1": "Main St"}).resolve("1") == "Main St"

    def test_resolve_unknown(self) -> None:
        assert IdentityMap().resolve("1") == UNKNOWN_NAME == "unknown"

    def test_mapping_protocol(self) -> None:
        names = IdentityMap({"1": "A", "2": "B"})

        assert len(names) == 2
        assert dict(names) == {"1": "A", "2": "B"}
        assert "1" in names

    def test_copy_is_independent(self) -> None:
        source = {"1": "A"}
        names = IdentityMap(source)
        source["2"] = "B"

        assert "2" not in names


class TestBuildIdentities:
    """Capacity is recorded while the map is built."""

    def test_one_capacity_per_station(self, metric_set: MetricSet) -> None:
        stations = [
            StationInformation(station_id="1", name="Main St", capacity=15),
            StationInformation(station_id="2", name="Oak Ave", capacity=20),
        ]

        names = build_identities(stations, metric_set)

        assert dict(names) == {"1": "Main St", "2": "Oak Ave"}
        assert metric_set.series("station_capacity") == {
            ("1", "Main St"): 15.0,
            ("2", "Oak Ave"): 20.0,
        }

    def test_empty_feed(self, metric_set: MetricSet) -> None:
        assert len(build_identities([], metric_set)) == 0
        assert metric_set.series("station_capacity") == {}


class TestResolveIdentities:
    """Tests for the station_information step."""

    async def test_main_st_scenario(
        self, client: GBFSClient, fake_gbfs: FakeGBFS, metric_set: MetricSet
    ) -> None:
        fake_gbfs.serve_body(
            "station_information",
            b'{"data":{"stations":[{"station_id":"1","name":"Main St","capacity":15}]}}',
        )

        names, result = await resolve_identities(client, metric_set)

        assert names.resolve("1") == "Main St"
        assert metric_set.get("station_capacity", ("1", "Main St")) == 15.0
        assert result.ok
        assert result.feed is Feed.STATION_INFORMATION
        assert result.records == 1

    async def test_failure_returns_empty_map(
        self, client: GBFSClient, fake_gbfs: FakeGBFS, metric_set: MetricSet
    ) -> None:
        fake_gbfs.serve_status("station_information", 502)

        names, result = await resolve_identities(client, metric_set)

        assert len(names) == 0
        assert not result.ok
        assert result.error is not None
        assert result.error.reason == "status"

    async def test_failure_keeps_previous_capacity(
        self, client: GBFSClient, fake_gbfs: FakeGBFS, metric_set: MetricSet
    ) -> None:
        fake_gbfs.serve_json(
            "station_information",
            station_information({"station_id": "1", "name": "Main St", "capacity": 15}),
        )
        await resolve_identities(client, metric_set)

        fake_gbfs.serve_body("station_information", b"garbage")
        names, _ = await resolve_identities(client, metric_set)

        assert len(names) == 0
        assert metric_set.get("station_capacity", ("1", "Main St")) == 15.0

    async def test_map_not_carried_between_passes(
        self, client: GBFSClient, fake_gbfs: FakeGBFS, metric_set: MetricSet
    ) -> None:
        fake_gbfs.serve_json(
            "station_information",
            station_information({"station_id": "1", "name": "Main St"}),
        )
        first, _ = await resolve_identities(client, metric_set)

        fake_gbfs.serve_json(
            "station_information",
            station_information({"station_id": "2", "name": "Oak Ave"}),
        )
        second, _ = await resolve_identities(client, metric_set)

        assert first.resolve("1") == "Main St"
        assert second.resolve("1") == UNKNOWN_NAME
