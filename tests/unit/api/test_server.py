"""Tests for gbfsexporter.api.server - the /metrics endpoint and lifespan.

Tests cover:
- Startup pass before the first scrape
- Exposition format of /metrics
- Scrapes keep working while every feed fails
- Health endpoint
"""

from __future__ import annotations

import pytest
from conftest import (
    BASE_URL,
    FakeGBFS,
    free_bike_status,
    station_information,
    station_status,
)

from gbfsexporter.core.config import Settings
from gbfsexporter.http import GBFSClient
from gbfsexporter.metrics import MetricSet

fastapi = pytest.importorskip("fastapi", reason="FastAPI not installed")
from fastapi.testclient import TestClient  # noqa: E402

from gbfsexporter.api.server import create_app  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings(base_url=BASE_URL, sample_interval=3600)


def make_app(settings: Settings, fake_gbfs: FakeGBFS, metric_set: MetricSet | None = None):
    client = GBFSClient(BASE_URL, transport=fake_gbfs.transport)
    return create_app(settings, client=client, metric_set=metric_set)


@pytest.fixture
def healthy_feed(fake_gbfs: FakeGBFS) -> FakeGBFS:
    fake_gbfs.serve_json(
        "station_information",
        station_information({"station_id": "1", "name": "Main St", "capacity": 15}),
    )
    fake_gbfs.serve_json(
        "station_status",
        station_status({"station_id": "1", "num_bikes_available": 4, "is_renting": 1}),
    )
    fake_gbfs.serve_json(
        "free_bike_status",
        free_bike_status({"bike_id": "X", "is_disabled": 1, "is_reserved": 0}),
    )
    return fake_gbfs


class TestAppFactory:
    """Tests for create_app."""

    def test_state(self, settings: Settings, fake_gbfs: FakeGBFS) -> None:
        metric_set = MetricSet()
        app = make_app(settings, fake_gbfs, metric_set)

        assert app.state.metric_set is metric_set
        assert app.state.scheduler.interval.total_seconds() == 3600
        assert app.state.sampler.metric_set is metric_set

    def test_builds_defaults_from_settings(self, settings: Settings) -> None:
        app = create_app(settings)

        assert app.state.sampler.client.base_url == BASE_URL
        assert isinstance(app.state.metric_set, MetricSet)


class TestMetricsEndpoint:
    """Tests for GET /metrics."""

    def test_first_scrape_reflects_startup_pass(
        self, settings: Settings, healthy_feed: FakeGBFS
    ) -> None:
        app = make_app(settings, healthy_feed)

        with TestClient(app) as http:
            response = http.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        text = response.text
        assert 'station_capacity{station_id="1",name="Main St"} 15.0' in text
        assert 'station_bikes_available{station_id="1",name="Main St"} 4.0' in text
        assert 'bike_disabled{bike_id="X"} 1.0' in text
        assert 'bike_reserved{bike_id="X"} 0.0' in text

    def test_startup_pass_runs_once_before_serving(
        self, settings: Settings, healthy_feed: FakeGBFS
    ) -> None:
        app = make_app(settings, healthy_feed)

        with TestClient(app):
            assert len(healthy_feed.requests) == 3
            assert app.state.scheduler.run_count == 1
            assert app.state.scheduler.running

        assert app.state.scheduler.running is False

    def test_scrape_succeeds_when_every_feed_fails(
        self, settings: Settings, fake_gbfs: FakeGBFS
    ) -> None:
        fake_gbfs.serve_status("station_information", 500)
        fake_gbfs.serve_status("station_status", 500)
        fake_gbfs.serve_body("free_bike_status", b"not json")
        app = make_app(settings, fake_gbfs)

        with TestClient(app) as http:
            response = http.get("/metrics")

        assert response.status_code == 200
        assert "# TYPE station_capacity gauge" in response.text
        assert 'gbfs_exporter_fetch_errors_total{feed="station_status",reason="status"} 1.0' in (
            response.text
        )

    def test_unknown_labels_when_information_fails(
        self, settings: Settings, healthy_feed: FakeGBFS
    ) -> None:
        healthy_feed.serve_status("station_information", 503)
        app = make_app(settings, healthy_feed)

        with TestClient(app) as http:
            text = http.get("/metrics").text

        assert 'station_bikes_available{station_id="1",name="unknown"} 4.0' in text


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health(self, settings: Settings, healthy_feed: FakeGBFS) -> None:
        healthy_feed.serve_status("free_bike_status", 500)
        app = make_app(settings, healthy_feed)

        with TestClient(app) as http:
            body = http.get("/health").json()

        assert body["status"] == "healthy"
        assert body["passes"] == 1
        assert body["scheduler_running"] is True
        assert body["failed_feeds"] == ["free_bike_status"]
        assert body["last_sample_at"] is not None
