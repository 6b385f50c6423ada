"""Shared fixtures: an in-process GBFS feed served through httpx.MockTransport."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import pytest

from gbfsexporter.http import GBFSClient
from gbfsexporter.metrics import MetricSet

BASE_URL = "https://gbfs.test/gbfs/en"


def station_information(*stations: dict[str, Any]) -> dict[str, Any]:
    return {"last_updated": 1700000000, "ttl": 60, "data": {"stations": list(stations)}}


def station_status(*stations: dict[str, Any]) -> dict[str, Any]:
    return {"last_updated": 1700000000, "ttl": 60, "data": {"stations": list(stations)}}


def free_bike_status(*bikes: dict[str, Any]) -> dict[str, Any]:
    return {"last_updated": 1700000000, "ttl": 60, "data": {"bikes": list(bikes)}}


class BrokenStream(httpx.AsyncByteStream):
    """Response body that fails while being read."""

    async def __aiter__(self):
        raise httpx.ReadError("connection reset while reading body")
        yield b""  # pragma: no cover


class FakeGBFS:
    """Serves canned responses per feed name; unknown feeds return 404."""

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def serve_json(self, feed: str, payload: Any, status_code: int = 200) -> None:
        self.responses[feed] = lambda: httpx.Response(status_code, json=payload)

    def serve_body(self, feed: str, body: bytes, status_code: int = 200) -> None:
        self.responses[feed] = lambda: httpx.Response(status_code, content=body)

    def serve_status(self, feed: str, status_code: int) -> None:
        self.responses[feed] = lambda: httpx.Response(status_code, text="upstream error")

    def serve_broken_body(self, feed: str) -> None:
        self.responses[feed] = lambda: httpx.Response(200, stream=BrokenStream())

    def raise_error(self, feed: str, exc: Exception) -> None:
        def fail() -> httpx.Response:
            raise exc

        self.responses[feed] = fail

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        feed = request.url.path.rsplit("/", 1)[-1].removesuffix(".json")
        factory = self.responses.get(feed)
        if factory is None:
            return httpx.Response(404, text="not found")
        return factory()

    def requested_feeds(self) -> list[str]:
        return [r.url.path.rsplit("/", 1)[-1] for r in self.requests]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo handler changes made by configure_logging."""
    logger = logging.getLogger("gbfsexporter")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def fake_gbfs() -> FakeGBFS:
    return FakeGBFS()


@pytest.fixture
def metric_set() -> MetricSet:
    return MetricSet()


@pytest.fixture
async def client(fake_gbfs: FakeGBFS):
    async with GBFSClient(BASE_URL, transport=fake_gbfs.transport) as gbfs_client:
        yield gbfs_client
