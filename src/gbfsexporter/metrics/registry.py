"""Metric set for GBFS data.

Holds the fixed catalog of gauge families on its own
``prometheus_client.CollectorRegistry``. Writers only ever call
``MetricSet.set``; a label combination that was never set is absent from
the exposition, not zero. Combinations are never removed, so a bike or
station that disappears from the feed keeps its last value.

Example:
    >>> from gbfsexporter.metrics import MetricSet
    >>>
    >>> metrics = MetricSet()
    >>> metrics.set("station_capacity", ("1", "Main St"), 15)
    >>> metrics.get("station_capacity", ("1", "Main St"))
    15.0
    >>> b'station_capacity{station_id="1",name="Main St"} 15.0' in metrics.render()
    True
"""

from __future__ import annotations

import time
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

STATION_LABELS = ("station_id", "name")
BIKE_LABELS = ("bike_id",)


@dataclass(frozen=True)
class GaugeSpec:
    """Name, help text and label names of one gauge family."""

    name: str
    documentation: str
    labelnames: tuple[str, ...]


GAUGE_CATALOG: tuple[GaugeSpec, ...] = (
    GaugeSpec("station_capacity", "Bike capacity of the station.", STATION_LABELS),
    GaugeSpec("bike_disabled", "Bike is_disabled status", BIKE_LABELS),
    GaugeSpec("bike_reserved", "Bike is_reserved status", BIKE_LABELS),
    GaugeSpec(
        "station_last_report",
        "Station status report last check-in timestamp",
        STATION_LABELS,
    ),
    GaugeSpec("station_is_returning", "Station is_returning status", STATION_LABELS),
    GaugeSpec("station_is_renting", "Station is_renting status", STATION_LABELS),
    GaugeSpec("station_is_installed", "Station is_installed status", STATION_LABELS),
    GaugeSpec(
        "station_bikes_available",
        "Number of bikes available at the station",
        STATION_LABELS,
    ),
    GaugeSpec(
        "station_bikes_disabled",
        "Number of bikes disabled at the station",
        STATION_LABELS,
    ),
    GaugeSpec(
        "station_docks_available",
        "Number of docks available at the station",
        STATION_LABELS,
    ),
    GaugeSpec(
        "station_docks_disabled",
        "Number of docks disabled at the station",
        STATION_LABELS,
    ),
    GaugeSpec(
        "station_ebikes_available",
        "Number of ebikes available at the station",
        STATION_LABELS,
    ),
)


class MetricSet:
    """Fixed collection of labeled gauges plus exporter self-metrics.

    Each instance owns its registry, so tests and multiple exporters in one
    process never share state. prometheus_client guards every child with a
    lock, so ``render`` is safe while a sampling pass is writing.

    Attributes:
        registry: The registry rendered by ``render``
        prefix: Prefix for the exporter self-metrics
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        prefix: str = "gbfs_exporter",
    ) -> None:
        """Register every gauge family and the self-metrics.

        Args:
            registry: Registry to register on (default: a new one)
            prefix: Prefix for exporter self-metric names
        """
        self.registry = registry if registry is not None else CollectorRegistry()
        self.prefix = prefix
        self._specs = {spec.name: spec for spec in GAUGE_CATALOG}
        self._gauges: dict[str, Gauge] = {
            spec.name: Gauge(
                spec.name,
                spec.documentation,
                spec.labelnames,
                registry=self.registry,
            )
            for spec in GAUGE_CATALOG
        }

        self._fetch_errors = Counter(
            f"{prefix}_fetch_errors_total",
            "Failed feed fetches",
            ["feed", "reason"],
            registry=self.registry,
        )
        self._fetch_duration = Histogram(
            f"{prefix}_fetch_duration_seconds",
            "Time to fetch and decode a feed",
            ["feed"],
            buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
            registry=self.registry,
        )
        self._last_sample = Gauge(
            f"{prefix}_last_sample_timestamp_seconds",
            "Unix time the last sampling pass finished",
            registry=self.registry,
        )

    @property
    def names(self) -> list[str]:
        """Gauge family names in catalog order."""
        return list(self._gauges)

    def labelnames(self, name: str) -> tuple[str, ...]:
        self._gauge(name)
        return self._specs[name].labelnames

    def set(self, name: str, label_values: Sequence[str], value: float) -> None:
        """Set the value of one label combination, overwriting any previous one.

        Args:
            name: Gauge family name from the catalog
            label_values: Label values in the family's label order
            value: New value

        Raises:
            KeyError: If ``name`` is not in the catalog
            ValueError: If the number of label values is wrong
        """
        self._gauge(name).labels(*label_values).set(value)

    def get(self, name: str, label_values: Sequence[str]) -> float | None:
        """Current value of one label combination, or None if never set."""
        labels = dict(zip(self.labelnames(name), label_values, strict=True))
        return self.registry.get_sample_value(name, labels)

    def series(self, name: str) -> dict[tuple[str, ...], float]:
        """All label combinations currently exposed for one family."""
        labelnames = self.labelnames(name)
        result: dict[tuple[str, ...], float] = {}
        for metric in self._gauge(name).collect():
            for sample in metric.samples:
                result[tuple(sample.labels[label] for label in labelnames)] = sample.value
        return result

    def record_fetch_error(self, feed: str, reason: str) -> None:
        self._fetch_errors.labels(feed=feed, reason=reason).inc()

    @contextmanager
    def time_fetch(self, feed: str) -> Generator[None, None, None]:
        """Observe the duration of a fetch, whether it succeeds or not.

        Example:
            >>> metrics = MetricSet()
            >>> with metrics.time_fetch("station_status"):
            ...     pass
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            self._fetch_duration.labels(feed=feed).observe(time.perf_counter() - start)

    def mark_sample_complete(self, timestamp: float | None = None) -> None:
        self._last_sample.set(timestamp if timestamp is not None else time.time())

    def render(self) -> bytes:
        """Render the registry in the Prometheus text exposition format."""
        return generate_latest(self.registry)

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def _gauge(self, name: str) -> Gauge:
        try:
            return self._gauges[name]
        except KeyError:
            raise KeyError(f"Unknown metric family: {name}") from None


__all__ = [
    "BIKE_LABELS",
    "GAUGE_CATALOG",
    "STATION_LABELS",
    "GaugeSpec",
    "MetricSet",
]
