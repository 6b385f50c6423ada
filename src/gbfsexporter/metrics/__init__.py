"""Prometheus metric set for GBFS data.

Example:
    >>> from gbfsexporter.metrics import MetricSet
    >>>
    >>> metrics = MetricSet()
    >>> metrics.set("bike_disabled", ("bike-1",), 1)
    >>> print(metrics.render().decode())
"""

from gbfsexporter.metrics.registry import (
    BIKE_LABELS,
    GAUGE_CATALOG,
    STATION_LABELS,
    GaugeSpec,
    MetricSet,
)

__all__ = [
    "BIKE_LABELS",
    "GAUGE_CATALOG",
    "STATION_LABELS",
    "GaugeSpec",
    "MetricSet",
]
