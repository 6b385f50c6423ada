"""
gbfs-exporter - Prometheus exporter for GBFS bikeshare feeds.

Polls a GBFS feed (station information, station status, free bike status)
once a minute and republishes it as gauges for Prometheus to scrape.

Quick Start:
    >>> from gbfsexporter import GBFSClient, MetricSet, Sampler
    >>> async with GBFSClient("https://gbfs.baywheels.com/gbfs/en") as client:
    ...     metrics = MetricSet()
    ...     await Sampler(client, metrics).sample()
    ...     print(metrics.render().decode())

Architecture:
    Feed client: GBFSClient
    Metric set: MetricSet
    Sampling: Sampler, IdentityMap
    Scheduling: PeriodicScheduler
    Serving: gbfsexporter.api.create_app (requires fastapi)
"""

# Imported by submodules, keep above them
__version__ = "0.1.0"

from gbfsexporter.core.config import Settings, get_settings
from gbfsexporter.core.exceptions import (
    ConfigurationError,
    FeedDecodeError,
    FeedError,
    FeedReadError,
    FeedStatusError,
    FeedTransportError,
    GBFSExporterError,
)
from gbfsexporter.http import GBFSClient
from gbfsexporter.metrics import MetricSet
from gbfsexporter.models import (
    BikeStatus,
    Feed,
    FreeBikeStatusResponse,
    StationInformation,
    StationInformationResponse,
    StationStatus,
    StationStatusResponse,
)
from gbfsexporter.sampling import UNKNOWN_NAME, IdentityMap, SampleReport, Sampler
from gbfsexporter.scheduler import PeriodicScheduler

__all__ = [
    "__version__",
    # Config
    "Settings",
    "get_settings",
    # Errors
    "ConfigurationError",
    "FeedDecodeError",
    "FeedError",
    "FeedReadError",
    "FeedStatusError",
    "FeedTransportError",
    "GBFSExporterError",
    # Models
    "BikeStatus",
    "Feed",
    "FreeBikeStatusResponse",
    "StationInformation",
    "StationInformationResponse",
    "StationStatus",
    "StationStatusResponse",
    # Pipeline
    "GBFSClient",
    "IdentityMap",
    "MetricSet",
    "PeriodicScheduler",
    "SampleReport",
    "Sampler",
    "UNKNOWN_NAME",
]
