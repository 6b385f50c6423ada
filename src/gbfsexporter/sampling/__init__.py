"""Sampling pipeline: fetch, resolve station identity, update gauges.

Example:
    >>> from gbfsexporter.sampling import Sampler
    >>> sampler = Sampler(client, metric_set)
    >>> report = await sampler.sample()
"""

from gbfsexporter.sampling.fetch import StepResult, fetch_feed
from gbfsexporter.sampling.identity import (
    UNKNOWN_NAME,
    IdentityMap,
    build_identities,
    resolve_identities,
)
from gbfsexporter.sampling.sampler import (
    SampleReport,
    Sampler,
    apply_free_bike_status,
    apply_station_status,
)

__all__ = [
    "UNKNOWN_NAME",
    "IdentityMap",
    "SampleReport",
    "Sampler",
    "StepResult",
    "apply_free_bike_status",
    "apply_station_status",
    "build_identities",
    "fetch_feed",
    "resolve_identities",
]
