"""Typed records for the GBFS feeds the exporter samples."""

from gbfsexporter.models.base import Feed, FeedEnvelope, GBFSModel
from gbfsexporter.models.bike import BikeStatus, FreeBikeStatusResponse
from gbfsexporter.models.station import (
    StationInformation,
    StationInformationResponse,
    StationStatus,
    StationStatusResponse,
)

__all__ = [
    "BikeStatus",
    "Feed",
    "FeedEnvelope",
    "FreeBikeStatusResponse",
    "GBFSModel",
    "StationInformation",
    "StationInformationResponse",
    "StationStatus",
    "StationStatusResponse",
]
