"""Core configuration, logging and exceptions."""

from gbfsexporter.core.config import Settings, get_settings, parse_listen_address
from gbfsexporter.core.exceptions import (
    ConfigurationError,
    FeedDecodeError,
    FeedError,
    FeedReadError,
    FeedStatusError,
    FeedTransportError,
    GBFSExporterError,
)
from gbfsexporter.core.logging import configure_logging

__all__ = [
    "ConfigurationError",
    "FeedDecodeError",
    "FeedError",
    "FeedReadError",
    "FeedStatusError",
    "FeedTransportError",
    "GBFSExporterError",
    "Settings",
    "configure_logging",
    "get_settings",
    "parse_listen_address",
]
