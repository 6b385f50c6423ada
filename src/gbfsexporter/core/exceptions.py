"""Custom exceptions.

gbfs-exporter uses a small hierarchy of exceptions so callers can decide
how fatal a failure is:

Example:
    >>> from gbfsexporter.core.exceptions import FeedStatusError, FeedError
    >>> err = FeedStatusError("station_status", 500)
    >>> isinstance(err, FeedError)
    True
    >>> err.reason
    'status'
"""

from __future__ import annotations


class GBFSExporterError(Exception):
    """Base exception for gbfs-exporter.

    Example:
        >>> from gbfsexporter.core.exceptions import GBFSExporterError
        >>> str(GBFSExporterError("something went wrong"))
        'something went wrong'
    """


class ConfigurationError(GBFSExporterError):
    """Configuration is invalid.

    Example:
        >>> from gbfsexporter.core.exceptions import ConfigurationError
        >>> raise ConfigurationError("bad listen address")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ConfigurationError: bad listen address
    """


class FeedError(GBFSExporterError):
    """Fetching or decoding one GBFS feed failed.

    Attributes:
        feed: Feed name (e.g. "station_status").
        reason: Failure category used for logging and the error counter.
        cause: Underlying exception, if any.
    """

    reason = "unknown"

    def __init__(
        self,
        message: str,
        feed: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.feed = feed
        self.cause = cause


class FeedTransportError(FeedError):
    """Feed host unreachable, connection reset, or request timed out."""

    reason = "transport"


class FeedStatusError(FeedError):
    """Feed responded with a non-success status code.

    Example:
        >>> from gbfsexporter.core.exceptions import FeedStatusError
        >>> FeedStatusError("free_bike_status", 503).status_code
        503
    """

    reason = "status"

    def __init__(self, feed: str, status_code: int, reason_phrase: str = "") -> None:
        message = f"{feed}: HTTP {status_code} {reason_phrase}".rstrip()
        super().__init__(message, feed=feed)
        self.status_code = status_code


class FeedReadError(FeedError):
    """Response body could not be read."""

    reason = "read"


class FeedDecodeError(FeedError):
    """Response body is not valid JSON or does not match the feed schema."""

    reason = "decode"


__all__ = [
    "ConfigurationError",
    "FeedDecodeError",
    "FeedError",
    "FeedReadError",
    "FeedStatusError",
    "FeedTransportError",
    "GBFSExporterError",
]
