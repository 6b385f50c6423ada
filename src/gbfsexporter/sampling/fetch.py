"""Fetch one feed inside a sampling pass.

Wraps a client fetch with the exporter's self-metrics and turns the outcome
into a ``StepResult`` so one failing feed never aborts the pass.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from gbfsexporter.core.exceptions import FeedError
from gbfsexporter.metrics import MetricSet
from gbfsexporter.models import Feed, FeedEnvelope

logger = logging.getLogger("gbfsexporter.sampling")

EnvelopeT = TypeVar("EnvelopeT", bound=FeedEnvelope)


@dataclass(frozen=True)
class StepResult:
    """Outcome of one step of a sampling pass.

    Attributes:
        feed: The feed the step sampled
        records: Records applied to the metric set (0 on failure)
        error: The feed failure, or None on success
    """

    feed: Feed
    records: int = 0
    error: FeedError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def fetch_feed(
    metric_set: MetricSet,
    feed: Feed,
    fetch: Callable[[], Awaitable[EnvelopeT]],
) -> EnvelopeT | FeedError:
    """Run ``fetch`` and return its document, or the ``FeedError`` it raised.

    Failures are logged and counted in ``gbfs_exporter_fetch_errors_total``.
    Anything other than a ``FeedError`` propagates.
    """
    with metric_set.time_fetch(feed.value):
        try:
            return await fetch()
        except FeedError as e:
            metric_set.record_fetch_error(feed.value, e.reason)
            logger.warning(
                "Error sampling %s (%s): %s",
                feed.value.replace("_", " "),
                e.reason,
                e,
            )
            return e
