"""Periodic scheduler for sampling passes.

Runs the sampler once on demand (startup), then on a fixed-rate tick in a
background ``asyncio.Task`` for the lifetime of the process.

If a pass overruns the interval the missed ticks are dropped: the next pass
starts on the next tick boundary after the overrun, never concurrently and
never in a burst.

Example:
    >>> scheduler = PeriodicScheduler(sampler, interval=timedelta(seconds=60))
    >>> await scheduler.run_once()
    >>> scheduler.start()
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import timedelta

from gbfsexporter.sampling import SampleReport, Sampler

logger = logging.getLogger("gbfsexporter.scheduler")


class PeriodicScheduler:
    """Fixed-interval driver for a ``Sampler``.

    Attributes:
        sampler: The sampler to run
        interval: Time between pass starts
        run_count: Passes completed since creation
    """

    def __init__(
        self,
        sampler: Sampler,
        interval: timedelta = timedelta(seconds=60),
    ) -> None:
        if interval <= timedelta(0):
            raise ValueError("interval must be positive")
        self.sampler = sampler
        self.interval = interval
        self.run_count = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> SampleReport | None:
        """Run one pass now.

        Unexpected errors are logged rather than raised so a broken pass
        never takes down the loop or the server.
        """
        try:
            report = await self.sampler.sample()
        except Exception:
            logger.exception("Sampling pass failed")
            return None
        self.run_count += 1
        return report

    def start(self) -> asyncio.Task[None]:
        """Start the background loop. The first tick is one interval away.

        Raises:
            RuntimeError: If the loop is already running.
        """
        if self.running:
            raise RuntimeError("Scheduler is already running")
        self._task = asyncio.create_task(self._run(), name="gbfs-sampler")
        logger.info("Sampling every %.0fs", self.interval.total_seconds())
        return self._task

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to finish.

        This is idempotent - calling multiple times is safe.
        """
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        period = self.interval.total_seconds()
        next_tick = time.monotonic() + period
        while True:
            await asyncio.sleep(max(0.0, next_tick - time.monotonic()))
            await self.run_once()

            next_tick += period
            now = time.monotonic()
            if next_tick <= now:
                skipped = int((now - next_tick) // period) + 1
                logger.warning(
                    "Sampling pass overran the interval, skipping %d tick(s)", skipped
                )
                next_tick += skipped * period
