"""Scheduler for periodic sampling.

Example:
    >>> from gbfsexporter.scheduler import PeriodicScheduler
    >>> from datetime import timedelta
    >>>
    >>> scheduler = PeriodicScheduler(sampler, timedelta(seconds=60))
    >>> await scheduler.run_once()
    >>> scheduler.start()
"""

from gbfsexporter.scheduler.periodic import PeriodicScheduler

__all__ = ["PeriodicScheduler"]
