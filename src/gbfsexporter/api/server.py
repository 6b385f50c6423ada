"""HTTP serving for gbfs-exporter.

Exposes the metric set for Prometheus and hosts the sampling loop in the
application lifespan:

- one sampling pass is awaited before the server accepts connections, so
  the first scrape is never empty
- the periodic loop then runs as a background task on the server's event
  loop, so a slow feed never blocks a scrape

Example:
    >>> from gbfsexporter.api.server import create_app
    >>> from gbfsexporter.core.config import get_settings
    >>>
    >>> app = create_app(get_settings())
    >>>
    >>> # Run with: gbfs-exporter serve --listen :9100
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any

import uvicorn
from fastapi import FastAPI, Response

from gbfsexporter import __version__
from gbfsexporter.core.config import Settings
from gbfsexporter.http import GBFSClient
from gbfsexporter.metrics import MetricSet
from gbfsexporter.sampling import Sampler
from gbfsexporter.scheduler import PeriodicScheduler

logger = logging.getLogger("gbfsexporter.api")


def create_app(
    settings: Settings,
    *,
    client: GBFSClient | None = None,
    metric_set: MetricSet | None = None,
) -> FastAPI:
    """Create the exporter application.

    Args:
        settings: Exporter settings.
        client: Feed client (default: built from settings).
        metric_set: Metric set to expose (default: a new one).

    Returns:
        Configured FastAPI application. ``app.state`` holds the metric set,
        sampler and scheduler.
    """
    client = client if client is not None else GBFSClient.from_settings(settings)
    metric_set = metric_set if metric_set is not None else MetricSet()
    sampler = Sampler(client, metric_set)
    scheduler = PeriodicScheduler(
        sampler, interval=timedelta(seconds=settings.sample_interval)
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # sample at startup
        await scheduler.run_once()
        scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()
            await client.close()

    app = FastAPI(
        title="gbfs-exporter",
        version=__version__,
        description="Prometheus exporter for GBFS bikeshare feeds",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )

    app.state.settings = settings
    app.state.metric_set = metric_set
    app.state.sampler = sampler
    app.state.scheduler = scheduler

    @app.get("/metrics")
    async def metrics() -> Response:
        """Current metric values in the Prometheus text format."""
        return Response(content=metric_set.render(), media_type=metric_set.content_type)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        """Liveness plus the outcome of the last pass."""
        report = sampler.last_report
        return {
            "status": "healthy",
            "base_url": client.base_url,
            "scheduler_running": scheduler.running,
            "passes": scheduler.run_count,
            "last_sample_at": report.started_at.isoformat() if report else None,
            "failed_feeds": [feed.value for feed in report.failed_feeds] if report else [],
        }

    return app


def run_server(settings: Settings) -> None:
    """Serve the exporter until the process is killed.

    A failure to bind the listen address terminates the process.
    """
    app = create_app(settings)
    logger.info("Listening on %s", settings.listen)
    config = uvicorn.Config(
        app,
        host=settings.listen_host,
        port=settings.listen_port,
        log_config=None,
        access_log=False,
    )
    uvicorn.Server(config).run()
