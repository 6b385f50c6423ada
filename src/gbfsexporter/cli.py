"""CLI entry point."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gbfsexporter.core.config import Settings, get_settings
from gbfsexporter.core.exceptions import ConfigurationError
from gbfsexporter.core.logging import configure_logging

app = typer.Typer(
    name="gbfs-exporter",
    help="Prometheus exporter for GBFS bikeshare feeds",
    no_args_is_help=True,
)
console = Console()


def _load_settings(**overrides: object) -> Settings:
    try:
        settings = get_settings(**overrides)
    except (ConfigurationError, ValidationError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2) from e
    configure_logging(settings.log_level, settings.log_format)
    return settings


@app.command()
def serve(
    listen: Optional[str] = typer.Option(
        None, "--listen", help="Listen address (default :9100)"
    ),
) -> None:
    """Sample the feeds every minute and serve /metrics."""
    from gbfsexporter.api.server import run_server

    run_server(_load_settings(listen=listen))


@app.command()
def sample(
    base_url: Optional[str] = typer.Option(None, "--base-url", help="GBFS feed base URL"),
    show_metrics: bool = typer.Option(
        False, "--metrics", help="Print the rendered exposition"
    ),
) -> None:
    """Run one sampling pass and print its outcome."""
    from gbfsexporter.http import GBFSClient
    from gbfsexporter.metrics import MetricSet
    from gbfsexporter.sampling import SampleReport, Sampler

    settings = _load_settings(base_url=base_url)
    metric_set = MetricSet()

    async def run() -> SampleReport:
        async with GBFSClient.from_settings(settings) as client:
            return await Sampler(client, metric_set).sample()

    report = asyncio.run(run())

    table = Table(title=f"GBFS pass ({report.duration:.2f}s)")
    table.add_column("Feed")
    table.add_column("Records", justify="right")
    table.add_column("Error")
    for step in report.steps:
        table.add_row(
            step.feed.value,
            str(step.records),
            "" if step.ok else f"[red]{escape(str(step.error))}[/red]",
        )
    console.print(table)

    if show_metrics:
        console.print(metric_set.render().decode(), markup=False, highlight=False)
    if not report.ok:
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show version."""
    from gbfsexporter import __version__

    console.print(f"gbfs-exporter {__version__}")


if __name__ == "__main__":
    app()
