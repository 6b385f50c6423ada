"""Allow ``python -m gbfsexporter``."""

from gbfsexporter.cli import app

app()
