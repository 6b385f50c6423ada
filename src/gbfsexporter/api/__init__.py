"""HTTP serving for the exporter."""

from gbfsexporter.api.server import create_app, run_server

__all__ = ["create_app", "run_server"]
