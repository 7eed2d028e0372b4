"""Dashboard module: HTTP API serving aggregation snapshots."""

from orderflow.dashboard.server import create_app, main


__all__ = [
    "create_app",
    "main",
]
