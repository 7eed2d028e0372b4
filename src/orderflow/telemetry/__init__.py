"""Telemetry module: non-blocking logging."""

from orderflow.telemetry.logger import AsyncLogger, MicrosecondFormatter, setup_logging


__all__ = [
    "AsyncLogger",
    "MicrosecondFormatter",
    "setup_logging",
]
