"""Utility helpers for the OrderFlow aggregator."""

from orderflow.utils.time import LatencyTimer, format_elapsed, get_timestamp_ms


__all__ = [
    "LatencyTimer",
    "format_elapsed",
    "get_timestamp_ms",
]
