"""Clock helpers: snapshot timestamps and fetch latency."""

import time


def get_timestamp_ms() -> int:
    """Unix wall-clock time in milliseconds, used to stamp snapshots."""
    return time.time_ns() // 1_000_000


class LatencyTimer:
    """
    Measures the wall time of a ``with`` block on the monotonic clock.

    ``elapsed`` is in seconds and is 0.0 until the block exits; ``str()``
    renders it for log lines.
    """

    __slots__ = ("_started", "elapsed")

    def __init__(self) -> None:
        self._started = 0.0
        self.elapsed = 0.0

    def __enter__(self) -> "LatencyTimer":
        self._started = time.perf_counter()
        return self

    def __exit__(self, *args: object) -> None:
        self.elapsed = time.perf_counter() - self._started

    def __str__(self) -> str:
        return format_elapsed(self.elapsed)


def format_elapsed(seconds: float) -> str:
    """
    Render a duration with a unit suited to its size.

    >>> format_elapsed(0.0042)
    '4.2ms'
    >>> format_elapsed(1.5)
    '1.50s'
    """
    if seconds >= 1.0:
        return f"{seconds:.2f}s"
    return f"{seconds * 1000:.1f}ms"
