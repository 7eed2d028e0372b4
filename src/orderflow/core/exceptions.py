"""
Exception hierarchy for the OrderFlow aggregator.

Adapter-level failures derive from ``FetchError`` so the aggregator can
drop a single venue without aborting the cycle. Only ``AggregationError``
is fatal for a cycle.
"""

from collections.abc import Sequence


class OrderflowError(Exception):
    """Base exception for all OrderFlow errors."""

    pass


class TransportError(OrderflowError):
    """The transport could not complete a request (DNS, connect, timeout...)."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class FetchError(OrderflowError):
    """Fetching market data for one venue and symbol failed."""

    def __init__(
        self,
        venue: str,
        symbol: str,
        message: str,
        cause: BaseException | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(f"{venue} {symbol}: {message}")
        self.venue = venue
        self.symbol = symbol
        self.cause = cause
        self.status = status


class RateLimitError(FetchError):
    """Venue answered HTTP 429; callers may back off before refreshing."""

    def __init__(
        self,
        venue: str,
        symbol: str,
        retry_after: float | None = None,
        cause: BaseException | None = None,
    ) -> None:
        message = "rate limited"
        if retry_after is not None:
            message += f" (retry after {retry_after:g}s)"
        super().__init__(venue, symbol, message, cause=cause, status=429)
        self.retry_after = retry_after


class ParseError(FetchError):
    """Venue response was malformed or did not match the expected shape."""

    pass


class AggregationError(OrderflowError):
    """Every configured fetch failed; no snapshot can be produced."""

    def __init__(
        self,
        attempted: Sequence[tuple[str, str]],
        failures: Sequence[FetchError],
    ) -> None:
        super().__init__(
            f"All {len(attempted)} market fetches failed: "
            + "; ".join(str(f) for f in failures)
        )
        self.attempted = list(attempted)
        self.failures = list(failures)

    @property
    def rate_limited(self) -> bool:
        """True when at least one failure was a rate limit."""
        return any(isinstance(f, RateLimitError) for f in self.failures)

    @property
    def retry_after(self) -> float | None:
        """Longest back-off any venue asked for, in seconds."""
        delays = [
            f.retry_after
            for f in self.failures
            if isinstance(f, RateLimitError) and f.retry_after is not None
        ]
        return max(delays, default=None)


class UnknownExchangeError(OrderflowError, KeyError):
    """No adapter is registered under the requested venue identifier."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No adapter registered for exchange {name!r}")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])
