"""
Aggregation cycle orchestrator.

Fans out one ``fetch_quote`` per configured ``(venue, symbol)``, drops
the venues that failed, attaches liquidity metrics to the survivors and
scores arbitrage candidates over them.
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from orderflow.core.exceptions import AggregationError, FetchError, RateLimitError
from orderflow.core.types import DashboardSnapshot, FetchFailure, NormalizedQuote, Transport
from orderflow.exchange.adapters import ExchangeAdapter
from orderflow.exchange.registry import create_adapter
from orderflow.market.liquidity import LiquidityAnalyzer
from orderflow.strategy.calculator import ArbitrageCalculator
from orderflow.strategy.opportunity import ArbitrageEngine
from orderflow.utils.time import LatencyTimer, get_timestamp_ms


if TYPE_CHECKING:
    from orderflow.config.settings import Settings


logger = logging.getLogger(__name__)


class Aggregator:
    """
    Produces one ``DashboardSnapshot`` per call to ``aggregate``.

    Holds no state between cycles; each call fetches every configured
    market afresh.
    """

    def __init__(
        self,
        adapters: Mapping[str, ExchangeAdapter],
        markets: Mapping[str, Sequence[str]],
        analyzer: LiquidityAnalyzer,
        engine: ArbitrageEngine,
    ) -> None:
        """
        Initialize aggregator.

        Args:
            adapters: Adapter per venue identifier.
            markets: Symbols to fetch per venue, in display order.
            analyzer: Liquidity analyzer applied to every quote.
            engine: Arbitrage engine run over the surviving quotes.

        Raises:
            ValueError: If a market venue has no adapter or nothing is configured.
        """
        missing = [venue for venue in markets if venue not in adapters]
        if missing:
            raise ValueError(f"No adapter for venue(s): {', '.join(missing)}")

        self._adapters = dict(adapters)
        self._targets: list[tuple[str, str]] = [
            (venue, symbol) for venue, symbols in markets.items() for symbol in symbols
        ]
        if not self._targets:
            raise ValueError("At least one market must be configured")

        self._analyzer = analyzer
        self._engine = engine

    @classmethod
    def from_settings(cls, settings: "Settings", transport: Transport) -> "Aggregator":
        """
        Wire adapters, analyzer and engine from settings.

        Raises:
            UnknownExchangeError: If a configured venue has no registered adapter.
        """
        markets: dict[str, list[str]] = {}
        for venue, symbol in settings.targets:
            markets.setdefault(venue, []).append(symbol)

        adapters = {
            venue: create_adapter(venue, transport, depth_limit=settings.depth_limit)
            for venue in markets
        }
        analyzer = LiquidityAnalyzer(
            band_percent=settings.band_percent,
            low_liquidity_threshold_usd=settings.low_liquidity_threshold_usd,
        )
        engine = ArbitrageEngine(
            calculator=ArbitrageCalculator(taker_fee=settings.taker_fee),
            quote_assets=settings.quote_assets,
            base_asset=settings.base_asset,
            kinds=settings.opportunity_kinds,
            min_net=settings.min_net_profit,
        )
        return cls(adapters, markets, analyzer, engine)

    async def aggregate(self) -> DashboardSnapshot:
        """
        Run one aggregation cycle.

        Returns:
            Snapshot with quotes in configuration order.

        Raises:
            AggregationError: If every fetch failed.
        """
        with LatencyTimer() as timer:
            results = await asyncio.gather(
                *(self._adapters[venue].fetch_quote(symbol) for venue, symbol in self._targets),
                return_exceptions=True,
            )

        quotes: list[NormalizedQuote] = []
        errors: list[FetchError] = []
        failures: list[FetchFailure] = []

        for (venue, symbol), result in zip(self._targets, results):
            if isinstance(result, FetchError):
                retry_after = result.retry_after if isinstance(result, RateLimitError) else None
                logger.warning(f"Dropping {venue} {symbol}: {result}")
                errors.append(result)
                failures.append(
                    FetchFailure(
                        exchange=venue,
                        symbol=symbol,
                        error=str(result),
                        status=result.status,
                        rate_limited=isinstance(result, RateLimitError),
                        retry_after=retry_after,
                    )
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                quotes.append(self._analyzer.annotate(result))

        if not quotes:
            error = AggregationError(self._targets, errors)
            logger.error(str(error))
            raise error

        opportunities = self._engine.find_opportunities(quotes)

        logger.info(
            f"Cycle done in {timer}: "
            f"{len(quotes)}/{len(self._targets)} quotes, "
            f"{len(opportunities)} candidates"
        )

        return DashboardSnapshot(
            quotes=tuple(quotes),
            opportunities=tuple(opportunities),
            failures=tuple(failures),
            timestamp_ms=get_timestamp_ms(),
        )

    @property
    def targets(self) -> list[tuple[str, str]]:
        """Configured ``(venue, symbol)`` fetches, in order."""
        return list(self._targets)


# =============================================================================
# Refresh Entry Point
# =============================================================================


@dataclass(slots=True, frozen=True)
class RefreshResult:
    """
    Outcome of a refresh: exactly one of ``data`` or ``error`` is set.

    On failure ``rate_limited`` and ``retry_after`` tell the caller whether
    and for how long to back off before the next refresh.
    """

    data: DashboardSnapshot | None = None
    error: str | None = None
    rate_limited: bool = False
    retry_after: float | None = None

    @property
    def ok(self) -> bool:
        return self.data is not None

    def to_dict(self) -> dict[str, Any]:
        if self.data is not None:
            return {"data": self.data.to_dict()}
        return {
            "error": self.error,
            "rateLimited": self.rate_limited,
            "retryAfter": self.retry_after,
        }


async def refresh(aggregator: Aggregator, timeout: float | None = None) -> RefreshResult:
    """
    Run one cycle for a caller that cannot handle exceptions.

    Total failure and an expired deadline are reported as ``error``.
    """
    try:
        snapshot = await asyncio.wait_for(aggregator.aggregate(), timeout)
    except AggregationError as e:
        return RefreshResult(
            error=str(e),
            rate_limited=e.rate_limited,
            retry_after=e.retry_after,
        )
    except asyncio.TimeoutError:
        logger.error(f"Aggregation cycle exceeded {timeout}s deadline")
        return RefreshResult(error=f"Aggregation timed out after {timeout}s")

    return RefreshResult(data=snapshot)
