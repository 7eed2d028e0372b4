"""
Integration tests for the Aggregator.

Runs full cycles over the mock transport with healthy and failing venues.
"""

import asyncio

import pytest

from orderflow.config.constants import BYBIT_REST_URL, MEXC_REST_URL
from orderflow.config.settings import Settings
from orderflow.core.aggregator import Aggregator, RefreshResult, refresh
from orderflow.core.exceptions import AggregationError, UnknownExchangeError
from orderflow.core.types import CrossExchangeSpread, DashboardSnapshot
from orderflow.market.liquidity import LiquidityAnalyzer
from orderflow.strategy.calculator import ArbitrageCalculator
from orderflow.strategy.opportunity import ArbitrageEngine
from tests.mocks.transport import (
    MockTransport,
    serve_all,
    serve_binance,
    serve_bybit,
    serve_rate_limited,
)


class SlowAggregator(Aggregator):
    """Aggregator whose cycle never finishes in time."""

    def __init__(self) -> None:
        pass

    async def aggregate(self) -> DashboardSnapshot:
        await asyncio.sleep(10)
        raise AssertionError("unreachable")


class TestAggregator:
    """Tests for Aggregator.aggregate."""

    @pytest.mark.asyncio
    async def test_all_venues_healthy(self, settings: Settings, mock_transport: MockTransport) -> None:
        """Test one quote per venue in configuration order."""
        serve_all(mock_transport)
        aggregator = Aggregator.from_settings(settings, mock_transport)

        snapshot = await aggregator.aggregate()

        assert [q.exchange for q in snapshot.quotes] == ["binance", "mexc", "bitget", "bybit"]
        assert not snapshot.is_partial
        assert snapshot.timestamp_ms > 0
        assert all(q.liquidity is not None for q in snapshot.quotes)
        # 4 venues with identical books: 12 ordered cross pairs, no pairs or triangles
        assert len(snapshot.cross_exchange_spreads) == 12
        assert snapshot.pair_spreads == []
        assert snapshot.triangular_cycles == []

    @pytest.mark.asyncio
    async def test_one_venue_failing(self, settings: Settings, mock_transport: MockTransport) -> None:
        """Test a failed venue is dropped and reported while the rest survive."""
        serve_all(mock_transport)
        mock_transport.add(f"{BYBIT_REST_URL}/orderbook", status=500, body=b"upstream error")
        aggregator = Aggregator.from_settings(settings, mock_transport)

        snapshot = await aggregator.aggregate()

        venues = {q.exchange for q in snapshot.quotes}
        assert venues == {"binance", "mexc", "bitget"}
        assert snapshot.is_partial
        (failure,) = snapshot.failures
        assert failure.exchange == "bybit"
        assert failure.status == 500
        assert failure.rate_limited is False
        for spread in snapshot.cross_exchange_spreads:
            assert spread.buy_venue in venues
            assert spread.sell_venue in venues
        assert len(snapshot.cross_exchange_spreads) == 6

    @pytest.mark.asyncio
    async def test_rate_limited_venue_flagged(
        self, settings: Settings, mock_transport: MockTransport
    ) -> None:
        """Test a 429 is recorded as a rate-limited failure."""
        serve_all(mock_transport)
        mock_transport.add(f"{MEXC_REST_URL}/ticker/price", status=429, body=b"")
        aggregator = Aggregator.from_settings(settings, mock_transport)

        snapshot = await aggregator.aggregate()

        (failure,) = snapshot.failures
        assert failure.exchange == "mexc"
        assert failure.rate_limited is True
        assert failure.retry_after is None

    @pytest.mark.asyncio
    async def test_rate_limit_retry_after(
        self, settings: Settings, mock_transport: MockTransport
    ) -> None:
        """Test a Retry-After header is kept on the failure and its dict."""
        serve_all(mock_transport)
        mock_transport.add(
            f"{BYBIT_REST_URL}/orderbook", status=429, headers={"Retry-After": "2"}, body=b""
        )
        aggregator = Aggregator.from_settings(settings, mock_transport)

        snapshot = await aggregator.aggregate()

        (failure,) = snapshot.failures
        assert failure.exchange == "bybit"
        assert failure.rate_limited is True
        assert failure.retry_after == 2.0
        assert failure.to_dict()["rateLimited"] is True
        assert failure.to_dict()["retryAfter"] == 2.0

    @pytest.mark.asyncio
    async def test_all_venues_failing(self, settings: Settings, mock_transport: MockTransport) -> None:
        """Test total failure raises AggregationError with every cause."""
        mock_transport.break_prefix("https://")
        aggregator = Aggregator.from_settings(settings, mock_transport)

        with pytest.raises(AggregationError) as exc_info:
            await aggregator.aggregate()

        assert len(exc_info.value.attempted) == 4
        assert len(exc_info.value.failures) == 4
        assert {f.venue for f in exc_info.value.failures} == {"binance", "mexc", "bitget", "bybit"}

    @pytest.mark.asyncio
    async def test_multi_symbol_venue(self, mock_transport: MockTransport) -> None:
        """Test three stablecoin markets on one venue produce pairs and triangles."""
        serve_binance(mock_transport, "VANAUSDT", bids=[["1.000", "100"]], asks=[["1.002", "100"]])
        serve_binance(mock_transport, "VANAUSDC", bids=[["1.003", "100"]], asks=[["1.005", "100"]])
        serve_binance(mock_transport, "VANAFDUSD", bids=[["0.998", "100"]], asks=[["1.001", "100"]])
        serve_bybit(mock_transport)
        settings = Settings(
            _env_file=None,
            markets={"binance": ["VANAUSDT", "VANAUSDC", "VANAFDUSD"], "bybit": ["VANAUSDT"]},
        )
        aggregator = Aggregator.from_settings(settings, mock_transport)

        snapshot = await aggregator.aggregate()

        assert [q.symbol for q in snapshot.quotes] == ["VANAUSDT", "VANAUSDC", "VANAFDUSD", "VANAUSDT"]
        assert len(snapshot.pair_spreads) == 3
        assert len(snapshot.triangular_cycles) == 2
        assert len(snapshot.cross_exchange_spreads) == 12

    @pytest.mark.asyncio
    async def test_min_net_profit(self, mock_transport: MockTransport) -> None:
        """Test the configured threshold filters the snapshot."""
        serve_binance(mock_transport, bids=[["99", "10"]], asks=[["100", "10"]])
        serve_bybit(mock_transport, bids=[["104", "10"]], asks=[["105", "10"]])
        settings = Settings(
            _env_file=None,
            markets={"binance": ["VANAUSDT"], "bybit": ["VANAUSDT"]},
            min_net_profit=0.0025,
        )
        aggregator = Aggregator.from_settings(settings, mock_transport)

        snapshot = await aggregator.aggregate()

        (spread,) = snapshot.opportunities
        assert isinstance(spread, CrossExchangeSpread)
        assert spread.buy_venue == "binance"
        assert spread.profit_net == pytest.approx(0.038)

    def test_targets_follow_settings(self, mock_transport: MockTransport) -> None:
        """Test wiring keeps the configured fetch order across venues."""
        settings = Settings(
            _env_file=None,
            markets={"bybit": ["VANAUSDT"], "binance": ["VANAUSDT", "VANAUSDC"]},
        )

        aggregator = Aggregator.from_settings(settings, mock_transport)

        assert aggregator.targets == list(settings.targets)
        assert aggregator.targets == [
            ("bybit", "VANAUSDT"),
            ("binance", "VANAUSDT"),
            ("binance", "VANAUSDC"),
        ]

    def test_unknown_venue(self, mock_transport: MockTransport) -> None:
        """Test wiring fails for a venue without an adapter."""
        settings = Settings(_env_file=None, markets={"kraken": ["VANAUSD"]})

        with pytest.raises(UnknownExchangeError):
            Aggregator.from_settings(settings, mock_transport)

    def test_missing_adapter(self, analyzer: LiquidityAnalyzer) -> None:
        """Test direct construction checks every market has an adapter."""
        engine = ArbitrageEngine(ArbitrageCalculator())

        with pytest.raises(ValueError):
            Aggregator({}, {"binance": ["VANAUSDT"]}, analyzer, engine)

    @pytest.mark.asyncio
    async def test_snapshot_serialization(
        self, settings: Settings, mock_transport: MockTransport
    ) -> None:
        """Test the presentation dict shape."""
        serve_all(mock_transport)
        mock_transport.add(f"{BYBIT_REST_URL}/tickers", status=503, body=b"")
        snapshot = await Aggregator.from_settings(settings, mock_transport).aggregate()

        data = snapshot.to_dict()

        assert set(data) == {
            "timestamp",
            "quotes",
            "pairArbitrage",
            "triangularArbitrage",
            "crossExchangeArbitrage",
            "failures",
        }
        assert data["quotes"][0]["depthUSD"]["bids"] > 0
        assert data["crossExchangeArbitrage"][0]["kind"] == "cross_exchange"
        assert data["failures"] == [
            {
                "exchange": "bybit",
                "symbol": "VANAUSDT",
                "error": str(snapshot.failures[0].error),
                "status": 503,
                "rateLimited": False,
                "retryAfter": None,
            }
        ]


class TestRefresh:
    """Tests for the non-raising refresh entry point."""

    @pytest.mark.asyncio
    async def test_success(self, settings: Settings, mock_transport: MockTransport) -> None:
        """Test a successful cycle is returned as data."""
        serve_all(mock_transport)

        result = await refresh(Aggregator.from_settings(settings, mock_transport), timeout=5)

        assert result.ok
        assert result.error is None
        assert set(result.to_dict()) == {"data"}

    @pytest.mark.asyncio
    async def test_total_failure(self, settings: Settings, mock_transport: MockTransport) -> None:
        """Test total failure is returned as an error message."""
        result = await refresh(Aggregator.from_settings(settings, mock_transport))

        assert isinstance(result, RefreshResult)
        assert not result.ok
        assert "failed" in result.error
        assert result.rate_limited is False
        assert result.retry_after is None
        assert result.to_dict() == {"error": result.error, "rateLimited": False, "retryAfter": None}

    @pytest.mark.asyncio
    async def test_rate_limited_total_failure(
        self, settings: Settings, mock_transport: MockTransport
    ) -> None:
        """Test an all-429 cycle reports the back-off to the caller."""
        serve_rate_limited(mock_transport, retry_after="5")

        result = await refresh(Aggregator.from_settings(settings, mock_transport))

        assert not result.ok
        assert result.rate_limited is True
        assert result.retry_after == 5.0
        assert result.to_dict()["rateLimited"] is True
        assert result.to_dict()["retryAfter"] == 5.0

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        """Test an expired deadline is returned as an error message."""
        result = await refresh(SlowAggregator(), timeout=0.01)

        assert not result.ok
        assert "timed out" in result.error
