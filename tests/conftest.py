"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for all test modules.
"""

from collections.abc import Callable, Sequence

import pytest

from orderflow.config.settings import Settings
from orderflow.core.types import NormalizedQuote, RawQuote
from orderflow.market.liquidity import LiquidityAnalyzer
from orderflow.market.orderbook import build_quote
from orderflow.strategy.calculator import ArbitrageCalculator
from orderflow.strategy.opportunity import ArbitrageEngine
from tests.mocks.transport import MockTransport


QuoteFactory = Callable[..., NormalizedQuote]


# =============================================================================
# Quote Fixtures
# =============================================================================


def make_quote(
    exchange: str = "binance",
    symbol: str = "VANAUSDT",
    bid: float | None = 0.999,
    ask: float | None = 1.001,
    last_price: float = 1.0,
    quote_volume: float = 100000.0,
    bids: Sequence[Sequence[str]] | None = None,
    asks: Sequence[Sequence[str]] | None = None,
    size: float = 1000.0,
) -> NormalizedQuote:
    """Build a normalized quote with a one-level book unless levels are given."""
    if bids is None:
        bids = [[str(bid), str(size)]] if bid is not None else []
    if asks is None:
        asks = [[str(ask), str(size)]] if ask is not None else []

    return build_quote(
        RawQuote(
            exchange=exchange,
            symbol=symbol,
            last_price=last_price,
            quote_volume=quote_volume,
            bids=tuple(bids),
            asks=tuple(asks),
        )
    )


@pytest.fixture
def quote_factory() -> QuoteFactory:
    """Factory for normalized quotes."""
    return make_quote


@pytest.fixture
def vana_depth() -> tuple[list[list[str]], list[list[str]]]:
    """Unsorted VANA book around 1.00 as a venue would send it."""
    bids = [["0.995", "20000"], ["1.000", "10000"], ["0.970", "50000"], ["0.998", "15000"]]
    asks = [["1.030", "40000"], ["1.004", "12000"], ["1.001", "8000"], ["1.015", "25000"]]
    return bids, asks


@pytest.fixture
def stablecoin_quotes(quote_factory: QuoteFactory) -> list[NormalizedQuote]:
    """VANA against three stablecoins on one venue."""
    return [
        quote_factory(symbol="VANAUSDT", bid=1.000, ask=1.002),
        quote_factory(symbol="VANAUSDC", bid=1.003, ask=1.005),
        quote_factory(symbol="VANAFDUSD", bid=0.998, ask=1.001),
    ]


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def calculator() -> ArbitrageCalculator:
    """Arbitrage calculator with the default 0.1% taker fee."""
    return ArbitrageCalculator(taker_fee=0.001)


@pytest.fixture
def engine(calculator: ArbitrageCalculator) -> ArbitrageEngine:
    """Arbitrage engine enumerating every opportunity class."""
    return ArbitrageEngine(calculator=calculator, base_asset="VANA")


@pytest.fixture
def analyzer() -> LiquidityAnalyzer:
    """Liquidity analyzer with ±2% band and $60k threshold."""
    return LiquidityAnalyzer(band_percent=0.02, low_liquidity_threshold_usd=60000.0)


# =============================================================================
# Infrastructure Fixtures
# =============================================================================


@pytest.fixture
def mock_transport() -> MockTransport:
    """Empty in-memory transport."""
    return MockTransport()


@pytest.fixture
def settings() -> Settings:
    """Settings with one VANAUSDT market per venue, ignoring any .env file."""
    return Settings(
        _env_file=None,
        markets={
            "binance": ["VANAUSDT"],
            "mexc": ["VANAUSDT"],
            "bitget": ["VANAUSDT"],
            "bybit": ["VANAUSDT"],
        },
    )
