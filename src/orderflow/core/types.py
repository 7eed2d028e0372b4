"""
Type definitions for the OrderFlow aggregator.

This module contains all dataclasses, enums and Protocol definitions used
throughout the application. Market entities are frozen and slotted: they are
built once per aggregation cycle and never mutated.
"""

import math
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, TypeAlias


# Raw ``[price, size]`` entry as returned by a venue depth endpoint
RawLevel: TypeAlias = Sequence[str | float]

# ``(exchange, symbol)`` identity of a quote
QuoteKey: TypeAlias = tuple[str, str]


# =============================================================================
# Enums
# =============================================================================


class BookSide(str, Enum):
    """Order book side."""

    BID = "BID"
    ASK = "ASK"


class OpportunityKind(str, Enum):
    """Arbitrage opportunity class."""

    PAIR_SPREAD = "pair_spread"
    TRIANGULAR = "triangular"
    CROSS_EXCHANGE = "cross_exchange"


# =============================================================================
# Order Book Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class PriceLevel:
    """Single depth-of-book entry."""

    price: float
    size: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.price) or self.price <= 0:
            raise ValueError(f"Price must be positive, got {self.price!r}")
        if not math.isfinite(self.size) or self.size < 0:
            raise ValueError(f"Size must be non-negative, got {self.size!r}")

    @property
    def notional(self) -> float:
        """Quote-denominated value of the level."""
        return self.price * self.size


@dataclass(slots=True, frozen=True)
class OrderBookSide:
    """
    One canonically sorted side of an order book.

    Bids are sorted descending and asks ascending by price, so the best
    price is always first. ``totals[i]`` is the cumulative size of
    ``levels[0..i]``.
    """

    side: BookSide
    levels: tuple[PriceLevel, ...] = ()
    totals: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if len(self.levels) != len(self.totals):
            raise ValueError("levels and totals must have the same length")

    def __len__(self) -> int:
        return len(self.levels)

    def __iter__(self) -> Iterator[PriceLevel]:
        return iter(self.levels)

    @property
    def is_empty(self) -> bool:
        """True when the side has no levels."""
        return not self.levels

    @property
    def best(self) -> PriceLevel | None:
        """Best level (highest bid / lowest ask), if any."""
        return self.levels[0] if self.levels else None

    @property
    def best_price(self) -> float | None:
        """Price of the best level, if any."""
        return self.levels[0].price if self.levels else None

    def rows(self) -> Iterator[tuple[float, float, float]]:
        """Iterate ``(price, size, total)`` rows in book order."""
        for level, total in zip(self.levels, self.totals):
            yield level.price, level.size, total

    def to_list(self) -> list[dict[str, float]]:
        """Serialize as a list of ``{price, size, total}`` dicts."""
        return [
            {"price": price, "size": size, "total": total}
            for price, size, total in self.rows()
        ]


# =============================================================================
# Liquidity Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class LiquidityBand:
    """Inclusive price range around the mid-price."""

    lower: float
    upper: float

    def contains(self, price: float) -> bool:
        """Check whether a price lies inside the band (inclusive)."""
        return self.lower <= price <= self.upper


@dataclass(slots=True, frozen=True)
class DepthUSD:
    """USD notional resting inside the band on each side."""

    bids: float
    asks: float


@dataclass(slots=True, frozen=True)
class LowLiquidity:
    """Low-liquidity flags per side."""

    bids: bool
    asks: bool


@dataclass(slots=True, frozen=True)
class LiquidityReport:
    """Liquidity metrics for a single quote."""

    band: LiquidityBand
    depth_usd: DepthUSD
    low_liquidity: LowLiquidity
    band_percent: float
    threshold_usd: float


# =============================================================================
# Quote Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class RawQuote:
    """
    Venue data as fetched, before normalization.

    ``bids`` and ``asks`` hold the venue's raw ``[price, size]`` string pairs
    in whatever order the venue returned them.
    """

    exchange: str
    symbol: str
    last_price: float
    quote_volume: float
    bids: tuple[RawLevel, ...]
    asks: tuple[RawLevel, ...]


@dataclass(slots=True, frozen=True)
class NormalizedQuote:
    """
    Normalized market snapshot for one ``(exchange, symbol)``.

    ``mid_price`` is always positive: quotes without any usable price
    source are rejected before construction.
    """

    exchange: str
    symbol: str
    last_price: float
    quote_volume: float
    mid_price: float
    bids: OrderBookSide
    asks: OrderBookSide
    liquidity: LiquidityReport | None = None

    @property
    def key(self) -> QuoteKey:
        """``(exchange, symbol)`` identity."""
        return self.exchange, self.symbol

    @property
    def best_bid(self) -> float | None:
        """Highest bid price, if the bid side is non-empty."""
        return self.bids.best_price

    @property
    def best_ask(self) -> float | None:
        """Lowest ask price, if the ask side is non-empty."""
        return self.asks.best_price

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the presentation layer."""
        data: dict[str, Any] = {
            "exchange": self.exchange,
            "symbol": self.symbol,
            "price": self.last_price,
            "quoteVolume": self.quote_volume,
            "midPrice": self.mid_price,
            "depthUSD": None,
            "lowLiquidity": None,
            "orderBook": {
                "bids": self.bids.to_list(),
                "asks": self.asks.to_list(),
            },
        }
        if self.liquidity is not None:
            data["depthUSD"] = {
                "bids": self.liquidity.depth_usd.bids,
                "asks": self.liquidity.depth_usd.asks,
            }
            data["lowLiquidity"] = {
                "bids": self.liquidity.low_liquidity.bids,
                "asks": self.liquidity.low_liquidity.asks,
            }
        return data


# =============================================================================
# Opportunity Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class PairSpread:
    """Mid-price divergence between two symbols on one exchange."""

    exchange: str
    pair_symbols: tuple[str, str]
    gross_spread: float
    spread_net: float

    kind = OpportunityKind.PAIR_SPREAD

    @property
    def net(self) -> float:
        return self.spread_net

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "exchange": self.exchange,
            "pair": list(self.pair_symbols),
            "grossSpread": self.gross_spread,
            "spread": self.spread_net,
        }


@dataclass(slots=True, frozen=True)
class TriangularCycle:
    """
    Closed loop through three quote assets on one exchange.

    ``path`` starts and ends with the same asset, e.g.
    ``("USDT", "USDC", "FDUSD", "USDT")``.
    """

    exchange: str
    base_asset: str
    path: tuple[str, str, str, str]
    symbols: tuple[str, str, str]
    leg_rates: tuple[float, float, float]
    gross_profit: float
    profit_net: float

    kind = OpportunityKind.TRIANGULAR

    @property
    def net(self) -> float:
        return self.profit_net

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "exchange": self.exchange,
            "baseAsset": self.base_asset,
            "path": list(self.path),
            "symbols": list(self.symbols),
            "legRates": list(self.leg_rates),
            "grossProfit": self.gross_profit,
            "profit": self.profit_net,
        }


@dataclass(slots=True, frozen=True)
class CrossExchangeSpread:
    """Buy at the best ask on one quote, sell at the best bid on another."""

    buy_venue: str
    buy_symbol: str
    buy_price: float
    sell_venue: str
    sell_symbol: str
    sell_price: float
    gross_profit: float
    profit_net: float

    kind = OpportunityKind.CROSS_EXCHANGE

    @property
    def net(self) -> float:
        return self.profit_net

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "buyOn": self.buy_venue,
            "buySymbol": self.buy_symbol,
            "buyPrice": self.buy_price,
            "sellOn": self.sell_venue,
            "sellSymbol": self.sell_symbol,
            "sellPrice": self.sell_price,
            "grossProfit": self.gross_profit,
            "profit": self.profit_net,
        }


Opportunity: TypeAlias = PairSpread | TriangularCycle | CrossExchangeSpread


# =============================================================================
# Snapshot Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class FetchFailure:
    """Report of a ``(venue, symbol)`` fetch dropped from a cycle."""

    exchange: str
    symbol: str
    error: str
    status: int | None = None
    rate_limited: bool = False
    retry_after: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "exchange": self.exchange,
            "symbol": self.symbol,
            "error": self.error,
            "status": self.status,
            "rateLimited": self.rate_limited,
            "retryAfter": self.retry_after,
        }


@dataclass(slots=True, frozen=True)
class DashboardSnapshot:
    """
    Result of one aggregation cycle.

    This is the only value handed to the presentation layer.
    """

    quotes: tuple[NormalizedQuote, ...]
    opportunities: tuple[Opportunity, ...]
    failures: tuple[FetchFailure, ...] = ()
    timestamp_ms: int = 0

    @property
    def is_partial(self) -> bool:
        """True when at least one configured fetch failed."""
        return bool(self.failures)

    @property
    def pair_spreads(self) -> list[PairSpread]:
        return [o for o in self.opportunities if isinstance(o, PairSpread)]

    @property
    def triangular_cycles(self) -> list[TriangularCycle]:
        return [o for o in self.opportunities if isinstance(o, TriangularCycle)]

    @property
    def cross_exchange_spreads(self) -> list[CrossExchangeSpread]:
        return [o for o in self.opportunities if isinstance(o, CrossExchangeSpread)]

    def to_dict(self) -> dict[str, Any]:
        """Serialize the snapshot for the dashboard."""
        return {
            "timestamp": self.timestamp_ms,
            "quotes": [q.to_dict() for q in self.quotes],
            "pairArbitrage": [o.to_dict() for o in self.pair_spreads],
            "triangularArbitrage": [o.to_dict() for o in self.triangular_cycles],
            "crossExchangeArbitrage": [o.to_dict() for o in self.cross_exchange_spreads],
            "failures": [f.to_dict() for f in self.failures],
        }


# =============================================================================
# Transport Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class HttpResponse:
    """Transport-level response."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        """True for 2xx status codes."""
        return 200 <= self.status < 300


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class Transport(Protocol):
    """
    Injected HTTP capability used by exchange adapters.

    Implementations raise ``TransportError`` when a request cannot be
    completed; any HTTP status is returned as a response.
    """

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        """Perform a single HTTP request."""
        ...
