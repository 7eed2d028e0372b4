"""Core module containing type definitions and the exception hierarchy."""

from orderflow.core.exceptions import (
    AggregationError,
    FetchError,
    OrderflowError,
    ParseError,
    RateLimitError,
    TransportError,
    UnknownExchangeError,
)
from orderflow.core.types import (
    BookSide,
    CrossExchangeSpread,
    DashboardSnapshot,
    FetchFailure,
    HttpResponse,
    LiquidityReport,
    NormalizedQuote,
    Opportunity,
    OpportunityKind,
    OrderBookSide,
    PairSpread,
    PriceLevel,
    RawQuote,
    Transport,
    TriangularCycle,
)


__all__ = [
    "AggregationError",
    "BookSide",
    "CrossExchangeSpread",
    "DashboardSnapshot",
    "FetchError",
    "FetchFailure",
    "HttpResponse",
    "LiquidityReport",
    "NormalizedQuote",
    "Opportunity",
    "OpportunityKind",
    "OrderBookSide",
    "OrderflowError",
    "PairSpread",
    "ParseError",
    "PriceLevel",
    "RateLimitError",
    "RawQuote",
    "Transport",
    "TransportError",
    "TriangularCycle",
    "UnknownExchangeError",
]
