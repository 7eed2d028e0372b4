"""Market data normalization, liquidity and symbol helpers."""

from orderflow.market.liquidity import LiquidityAnalyzer
from orderflow.market.orderbook import build_quote, normalize_book, normalize_side
from orderflow.market.symbols import format_symbol, split_symbol


__all__ = [
    "LiquidityAnalyzer",
    "build_quote",
    "format_symbol",
    "normalize_book",
    "normalize_side",
    "split_symbol",
]
