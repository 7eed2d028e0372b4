"""
Order book normalization.

Converts venue depth payloads into canonically sorted book sides with
cumulative sizes, and builds the normalized quote used by the rest of the
pipeline.
"""

import math
from collections.abc import Iterable
from itertools import accumulate

from orderflow.core.types import (
    BookSide,
    NormalizedQuote,
    OrderBookSide,
    PriceLevel,
    RawLevel,
    RawQuote,
)


def parse_levels(raw: Iterable[RawLevel]) -> list[PriceLevel]:
    """
    Parse raw ``[price, size]`` entries.

    Trailing fields some venues append (order counts, flags) are ignored.

    Raises:
        ValueError: If an entry is too short or holds an invalid number.
    """
    levels: list[PriceLevel] = []
    for entry in raw:
        if len(entry) < 2:
            raise ValueError(f"Depth entry needs price and size, got {entry!r}")
        levels.append(PriceLevel(price=float(entry[0]), size=float(entry[1])))
    return levels


def normalize_side(raw: Iterable[RawLevel], side: BookSide) -> OrderBookSide:
    """
    Normalize one side of a book.

    Bids are sorted descending and asks ascending by price, independent
    of the order the venue used. The sort is stable, so equal prices keep
    their input order.

    Args:
        raw: Raw depth entries for the side.
        side: Which side the entries belong to.

    Returns:
        Sorted side with running cumulative sizes.
    """
    levels = sorted(
        parse_levels(raw),
        key=lambda level: level.price,
        reverse=side is BookSide.BID,
    )
    totals = tuple(accumulate(level.size for level in levels))
    return OrderBookSide(side=side, levels=tuple(levels), totals=totals)


def normalize_book(
    bids: Iterable[RawLevel],
    asks: Iterable[RawLevel],
) -> tuple[OrderBookSide, OrderBookSide]:
    """Normalize both sides of a book."""
    return normalize_side(bids, BookSide.BID), normalize_side(asks, BookSide.ASK)


def _is_usable_price(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def resolve_mid_price(
    bids: OrderBookSide,
    asks: OrderBookSide,
    last_price: float | None,
) -> float:
    """
    Resolve the reference price of a quote.

    Fallback order: mid of best bid and best ask when both sides are
    present, otherwise the last traded price.

    Raises:
        ValueError: If neither source yields a positive price.
    """
    best_bid = bids.best_price
    best_ask = asks.best_price
    if best_bid is not None and best_ask is not None:
        return (best_bid + best_ask) / 2
    if _is_usable_price(last_price):
        return last_price  # type: ignore[return-value]
    raise ValueError("No usable price: book side missing and last price invalid")


def build_quote(raw: RawQuote) -> NormalizedQuote:
    """
    Build a normalized quote from raw venue data.

    Raises:
        ValueError: On malformed depth entries or when no price is usable.
    """
    bids, asks = normalize_book(raw.bids, raw.asks)
    mid_price = resolve_mid_price(bids, asks, raw.last_price)

    return NormalizedQuote(
        exchange=raw.exchange,
        symbol=raw.symbol,
        last_price=raw.last_price,
        quote_volume=raw.quote_volume,
        mid_price=mid_price,
        bids=bids,
        asks=asks,
    )
