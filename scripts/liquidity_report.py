#!/usr/bin/env python3
"""
Liquidity Report Script.

Runs one aggregation cycle and prints a human-readable table of band
depth per market plus the best candidate of each opportunity class.
"""

import asyncio
import sys
from pathlib import Path

# Add src to path for direct execution
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from orderflow.config.constants import FILTERED_VIEW_MIN_NET
from orderflow.config.settings import get_settings
from orderflow.core.aggregator import Aggregator
from orderflow.core.exceptions import AggregationError
from orderflow.core.types import OpportunityKind
from orderflow.exchange.transport import AiohttpTransport
from orderflow.market.symbols import format_symbol
from orderflow.strategy.opportunity import best_opportunity, profitable


def _flag(low: bool) -> str:
    return "LOW" if low else ""


async def main() -> int:
    """Fetch one snapshot and display it."""
    print("=" * 72)
    print("  ORDERFLOW LIQUIDITY REPORT")
    print("=" * 72)
    print()

    settings = get_settings()

    async with AiohttpTransport(timeout=settings.request_timeout) as transport:
        aggregator = Aggregator.from_settings(settings, transport)
        try:
            snapshot = await aggregator.aggregate()
        except AggregationError as e:
            print(f"No data: {e}")
            return 1

    band = settings.band_percent * 100
    print(f"Depth within ±{band:g}% of mid, flagged below ${settings.low_liquidity_threshold_usd:,.0f}")
    print()
    print(f"{'Exchange':<10}{'Market':<16}{'Mid':>12}{'Bid depth $':>14}{'':>5}{'Ask depth $':>14}")
    print("-" * 72)

    for quote in snapshot.quotes:
        report = quote.liquidity
        assert report is not None
        print(
            f"{quote.exchange:<10}"
            f"{format_symbol(quote.symbol, settings.base_asset):<16}"
            f"{quote.mid_price:>12.6f}"
            f"{report.depth_usd.bids:>14,.0f}{_flag(report.low_liquidity.bids):>5}"
            f"{report.depth_usd.asks:>14,.0f}{_flag(report.low_liquidity.asks):>5}"
        )

    for failure in snapshot.failures:
        print(f"{failure.exchange:<10}{failure.symbol:<16}  unavailable: {failure.error}")

    print()
    print("=" * 72)
    print("  BEST CANDIDATES (net of fees)")
    print("=" * 72)
    print()

    for kind in OpportunityKind:
        best = best_opportunity(snapshot.opportunities, kind=kind)
        if best is None:
            print(f"{kind.value:<16} -")
            continue
        print(f"{kind.value:<16} {best.net * 100:+.3f}%  {best.to_dict()}")

    print()
    print(f"Profitable candidates:       {len(profitable(snapshot.opportunities))}")
    above = profitable(snapshot.opportunities, threshold=FILTERED_VIEW_MIN_NET)
    print(f"Above {FILTERED_VIEW_MIN_NET * 100:g}% net:  {len(above)}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
