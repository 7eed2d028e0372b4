"""
Liquidity analysis around the mid-price.

Measures USD notional resting within a symmetric percentage band on each
side of the book and flags sides below an absolute threshold.
"""

import dataclasses

from orderflow.config.constants import (
    DEFAULT_BAND_PERCENT,
    DEFAULT_LOW_LIQUIDITY_THRESHOLD_USD,
)
from orderflow.core.types import (
    DepthUSD,
    LiquidityBand,
    LiquidityReport,
    LowLiquidity,
    NormalizedQuote,
    OrderBookSide,
)


def band_for(mid_price: float, band_percent: float) -> LiquidityBand:
    """Compute the inclusive band ``[mid*(1-p), mid*(1+p)]``."""
    return LiquidityBand(
        lower=mid_price * (1.0 - band_percent),
        upper=mid_price * (1.0 + band_percent),
    )


def depth_in_band(side: OrderBookSide, band: LiquidityBand) -> float:
    """Sum ``price * size`` over the levels of a side inside the band."""
    return sum(level.notional for level in side if band.contains(level.price))


class LiquidityAnalyzer:
    """
    Computes band depth and low-liquidity flags for quotes.

    Stateless: results depend only on the quote and the configured
    parameters.
    """

    __slots__ = ("_band_percent", "_threshold_usd")

    def __init__(
        self,
        band_percent: float = DEFAULT_BAND_PERCENT,
        low_liquidity_threshold_usd: float = DEFAULT_LOW_LIQUIDITY_THRESHOLD_USD,
    ) -> None:
        """
        Initialize analyzer.

        Args:
            band_percent: Half-width of the band (e.g., 0.02 = ±2%).
            low_liquidity_threshold_usd: Depth below which a side is flagged.
        """
        if not 0.0 <= band_percent < 1.0:
            raise ValueError(f"band_percent must be in [0, 1), got {band_percent}")
        if low_liquidity_threshold_usd < 0:
            raise ValueError("low_liquidity_threshold_usd must be non-negative")

        self._band_percent = band_percent
        self._threshold_usd = low_liquidity_threshold_usd

    def analyze(self, quote: NormalizedQuote) -> LiquidityReport:
        """
        Compute liquidity metrics for a quote.

        A side is flagged when its depth is strictly below the threshold.
        """
        band = band_for(quote.mid_price, self._band_percent)
        depth = DepthUSD(
            bids=depth_in_band(quote.bids, band),
            asks=depth_in_band(quote.asks, band),
        )

        return LiquidityReport(
            band=band,
            depth_usd=depth,
            low_liquidity=LowLiquidity(
                bids=depth.bids < self._threshold_usd,
                asks=depth.asks < self._threshold_usd,
            ),
            band_percent=self._band_percent,
            threshold_usd=self._threshold_usd,
        )

    def annotate(self, quote: NormalizedQuote) -> NormalizedQuote:
        """Return a copy of the quote with its liquidity report attached."""
        return dataclasses.replace(quote, liquidity=self.analyze(quote))

    @property
    def band_percent(self) -> float:
        return self._band_percent

    @property
    def threshold_usd(self) -> float:
        return self._threshold_usd
