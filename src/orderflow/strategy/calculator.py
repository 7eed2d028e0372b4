"""
Arbitrage scoring.

Computes gross and fee-adjusted net scores for the three opportunity
classes. Fees are a flat taker rate subtracted once per leg; they are not
compounded through the legs.
"""

import logging

from orderflow.config.constants import DEFAULT_TAKER_FEE
from orderflow.core.types import (
    CrossExchangeSpread,
    NormalizedQuote,
    PairSpread,
    TriangularCycle,
)


logger = logging.getLogger(__name__)


class ArbitrageCalculator:
    """
    Scores arbitrage candidates built from normalized quotes.

    Buying executes at the best ask, selling at the best bid.
    """

    __slots__ = ("_taker_fee",)

    def __init__(self, taker_fee: float = DEFAULT_TAKER_FEE) -> None:
        """
        Initialize calculator.

        Args:
            taker_fee: Fee per leg (e.g., 0.001 = 0.1%).
        """
        if taker_fee < 0:
            raise ValueError(f"taker_fee must be non-negative, got {taker_fee}")
        self._taker_fee = taker_fee

    def net(self, gross: float, legs: int) -> float:
        """Subtract one taker fee per leg from a gross score."""
        return gross - legs * self._taker_fee

    def pair_spread(self, first: NormalizedQuote, second: NormalizedQuote) -> PairSpread:
        """
        Score the mid-price divergence of two symbols on one exchange.

        ``gross = |mid(first) / mid(second) - 1|``, two legs of fees.
        """
        gross = abs(first.mid_price / second.mid_price - 1.0)
        return PairSpread(
            exchange=first.exchange,
            pair_symbols=(first.symbol, second.symbol),
            gross_spread=gross,
            spread_net=self.net(gross, legs=2),
        )

    @staticmethod
    def leg_rate(spend: NormalizedQuote, receive: NormalizedQuote) -> float | None:
        """
        Conversion rate for one triangular leg.

        Buys the base asset on ``spend`` at its best ask and sells it on
        ``receive`` at its best bid. The two quote assets are treated as
        worth the same, which ignores the spread of the stablecoin pair
        itself.

        Returns:
            ``bid(receive) / ask(spend)`` or None if a side is missing.
        """
        ask = spend.best_ask
        bid = receive.best_bid
        if ask is None or bid is None:
            return None
        return bid / ask

    def triangular_cycle(
        self,
        exchange: str,
        base_asset: str,
        cycle: tuple[str, str, str],
        quotes: dict[str, NormalizedQuote],
    ) -> TriangularCycle | None:
        """
        Score a directed cycle through three quote assets.

        Args:
            exchange: Venue all three quotes come from.
            base_asset: Asset bought and sold on every leg.
            cycle: Quote assets in traversal order, without the closing hop.
            quotes: Quote asset -> quote of ``base_asset`` in that asset.

        Returns:
            Scored cycle, or None if a leg lacks a book side.
        """
        a, b, c = cycle
        rates: list[float] = []
        for spend, receive in ((a, b), (b, c), (c, a)):
            rate = self.leg_rate(quotes[spend], quotes[receive])
            if rate is None:
                return None
            rates.append(rate)

        gross = rates[0] * rates[1] * rates[2] - 1.0
        return TriangularCycle(
            exchange=exchange,
            base_asset=base_asset,
            path=(a, b, c, a),
            symbols=(quotes[a].symbol, quotes[b].symbol, quotes[c].symbol),
            leg_rates=(rates[0], rates[1], rates[2]),
            gross_profit=gross,
            profit_net=self.net(gross, legs=3),
        )

    def cross_exchange(
        self,
        buy: NormalizedQuote,
        sell: NormalizedQuote,
    ) -> CrossExchangeSpread | None:
        """
        Score buying on one quote and selling on another.

        ``gross = bid(sell) / ask(buy) - 1``, two legs of fees.

        Returns:
            Scored spread, or None if ``buy`` has no asks or ``sell`` no bids.
        """
        buy_price = buy.best_ask
        sell_price = sell.best_bid
        if buy_price is None or sell_price is None:
            return None

        gross = sell_price / buy_price - 1.0
        return CrossExchangeSpread(
            buy_venue=buy.exchange,
            buy_symbol=buy.symbol,
            buy_price=buy_price,
            sell_venue=sell.exchange,
            sell_symbol=sell.symbol,
            sell_price=sell_price,
            gross_profit=gross,
            profit_net=self.net(gross, legs=2),
        )

    @property
    def taker_fee(self) -> float:
        """Get fee rate per leg."""
        return self._taker_fee
