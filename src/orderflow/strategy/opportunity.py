"""
Opportunity enumeration and selection.

The engine returns every scorable candidate with its signed net value;
choosing the best one or keeping only profitable ones is left to the pure
reducers at the bottom of this module.
"""

import logging
from collections.abc import Iterable, Sequence
from itertools import combinations

from orderflow.config.constants import DEFAULT_QUOTE_ASSETS
from orderflow.core.types import (
    CrossExchangeSpread,
    NormalizedQuote,
    Opportunity,
    OpportunityKind,
    PairSpread,
    TriangularCycle,
)
from orderflow.market.symbols import split_symbol
from orderflow.strategy.calculator import ArbitrageCalculator
from orderflow.strategy.graph import TriangleDiscovery


logger = logging.getLogger(__name__)


def _group_by_exchange(
    quotes: Iterable[NormalizedQuote],
) -> dict[str, list[NormalizedQuote]]:
    groups: dict[str, list[NormalizedQuote]] = {}
    for quote in quotes:
        groups.setdefault(quote.exchange, []).append(quote)
    return groups


class ArbitrageEngine:
    """
    Enumerates arbitrage candidates over one cycle's quotes.

    Candidates are produced in the order pair spreads, triangular cycles,
    cross-exchange spreads and are neither sorted nor truncated.
    """

    def __init__(
        self,
        calculator: ArbitrageCalculator,
        quote_assets: Sequence[str] = DEFAULT_QUOTE_ASSETS,
        base_asset: str | None = None,
        kinds: Iterable[OpportunityKind] | None = None,
        min_net: float | None = None,
    ) -> None:
        """
        Initialize engine.

        Args:
            calculator: Scoring calculator.
            quote_assets: Quote assets used to split symbols for triangles.
            base_asset: Restrict triangles to this base asset.
            kinds: Opportunity classes to enumerate (default: all).
            min_net: If set, keep only candidates with ``net > min_net``.
        """
        self._calculator = calculator
        self._quote_assets = tuple(quote_assets)
        self._base_asset = base_asset
        self._kinds = frozenset(kinds) if kinds is not None else frozenset(OpportunityKind)
        self._min_net = min_net

    def find_opportunities(self, quotes: Sequence[NormalizedQuote]) -> list[Opportunity]:
        """
        Enumerate and score all enabled opportunity classes.

        Args:
            quotes: Normalized quotes of the cycle, in configuration order.

        Returns:
            Every candidate (filtered by ``min_net`` when configured).
        """
        opportunities: list[Opportunity] = []

        if OpportunityKind.PAIR_SPREAD in self._kinds:
            opportunities.extend(self.pair_spreads(quotes))
        if OpportunityKind.TRIANGULAR in self._kinds:
            opportunities.extend(self.triangular_cycles(quotes))
        if OpportunityKind.CROSS_EXCHANGE in self._kinds:
            opportunities.extend(self.cross_exchange_spreads(quotes))

        if self._min_net is not None:
            opportunities = profitable(opportunities, threshold=self._min_net)

        logger.debug(f"Scored {len(opportunities)} candidates over {len(quotes)} quotes")
        return opportunities

    def pair_spreads(self, quotes: Sequence[NormalizedQuote]) -> list[PairSpread]:
        """Score every unordered symbol pair on each exchange."""
        spreads: list[PairSpread] = []
        for venue_quotes in _group_by_exchange(quotes).values():
            for first, second in combinations(venue_quotes, 2):
                spreads.append(self._calculator.pair_spread(first, second))
        return spreads

    def triangular_cycles(self, quotes: Sequence[NormalizedQuote]) -> list[TriangularCycle]:
        """
        Score every canonical 3-cycle between quote assets on each exchange.

        Quotes are grouped per exchange by base asset; groups with fewer
        than three quote assets yield nothing. The first quote asset seen
        in ``quotes`` starts each cycle.
        """
        cycles: list[TriangularCycle] = []

        for exchange, venue_quotes in _group_by_exchange(quotes).items():
            by_base: dict[str, dict[str, NormalizedQuote]] = {}
            for quote in venue_quotes:
                parts = split_symbol(quote.symbol, self._quote_assets, self._base_asset)
                if parts is None:
                    continue
                base, quote_asset = parts
                by_base.setdefault(base, {})[quote_asset] = quote

            for base, by_quote in by_base.items():
                if len(by_quote) < 3:
                    continue

                discovery = TriangleDiscovery(order=list(by_quote))
                discovery.build_graph(by_quote)
                for cycle in discovery.find_cycles():
                    scored = self._calculator.triangular_cycle(exchange, base, cycle, by_quote)
                    if scored is not None:
                        cycles.append(scored)

        return cycles

    def cross_exchange_spreads(
        self,
        quotes: Sequence[NormalizedQuote],
    ) -> list[CrossExchangeSpread]:
        """Score buying on quote ``i`` and selling on quote ``j`` for all ``i != j``."""
        spreads: list[CrossExchangeSpread] = []
        for i, buy in enumerate(quotes):
            for j, sell in enumerate(quotes):
                if i == j:
                    continue
                spread = self._calculator.cross_exchange(buy, sell)
                if spread is not None:
                    spreads.append(spread)
        return spreads

    @property
    def kinds(self) -> frozenset[OpportunityKind]:
        """Enabled opportunity classes."""
        return self._kinds

    @property
    def min_net(self) -> float | None:
        return self._min_net


# =============================================================================
# Reducers
# =============================================================================


def profitable(
    opportunities: Iterable[Opportunity],
    threshold: float = 0.0,
) -> list[Opportunity]:
    """Keep candidates whose net score is strictly above ``threshold``."""
    return [o for o in opportunities if o.net > threshold]


def sort_by_net(opportunities: Iterable[Opportunity]) -> list[Opportunity]:
    """Sort candidates by net score, best first."""
    return sorted(opportunities, key=lambda o: o.net, reverse=True)


def best_opportunity(
    opportunities: Iterable[Opportunity],
    kind: OpportunityKind | None = None,
    positive_only: bool = False,
) -> Opportunity | None:
    """
    Select the candidate with the highest net score.

    Args:
        opportunities: Candidates to reduce.
        kind: Restrict to one opportunity class.
        positive_only: Ignore candidates with ``net <= 0``.

    Returns:
        Best candidate, or None if nothing qualifies. Ties keep the first.
    """
    best: Opportunity | None = None
    for opportunity in opportunities:
        if kind is not None and opportunity.kind is not kind:
            continue
        if positive_only and opportunity.net <= 0:
            continue
        if best is None or opportunity.net > best.net:
            best = opportunity
    return best
