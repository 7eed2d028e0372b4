"""
Triangular cycle discovery using graph analysis.

Builds a directed graph whose nodes are the quote assets a base asset
trades against on one exchange, then enumerates its 3-cycles with NetworkX.
"""

import logging
from collections.abc import Mapping, Sequence

import networkx as nx

from orderflow.core.types import NormalizedQuote


logger = logging.getLogger(__name__)


class TriangleDiscovery:
    """
    Discovers directed 3-cycles between quote assets.

    An edge ``u -> v`` means the base asset can be bought with ``u`` (the
    ``base/u`` book has asks) and sold for ``v`` (the ``base/v`` book has
    bids).

    Each cycle is reported once, rotated to start at the asset listed
    first in ``order``.
    """

    def __init__(self, order: Sequence[str]) -> None:
        """
        Initialize triangle discovery.

        Args:
            order: Quote assets in preference order; defines the
                canonical starting leg of each cycle.
        """
        self._rank = {asset: i for i, asset in enumerate(order)}
        self._graph: nx.DiGraph = nx.DiGraph()

    def build_graph(self, quotes: Mapping[str, NormalizedQuote]) -> int:
        """
        Build the directed graph from quotes keyed by quote asset.

        Returns:
            Number of edges added.
        """
        self._graph.clear()
        self._graph.add_nodes_from(quotes)

        for spend, spend_quote in quotes.items():
            if spend_quote.best_ask is None:
                continue
            for receive, receive_quote in quotes.items():
                if receive == spend or receive_quote.best_bid is None:
                    continue
                self._graph.add_edge(spend, receive)

        return int(self._graph.number_of_edges())

    def find_cycles(self) -> list[tuple[str, str, str]]:
        """
        Find all directed 3-cycles in canonical rotation.

        Returns:
            Cycles sorted by the rank of their assets.
        """
        cycles: set[tuple[str, str, str]] = set()
        for cycle in nx.simple_cycles(self._graph, length_bound=3):
            if len(cycle) != 3:
                continue
            cycles.add(self._canonical(cycle))

        ordered = sorted(cycles, key=lambda c: tuple(self._rank_of(a) for a in c))
        logger.debug(f"Found {len(ordered)} triangular cycles")
        return ordered

    def _rank_of(self, asset: str) -> tuple[int, str]:
        return self._rank.get(asset, len(self._rank)), asset

    def _canonical(self, cycle: Sequence[str]) -> tuple[str, str, str]:
        """Rotate a cycle so its first-ranked asset leads."""
        start = min(range(len(cycle)), key=lambda i: self._rank_of(cycle[i]))
        a, b, c = (cycle[(start + k) % 3] for k in range(3))
        return a, b, c

    @property
    def graph(self) -> nx.DiGraph:
        """Get the underlying NetworkX graph."""
        return self._graph
