"""Strategy module for arbitrage enumeration and scoring."""

from orderflow.strategy.calculator import ArbitrageCalculator
from orderflow.strategy.graph import TriangleDiscovery
from orderflow.strategy.opportunity import (
    ArbitrageEngine,
    best_opportunity,
    profitable,
    sort_by_net,
)


__all__ = [
    "ArbitrageCalculator",
    "ArbitrageEngine",
    "TriangleDiscovery",
    "best_opportunity",
    "profitable",
    "sort_by_net",
]
