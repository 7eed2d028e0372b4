"""
OrderFlow Insights.

Aggregates VANA order books and tickers across crypto exchanges, measures
liquidity around the mid-price and scores pair, triangular and
cross-exchange arbitrage candidates net of taker fees.
"""

__version__ = "1.0.0"
__author__ = "Tim"
