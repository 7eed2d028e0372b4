"""Configuration module for the OrderFlow aggregator."""

from orderflow.config.constants import (
    DEFAULT_BAND_PERCENT,
    DEFAULT_LOW_LIQUIDITY_THRESHOLD_USD,
    DEFAULT_MARKETS,
    DEFAULT_TAKER_FEE,
)
from orderflow.config.settings import Settings, get_settings


__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_BAND_PERCENT",
    "DEFAULT_LOW_LIQUIDITY_THRESHOLD_USD",
    "DEFAULT_MARKETS",
    "DEFAULT_TAKER_FEE",
]
