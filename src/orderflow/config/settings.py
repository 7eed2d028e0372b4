"""
Application settings with environment variable support.

Uses Pydantic Settings for type-safe configuration with automatic
environment variable loading and validation.
"""

from collections.abc import Iterator
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from orderflow.config.constants import (
    DEFAULT_BAND_PERCENT,
    DEFAULT_BASE_ASSET,
    DEFAULT_CYCLE_TIMEOUT,
    DEFAULT_DEPTH_LIMIT,
    DEFAULT_LOW_LIQUIDITY_THRESHOLD_USD,
    DEFAULT_MARKETS,
    DEFAULT_QUOTE_ASSETS,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TAKER_FEE,
)
from orderflow.core.types import OpportunityKind


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Collection-valued settings (``MARKETS``, ``QUOTE_ASSETS``,
    ``OPPORTUNITY_KINDS``) are read from the environment as JSON.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Tracked Markets
    # =========================================================================

    base_asset: str = Field(
        default=DEFAULT_BASE_ASSET,
        min_length=1,
        description="Token whose books are aggregated",
    )

    markets: dict[str, list[str]] = Field(
        default_factory=lambda: {v: list(s) for v, s in DEFAULT_MARKETS.items()},
        description="Venue identifier -> symbols to fetch on that venue",
    )

    quote_assets: list[str] = Field(
        default_factory=lambda: list(DEFAULT_QUOTE_ASSETS),
        min_length=1,
        description="Quote assets recognised when splitting symbols",
    )

    depth_limit: int = Field(
        default=DEFAULT_DEPTH_LIMIT,
        ge=1,
        le=500,
        description="Order book levels requested per side",
    )

    # =========================================================================
    # Liquidity
    # =========================================================================

    band_percent: float = Field(
        default=DEFAULT_BAND_PERCENT,
        gt=0.0,
        lt=1.0,
        description="Depth band around the mid-price (e.g., 0.02 = ±2%)",
    )

    low_liquidity_threshold_usd: float = Field(
        default=DEFAULT_LOW_LIQUIDITY_THRESHOLD_USD,
        ge=0.0,
        description="Band depth in USD below which a side is flagged",
    )

    # =========================================================================
    # Arbitrage
    # =========================================================================

    taker_fee: float = Field(
        default=DEFAULT_TAKER_FEE,
        ge=0.0,
        le=0.01,
        description="Taker fee per leg (e.g., 0.001 = 0.1%)",
    )

    opportunity_kinds: list[OpportunityKind] = Field(
        default_factory=lambda: list(OpportunityKind),
        min_length=1,
        description="Opportunity classes the engine enumerates",
    )

    min_net_profit: float | None = Field(
        default=None,
        description="Only report candidates with net score above this value",
    )

    # =========================================================================
    # Network & Scheduling
    # =========================================================================

    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        gt=0.0,
        description="Per-request transport timeout in seconds",
    )

    cycle_timeout: float = Field(
        default=DEFAULT_CYCLE_TIMEOUT,
        gt=0.0,
        description="Overall deadline for one aggregation cycle in seconds",
    )

    refresh_interval: float = Field(
        default=DEFAULT_REFRESH_INTERVAL,
        ge=1.0,
        description="Seconds between cycles in watch mode",
    )

    # =========================================================================
    # Operation Mode
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )

    use_uvloop: bool = Field(
        default=True,
        description="Use uvloop for improved async performance",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("base_asset", mode="after")
    @classmethod
    def normalize_base_asset(cls, v: str) -> str:
        """Upper-case the base asset."""
        return v.strip().upper()

    @field_validator("quote_assets", mode="after")
    @classmethod
    def normalize_quote_assets(cls, v: list[str]) -> list[str]:
        """Upper-case quote assets and drop duplicates, keeping order."""
        return list(dict.fromkeys(q.strip().upper() for q in v if q.strip()))

    @field_validator("markets", mode="after")
    @classmethod
    def validate_markets(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        """Require at least one venue, each with at least one symbol."""
        if not v:
            raise ValueError("At least one market must be configured")

        markets: dict[str, list[str]] = {}
        for venue, symbols in v.items():
            cleaned = list(dict.fromkeys(s.strip().upper() for s in symbols if s.strip()))
            if not cleaned:
                raise ValueError(f"Venue {venue!r} has no symbols configured")
            markets[venue.strip().lower()] = cleaned
        return markets

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def targets(self) -> Iterator[tuple[str, str]]:
        """Iterate over ``(venue, symbol)`` fetch targets in configured order."""
        for venue, symbols in self.markets.items():
            for symbol in symbols:
                yield venue, symbol

    @property
    def target_count(self) -> int:
        """Number of ``(venue, symbol)`` fetches per cycle."""
        return sum(len(symbols) for symbols in self.markets.values())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded only once.
    Clear cache with `get_settings.cache_clear()` if needed.
    """
    return Settings()
