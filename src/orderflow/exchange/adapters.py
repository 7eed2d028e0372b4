"""
Exchange adapters.

One adapter per venue, each turning that venue's public REST responses
into the same ``NormalizedQuote``. Every adapter implements two
capabilities, ``fetch_ticker`` (last price and 24h quote volume) and
``fetch_depth`` (raw bid/ask levels), which ``fetch_raw`` runs
concurrently.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, TypeVar
from urllib.parse import urlencode

import orjson
from pydantic import BaseModel, ValidationError

from orderflow.config.constants import (
    BINANCE_REST_URL,
    BITGET_ENDPOINT_ORDERBOOK,
    BITGET_ENDPOINT_TICKERS,
    BITGET_REST_URL,
    BITGET_SUCCESS_CODE,
    BYBIT_CATEGORY,
    BYBIT_ENDPOINT_ORDERBOOK,
    BYBIT_ENDPOINT_TICKERS,
    BYBIT_REST_URL,
    BYBIT_SUCCESS_CODE,
    DEFAULT_DEPTH_LIMIT,
    ENDPOINT_DEPTH,
    ENDPOINT_TICKER_24H,
    ENDPOINT_TICKER_PRICE,
    HTTP_TOO_MANY_REQUESTS,
    MEXC_REST_URL,
)
from orderflow.core.exceptions import FetchError, ParseError, RateLimitError, TransportError
from orderflow.core.types import NormalizedQuote, RawLevel, RawQuote, Transport
from orderflow.exchange.models import (
    BitgetOrderbookResponse,
    BitgetTickersResponse,
    BybitOrderbookResponse,
    BybitTickersResponse,
    DepthSnapshot,
    Ticker24h,
    TickerPrice,
)
from orderflow.exchange.registry import register_adapter
from orderflow.market.orderbook import build_quote
from orderflow.utils.time import LatencyTimer


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# ``(last_price, quote_volume)``
Ticker = tuple[float, float]
# ``(bids, asks)`` as returned by the venue
RawDepth = tuple[list[RawLevel], list[RawLevel]]


def _parse_retry_after(headers: Mapping[str, str]) -> float | None:
    """Read a ``Retry-After`` header given in seconds, if present."""
    for key, value in headers.items():
        if key.lower() == "retry-after":
            try:
                return float(value)
            except ValueError:
                return None
    return None


class ExchangeAdapter(ABC):
    """
    Base class for venue adapters.

    Subclasses set ``name`` and ``base_url`` and implement the ticker and
    depth capabilities. All HTTP goes through ``_get_json``, which maps
    transport and HTTP failures onto the ``FetchError`` hierarchy.
    """

    name: ClassVar[str]
    base_url: ClassVar[str]

    def __init__(
        self,
        transport: Transport,
        depth_limit: int = DEFAULT_DEPTH_LIMIT,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            transport: HTTP capability used for every request.
            depth_limit: Levels requested per book side.
        """
        self._transport = transport
        self._depth_limit = depth_limit

    # =========================================================================
    # Capabilities
    # =========================================================================

    @abstractmethod
    async def fetch_ticker(self, symbol: str) -> Ticker:
        """Fetch ``(last_price, quote_volume)`` for a symbol."""

    @abstractmethod
    async def fetch_depth(self, symbol: str) -> RawDepth:
        """Fetch raw ``(bids, asks)`` levels for a symbol."""

    # =========================================================================
    # Quote Assembly
    # =========================================================================

    async def fetch_raw(self, symbol: str) -> RawQuote:
        """
        Fetch ticker and depth concurrently.

        Raises:
            FetchError: If either request fails.
        """
        with LatencyTimer() as timer:
            (last_price, quote_volume), (bids, asks) = await asyncio.gather(
                self.fetch_ticker(symbol),
                self.fetch_depth(symbol),
            )

        logger.debug(
            f"{self.name} {symbol}: fetched {len(bids)} bids / {len(asks)} asks "
            f"in {timer}"
        )

        return RawQuote(
            exchange=self.name,
            symbol=symbol,
            last_price=last_price,
            quote_volume=quote_volume,
            bids=tuple(bids),
            asks=tuple(asks),
        )

    async def fetch_quote(self, symbol: str) -> NormalizedQuote:
        """
        Fetch and normalize a quote.

        Raises:
            RateLimitError: On HTTP 429.
            ParseError: On malformed payloads or when no price is usable.
            FetchError: On any other network or HTTP failure.
        """
        raw = await self.fetch_raw(symbol)
        try:
            return build_quote(raw)
        except ValueError as e:
            raise ParseError(self.name, symbol, f"invalid market data: {e}", cause=e) from e

    # =========================================================================
    # HTTP Helpers
    # =========================================================================

    def _url(self, endpoint: str, params: Mapping[str, Any]) -> str:
        return f"{self.base_url}{endpoint}?{urlencode(params)}"

    async def _get_json(
        self,
        endpoint: str,
        symbol: str,
        params: Mapping[str, Any],
    ) -> Any:
        """
        GET an endpoint and decode its JSON body.

        Raises:
            RateLimitError: On HTTP 429.
            FetchError: On transport failure or other non-2xx status.
            ParseError: If the body is not valid JSON.
        """
        url = self._url(endpoint, params)

        try:
            response = await self._transport.fetch(url)
        except TransportError as e:
            raise FetchError(self.name, symbol, str(e), cause=e) from e

        if response.status == HTTP_TOO_MANY_REQUESTS:
            raise RateLimitError(
                self.name,
                symbol,
                retry_after=_parse_retry_after(response.headers),
            )

        if not response.ok:
            detail = response.body[:200].decode("utf-8", errors="replace")
            raise FetchError(
                self.name,
                symbol,
                f"HTTP {response.status} from {endpoint}: {detail}",
                status=response.status,
            )

        try:
            return orjson.loads(response.body)
        except orjson.JSONDecodeError as e:
            raise ParseError(self.name, symbol, f"invalid JSON from {endpoint}", cause=e) from e

    def _validate(self, model: type[M], data: Any, symbol: str) -> M:
        """Validate a payload against a response model."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ParseError(
                self.name,
                symbol,
                f"unexpected {model.__name__} payload",
                cause=e,
            ) from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}(depth_limit={self._depth_limit})"


# =============================================================================
# Binance-style venues
# =============================================================================


@register_adapter
class BinanceAdapter(ExchangeAdapter):
    """Binance spot: separate price, 24h ticker and depth endpoints."""

    name = "binance"
    base_url = BINANCE_REST_URL

    async def fetch_ticker(self, symbol: str) -> Ticker:
        params = {"symbol": symbol}
        price_data, ticker_data = await asyncio.gather(
            self._get_json(ENDPOINT_TICKER_PRICE, symbol, params),
            self._get_json(ENDPOINT_TICKER_24H, symbol, params),
        )

        price = self._validate(TickerPrice, price_data, symbol)
        ticker = self._validate(Ticker24h, ticker_data, symbol)
        return price.price, ticker.quote_volume

    async def fetch_depth(self, symbol: str) -> RawDepth:
        data = await self._get_json(
            ENDPOINT_DEPTH,
            symbol,
            {"symbol": symbol, "limit": self._depth_limit},
        )
        depth = self._validate(DepthSnapshot, data, symbol)
        return depth.bids, depth.asks


@register_adapter
class MexcAdapter(BinanceAdapter):
    """MEXC spot: Binance-compatible v3 API."""

    name = "mexc"
    base_url = MEXC_REST_URL


# =============================================================================
# Enveloped venues
# =============================================================================


@register_adapter
class BitgetAdapter(ExchangeAdapter):
    """Bitget spot v2: ``{code, msg, data}`` envelopes."""

    name = "bitget"
    base_url = BITGET_REST_URL

    def _check_code(self, code: str, msg: str, symbol: str) -> None:
        if code != BITGET_SUCCESS_CODE:
            raise ParseError(self.name, symbol, f"API error {code}: {msg}")

    async def fetch_ticker(self, symbol: str) -> Ticker:
        data = await self._get_json(BITGET_ENDPOINT_TICKERS, symbol, {"symbol": symbol})
        response = self._validate(BitgetTickersResponse, data, symbol)
        self._check_code(response.code, response.msg, symbol)

        if not response.data:
            raise ParseError(self.name, symbol, "ticker not found")

        ticker = response.data[0]
        return ticker.last_price, ticker.quote_volume

    async def fetch_depth(self, symbol: str) -> RawDepth:
        data = await self._get_json(
            BITGET_ENDPOINT_ORDERBOOK,
            symbol,
            {"symbol": symbol, "type": "step0", "limit": self._depth_limit},
        )
        response = self._validate(BitgetOrderbookResponse, data, symbol)
        self._check_code(response.code, response.msg, symbol)

        if response.data is None:
            raise ParseError(self.name, symbol, "order book missing")

        return response.data.bids, response.data.asks


@register_adapter
class BybitAdapter(ExchangeAdapter):
    """Bybit v5 market API, spot category: ``{retCode, retMsg, result}``."""

    name = "bybit"
    base_url = BYBIT_REST_URL

    def _check_code(self, code: int, msg: str, symbol: str) -> None:
        if code != BYBIT_SUCCESS_CODE:
            raise ParseError(self.name, symbol, f"API error {code}: {msg}")

    async def fetch_ticker(self, symbol: str) -> Ticker:
        data = await self._get_json(
            BYBIT_ENDPOINT_TICKERS,
            symbol,
            {"category": BYBIT_CATEGORY, "symbol": symbol},
        )
        response = self._validate(BybitTickersResponse, data, symbol)
        self._check_code(response.ret_code, response.ret_msg, symbol)

        if response.result is None or not response.result.items:
            raise ParseError(self.name, symbol, "ticker not found")

        ticker = response.result.items[0]
        return ticker.last_price, ticker.turnover_24h

    async def fetch_depth(self, symbol: str) -> RawDepth:
        data = await self._get_json(
            BYBIT_ENDPOINT_ORDERBOOK,
            symbol,
            {"category": BYBIT_CATEGORY, "symbol": symbol, "limit": self._depth_limit},
        )
        response = self._validate(BybitOrderbookResponse, data, symbol)
        self._check_code(response.ret_code, response.ret_msg, symbol)

        if response.result is None:
            raise ParseError(self.name, symbol, "order book missing")

        return response.result.bids, response.result.asks
