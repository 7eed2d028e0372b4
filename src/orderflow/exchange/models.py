"""
Pydantic models for exchange REST responses.

These models provide type-safe parsing of venue payloads with automatic
validation. Numeric strings are coerced to floats; depth entries are kept
raw and parsed by the order book normalizer.
"""

from pydantic import BaseModel, Field


# Raw ``[price, size, ...]`` depth entry
DepthEntry = list[str | float]


# =============================================================================
# Binance / MEXC
# =============================================================================


class TickerPrice(BaseModel):
    """Latest price response (``/ticker/price``)."""

    symbol: str
    price: float


class Ticker24h(BaseModel):
    """24h rolling ticker response (``/ticker/24hr``)."""

    symbol: str | None = None
    quote_volume: float = Field(alias="quoteVolume")

    model_config = {"populate_by_name": True}


class DepthSnapshot(BaseModel):
    """Order book response (``/depth``)."""

    last_update_id: int | None = Field(default=None, alias="lastUpdateId")
    bids: list[DepthEntry]
    asks: list[DepthEntry]

    model_config = {"populate_by_name": True}


# =============================================================================
# Bitget (v2 spot)
# =============================================================================


class BitgetTicker(BaseModel):
    """Single entry of the Bitget tickers list."""

    symbol: str | None = None
    last_price: float = Field(alias="lastPr")
    quote_volume: float = Field(alias="quoteVolume")

    model_config = {"populate_by_name": True}


class BitgetTickersResponse(BaseModel):
    """Bitget ``/tickers`` envelope."""

    code: str
    msg: str = ""
    data: list[BitgetTicker] | None = None


class BitgetOrderbook(BaseModel):
    """Bitget order book payload."""

    bids: list[DepthEntry]
    asks: list[DepthEntry]


class BitgetOrderbookResponse(BaseModel):
    """Bitget ``/orderbook`` envelope."""

    code: str
    msg: str = ""
    data: BitgetOrderbook | None = None


# =============================================================================
# Bybit (v5 market, spot category)
# =============================================================================


class BybitTicker(BaseModel):
    """Single entry of the Bybit tickers list."""

    symbol: str | None = None
    last_price: float = Field(alias="lastPrice")
    turnover_24h: float = Field(alias="turnover24h")

    model_config = {"populate_by_name": True}


class BybitTickerResult(BaseModel):
    """Bybit tickers ``result`` object."""

    category: str | None = None
    items: list[BybitTicker] = Field(default_factory=list, alias="list")

    model_config = {"populate_by_name": True}


class BybitTickersResponse(BaseModel):
    """Bybit ``/tickers`` envelope."""

    ret_code: int = Field(alias="retCode")
    ret_msg: str = Field(default="", alias="retMsg")
    result: BybitTickerResult | None = None

    model_config = {"populate_by_name": True}


class BybitOrderbook(BaseModel):
    """Bybit order book ``result`` object."""

    symbol: str | None = Field(default=None, alias="s")
    bids: list[DepthEntry] = Field(alias="b")
    asks: list[DepthEntry] = Field(alias="a")

    model_config = {"populate_by_name": True}


class BybitOrderbookResponse(BaseModel):
    """Bybit ``/orderbook`` envelope."""

    ret_code: int = Field(alias="retCode")
    ret_msg: str = Field(default="", alias="retMsg")
    result: BybitOrderbook | None = None

    model_config = {"populate_by_name": True}
