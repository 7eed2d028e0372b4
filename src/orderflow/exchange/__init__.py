"""Exchange integration: venue adapters, registry and HTTP transport."""

from orderflow.exchange.adapters import (
    BinanceAdapter,
    BitgetAdapter,
    BybitAdapter,
    ExchangeAdapter,
    MexcAdapter,
)
from orderflow.exchange.registry import (
    available_exchanges,
    create_adapter,
    get_adapter_class,
    register_adapter,
)
from orderflow.exchange.transport import AiohttpTransport


__all__ = [
    "AiohttpTransport",
    "BinanceAdapter",
    "BitgetAdapter",
    "BybitAdapter",
    "ExchangeAdapter",
    "MexcAdapter",
    "available_exchanges",
    "create_adapter",
    "get_adapter_class",
    "register_adapter",
]
