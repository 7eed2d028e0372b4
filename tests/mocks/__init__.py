"""Mock implementations for testing."""

from tests.mocks.transport import (
    MockTransport,
    serve_all,
    serve_binance,
    serve_bitget,
    serve_bybit,
    serve_mexc,
)


__all__ = [
    "MockTransport",
    "serve_all",
    "serve_binance",
    "serve_bitget",
    "serve_bybit",
    "serve_mexc",
]
