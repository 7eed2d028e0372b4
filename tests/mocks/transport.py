"""
In-memory transport for testing.

Serves canned venue payloads by URL path so adapters and the aggregator
run end to end without network calls.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, urlsplit

import orjson

from orderflow.config.constants import (
    BINANCE_REST_URL,
    BITGET_REST_URL,
    BYBIT_REST_URL,
    MEXC_REST_URL,
)
from orderflow.core.exceptions import TransportError
from orderflow.core.types import HttpResponse


Levels = Sequence[Sequence[str]]

DEFAULT_BIDS: Levels = [["0.999", "40000"], ["1.000", "30000"], ["0.990", "50000"]]
DEFAULT_ASKS: Levels = [["1.010", "50000"], ["1.002", "30000"], ["1.004", "40000"]]


@dataclass
class Route:
    """Canned response for one URL path."""

    status: int = 200
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


class MockTransport:
    """
    Mock ``Transport`` for testing.

    Routes match on ``scheme://host/path`` and, when given, a subset of the
    query parameters. Unmatched URLs answer 404.
    """

    def __init__(self) -> None:
        self._routes: dict[str, list[Route]] = {}
        self._broken: dict[str, str] = {}
        self.requests: list[str] = []

    def add(
        self,
        url: str,
        payload: Any = None,
        status: int = 200,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
        params: Mapping[str, str] | None = None,
    ) -> None:
        """Register a response; ``body`` overrides the JSON-encoded ``payload``."""
        route = Route(
            status=status,
            body=body if body is not None else orjson.dumps(payload),
            headers=dict(headers or {}),
            params=dict(params or {}),
        )
        self._routes.setdefault(url, []).insert(0, route)

    def break_prefix(self, prefix: str, message: str = "Connection refused") -> None:
        """Make every request under ``prefix`` raise ``TransportError``."""
        self._broken[prefix] = message

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        self.requests.append(url)

        for prefix, message in self._broken.items():
            if url.startswith(prefix):
                raise TransportError(message, url=url)

        parts = urlsplit(url)
        path = f"{parts.scheme}://{parts.netloc}{parts.path}"
        query = dict(parse_qsl(parts.query))

        for route in self._routes.get(path, []):
            if all(query.get(k) == v for k, v in route.params.items()):
                return HttpResponse(status=route.status, headers=route.headers, body=route.body)

        return HttpResponse(status=404, body=b'{"msg":"not found"}')

    def requested(self, fragment: str) -> list[str]:
        """Recorded URLs containing ``fragment``."""
        return [url for url in self.requests if fragment in url]


# =============================================================================
# Venue Payloads
# =============================================================================


def serve_binance(
    transport: MockTransport,
    symbol: str = "VANAUSDT",
    last_price: str = "1.001",
    quote_volume: str = "250000.5",
    bids: Levels = DEFAULT_BIDS,
    asks: Levels = DEFAULT_ASKS,
    base_url: str = BINANCE_REST_URL,
) -> None:
    """Serve Binance-style ``/ticker/price``, ``/ticker/24hr`` and ``/depth``."""
    params = {"symbol": symbol}
    transport.add(f"{base_url}/ticker/price", {"symbol": symbol, "price": last_price}, params=params)
    transport.add(
        f"{base_url}/ticker/24hr",
        {"symbol": symbol, "lastPrice": last_price, "quoteVolume": quote_volume},
        params=params,
    )
    transport.add(
        f"{base_url}/depth",
        {"lastUpdateId": 1027024, "bids": list(bids), "asks": list(asks)},
        params=params,
    )


def serve_mexc(transport: MockTransport, symbol: str = "VANAUSDT", **kwargs: Any) -> None:
    serve_binance(transport, symbol, base_url=MEXC_REST_URL, **kwargs)


def serve_bitget(
    transport: MockTransport,
    symbol: str = "VANAUSDT",
    last_price: str = "1.001",
    quote_volume: str = "180000",
    bids: Levels = DEFAULT_BIDS,
    asks: Levels = DEFAULT_ASKS,
) -> None:
    """Serve Bitget v2 ``/tickers`` and ``/orderbook`` envelopes."""
    params = {"symbol": symbol}
    transport.add(
        f"{BITGET_REST_URL}/tickers",
        {
            "code": "00000",
            "msg": "success",
            "requestTime": 1695808949356,
            "data": [{"symbol": symbol, "lastPr": last_price, "quoteVolume": quote_volume}],
        },
        params=params,
    )
    transport.add(
        f"{BITGET_REST_URL}/orderbook",
        {
            "code": "00000",
            "msg": "success",
            "requestTime": 1695808949356,
            "data": {"bids": list(bids), "asks": list(asks), "ts": "1695808949356"},
        },
        params=params,
    )


def serve_bybit(
    transport: MockTransport,
    symbol: str = "VANAUSDT",
    last_price: str = "1.001",
    turnover: str = "120000",
    bids: Levels = DEFAULT_BIDS,
    asks: Levels = DEFAULT_ASKS,
) -> None:
    """Serve Bybit v5 spot ``/tickers`` and ``/orderbook`` envelopes."""
    params = {"category": "spot", "symbol": symbol}
    transport.add(
        f"{BYBIT_REST_URL}/tickers",
        {
            "retCode": 0,
            "retMsg": "OK",
            "result": {
                "category": "spot",
                "list": [{"symbol": symbol, "lastPrice": last_price, "turnover24h": turnover}],
            },
        },
        params=params,
    )
    transport.add(
        f"{BYBIT_REST_URL}/orderbook",
        {
            "retCode": 0,
            "retMsg": "OK",
            "result": {"s": symbol, "b": list(bids), "a": list(asks), "ts": 1716863719031},
        },
        params=params,
    )


def serve_all(transport: MockTransport, symbol: str = "VANAUSDT") -> None:
    """Serve the same healthy market on all four venues."""
    serve_binance(transport, symbol)
    serve_mexc(transport, symbol)
    serve_bitget(transport, symbol)
    serve_bybit(transport, symbol)


def serve_rate_limited(transport: MockTransport, retry_after: str | None = None) -> None:
    """Answer 429 on every venue endpoint, optionally with ``Retry-After``."""
    headers = {"Retry-After": retry_after} if retry_after is not None else {}
    for base_url in (BINANCE_REST_URL, MEXC_REST_URL):
        for endpoint in ("ticker/price", "ticker/24hr", "depth"):
            transport.add(f"{base_url}/{endpoint}", status=429, headers=headers, body=b"")
    for base_url in (BITGET_REST_URL, BYBIT_REST_URL):
        for endpoint in ("tickers", "orderbook"):
            transport.add(f"{base_url}/{endpoint}", status=429, headers=headers, body=b"")
