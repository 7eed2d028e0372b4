"""
Async HTTP transport backed by aiohttp.

Default implementation of the ``Transport`` capability injected into
exchange adapters:
- Single session with connection pooling
- Keep-alive for reduced latency
- Network failures surfaced as ``TransportError``
"""

from collections.abc import Mapping

import aiohttp

from orderflow.config.constants import (
    CONNECTOR_LIMIT,
    CONNECTOR_LIMIT_PER_HOST,
    DEFAULT_REQUEST_TIMEOUT,
    KEEPALIVE_TIMEOUT,
)
from orderflow.core.exceptions import TransportError
from orderflow.core.types import HttpResponse


class AiohttpTransport:
    """
    aiohttp-based transport.

    Usable as an async context manager; the session is created lazily on
    first request otherwise.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            timeout: Total timeout per request in seconds.
            headers: Default headers sent with every request.
        """
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._headers = {"Accept": "application/json", **(headers or {})}
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=CONNECTOR_LIMIT,
                limit_per_host=CONNECTOR_LIMIT_PER_HOST,
                keepalive_timeout=KEEPALIVE_TIMEOUT,
                enable_cleanup_closed=True,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                headers=self._headers,
                timeout=self._timeout,
            )

        return self._session

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        """
        Perform a single HTTP request.

        Raises:
            TransportError: On connection errors and timeouts.
        """
        session = await self._get_session()
        try:
            async with session.request(method, url, headers=headers, data=body) as response:
                payload = await response.read()
                return HttpResponse(
                    status=response.status,
                    headers=dict(response.headers),
                    body=payload,
                )
        except aiohttp.ClientError as e:
            raise TransportError(f"Network error: {e}", url=url) from e
        except TimeoutError as e:
            raise TransportError(f"Request timed out after {self._timeout.total}s", url=url) from e

    async def close(self) -> None:
        """Close the underlying session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "AiohttpTransport":
        """Async context manager entry."""
        await self._get_session()
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()
