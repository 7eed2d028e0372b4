"""
FastAPI server for the OrderFlow dashboard.

``GET /api/dashboard`` runs one aggregation cycle per request and returns
the snapshot; this is the refresh call the dashboard UI polls.
"""

import logging
import math
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from orderflow import __version__
from orderflow.config.settings import Settings, get_settings
from orderflow.core.aggregator import Aggregator, refresh
from orderflow.exchange.transport import AiohttpTransport


logger = logging.getLogger(__name__)

HTTP_SERVICE_UNAVAILABLE = 503


def create_app(
    settings: Settings | None = None,
    aggregator: Aggregator | None = None,
) -> FastAPI:
    """
    Build the dashboard application.

    Args:
        settings: Settings to use (default: ``get_settings()`` at startup).
        aggregator: Pre-built aggregator. When omitted, the app creates one
            over its own ``AiohttpTransport`` for the lifespan of the server.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app_settings = settings or get_settings()
        app.state.settings = app_settings

        if aggregator is not None:
            app.state.aggregator = aggregator
            yield
            return

        transport = AiohttpTransport(timeout=app_settings.request_timeout)
        app.state.aggregator = Aggregator.from_settings(app_settings, transport)
        logger.info(f"Dashboard tracking {app_settings.target_count} markets")
        try:
            yield
        finally:
            await transport.close()

    app = FastAPI(
        title="OrderFlow Insights",
        version=__version__,
        lifespan=lifespan,
    )
    app.get("/api/dashboard")(get_dashboard)
    app.get("/api/health")(get_health)
    return app


async def get_dashboard(request: Request) -> JSONResponse:
    state = request.app.state
    result = await refresh(state.aggregator, timeout=state.settings.cycle_timeout)

    if result.ok:
        return JSONResponse(content=result.to_dict())

    headers = {}
    if result.retry_after is not None:
        headers["Retry-After"] = str(math.ceil(result.retry_after))
    return JSONResponse(
        content=result.to_dict(),
        status_code=HTTP_SERVICE_UNAVAILABLE,
        headers=headers,
    )


async def get_health() -> dict[str, str]:
    return {"status": "ok"}


app = create_app()


def main() -> None:
    import uvicorn

    print(
        """
╔═══════════════════════════════════════════════════════════════╗
║              ORDERFLOW INSIGHTS - DASHBOARD API               ║
╚═══════════════════════════════════════════════════════════════╝

Snapshot: http://localhost:8000/api/dashboard
Press Ctrl+C to stop.
    """
    )
    uvicorn.run(
        "orderflow.dashboard.server:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        log_level="warning",
    )


if __name__ == "__main__":
    main()
