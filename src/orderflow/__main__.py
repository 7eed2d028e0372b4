"""
Entry point for the OrderFlow aggregator.

Usage:
    python -m orderflow            # one cycle, snapshot JSON on stdout
    python -m orderflow --watch    # one cycle every REFRESH_INTERVAL seconds
    orderflow                      # if installed via pip
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import orjson


# Try to use uvloop for better performance
try:
    import uvloop

    UVLOOP_AVAILABLE = True
except ImportError:
    UVLOOP_AVAILABLE = False


logger = logging.getLogger("orderflow.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="orderflow",
        description="Aggregate VANA order books and score arbitrage candidates.",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep running, printing one snapshot per refresh interval",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the snapshot JSON",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs (DEBUG and up) to this file",
    )
    return parser.parse_args(argv)


async def run(watch: bool, pretty: bool) -> int:
    """
    Run aggregation cycles and print snapshots.

    Returns:
        Exit code: 1 if a single-shot cycle failed entirely, else 0.
    """
    from orderflow.config.settings import get_settings
    from orderflow.core.aggregator import Aggregator, refresh
    from orderflow.exchange.transport import AiohttpTransport

    settings = get_settings()
    option = orjson.OPT_INDENT_2 if pretty else 0

    async with AiohttpTransport(timeout=settings.request_timeout) as transport:
        aggregator = Aggregator.from_settings(settings, transport)

        while True:
            result = await refresh(aggregator, timeout=settings.cycle_timeout)

            if result.data is not None:
                sys.stdout.write(orjson.dumps(result.data.to_dict(), option=option).decode() + "\n")
                sys.stdout.flush()
            else:
                logger.error(f"Refresh failed: {result.error}")
                if not watch:
                    return 1

            if not watch:
                return 0

            await asyncio.sleep(settings.refresh_interval)


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success).
    """
    from pydantic import ValidationError

    from orderflow.config.settings import get_settings
    from orderflow.core.exceptions import UnknownExchangeError
    from orderflow.telemetry.logger import setup_logging

    args = parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    async_logger = setup_logging(level=settings.log_level, log_file=args.log_file)

    loop_factory: Callable[[], asyncio.AbstractEventLoop] | None = None
    if settings.use_uvloop and UVLOOP_AVAILABLE:
        loop_factory = uvloop.new_event_loop

    logger.info(
        f"Tracking {settings.target_count} markets "
        f"(uvloop {'enabled' if loop_factory else 'disabled'})"
    )

    try:
        with asyncio.Runner(loop_factory=loop_factory) as runner:
            return runner.run(run(watch=args.watch, pretty=args.pretty))
    except UnknownExchangeError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    finally:
        async_logger.stop()


if __name__ == "__main__":
    sys.exit(main())
