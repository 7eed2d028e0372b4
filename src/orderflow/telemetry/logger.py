"""
Non-blocking logging.

Coroutines only enqueue records; a ``QueueListener`` thread formats them
and writes to stderr (and optionally a file), so slow terminals or disks
never hold up venue fetches.
"""

import logging
import sys
from datetime import datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import Queue

from orderflow.config.constants import LOG_DATE_FORMAT, LOG_FORMAT, MAX_LOG_QUEUE_SIZE


ROOT_LOGGER_NAME = "orderflow"

# Third-party loggers capped at WARNING
QUIET_LOGGERS = ("aiohttp", "asyncio")


class MicrosecondFormatter(logging.Formatter):
    """Appends microseconds to ``LOG_DATE_FORMAT`` timestamps."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        created = datetime.fromtimestamp(record.created)
        return f"{created.strftime(datefmt or LOG_DATE_FORMAT)}.{created.microsecond:06d}"


class AsyncLogger:
    """
    Owns the queue, the handler attached to a logger and the listener
    thread draining it. Use ``start``/``stop`` or the ``with`` form.
    """

    def __init__(
        self,
        name: str = ROOT_LOGGER_NAME,
        level: int = logging.INFO,
        log_file: Path | None = None,
    ) -> None:
        """
        Args:
            name: Logger the queue handler is attached to.
            level: Threshold for the logger and the stderr handler.
            log_file: If set, DEBUG and above are also appended here.
        """
        self._logger = logging.getLogger(name)
        self._level = level
        self._log_file = log_file
        self._queue: Queue[logging.LogRecord] = Queue(maxsize=MAX_LOG_QUEUE_SIZE)
        self._queue_handler = QueueHandler(self._queue)
        self._listener: QueueListener | None = None

    def _sinks(self) -> list[logging.Handler]:
        formatter = MicrosecondFormatter(LOG_FORMAT, LOG_DATE_FORMAT)

        # stdout is reserved for snapshot JSON
        stderr = logging.StreamHandler(sys.stderr)
        stderr.setLevel(self._level)
        sinks: list[logging.Handler] = [stderr]

        if self._log_file is not None:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            to_file = logging.FileHandler(self._log_file)
            to_file.setLevel(logging.DEBUG)
            sinks.append(to_file)

        for sink in sinks:
            sink.setFormatter(formatter)
        return sinks

    def start(self) -> None:
        """Attach the queue handler and start draining. Idempotent."""
        if self._listener is not None:
            return

        self._listener = QueueListener(self._queue, *self._sinks(), respect_handler_level=True)
        self._logger.addHandler(self._queue_handler)
        self._logger.setLevel(self._level)
        self._listener.start()

    def stop(self) -> None:
        """Flush queued records, then detach. Safe to call twice."""
        if self._listener is None:
            return

        self._listener.stop()
        for sink in self._listener.handlers:
            sink.close()
        self._listener = None
        self._logger.removeHandler(self._queue_handler)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def __enter__(self) -> "AsyncLogger":
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> AsyncLogger:
    """
    Route ``orderflow.*`` logging through a started ``AsyncLogger``.

    Handlers already on the root logger are removed so records are not
    printed twice.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR); unknown names mean INFO.
        log_file: Optional extra sink.

    Returns:
        The running logger; call ``stop()`` on shutdown to flush.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    async_logger = AsyncLogger(ROOT_LOGGER_NAME, level=numeric_level, log_file=log_file)
    async_logger.start()
    return async_logger
