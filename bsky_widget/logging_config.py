"""Logging setup: colored console plus optional rotating file.

Call ``setup_logging()`` once at startup; modules log via ``logging.getLogger(__name__)``.
File output goes through a queue so request handlers never block on disk I/O.
"""

from __future__ import annotations

import atexit
import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "widget.log"
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3

CONSOLE_FMT = "%(asctime)s %(levelname)s %(name)s: %(ctx)s%(message)s"
FILE_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(ctx)s%(message)s"
DATE_FMT = "%H:%M:%S"
FILE_DATE_FMT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO.
_NOISY_LOGGERS = ("aiohttp.access", "aiohttp.client", "aiohttp.internal")

logger = logging.getLogger(__name__)

_LEVEL_COLORS = {
    "DEBUG": "\x1b[36m",
    "INFO": "\x1b[32m",
    "WARNING": "\x1b[33m",
    "ERROR": "\x1b[31m",
    "CRITICAL": "\x1b[35m",
}
_RESET = "\x1b[0m"

_listener: QueueListener | None = None
_atexit_registered = False


class _ColorFormatter(logging.Formatter):
    """Pads level names and colors them when writing to a terminal."""

    def __init__(self, fmt: str, datefmt: str | None = None, *, use_color: bool = True) -> None:
        super().__init__(fmt, datefmt)
        self._use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        padded = f"{levelname:<8}"
        record.levelname = (
            f"{_LEVEL_COLORS.get(levelname, '')}{padded}{_RESET}" if self._use_color else padded
        )
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def shutdown_logging() -> None:
    """Flush and stop the file queue listener, if running."""
    global _listener  # noqa: PLW0603
    if _listener is not None:
        _listener.stop()
        _listener = None


def _file_handler(log_dir: Path) -> RotatingFileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FMT, datefmt=FILE_DATE_FMT))
    return handler


def setup_logging(
    level: int = logging.INFO,
    verbose: bool = False,
    log_dir: Path | None = None,
) -> None:
    """Configure the root logger. Safe to call more than once.

    Args:
        level: Minimum console level.
        verbose: Force DEBUG level.
        log_dir: Directory for ``widget.log``. File logging is skipped when None.
    """
    global _listener, _atexit_registered  # noqa: PLW0603
    if verbose:
        level = logging.DEBUG

    shutdown_logging()

    from bsky_widget.log_context import ContextFilter

    ctx_filter = ContextFilter()
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if sys.stderr is not None:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level)
        console.addFilter(ctx_filter)
        use_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
        console.setFormatter(_ColorFormatter(CONSOLE_FMT, datefmt=DATE_FMT, use_color=use_color))
        root.addHandler(console)

    if log_dir is not None:
        records: queue.Queue[logging.LogRecord] = queue.Queue()
        queue_handler = QueueHandler(records)
        queue_handler.setLevel(logging.DEBUG)
        queue_handler.addFilter(ctx_filter)
        root.addHandler(queue_handler)

        _listener = QueueListener(records, _file_handler(log_dir), respect_handler_level=True)
        _listener.start()
        if not _atexit_registered:
            atexit.register(shutdown_logging)
            _atexit_registered = True

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging initialized (level=%s)", logging.getLevelName(level))
