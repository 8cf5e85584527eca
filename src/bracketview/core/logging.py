"""
Logging setup for the display processes.

Everything under ``bracketview.*`` shares one configured logger; the refresh
loops log each cycle through it, so the console and the optional log file
are the main way to watch a display running unattended.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path

ROOT_LOGGER_NAME = "bracketview"

LOG_FORMATS = {
    "simple": "%(levelname)s: %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "compact": "%(name)s - %(levelname)s - %(message)s",
    "json": (
        '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
        '"module": "%(name)s", "message": "%(message)s"}'
    ),
}

# Per-request chatter from the HTTP stack drowns out refresh logs at DEBUG.
NOISY_LOGGERS = ("urllib3", "requests")


def _handler(
    handler: logging.Handler, level: int, formatter: logging.Formatter
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | int = logging.INFO,
    log_file: str | Path | None = None,
    format_style: str = "detailed",
    include_timestamp: bool = True,
) -> logging.Logger:
    """Configure the package logger for a display process.

    Args:
        level: Level name or number. Unknown names fall back to INFO.
        log_file: Also append records to this file; parent directories are
            created as needed.
        format_style: One of "simple", "detailed" or "json".
        include_timestamp: Drop the timestamp from the detailed format when
            False (useful when a supervisor already stamps lines).

    Returns:
        The ``bracketview`` logger.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    style = format_style
    if style == "detailed" and not include_timestamp:
        style = "compact"
    formatter = logging.Formatter(LOG_FORMATS.get(style, LOG_FORMATS["detailed"]))

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level, formatter))

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(
            _handler(logging.FileHandler(path, encoding="utf-8"), level, formatter)
        )

    logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger nested under the package logger."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


@contextmanager
def log_timing(
    logger: logging.Logger, operation: str, level: int = logging.DEBUG
):
    """Log how long the wrapped block took.

    Failures are logged at ERROR with the elapsed time and re-raised.

    Examples:
        >>> with log_timing(logger, "building bracket view"):
        ...     view = build_bracket_view(records, engine)
    """
    started = time.perf_counter()
    logger.log(level, f"Starting {operation}")
    try:
        yield
    except Exception as e:
        logger.error(
            f"Failed {operation} after {time.perf_counter() - started:.3f}s: {e}"
        )
        raise
    logger.log(level, f"Completed {operation} in {time.perf_counter() - started:.3f}s")
