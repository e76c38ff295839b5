"""Logging configuration — central setup for the CLI entrypoints.

Called once at startup. Every module that does
``logger = logging.getLogger(__name__)`` inherits this config. Logs go to
stderr so catalog output on stdout stays machine-readable.
"""

from __future__ import annotations

import logging
import sys

# WARNING level: minimal
_FMT_MINIMAL = "%(levelname)s: %(message)s"

# INFO level: timestamped
_FMT_VERBOSE = "%(asctime)s %(levelname)-7s %(message)s"
_DATEFMT = "%H:%M:%S"

# DEBUG level: file:line diagnostics
_FMT_DEBUG = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d - %(message)s"

_FMT_FILE = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d - %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Transport loggers that log every request at INFO/DEBUG
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure Python logging for the whole process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file, written at the same level with
            file:line detail.
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(numeric_level)

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(numeric_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    if numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.INFO
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.INFO
    return numeric
