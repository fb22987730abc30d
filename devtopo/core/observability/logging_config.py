"""
Logging configuration for devtopo runs.

The CLI configures the root logger once before loading devtopo.yml.
Transforms run on worker threads, so the DEBUG and file formats carry
the thread name to keep interleaved build messages apart. Per-service
build output goes to ServiceLogs, not here.

Levels are resolved in precedence order:
    CLI flag  >  DEVTOPO_LOG_LEVEL env var  >  WARNING (default)

Optional file output via DEVTOPO_LOG_FILE / DEVTOPO_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import sys

# Default (WARNING): runner errors and registry overwrites only
_FMT_MINIMAL = "%(message)s"

# --verbose: publish start/failure per project, rule skips
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

# --debug: every command line, worker count, rule resolution
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(threadName)s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

# DEVTOPO_LOG_FILE: full detail regardless of console level
_FMT_FILE = "%(asctime)s %(levelname)-5s %(threadName)s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Route devtopo loggers to stderr and, optionally, a file.

    Args:
        level: Console level name; unknown names fall back to WARNING.
        log_file: File that receives the same records, e.g. to keep
            publish failures from a long parallel run.
        log_file_level: Level for ``log_file``; defaults to ``level``.
    """
    numeric_level = parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    # The file may be more verbose than the console
    effective_level = numeric_level

    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    # A broken handler must not abort a worker thread mid-build
    logging.raiseExceptions = False


def parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant (WARNING if unknown)."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
