"""
Logging setup — one call at startup, driven by SessionConfig.

Console output goes to stderr at ``config.log_level``, with more detail
as the level drops. Each run also appends to ``config.log_file``
(``.appshelf/appshelf.log`` unless configured otherwise) at
``config.log_file_level``, so the history of backend failures survives
the terminal. A log file that cannot be opened is reported once and the
run continues with console logging only.

Modules never configure logging themselves; they only do
``logger = logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from appshelf.core.config.session import SessionConfig

logger = logging.getLogger(__name__)

# (format, datefmt) by the most verbose level they apply to
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_CONSOLE_PLAIN = "%(message)s"

_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(config: SessionConfig) -> Path | None:
    """Replace the root logger's handlers according to ``config``.

    Safe to call more than once; earlier handlers are closed.

    Returns:
        The log file being written, or None for console-only logging.
    """
    console_level = parse_level(config.log_level)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.addHandler(_console_handler(console_level))
    root.setLevel(console_level)

    log_file = None
    if config.log_file is not None:
        file_level = parse_level(config.log_file_level)
        try:
            root.addHandler(_file_handler(config.log_file, file_level))
        except OSError as e:
            logger.warning(
                "Cannot open log file %s (%s); logging to console only",
                config.log_file,
                e,
            )
        else:
            root.setLevel(min(console_level, file_level))
            log_file = config.log_file

    # A broken stream must never take a user action down with it
    logging.raiseExceptions = False
    return log_file


def parse_level(name: str | None) -> int:
    """Level name to its numeric value; unknown names mean WARNING."""
    if not name:
        return logging.WARNING
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = _CONSOLE_PLAIN, None
    for threshold, candidate_fmt, candidate_datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            fmt, datefmt = candidate_fmt, candidate_datefmt
            break

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    """Append-mode file handler; raises OSError if the file can't be opened."""
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler
