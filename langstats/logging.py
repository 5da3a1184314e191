"""Diagnostic logging for langstats.

Standard output carries the JSON result, so every log record goes to stderr
or to an optional log file.
"""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "langstats"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``langstats.<name>``, or the package logger itself."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install stderr (and optionally file) handlers on the package logger.

    Stderr shows warnings only, or everything with ``verbose``. The log file,
    when given, always receives debug output. Calling this again replaces the
    handlers installed by the previous call.
    """
    console_level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_ROOT)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter("[langstats] %(levelname)s %(message)s"))
    logger.addHandler(console)
    logger.setLevel(console_level)

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(sink)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["configure_logging", "get_logger"]
