"""Coloured console logging for the importer."""

from __future__ import annotations

import logging
import sys
from typing import Union

TRACE = 5
OFF = logging.CRITICAL + 10

logging.addLevelName(TRACE, "TRACE")

_RESET = "\x1b[0m"

_LEVEL_NAMES = {
    "off": OFF,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}


def _label_and_style(levelno: int) -> tuple:
    if levelno >= logging.ERROR:
        return "ERROR", "\x1b[1;31m"
    if levelno >= logging.WARNING:
        return "WARN", "\x1b[1;33m"
    if levelno >= logging.INFO:
        return "INFO", "\x1b[1;32m"
    if levelno >= logging.DEBUG:
        return "DEBUG", "\x1b[36m"
    return "TRACE", "\x1b[90m"


class ColorFormatter(logging.Formatter):
    """Formats records with a coloured level; debug and trace also show file and line."""

    def format(self, record: logging.LogRecord) -> str:
        label, style = _label_and_style(record.levelno)
        message = record.getMessage()
        if record.levelno <= logging.DEBUG:
            return (
                f"{style}{label:>5}{_RESET} "
                f"[{record.filename or 'unknown'}:{record.lineno or 0}] {message}"
            )
        return f"{style}{label:>5}{_RESET}: {message}"


def init_logger(level: Union[int, str]) -> logging.Handler:
    """Install a coloured stderr handler on the root logger at the given level."""
    if isinstance(level, str):
        try:
            numeric = _LEVEL_NAMES[level.strip().lower()]
        except KeyError:
            raise ValueError(f"unknown log level: {level!r}") from None
    else:
        numeric = int(level)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing.formatter, ColorFormatter):
            root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColorFormatter())
    root.addHandler(handler)
    root.setLevel(numeric)
    return handler