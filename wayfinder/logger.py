"""Structured JSON logging setup."""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from wayfinder.config import get_settings

_LOGGERS: list[logging.Logger] = []


def get_logger(name: str) -> logging.Logger:
    """Return a logger that writes JSON records to stdout.

    Handlers are attached once per logger name.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(get_settings().log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    _LOGGERS.append(logger)

    return logger


def set_log_level(level: str) -> None:
    """Apply `level` to every logger handed out by `get_logger` so far."""
    for logger in _LOGGERS:
        logger.setLevel(level)
