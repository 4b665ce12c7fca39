"""Logging configuration helpers for the quiz service."""

from __future__ import annotations

import logging
from logging import Logger

DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str | int = logging.INFO, fmt: str = DEFAULT_LOG_FORMAT) -> Logger:
    """Configure root logging once and return the application logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=fmt)
    return logging.getLogger("quizshare")
