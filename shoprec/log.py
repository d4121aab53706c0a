"""Loguru sink configuration for command-line use."""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a stderr sink at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)


__all__ = ["setup_logging"]
