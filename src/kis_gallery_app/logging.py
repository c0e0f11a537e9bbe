"""Logging configuration helpers."""
from __future__ import annotations

import sys

from loguru import logger


def configure_logging(level: str = "INFO") -> None:
    """Configure loguru with a single stderr sink for the gallery session."""
    logger.remove()
    logger.add(
        sink=sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | {message}",
    )
    logger.debug("Logging configured at level {}", level.upper())
