from __future__ import annotations

import sys

from loguru import logger

from app.config.settings import Settings

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(settings: Settings) -> None:
    """Replace loguru's default sink with a single stderr sink at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper(), format=_FORMAT)
