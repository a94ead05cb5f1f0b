"""Logging setup.

Library modules log through ``loguru.logger`` directly. Collaborator and
persistence failures are warnings, fallback-chain decisions are debug.
"""

from __future__ import annotations

import sys

from loguru import logger

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(verbose: bool = False) -> None:
    """Replace loguru's default sink with a stderr sink at WARNING or DEBUG."""
    logger.remove()
    logger.add(sys.stderr, format=_FORMAT, level="DEBUG" if verbose else "WARNING")
