"""Centralized logging configuration."""

import sys

from loguru import logger

log_format = " | ".join(
    (
        "<g>{time:YYYY-MM-DD HH:mm:ss.SSS}</>",
        "<lvl>{level:<8}</>",
        "<c>{name}:{function}:{line}</>",
        "{message}",
    )
)


def configure_logging(level: str = "INFO") -> None:
    # Remove the default handler to avoid duplicate output
    logger.remove()
    logger.add(sys.stderr, format=log_format, level=level.upper())
