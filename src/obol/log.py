"""Loguru sink configuration for the CLI."""

from __future__ import annotations

import sys

from loguru import logger


def setup_logging(verbose: bool = False) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<dim>{time:HH:mm:ss}</dim> <level>{level: <8}</level> {message}",
    )
