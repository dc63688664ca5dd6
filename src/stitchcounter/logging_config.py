# SPDX-License-Identifier: MIT

"""Logging configuration for stitchcounter."""

import sys

from loguru import logger


def configure_logging(level: str = "WARNING", *, verbose: bool = False) -> None:
    """Configure loguru with the configured level, or DEBUG when verbose."""
    logger.remove()
    if verbose:
        level = "DEBUG"
    logger.add(sys.stderr, level=level.upper(), format="{level.icon} {message}")
