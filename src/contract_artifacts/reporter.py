"""Logging setup and the verbosity-aware reporter passed to each component."""

from __future__ import annotations

import sys

from loguru import logger

_FORMAT = "{message}"
_VERBOSE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}"


def configure_logging(verbose: bool = False) -> None:
    """Replace loguru's default sink with one sized for CLI output."""
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format=_VERBOSE_FORMAT)
    else:
        logger.add(sys.stderr, level="INFO", format=_FORMAT)


class Reporter:
    """Progress output plus details that are only emitted in verbose mode.

    URLs, workflow ids and raw errors go through ``detail`` because they can
    expose the CI token.
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def info(self, message: str) -> None:
        logger.opt(depth=1).info(message)

    def warning(self, message: str) -> None:
        logger.opt(depth=1).warning(message)

    def detail(self, message: object) -> None:
        if self.verbose:
            logger.opt(depth=1).debug(str(message))
