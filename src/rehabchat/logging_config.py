"""Logging setup for rehabchat.

Modules log through ``logging.getLogger(__name__)``; this module attaches a
single Rich handler to the package logger so records render on stderr
without interleaving with streamed answers on stdout.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "rehabchat"


def setup_logging(level: str | int = "WARNING") -> logging.Logger:
    """Configure the package logger.

    Calling it again only updates the level; no duplicate handlers are added.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or numeric level

    Returns:
        The configured ``rehabchat`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
