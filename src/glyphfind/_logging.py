"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from glyphfind._config import LogConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(config: LogConfig, verbose: bool = False) -> None:
    """
    Install a handler on the ``glyphfind`` logger.

    With a log file everything goes there, so nothing is drawn over the
    interactive screen. Without one, records go to stderr through rich at
    the configured level (WARNING by default).
    """
    level = logging.DEBUG if verbose else logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    logger = logging.getLogger("glyphfind")
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    handler: logging.Handler
    if config.file:
        handler = logging.FileHandler(config.file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)

    handler.setLevel(level)
    logger.addHandler(handler)
