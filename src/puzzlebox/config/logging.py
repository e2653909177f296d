"""Logging setup for applications embedding the puzzle box.

Library modules only create loggers (``logging.getLogger(__name__)``); handlers
are installed by the host application, once, via configure_logging().
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", fmt: str = LOG_FORMAT) -> logging.Logger:
    """Attach a stream handler to the ``puzzlebox`` logger.

    Calling it again only updates the level; no duplicate handlers are added.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("puzzlebox")
    if not any(getattr(h, "_puzzlebox_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        handler._puzzlebox_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
