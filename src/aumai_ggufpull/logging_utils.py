"""Logging setup for the aumai-ggufpull command line."""

from __future__ import annotations

import logging
import sys

__all__ = ["configure_logging"]

_PACKAGE_LOGGER = "aumai_ggufpull"
_MANAGED_HANDLER_FLAG = "_ggufpull_managed_handler"


def _remove_managed_handlers(logger: logging.Logger) -> None:
    """Detach any handlers previously installed by :func:`configure_logging`."""

    for handler in list(logger.handlers):
        if getattr(handler, _MANAGED_HANDLER_FLAG, False):
            logger.removeHandler(handler)
            handler.close()


def configure_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """Send package log records to stderr at *level* and return the package logger."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level)
    _remove_managed_handlers(logger)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _MANAGED_HANDLER_FLAG, True)
    logger.addHandler(handler)

    return logger
