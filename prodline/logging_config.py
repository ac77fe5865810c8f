"""Logging helpers for the production line simulator.

The package is silent by default (a ``NullHandler`` is installed on the
``prodline`` logger). Call one of these helpers to see engine output:

    from prodline.logging_config import enable_console_logging
    enable_console_logging(level="DEBUG")

``configure_from_env`` reads ``PRODLINE_LOGGING`` (DEBUG, INFO, WARNING,
ERROR, CRITICAL) and enables console logging when it is set.
"""
from __future__ import annotations

import logging
import os
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "prodline"
ENV_LEVEL = "PRODLINE_LOGGING"


def _get_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _clear_handlers() -> None:
    """Remove and close every handler except the NullHandler."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


def enable_console_logging(
    level: Union[str, int] = "INFO",
    format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> logging.StreamHandler:
    """Attach a stderr handler to the ``prodline`` logger and return it."""
    _clear_handlers()
    logger = _get_logger()
    logger.setLevel(_get_level(level))
    handler = logging.StreamHandler()
    handler.setLevel(_get_level(level))
    handler.setFormatter(logging.Formatter(format, date_format))
    logger.addHandler(handler)
    return handler


def disable_logging() -> None:
    _clear_handlers()
    _get_logger().setLevel(logging.WARNING)


def configure_from_env() -> Optional[logging.StreamHandler]:
    level = os.environ.get(ENV_LEVEL)
    if not level:
        return None
    return enable_console_logging(level=level)
