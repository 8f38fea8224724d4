"""Logging helpers for library users and examples."""

from __future__ import annotations

import logging

PACKAGE_LOGGER_NAME = "circuitforge"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure console logging for examples and scripts.

    ``basicConfig`` is a no-op once the root logger has handlers, so the
    level is also applied to the package logger. Generation attempt details
    are logged at ``DEBUG``.

    Args:
        level: Level for the root and the ``circuitforge`` loggers.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger(PACKAGE_LOGGER_NAME).setLevel(level)
