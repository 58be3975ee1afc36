"""
Logger setup for stackview hosts.

Purpose
- Attach handlers to the ``stackview`` package logger; library modules only call
  ``logging.getLogger(__name__)`` and never configure handlers themselves.

Source of truth and boundaries
- Called once by app.main from ``--log-level``/``--log-file``. Interactive hosts may
  call it or configure the ``stackview`` logger their own way.
- Console output goes to stderr; stdout belongs to the JSON view model.

Notes
- Calling again replaces the previous handlers instead of adding to them.
"""

from __future__ import annotations

import logging
import sys

__all__ = ["LOG_FORMAT", "setup_logging"]

PACKAGE_LOGGER = "stackview"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """
    Route ``stackview.*`` records to stderr and, optionally, to a file.

    Args:
        level: Threshold for the package logger and every handler.
        log_file: Path of a log file, truncated on each call; None for stderr only.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    logger.addHandler(_handler(logging.StreamHandler(sys.stderr), level, formatter))
    if log_file:
        logger.addHandler(
            _handler(logging.FileHandler(log_file, mode="w", encoding="utf-8"), level, formatter)
        )

    logger.debug("Logging initialized at %s", logging.getLevelName(level))
