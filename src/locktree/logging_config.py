"""Logging setup for the locktree command line."""

from __future__ import annotations

import json
import logging
import sys

LOGGER_NAME = "locktree"
TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(
            {
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
        )


def setup_logging(level: str = "WARNING", structured: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the ``locktree`` logger.

    stdout is left to the report. Calling this again changes the level and
    formatter of the existing handler instead of adding another.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    if not logger.handlers:
        logger.addHandler(logging.StreamHandler(sys.stderr))

    formatter = JsonFormatter() if structured else logging.Formatter(TEXT_FORMAT)
    for handler in logger.handlers:
        handler.setFormatter(formatter)
    return logger
