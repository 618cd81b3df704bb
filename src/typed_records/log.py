"""Logging setup for typed_records."""

from __future__ import annotations

import logging
from typing import IO

LOGGER_NAME = "typed_records"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def configure_logging(
    verbose: bool = False, debug: bool = False, stream: IO[str] | None = None
) -> logging.Logger:
    """Attach a stream handler to the package logger.

    debug selects DEBUG, verbose INFO, otherwise WARNING. Calling again
    replaces the handler installed by the previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if debug:
        logger.setLevel(logging.DEBUG)
    elif verbose:
        logger.setLevel(logging.INFO)
    else:
        logger.setLevel(logging.WARNING)

    for handler in list(logger.handlers):
        if getattr(handler, "_typed_records", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._typed_records = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
