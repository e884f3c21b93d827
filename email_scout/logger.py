"""Logging setup for EmailScout.

Every module logs through the ``EmailScout`` logger::

    from email_scout.logger import logger
    logger.debug("Visited %s", url)

Importing the package installs no handlers, so library users keep control of
their own logging tree. The CLI calls :func:`init_logging` once per run: log
records then go to stderr (stdout carries the scrape results) and, if asked,
to a size-rotated file.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

logger: logging.Logger = logging.getLogger("EmailScout")


def _with_format(handler: logging.Handler, fmt: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = LOG_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Attach a stderr handler (and a rotating file handler for *log_file*).

    With *replace_handlers* the handlers from a previous call are closed and
    removed first. Records stop propagating to the root logger.
    """
    logger.setLevel(level)
    if replace_handlers:
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()

    logger.addHandler(_with_format(logging.StreamHandler(sys.stderr), log_format))
    if log_file is not None:
        rotating = RotatingFileHandler(
            str(log_file), maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )
        logger.addHandler(_with_format(rotating, log_format))

    logger.propagate = False
    return logger


def init_logging(
    level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = LOG_FORMAT,
) -> logging.Logger:
    """CLI entry: fresh handlers for this run."""
    return configure(level=level, log_file=log_file, log_format=log_format)


__all__ = ["logger", "configure", "init_logging", "LOG_FORMAT"]
