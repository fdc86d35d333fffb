"""Logging setup for the command line. The library itself only creates loggers."""

import logging
from typing import List

from assethash.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(settings: Settings) -> None:
    """Attach handlers to the assethash logger: stderr, plus settings.log_file if set."""
    level = getattr(logging, settings.log_level, logging.INFO)
    logger = logging.getLogger("assethash")
    logger.setLevel(level)
    logger.handlers.clear()

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    log_file = settings.log_file.strip()
    file_error = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as e:
            file_error = e

    fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    if file_error is not None:
        logger.warning("Could not open log file %s: %s", log_file, file_error)
    elif log_file:
        logger.debug("Logging to file %s", log_file)
