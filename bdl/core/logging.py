"""
Logging setup for the bdl command line.

Log records go to stderr; stdout carries the command output (rendered
HTML, iCal, listings).
"""
import logging
import sys
from typing import Optional

from bdl.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(name: str = "bdl", level: Optional[str] = None) -> logging.Logger:
    """
    Configure the `name` logger with a single stderr handler.

    Args:
        name: Logger name; module loggers below it ("bdl.journal...") propagate to it
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (defaults to BDL_LOG_LEVEL)

    Raises:
        ValueError: If `level` is not a logging level name
    """
    level_name = (level or LOG_LEVEL).upper()
    numeric = logging.getLevelName(level_name)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(name)
    logger.setLevel(numeric)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
