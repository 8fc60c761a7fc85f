"""Logging configuration helpers."""

import logging

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the package logger once; later calls only adjust the level."""
    logger = logging.getLogger("macro_budget")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
