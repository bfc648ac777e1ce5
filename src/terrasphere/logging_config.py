"""
Logging setup for the terrasphere command line.

Library modules only create module loggers; handlers are attached here,
once, by whoever runs the simulation.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route the package's log records to stdout and, optionally, a file.

    Calling it again replaces the handlers from the previous call.

    Returns:
        The 'terrasphere' package logger
    """
    logger = logging.getLogger("terrasphere")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.debug("Logging to %s", ", ".join(type(h).__name__ for h in handlers))
    return logger
