"""Logging setup for unitcalc.

The package logs through ``logging.getLogger(__name__)`` everywhere. The CLI
calls :func:`setup_logging` once with the level and optional log file given on
the command line.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "unitcalc_pkg"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Name of the logging level (``DEBUG``, ``INFO``, ...)
        log_file: Optional path; when given, records are also written there

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))

    # Avoid stacking handlers when called more than once (REPL restarts, tests)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger

