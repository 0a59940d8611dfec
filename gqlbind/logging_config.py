"""
Logging configuration for gqlbind.

All modules obtain loggers through :func:`get_logger` so that a single call to
:func:`setup_logging` controls the whole package.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "gqlbind"
LOG_LEVEL_ENV = "GQLBIND_LOG_LEVEL"


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    rich_output: bool = True,
) -> logging.Logger:
    """
    Configure logging for the gqlbind package.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Falls back to ``GQLBIND_LOG_LEVEL`` and then WARNING.
        log_file: Optional file path that receives a plain-text copy of the log
        rich_output: Render console records with rich instead of a plain
            stream handler

    Returns:
        The configured package logger
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")

    log_level = getattr(logging, str(level).upper(), None)
    if not isinstance(log_level, int):
        log_level = logging.WARNING

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    if rich_output:
        console_handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            logging.Formatter("%(levelname)s %(name)s: %(message)s")
        )
    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the gqlbind namespace.

    Args:
        name: Logger name, typically ``__name__``

    Returns:
        Logger instance
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
