"""
Logging setup shared by the API, the Celery worker and the CLI.
"""

import logging
import sys
from typing import Optional, Union

from app.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# supabase sends every request through httpx; celery/kombu are noisy at INFO
LIBRARY_LOG_LEVELS = {
    "uvicorn": logging.WARNING,
    "fastapi": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "celery": logging.INFO,
    "kombu": logging.WARNING,
    "amqp": logging.WARNING,
}


def setup_logging(log_level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Send every league night log line to stdout in one format.

    Args:
        log_level: Level name or number; defaults to LOG_LEVEL from the environment

    Returns:
        The configured root logger
    """
    level = log_level if log_level is not None else LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Calling this twice (API import plus CLI) must not double every line
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root_logger.addHandler(console_handler)

    for library, library_level in LIBRARY_LOG_LEVELS.items():
        logging.getLogger(library).setLevel(library_level)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (usually __name__)
    """
    return logging.getLogger(name)
