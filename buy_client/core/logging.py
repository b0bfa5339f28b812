"""
Logging for the client.

Every module logs through a child of the ``buy_client`` logger. The package
never installs handlers on import; applications call ``setup_logging`` once
(or configure the ``buy_client`` logger themselves) to see request logs.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from buy_client.core import config

ROOT_LOGGER_NAME = "buy_client"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def setup_logging(log_level: Optional[str] = None, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the client's logger.

    Calling it again changes the level but never adds a second console handler.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR (defaults to LOG_LEVEL)
        log_file: Also write everything at DEBUG and above to this file (optional)

    Returns:
        The ``buy_client`` logger
    """
    level = _level(log_level or config.LOG_LEVEL)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = next((h for h in logger.handlers if type(h) is logging.StreamHandler), None)
    if console is None:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        logger.addHandler(console)
    console.setLevel(level)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under ``buy_client``; module names outside the package are nested below it."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
