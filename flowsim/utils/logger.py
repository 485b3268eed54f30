"""Logging setup shared by the engine and model components."""

import logging
import os
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER_NAME = "flowsim"


def _default_level() -> str:
    return os.environ.get("FLOWSIM_LOG_LEVEL", "INFO").upper()


def setup_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Create (or fetch) a logger under the ``flowsim`` hierarchy.

    Args:
        name: Logger name, usually the class name of the caller
        level: Optional level override; defaults to ``FLOWSIM_LOG_LEVEL``

    Returns:
        Configured logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(_default_level())
        root.propagate = False

    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    if level is not None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


def set_log_level(level: Union[int, str]) -> None:
    """Change the level of every ``flowsim`` logger at once.

    Args:
        level: Logging level name or number
    """
    setup_logger(ROOT_LOGGER_NAME, level)
