"""Logging helpers for guitarsleuth.

Provides debug(), info(), warn() and error() for the CLI layer, all routed
through the ``guitarsleuth`` logger. Library modules log through their own
``logging.getLogger(__name__)`` loggers, which propagate to it.
Debug output is enabled with the GUITARSLEUTH_DEBUG environment variable.
"""

import logging
import os
from typing import Optional

_logger: Optional[logging.Logger] = None


def debug_enabled() -> bool:
    return os.getenv("GUITARSLEUTH_DEBUG", "0").lower() in {"1", "true", "yes"}


def setup_logger() -> logging.Logger:
    """Attach a stream handler to the package logger once."""
    global _logger
    if _logger is not None:
        return _logger
    logger = logging.getLogger("guitarsleuth")
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("[%(levelname)s] %(asctime)s %(name)s %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if debug_enabled() else logging.WARNING)
    _logger = logger
    return logger


def debug(msg: str) -> None:
    """Log a debug message if debugging is enabled."""
    if debug_enabled():
        setup_logger().debug(msg)


def info(msg: str) -> None:
    """Log an info message."""
    setup_logger().info(msg)


def warn(msg: str) -> None:
    """Log a warning message."""
    setup_logger().warning(msg)


def error(msg: str) -> None:
    """Log an error message."""
    setup_logger().error(msg)
