"""
Logging helpers for Spectral Partition.

Modules obtain a logger with ``get_logger(__name__)``; entry points call
``setup_logging()`` once to attach a console handler.
"""

import logging
import sys
from typing import Optional, Union

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_ROOT_LOGGER = "spectral_partition"


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the package root."""
    if not name.startswith(_ROOT_LOGGER):
        name = f"{_ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(
    level: Union[int, str, None] = None, stream: Optional[object] = None
) -> logging.Logger:
    """
    Configure the package logger with a single stream handler.

    Args:
        level: Logging level name or number. Defaults to ``config.log_level``
            (``SPECTRAL_LOG_LEVEL``).
        stream: Stream for the handler (default: stderr)

    Returns:
        The configured package root logger
    """
    if level is None:
        from ..config import config

        level = config.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level)

    # Re-running setup replaces the handler instead of stacking duplicates
    for handler in list(logger.handlers):
        if getattr(handler, "_spectral_partition", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._spectral_partition = True
    logger.addHandler(handler)
    return logger
