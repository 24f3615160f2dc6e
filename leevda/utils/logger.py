"""Logging setup shared by services and the command line."""

import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logger(
    name: str = "leevda",
    level: Optional[Union[int, str]] = None,
    stream=None,
) -> logging.Logger:
    """
    Configure and return a logger with a single stream handler.

    Calling it again for the same name only updates the level.

    Args:
        name: Logger name (the package logger by default)
        level: Level name or number (defaults to Config.LOG_LEVEL)
        stream: Output stream (defaults to stderr)

    Returns:
        The configured logger
    """
    if level is None:
        from ..config import Config
        level = Config.LOG_LEVEL

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not any(getattr(h, "_leevda_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handler._leevda_handler = True
        logger.addHandler(handler)

    return logger
