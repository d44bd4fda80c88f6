"""Log utilities."""

import logging
import os

from rich.logging import RichHandler

# name of environment variable that overrides the default level of service loggers
LOG_LEVEL_ENV_VAR = "TOKEN_USAGE_TRACKER_LOG_LEVEL"


def get_logger(name: str) -> logging.Logger:
    """Retrieve logger with the provided name.

    The logger writes through its own rich handler and does not propagate to
    the root logger, so messages are not printed twice.
    """
    logger = logging.getLogger(name)
    logger.setLevel(os.environ.get(LOG_LEVEL_ENV_VAR, "DEBUG").upper())
    logger.handlers = [RichHandler(show_path=False)]
    logger.propagate = False
    return logger
