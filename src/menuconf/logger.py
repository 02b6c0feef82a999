"""
Logging setup for applications embedding menuconf.

The library modules only ever call logging.getLogger(__name__); nothing is
configured until the application calls setup_logger().
"""
import logging
import os
from typing import Optional, Union

from .config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"

LOG_FRAMEWORK = "menuconf"

# names of the handlers installed here; other handlers are left alone
STREAM_HANDLER_NAME = "menuconf-stream"
FILE_HANDLER_NAME = "menuconf-file"

LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logger(settings: Optional[Settings] = None,
                 log_file: Optional[Union[str, os.PathLike]] = None) -> logging.Logger:
    """Configure and return the 'menuconf' logger."""
    if settings is None:
        settings = Settings()
    logger = logging.getLogger(LOG_FRAMEWORK)
    logger.setLevel(LEVEL_MAP.get(settings.log_level.upper(), logging.WARNING))

    # own handlers only: avoid duplicated output through the root logger
    logger.propagate = False

    # calling setup_logger() again replaces its own handlers, not the caller's
    for handler in list(logger.handlers):
        if handler.get_name() in (STREAM_HANDLER_NAME, FILE_HANDLER_NAME):
            logger.removeHandler(handler)
            handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.set_name(STREAM_HANDLER_NAME)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.set_name(FILE_HANDLER_NAME)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger
