"""
Logging setup for the markup engine.

The package itself only creates module loggers under ``markup_engine``; the
host decides where records go by calling :func:`setup_logging` once.
"""

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "markup_engine"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL
}

RESET = '\033[0m'

LEVEL_COLORS = {
    'DEBUG': '\033[34m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[31m\033[1m'
}

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"


def resolve_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    """
    Turn a level name (any case) or number into a logging level.

    Args:
        level: Level name such as "debug", or a numeric level
        default: Level used for None and unknown names

    Returns:
        int: The numeric logging level
    """
    if isinstance(level, int):
        return level
    if not level:
        return default
    return LOG_LEVELS.get(str(level).upper(), default)


class LogFormatter(logging.Formatter):
    """Formatter that colors the level name of console records."""

    def __init__(self, colored: bool = True, *args, **kwargs):
        """
        Initialize formatter.

        Args:
            colored: Whether to color the level name
            *args: Additional formatter args
            **kwargs: Additional formatter kwargs
        """
        self.colored = colored and sys.platform != 'win32'
        super().__init__(*args, **kwargs)

    def format(self, record: logging.LogRecord) -> str:
        level_name = record.levelname
        if not self.colored or level_name not in LEVEL_COLORS:
            return super().format(record)

        record.levelname = f"{LEVEL_COLORS[level_name]}{level_name}{RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = level_name


def _console_handler(level: int) -> logging.Handler:
    # stdout is reserved for rendered markup
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(LogFormatter(colored=sys.stderr.isatty(), fmt=CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    return handler


def _file_handler(log_file: str, level: int) -> logging.Handler:
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def setup_logging(log_file: Optional[str] = None,
                  console_level: Union[str, int] = "INFO",
                  file_level: Union[str, int] = "DEBUG",
                  component: Optional[str] = None) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the engine's logger.

    Calling it again for a logger that already has handlers changes nothing.

    Args:
        log_file: Path to a log file (None for console only)
        console_level: Level for the stderr console handler
        file_level: Level for the file handler
        component: Configure ``markup_engine.<component>`` instead of the
            package logger

    Returns:
        logging.Logger: The configured logger
    """
    name = f"{LOGGER_NAME}.{component}" if component else LOGGER_NAME
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    console = resolve_level(console_level)
    levels = [console]
    logger.addHandler(_console_handler(console))

    if log_file:
        file_level = resolve_level(file_level, logging.DEBUG)
        levels.append(file_level)
        logger.addHandler(_file_handler(log_file, file_level))

    logger.setLevel(min(levels))
    return logger


def log_exception(logger: logging.Logger, exception: Exception,
                  message: str = "An exception occurred") -> None:
    """
    Log an exception with its traceback.

    Args:
        logger: Logger to use
        exception: Exception to log
        message: Message to log with the exception
    """
    exc_info = (type(exception), exception, exception.__traceback__)
    logger.error(f"{message}: {exception}", exc_info=exc_info)
