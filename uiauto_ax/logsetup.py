# uiauto_ax/logsetup.py
"""
Console and file logging for the engine and its command line tool.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "uiauto_ax"

_initialized: bool = False


class AXLogFormatter(logging.Formatter):
    """Formatter with millisecond timestamps and optional thread names."""

    def __init__(self, include_thread: bool = True):
        self.include_thread = include_thread
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        level = record.levelname.ljust(8)

        if self.include_thread:
            thread = record.threadName[:12].ljust(12)
            prefix = f"[{timestamp}] [{level}] [{thread}] {record.name}: "
        else:
            prefix = f"[{timestamp}] [{level}] {record.name}: "

        message = record.getMessage()
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return prefix + message


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logging(
    level: Union[int, str] = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Attach console (stderr) and optional file handlers to the ``uiauto_ax``
    logger.

    Calling it again only updates the level; handlers are installed once.

    Args:
        level: Level for the console handler and the logger itself
        log_file: Append DEBUG and above to this file when given
    """
    global _initialized

    logger = logging.getLogger(LOGGER_NAME)
    numeric = _coerce_level(level)

    if _initialized:
        has_file = any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        logger.setLevel(logging.DEBUG if has_file else numeric)
        for handler in logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(numeric)
        return logger

    logger.setLevel(logging.DEBUG if log_file else numeric)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric)
    console_handler.setFormatter(AXLogFormatter(include_thread=False))
    logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(AXLogFormatter(include_thread=True))
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not create log file: {e}")

    _initialized = True
    logger.debug(f"Logging initialized (level={logging.getLevelName(numeric)}, file={log_file})")
    return logger


def reset_logging() -> None:
    """Remove installed handlers; mainly for tests."""
    global _initialized
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    _initialized = False
