"""
Logging setup for SignRecognizer.

Console output plus a rotating log file. The file lives in
~/.signrecognizer/logs/ (%APPDATA%/SignRecognizer/logs/ on Windows)
unless the command line names an absolute path.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import LOG_BACKUP_COUNT, LOG_FILENAME, LOG_MAX_BYTES

LOGGER_NAME = "SignRecognizer"

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s.%(funcName)s:%(lineno)d | %(message)s"
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"


def get_log_directory() -> Path:
    """Per-user log directory, created on demand."""
    appdata = os.environ.get("APPDATA")
    if appdata:
        log_dir = Path(appdata) / "SignRecognizer" / "logs"
    else:
        log_dir = Path.home() / ".signrecognizer" / "logs"

    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def resolve_log_path(log_filename: Optional[str] = None) -> Path:
    """
    Where the log file goes.

    Args:
        log_filename: Bare name placed in the log directory, or an
            absolute path used as is (its parent is created).

    Returns:
        Path of the log file.
    """
    target = Path(log_filename or LOG_FILENAME)
    if target.is_absolute():
        target.parent.mkdir(parents=True, exist_ok=True)
        return target
    return get_log_directory() / target.name


def setup_logging(
    debug: bool = False,
    log_to_file: bool = True,
    log_filename: Optional[str] = None
) -> logging.Logger:
    """
    Configure and return the application logger.

    Calling it again replaces the previous handlers, so the CLI can be
    re-entered (tests do this) without duplicating output.

    Args:
        debug: Log DEBUG to the console as well.
        log_to_file: Attach the rotating file handler (--no-log-file turns it off).
        log_filename: Value of --log-file.

    Returns:
        The "SignRecognizer" logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(console_handler)

    if log_to_file:
        log_path = resolve_log_path(log_filename)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

        logger.debug(f"Logging to file: {log_path}")

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Child of the application logger ("SignRecognizer.<name>")."""
    base_logger = logging.getLogger(LOGGER_NAME)
    if name:
        return base_logger.getChild(name)
    return base_logger
