"""Logging configuration for gemdeploy."""

import logging
import os
import sys
from pathlib import Path

# Log levels
LOG_LEVEL = logging.INFO
LOG_LEVEL_ENV = "GEMDEPLOY_LOG_LEVEL"

# Log format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_file: str | None = None, debug: bool = False):
    """
    Configure logging for the application.

    Args:
        log_file: Optional path to log file. If None, logs to stdout only.
        debug: If True, enable DEBUG level logging (includes every command run)
    """
    level = LOG_LEVEL
    level_name = os.environ.get(LOG_LEVEL_ENV, "").upper()
    if debug:
        level = logging.DEBUG
    elif level_name and isinstance(logging.getLevelName(level_name), int):
        level = logging.getLevelName(level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

        logging.info(f"Logging to file: {log_file}")

    logging.debug(f"Log Level: {logging.getLevelName(level)}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger
    """
    return logging.getLogger(name)
