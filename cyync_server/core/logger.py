"""
Logging management module.

The lookup components never configure logging themselves: the process entry
point calls ``setup_logger`` once and the resulting logger is passed into the
pipeline (or picked up with ``get_logger``).
"""
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

LOGGER_NAME = "cyync"


def setup_logger(
    name: str = LOGGER_NAME,
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Setup and configure logger.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        format_string: Optional custom format string
        stream: Console stream (stdout by default; stdio servers need stderr)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Remove existing handlers
    logger.handlers.clear()

    # Set level
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    # Default format
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    # Console handler
    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
