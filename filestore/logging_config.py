"""
Application logging configuration.

This module provides unified logging configuration for the file storage
service. It sets up structured logging that captures detailed error
information for debugging while returning safe messages to clients.
"""
import logging
import sys

from filestore.config import settings


def setup_logging() -> logging.Logger:
    """
    Configure and return the application logger.

    The logger outputs to stdout with a structured format including:
    - Timestamp
    - Logger name
    - Log level
    - Message

    Safe to call from every module; handlers are only attached once.

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger("filestore")
    logger.setLevel(settings.LOG_LEVEL)

    # Prevent duplicate handlers if called multiple times
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(settings.LOG_LEVEL)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
