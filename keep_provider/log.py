"""Logging setup for the Keep provider."""

import logging

PACKAGE_LOGGER = "keep_provider"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Set the level of the package logger.

    Handlers and the root logger belong to the host application and are
    left alone.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level.upper())
    return package_logger
