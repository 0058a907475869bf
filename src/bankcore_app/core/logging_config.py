"""Centralized logging configuration for the application."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """Configure the package logger with a single stream handler."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    app_logger = logging.getLogger("bankcore_app")
    app_logger.setLevel(log_level)
    app_logger.handlers = [handler]


__all__ = ["setup_logging"]
