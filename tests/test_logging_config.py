"""Tests for logging setup."""

from __future__ import annotations

import logging

from bankcore_app.core.logging_config import LOG_FORMAT, setup_logging


def test_setup_logging_installs_single_handler() -> None:
    setup_logging("debug")
    setup_logging("warning")

    app_logger = logging.getLogger("bankcore_app")
    assert app_logger.level == logging.WARNING
    assert len(app_logger.handlers) == 1
    assert app_logger.handlers[0].formatter._fmt == LOG_FORMAT


def test_unknown_level_falls_back_to_info() -> None:
    setup_logging("loud")

    assert logging.getLogger("bankcore_app").level == logging.INFO
