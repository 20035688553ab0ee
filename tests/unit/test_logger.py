"""Tests for structlog setup."""

from __future__ import annotations

import logging

import structlog

from calendar_heatmap.observability.logger import get_logger, setup_logging


class TestSetupLogging:
    def test_json_format(self):
        setup_logging("DEBUG", "json")
        assert logging.getLogger("calendar_heatmap").level == logging.DEBUG
        renderer = structlog.get_config()["processors"][-1]
        assert isinstance(renderer, structlog.processors.JSONRenderer)

    def test_console_format(self):
        setup_logging("WARNING", "console")
        assert logging.getLogger("calendar_heatmap").level == logging.WARNING
        renderer = structlog.get_config()["processors"][-1]
        assert isinstance(renderer, structlog.dev.ConsoleRenderer)

    def test_unknown_level_falls_back_to_info(self):
        setup_logging("chatty", "json")
        assert logging.getLogger("calendar_heatmap").level == logging.INFO

    def test_get_logger(self):
        setup_logging("INFO", "json")
        log = get_logger("calendar_heatmap.tests")
        log.info("logger_ready", component="tests")
