"""Tests for ical-sync logging setup."""

from __future__ import annotations

import logging
import re

import pytest

from ical_sync.log import setup_logging


class TestSetupLogging:
    def test_sets_requested_level(self) -> None:
        setup_logging("DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_default_level_is_info(self) -> None:
        setup_logging()

        assert logging.getLogger().level == logging.INFO

    def test_level_name_is_case_insensitive(self) -> None:
        setup_logging("warning")

        assert logging.getLogger().level == logging.WARNING

    def test_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging("LOUD")

    def test_idempotent(self) -> None:
        setup_logging()
        count_after_first = len(logging.getLogger().handlers)

        setup_logging("DEBUG")

        assert len(logging.getLogger().handlers) == count_after_first


class TestHttpLoggers:
    """Per-request lines from the HTTP client only appear at DEBUG."""

    @pytest.mark.parametrize("name", ["httpx", "httpcore"])
    def test_held_at_warning_by_default(self, name: str) -> None:
        setup_logging("INFO")

        assert logging.getLogger(name).level == logging.WARNING

    @pytest.mark.parametrize("name", ["httpx", "httpcore"])
    def test_released_at_debug(self, name: str) -> None:
        setup_logging("INFO")
        setup_logging("DEBUG")

        assert logging.getLogger(name).getEffectiveLevel() == logging.DEBUG

    def test_request_lines_hidden_at_info(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging("INFO")
        logging.getLogger("httpx").info('HTTP Request: GET https://x.example.com "200 OK"')

        assert "HTTP Request" not in capsys.readouterr().err


class TestLogOutput:
    def test_format_fields(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Output has an ISO timestamp, level, logger name and message, pipe-separated."""
        setup_logging("INFO")
        logging.getLogger("ical_sync.format").info("syncing Lectures")

        err = capsys.readouterr().err
        assert re.search(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2} \| INFO", err)
        assert "| ical_sync.format |" in err
        assert "syncing Lectures" in err

    def test_debug_filtered_at_info(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging("INFO")
        logging.getLogger("ical_sync.filter").debug("hidden")

        assert "hidden" not in capsys.readouterr().err

    def test_debug_shown_at_debug(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging("DEBUG")
        logging.getLogger("ical_sync.filter").debug("visible")

        assert "visible" in capsys.readouterr().err
