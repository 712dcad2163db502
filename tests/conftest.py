"""Shared fixtures for ical-sync tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

_ENV_VARS = (
    "ICAL_SYNC_DATA_DIR",
    "ICAL_SYNC_MAX_RETRIES",
    "ICAL_SYNC_INITIAL_RETRY_DELAY",
    "ICAL_SYNC_MAX_RETRY_DELAY",
    "ICAL_SYNC_REQUEST_TIMEOUT",
    "ICAL_SYNC_UPDATE_EVENTS",
    "ICAL_SYNC_USER_AGENT",
    "LOG_LEVEL",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all ical-sync environment variables.

    Patches ``load_dotenv`` so a real ``.env`` file cannot re-inject values
    that the test explicitly removed.
    """
    monkeypatch.setattr("ical_sync.config.load_dotenv", lambda *_a, **_kw: None)
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def data_dir_env(clean_env: None, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``ICAL_SYNC_DATA_DIR`` at a temp directory and return it."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv("ICAL_SYNC_DATA_DIR", str(data_dir))
    return data_dir


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Generator[None, None, None]:
    """Reset the root logger after each test to prevent handler leaks."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    http_levels = {name: logging.getLogger(name).level for name in ("httpx", "httpcore")}
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    for name, level in http_levels.items():
        logging.getLogger(name).setLevel(level)
