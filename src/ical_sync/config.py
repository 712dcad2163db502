"""Configuration loading for ical-sync.

Reads settings from environment variables (with ``.env`` support via
python-dotenv).  Every variable is optional; malformed values are collected
and reported together in a single :class:`ConfigError`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_USER_AGENT = "ical-sync/0.1.0"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when configuration values are missing or invalid."""


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the sync engine.

    Attributes:
        data_dir: Root directory holding the calendar record file and the
            feed cache.
        max_retries: Retries after the first attempt (so ``max_retries + 1``
            requests at most per calendar).
        initial_retry_delay: Backoff base in seconds.
        max_retry_delay: Upper bound for any single backoff, in seconds.
        request_timeout: Per-request HTTP timeout in seconds.
        enable_downstream_update: Re-index parsed events after every
            successful download.
        user_agent: ``User-Agent`` header sent with every feed request.
        log_level: Logging level name (default ``"INFO"``).
    """

    data_dir: Path = field(default_factory=lambda: Path.home() / ".ical_sync")
    max_retries: int = 3
    initial_retry_delay: float = 1.0
    max_retry_delay: float = 30.0
    request_timeout: float = 30.0
    enable_downstream_update: bool = False
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"

    @property
    def calendar_cache_dir(self) -> Path:
        """Directory where downloaded ``.ics`` bodies are cached."""
        return self.data_dir / "calendars"

    @property
    def store_path(self) -> Path:
        """JSON file holding the calendar records."""
        return self.data_dir / "calendars.json"


def _read(name: str) -> str:
    return os.environ.get(name, "").strip()


def _parse_int(name: str, raw: str, errors: list[str], minimum: int) -> int | None:
    try:
        value = int(raw)
    except ValueError:
        errors.append(f"{name} must be an integer (got {raw!r})")
        return None
    if value < minimum:
        errors.append(f"{name} must be >= {minimum} (got {value})")
        return None
    return value


def _parse_float(
    name: str, raw: str, errors: list[str], *, positive: bool = False
) -> float | None:
    try:
        value = float(raw)
    except ValueError:
        errors.append(f"{name} must be a number (got {raw!r})")
        return None
    if positive and value <= 0:
        errors.append(f"{name} must be > 0 (got {value})")
        return None
    if value < 0:
        errors.append(f"{name} must be >= 0 (got {value})")
        return None
    return value


def _parse_bool(name: str, raw: str, errors: list[str]) -> bool | None:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    errors.append(f"{name} must be a boolean (got {raw!r})")
    return None


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Calls :func:`dotenv.load_dotenv` first so a ``.env`` file in the working
    directory is honoured.

    Returns:
        A validated :class:`Settings` instance.

    Raises:
        ConfigError: If any variable holds an unparseable or out-of-range
            value.  The message lists **all** offending variables.
    """
    load_dotenv()

    values: dict[str, object] = {}
    errors: list[str] = []

    data_dir = _read("ICAL_SYNC_DATA_DIR")
    if data_dir:
        values["data_dir"] = Path(data_dir).expanduser()

    raw = _read("ICAL_SYNC_MAX_RETRIES")
    if raw:
        parsed_int = _parse_int("ICAL_SYNC_MAX_RETRIES", raw, errors, minimum=0)
        if parsed_int is not None:
            values["max_retries"] = parsed_int

    for env_var, field_name, positive in (
        ("ICAL_SYNC_INITIAL_RETRY_DELAY", "initial_retry_delay", False),
        ("ICAL_SYNC_MAX_RETRY_DELAY", "max_retry_delay", False),
        ("ICAL_SYNC_REQUEST_TIMEOUT", "request_timeout", True),
    ):
        raw = _read(env_var)
        if raw:
            parsed = _parse_float(env_var, raw, errors, positive=positive)
            if parsed is not None:
                values[field_name] = parsed

    raw = _read("ICAL_SYNC_UPDATE_EVENTS")
    if raw:
        flag = _parse_bool("ICAL_SYNC_UPDATE_EVENTS", raw, errors)
        if flag is not None:
            values["enable_downstream_update"] = flag

    user_agent = _read("ICAL_SYNC_USER_AGENT")
    if user_agent:
        values["user_agent"] = user_agent

    log_level = _read("LOG_LEVEL")
    if log_level:
        values["log_level"] = log_level

    if errors:
        raise ConfigError("Invalid configuration: " + "; ".join(errors))

    settings = Settings(**values)  # type: ignore[arg-type]

    if settings.initial_retry_delay > settings.max_retry_delay:
        raise ConfigError(
            "Invalid configuration: ICAL_SYNC_INITIAL_RETRY_DELAY "
            f"({settings.initial_retry_delay}) exceeds ICAL_SYNC_MAX_RETRY_DELAY "
            f"({settings.max_retry_delay})"
        )

    return settings
