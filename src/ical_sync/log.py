"""Console logging for ical-sync.

Modules log through a module-level ``logger = logging.getLogger(__name__)``;
the CLI calls :func:`setup_logging` once to attach a pipe-separated stderr
handler.
"""

from __future__ import annotations

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_HANDLER_ATTR = "_ical_sync_log_handler"

# httpx logs every request at INFO; a batch sync would print one line per
# feed attempt on top of our own messages.
_HTTP_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger for console output.

    A second call only adjusts the level of the handler installed by the
    first.  The HTTP client libraries are held at WARNING unless *level* is
    ``DEBUG``.

    Args:
        level: A logging level name such as ``"DEBUG"`` or ``"warning"``.

    Raises:
        ValueError: If *level* is not a recognised logging level name.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level!r}")

    root = logging.getLogger()
    root.setLevel(numeric_level)

    http_level = logging.NOTSET if numeric_level <= logging.DEBUG else logging.WARNING
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    existing = next((h for h in root.handlers if getattr(h, _HANDLER_ATTR, False)), None)
    if existing is not None:
        existing.setLevel(numeric_level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    setattr(handler, _HANDLER_ATTR, True)
    root.addHandler(handler)
