"""Calendar record storage.

:class:`CalendarStore` is the interface the sync engine depends on: list
the active calendars and upsert a calendar after a terminal outcome.
:class:`JsonCalendarStore` implements it over a single JSON file, written
atomically (temp file + :func:`os.replace`) under a lock so each update is
one transaction.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from ical_sync.exceptions import StorageError
from ical_sync.models.calendar import CalendarItem

logger = logging.getLogger(__name__)

_ITEMS_ADAPTER = TypeAdapter(list[CalendarItem])


class CalendarStore(Protocol):
    """Record store keyed by calendar identifier."""

    def find_active(self) -> list[CalendarItem]:
        """Return every active calendar in a stable order."""
        ...

    def update(self, item: CalendarItem) -> None:
        """Insert or replace *item*, keyed by ``item.id``."""
        ...


class JsonCalendarStore:
    """:class:`CalendarStore` backed by a JSON array on disk.

    Calendars keep their insertion order.  A missing file is an empty
    store; an unreadable or malformed one raises :class:`StorageError`.

    Args:
        path: Location of the JSON file.  Parent directories are created on
            first write.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def all(self) -> list[CalendarItem]:
        with self._lock:
            return self._load()

    def find_active(self) -> list[CalendarItem]:
        with self._lock:
            return [item for item in self._load() if item.is_active]

    def get(self, calendar_id: str) -> CalendarItem | None:
        with self._lock:
            for item in self._load():
                if item.id == calendar_id:
                    return item
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def update(self, item: CalendarItem) -> None:
        """Upsert *item*; an unknown id is appended."""
        with self._lock:
            items = self._load()
            for index, existing in enumerate(items):
                if existing.id == item.id:
                    items[index] = item.model_copy()
                    break
            else:
                items.append(item.model_copy())
            self._save(items)

    def add(self, item: CalendarItem) -> None:
        """Insert a new calendar.

        Raises:
            StorageError: If a calendar with the same id already exists.
        """
        with self._lock:
            items = self._load()
            if any(existing.id == item.id for existing in items):
                raise StorageError(f"Calendar {item.id!r} already exists", self._path)
            items.append(item.model_copy())
            self._save(items)

    def remove(self, calendar_id: str) -> bool:
        """Delete a calendar.  Returns ``False`` if it did not exist."""
        with self._lock:
            items = self._load()
            remaining = [item for item in items if item.id != calendar_id]
            if len(remaining) == len(items):
                return False
            self._save(remaining)
            return True

    # ------------------------------------------------------------------
    # File I/O (callers hold the lock)
    # ------------------------------------------------------------------

    def _load(self) -> list[CalendarItem]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"Cannot read {self._path}: {exc}", self._path) from exc

        if not raw.strip():
            return []

        try:
            return _ITEMS_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            raise StorageError(
                f"Malformed calendar store {self._path}: {exc.error_count()} error(s)",
                self._path,
            ) from exc

    def _save(self, items: list[CalendarItem]) -> None:
        data = _ITEMS_ADAPTER.dump_json(items, indent=2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write {self._path}: {exc}", self._path) from exc

        logger.debug("Saved %d calendar(s) to %s", len(items), self._path)
