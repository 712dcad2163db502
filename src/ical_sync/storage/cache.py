"""On-disk cache of downloaded feed bodies.

Each calendar's latest payload lives at ``<directory>/<calendar id>.ics``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ical_sync.models.calendar import CalendarItem

logger = logging.getLogger(__name__)

_SUFFIX = ".ics"


class FeedCache:
    """Directory of cached ``.ics`` files keyed by calendar id.

    Args:
        directory: Cache directory; created on demand.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def ensure_dir(self) -> Path:
        self._directory.mkdir(parents=True, exist_ok=True)
        return self._directory

    def path_for(self, calendar_id: str) -> Path:
        return self._directory / f"{calendar_id}{_SUFFIX}"

    def write(self, calendar_id: str, payload: bytes) -> Path:
        """Store *payload* as the cached body for *calendar_id*.

        Raises:
            OSError: If the directory or file cannot be written.
        """
        self.ensure_dir()
        path = self.path_for(calendar_id)
        path.write_bytes(payload)
        return path

    def read(self, calendar_id: str) -> bytes | None:
        try:
            return self.path_for(calendar_id).read_bytes()
        except FileNotFoundError:
            return None

    def cleanup(self, calendars: Iterable[CalendarItem]) -> list[Path]:
        """Delete cached files whose calendar is not in *calendars*.

        Only ``*.ics`` files are considered.  A file that cannot be deleted
        is logged and skipped.

        Args:
            calendars: The calendars whose cache files must be kept.

        Returns:
            Paths that were removed.
        """
        if not self._directory.is_dir():
            return []

        keep = {calendar.id for calendar in calendars}
        removed: list[Path] = []

        for entry in sorted(self._directory.iterdir()):
            if not entry.is_file() or entry.suffix != _SUFFIX:
                continue
            # Ids may contain dots; only the suffix is stripped.
            calendar_id = entry.stem
            if calendar_id in keep:
                continue
            try:
                entry.unlink()
            except OSError as exc:
                logger.warning("Failed to remove old calendar file %s: %s", entry.name, exc)
                continue
            logger.info("Removed old calendar file: %s", entry.name)
            removed.append(entry)

        return removed
