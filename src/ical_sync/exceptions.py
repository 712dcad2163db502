"""Custom exceptions for ical-sync.

Per-calendar sync failures are *not* exceptions: they come back as
:class:`~ical_sync.models.sync.SyncOutcome` values.  The classes here cover
the faults that escape that channel.

Exception hierarchy::

    ICalSyncError          (base for all ical-sync errors)
    +-- StorageError       (calendar record store unreadable / unwritable)
    +-- FeedParseError     (downloaded payload is not a parseable calendar)
"""

from __future__ import annotations


class ICalSyncError(Exception):
    """Base exception for ical-sync."""


class StorageError(ICalSyncError):
    """Raised when the calendar record store cannot be read or written.

    Listing active calendars is the one failure allowed to abort a batch,
    since no partial batch can start without it.

    Attributes:
        path: The backing file involved, or ``None`` for non-file stores.
    """

    def __init__(self, message: str, path: object | None = None) -> None:
        super().__init__(message)
        self.path = path


class FeedParseError(ICalSyncError):
    """Raised when a downloaded feed cannot be parsed as iCalendar data.

    Only the downstream event index raises this; the sync engine catches
    it there and logs it without failing the download.

    Attributes:
        calendar_id: Identifier of the calendar whose payload failed.
    """

    def __init__(self, message: str, calendar_id: str = "") -> None:
        super().__init__(message)
        self.calendar_id = calendar_id
