"""Pydantic models for calendar feeds and their events.

- :class:`CalendarItem` -- a remote feed tracked for synchronization,
  persisted by the calendar record store.
- :class:`CalendarEvent` -- a single VEVENT extracted from a downloaded
  feed and registered in the event index.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CalendarItem(BaseModel):
    """A remote iCalendar feed.

    The sync engine mutates ``num_of_fails`` and ``last_update`` in place and
    hands the item back to the store; it never creates or deletes items.

    Attributes:
        id: Unique identifier, also the stem of the cached ``.ics`` file.
        name: Human-readable display name.
        url: HTTP(S) location of the feed.
        is_active: Whether batch syncs include this calendar.
        num_of_fails: Consecutive terminal sync failures.
        last_update: When the feed was last downloaded successfully.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(min_length=1)
    name: str
    url: str
    is_active: bool = True
    num_of_fails: int = Field(default=0, ge=0)
    last_update: datetime | None = None

    @field_validator("id")
    @classmethod
    def _id_is_filename_safe(cls, value: str) -> str:
        """Reject identifiers that would escape the cache directory."""
        if "/" in value or "\\" in value or value in {".", ".."}:
            raise ValueError(f"calendar id must be a plain file stem: {value!r}")
        return value


class CalendarEvent(BaseModel):
    """An event parsed from a calendar feed.

    Attributes:
        calendar_id: Identifier of the :class:`CalendarItem` it came from.
        uid: The VEVENT ``UID`` (empty if the feed omitted it).
        summary: Event title.
        start: Start as a timezone-aware ``datetime``.
        end: End as a timezone-aware ``datetime``, or ``None``.
        location: Event location, or ``None``.
        all_day: ``True`` when the feed used a ``DATE`` rather than a
            ``DATE-TIME`` value.
    """

    model_config = ConfigDict(frozen=True)

    calendar_id: str
    uid: str = ""
    summary: str = ""
    start: datetime
    end: datetime | None = None
    location: str | None = None
    all_day: bool = False
