"""Downstream event registration for freshly synced calendars.

After a successful download the sync engine hands the payload to a
:class:`DownstreamHook`.  :class:`NullHook` ignores it (the default);
:class:`EventIndexHook` replaces the calendar's entries in an in-memory
:class:`EventIndex` with the events parsed from the new payload, and drops
them again when the calendar fails terminally.

Hook errors never fail a sync: the engine logs and swallows them.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import date, datetime, time, timezone
from typing import Any, Protocol

from icalendar import Calendar

from ical_sync.exceptions import FeedParseError
from ical_sync.models.calendar import CalendarEvent, CalendarItem

logger = logging.getLogger(__name__)


class DownstreamHook(Protocol):
    """Consumer notified of each calendar's terminal outcome."""

    def apply(self, item: CalendarItem, payload: bytes) -> None:
        """Replace *item*'s derived records using the downloaded *payload*."""
        ...

    def purge(self, item: CalendarItem) -> None:
        """Remove *item*'s derived records after a terminal failure."""
        ...


class NullHook:
    """Hook that does nothing."""

    def apply(self, item: CalendarItem, payload: bytes) -> None:
        return None

    def purge(self, item: CalendarItem) -> None:
        return None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _to_datetime(value: Any) -> datetime | None:
    """Convert an icalendar date/datetime property to an aware ``datetime``."""
    if value is None:
        return None
    dt = value.dt if hasattr(value, "dt") else value
    if isinstance(dt, datetime):
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt
    if isinstance(dt, date):
        # Date only: midnight UTC.
        return datetime.combine(dt, time.min, tzinfo=timezone.utc)
    return None


def _is_all_day(value: Any) -> bool:
    if value is None:
        return False
    dt = value.dt if hasattr(value, "dt") else value
    return not isinstance(dt, datetime)


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_events(calendar_id: str, payload: bytes) -> list[CalendarEvent]:
    """Extract the VEVENTs of an iCalendar payload.

    Events without a usable ``DTSTART`` are skipped with a debug message.

    Args:
        calendar_id: Identifier stamped onto every returned event.
        payload: Raw ``.ics`` bytes as downloaded.

    Returns:
        Events in feed order.

    Raises:
        FeedParseError: If *payload* is not an iCalendar document.
    """
    try:
        calendar = Calendar.from_ical(payload)
    except ValueError as exc:
        raise FeedParseError(f"Invalid iCalendar data: {exc}", calendar_id) from exc

    events: list[CalendarEvent] = []
    for component in calendar.walk("VEVENT"):
        dtstart = component.get("dtstart")
        start = _to_datetime(dtstart)
        if start is None:
            logger.debug("Skipping event without DTSTART in calendar %s", calendar_id)
            continue
        events.append(
            CalendarEvent(
                calendar_id=calendar_id,
                uid=str(component.get("uid", "")),
                summary=str(component.get("summary", "")),
                start=start,
                end=_to_datetime(component.get("dtend")),
                location=_text(component.get("location")),
                all_day=_is_all_day(dtstart),
            )
        )
    return events


# ---------------------------------------------------------------------------
# Event index
# ---------------------------------------------------------------------------


class EventIndex:
    """Thread-safe in-memory collection of parsed events."""

    def __init__(self) -> None:
        self._events: list[CalendarEvent] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def events(self) -> list[CalendarEvent]:
        with self._lock:
            return list(self._events)

    def events_for(self, calendar_id: str) -> list[CalendarEvent]:
        with self._lock:
            return [event for event in self._events if event.calendar_id == calendar_id]

    def add_events(self, events: Iterable[CalendarEvent]) -> None:
        with self._lock:
            self._events.extend(events)

    def remove_where(self, predicate: Callable[[CalendarEvent], bool]) -> int:
        """Drop every event matching *predicate*; returns how many were dropped."""
        with self._lock:
            kept = [event for event in self._events if not predicate(event)]
            removed = len(self._events) - len(kept)
            self._events = kept
            return removed

    def replace_calendar(self, calendar_id: str, events: Iterable[CalendarEvent]) -> None:
        """Swap all events of *calendar_id* for *events* in one step."""
        new_events = list(events)
        with self._lock:
            self._events = [e for e in self._events if e.calendar_id != calendar_id]
            self._events.extend(new_events)


class EventIndexHook:
    """:class:`DownstreamHook` that keeps an :class:`EventIndex` current.

    Args:
        index: The index to update.
        parser: Payload parser; defaults to :func:`parse_events`.
    """

    def __init__(
        self,
        index: EventIndex,
        parser: Callable[[str, bytes], list[CalendarEvent]] = parse_events,
    ) -> None:
        self._index = index
        self._parser = parser

    @property
    def index(self) -> EventIndex:
        return self._index

    def apply(self, item: CalendarItem, payload: bytes) -> None:
        # Parse first so a bad payload leaves the previous events in place.
        events = self._parser(item.id, payload)
        self._index.replace_calendar(item.id, events)
        logger.info("Indexed %d event(s) for calendar %s", len(events), item.name)

    def purge(self, item: CalendarItem) -> None:
        removed = self._index.remove_where(lambda event: event.calendar_id == item.id)
        if removed:
            logger.info("Removed %d event(s) of failed calendar %s", removed, item.name)
