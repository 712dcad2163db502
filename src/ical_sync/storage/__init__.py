"""Persistence for ical-sync: calendar records and cached feed bodies."""

from __future__ import annotations

from ical_sync.storage.cache import FeedCache
from ical_sync.storage.store import CalendarStore, JsonCalendarStore

__all__ = [
    "CalendarStore",
    "FeedCache",
    "JsonCalendarStore",
]
