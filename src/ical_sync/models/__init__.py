"""Data models for ical-sync."""

from __future__ import annotations

from ical_sync.models.calendar import CalendarEvent, CalendarItem
from ical_sync.models.sync import (
    BatchResult,
    ItemSyncError,
    SyncOutcome,
    SyncProgress,
    SyncStatus,
)

__all__ = [
    "BatchResult",
    "CalendarEvent",
    "CalendarItem",
    "ItemSyncError",
    "SyncOutcome",
    "SyncProgress",
    "SyncStatus",
]
