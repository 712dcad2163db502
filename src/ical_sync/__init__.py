"""ical-sync: resilient synchronization of remote iCalendar feeds.

Downloads each active calendar with per-feed retries and backoff, caches
the payloads, tracks failures per calendar and broadcasts batch progress.
"""

from __future__ import annotations

from ical_sync.exceptions import FeedParseError, ICalSyncError, StorageError
from ical_sync.models.calendar import CalendarEvent, CalendarItem
from ical_sync.models.sync import (
    BatchResult,
    ItemSyncError,
    SyncOutcome,
    SyncProgress,
    SyncStatus,
)
from ical_sync.sync.backoff import BackoffPolicy
from ical_sync.sync.guard import ItemSyncGuard
from ical_sync.sync.orchestrator import BatchSyncOrchestrator
from ical_sync.sync.progress import ProgressBroadcaster
from ical_sync.sync.syncer import SingleItemSyncer

__version__ = "0.1.0"

__all__ = [
    "BackoffPolicy",
    "BatchResult",
    "BatchSyncOrchestrator",
    "CalendarEvent",
    "CalendarItem",
    "FeedParseError",
    "ICalSyncError",
    "ItemSyncError",
    "ItemSyncGuard",
    "ProgressBroadcaster",
    "SingleItemSyncer",
    "StorageError",
    "SyncOutcome",
    "SyncProgress",
    "SyncStatus",
]
