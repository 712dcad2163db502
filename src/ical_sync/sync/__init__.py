"""Sync engine: retrying per-calendar downloads and batch orchestration."""

from __future__ import annotations

from ical_sync.sync.backoff import BackoffPolicy
from ical_sync.sync.fetch import AttemptResult, FeedFetcher, HttpTransport, TransportResponse
from ical_sync.sync.guard import ItemSyncGuard
from ical_sync.sync.orchestrator import BatchSyncOrchestrator
from ical_sync.sync.progress import ProgressBroadcaster
from ical_sync.sync.syncer import SingleItemSyncer

__all__ = [
    "AttemptResult",
    "BackoffPolicy",
    "BatchSyncOrchestrator",
    "FeedFetcher",
    "HttpTransport",
    "ItemSyncGuard",
    "ProgressBroadcaster",
    "SingleItemSyncer",
    "TransportResponse",
]
