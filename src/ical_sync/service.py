"""Service facade wiring the sync engine together.

:class:`ICalSyncService` builds the store, feed cache, HTTP transport,
retry policy, in-flight guard, downstream hook, progress broadcaster and
orchestrator from :class:`~ical_sync.config.Settings`, and exposes the
operations the CLI (or any host application) needs.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ical_sync.config import Settings
from ical_sync.events import DownstreamHook, EventIndex, EventIndexHook, NullHook
from ical_sync.models.calendar import CalendarItem
from ical_sync.models.sync import BatchResult, SyncOutcome
from ical_sync.storage.cache import FeedCache
from ical_sync.storage.store import JsonCalendarStore
from ical_sync.sync.backoff import BackoffPolicy
from ical_sync.sync.fetch import FeedFetcher, HttpTransport, Transport
from ical_sync.sync.guard import ItemSyncGuard
from ical_sync.sync.orchestrator import BatchSyncOrchestrator, OnSyncProgress
from ical_sync.sync.progress import ProgressBroadcaster
from ical_sync.sync.syncer import SingleItemSyncer

logger = logging.getLogger(__name__)


class ICalSyncService:
    """Entry point for syncing the configured calendars.

    Args:
        settings: Validated runtime settings.
        transport: HTTP collaborator; an :class:`HttpTransport` owned (and
            closed) by the service is created if omitted.
        store: Calendar record store; defaults to a
            :class:`JsonCalendarStore` at ``settings.store_path``.
        backoff: Retry pause policy; defaults to one built from settings.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Transport | None = None,
        store: JsonCalendarStore | None = None,
        backoff: BackoffPolicy | None = None,
    ) -> None:
        self._settings = settings
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpTransport()
        self._store = store or JsonCalendarStore(settings.store_path)
        self._cache = FeedCache(settings.calendar_cache_dir)
        self._events = EventIndex()
        self._progress = ProgressBroadcaster()

        hook: DownstreamHook = (
            EventIndexHook(self._events) if settings.enable_downstream_update else NullHook()
        )

        self._syncer = SingleItemSyncer(
            fetcher=FeedFetcher(
                self._transport,
                timeout=settings.request_timeout,
                user_agent=settings.user_agent,
            ),
            store=self._store,
            cache=self._cache,
            guard=ItemSyncGuard(),
            backoff=backoff
            or BackoffPolicy(settings.initial_retry_delay, settings.max_retry_delay),
            max_retries=settings.max_retries,
            hook=hook,
        )
        self._orchestrator = BatchSyncOrchestrator(self._store, self._syncer, self._progress)

    @classmethod
    def from_settings(cls, settings: Settings) -> ICalSyncService:
        return cls(settings)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def store(self) -> JsonCalendarStore:
        return self._store

    @property
    def cache(self) -> FeedCache:
        return self._cache

    @property
    def events(self) -> EventIndex:
        """Events parsed from synced feeds (empty unless updates are enabled)."""
        return self._events

    @property
    def progress(self) -> ProgressBroadcaster:
        """Subscribe here for :class:`~ical_sync.models.sync.SyncProgress`."""
        return self._progress

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def sync(self, on_progress: OnSyncProgress | None = None) -> BatchResult:
        """Sync every active calendar.  See :meth:`BatchSyncOrchestrator.sync_all`."""
        self._cache.ensure_dir()
        return self._orchestrator.sync_all(on_progress=on_progress)

    def sync_single(self, item: CalendarItem) -> SyncOutcome:
        return self._syncer.sync_item(item)

    def get_active_calendars(self) -> list[CalendarItem]:
        return self._store.find_active()

    def cleanup_old_calendars(self) -> list[Path]:
        """Delete cached feeds of calendars that are no longer active."""
        return self._cache.cleanup(self._store.find_active())

    def close(self) -> None:
        if self._owns_transport and isinstance(self._transport, HttpTransport):
            self._transport.close()
        self._progress.close()

    def __enter__(self) -> ICalSyncService:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
