"""Retrying sync of a single calendar feed.

:class:`SingleItemSyncer` drives :class:`~ical_sync.sync.fetch.FeedFetcher`
through up to ``max_retries + 1`` attempts with
:class:`~ical_sync.sync.backoff.BackoffPolicy` pauses in between, then
records the terminal outcome on the calendar exactly once:

- **success** -- payload cached, downstream hook applied, ``num_of_fails``
  reset and ``last_update`` stamped.
- **exhausted / fatal** -- downstream hook purged, ``num_of_fails``
  incremented.

Failures are returned as :class:`~ical_sync.models.sync.SyncOutcome`
values, including a record store that cannot save the calendar.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from ical_sync.events import DownstreamHook, NullHook
from ical_sync.exceptions import StorageError
from ical_sync.models.calendar import CalendarItem
from ical_sync.models.sync import SyncOutcome
from ical_sync.storage.cache import FeedCache
from ical_sync.storage.store import CalendarStore
from ical_sync.sync.backoff import BackoffPolicy
from ical_sync.sync.fetch import AttemptResult, FeedFetcher
from ical_sync.sync.guard import ItemSyncGuard

logger = logging.getLogger(__name__)

ALREADY_SYNCING = "Already syncing"

DEFAULT_MAX_RETRIES = 3


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SingleItemSyncer:
    """Syncs one calendar with retries.

    Args:
        fetcher: Performs individual download attempts.
        store: Receives the calendar after its terminal outcome.
        cache: Stores the downloaded payload.
        guard: Rejects a calendar that is already being synced.
        backoff: Computes the pause between attempts.
        max_retries: Retries after the first attempt.
        hook: Downstream consumer; :class:`~ical_sync.events.NullHook` if
            omitted.
        sleep: Blocking sleep used between attempts (patched in tests).
        clock: Returns the timestamp stored in ``last_update``.
    """

    def __init__(
        self,
        fetcher: FeedFetcher,
        store: CalendarStore,
        cache: FeedCache,
        guard: ItemSyncGuard | None = None,
        backoff: BackoffPolicy | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        hook: DownstreamHook | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0 (got {max_retries})")
        self._fetcher = fetcher
        self._store = store
        self._cache = cache
        self._guard = guard or ItemSyncGuard()
        self._backoff = backoff or BackoffPolicy()
        self._max_retries = max_retries
        self._hook: DownstreamHook = hook or NullHook()
        self._sleep = sleep
        self._clock = clock

    @property
    def guard(self) -> ItemSyncGuard:
        return self._guard

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def sync_item(self, item: CalendarItem) -> SyncOutcome:
        """Download *item*'s feed, retrying transient failures.

        Returns:
            ``SyncOutcome(success=True)`` once a download succeeds;
            otherwise a failed outcome whose error is ``"Already syncing"``
            or ``"Failed after N retries: <last error>"``, or
            ``"Could not save calendar state: <error>"`` when the store
            rejects the terminal metadata update.
        """
        if not self._guard.try_acquire(item.id):
            logger.info("Calendar %s is already being synced, skipping", item.name)
            return SyncOutcome(success=False, error=ALREADY_SYNCING)

        try:
            return self._run_attempts(item)
        except StorageError as exc:
            logger.error("Could not save state of calendar %s: %s", item.name, exc)
            return SyncOutcome(success=False, error=f"Could not save calendar state: {exc}")
        finally:
            self._guard.release(item.id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_attempts(self, item: CalendarItem) -> SyncOutcome:
        logger.info("Syncing calendar %s", item.name)

        last_error = "Unknown error"
        retries = 0

        for attempt in range(self._max_retries + 1):
            result = self._attempt(item)
            if result.success:
                self._record_success(item, result.payload)
                return SyncOutcome(success=True)

            last_error = result.reason
            retries = attempt

            if result.kind == "fatal":
                logger.warning(
                    "Sync attempt %d for %s failed permanently: %s",
                    attempt + 1,
                    item.name,
                    last_error,
                )
                break

            if attempt < self._max_retries:
                delay = self._backoff.delay(attempt)
                logger.warning(
                    "Sync attempt %d failed for %s, retrying in %.1fs: %s",
                    attempt + 1,
                    item.name,
                    delay,
                    last_error,
                )
                self._sleep(delay)
        else:
            retries = self._max_retries

        self._record_failure(item, last_error)
        return SyncOutcome(
            success=False,
            error=f"Failed after {retries} retries: {last_error}",
        )

    def _attempt(self, item: CalendarItem) -> AttemptResult:
        """One download plus cache write, folded into a single result."""
        result = self._fetcher.fetch(item.url)
        if not result.success:
            return result

        try:
            path = self._cache.write(item.id, result.payload)
        except OSError as exc:
            return AttemptResult.retryable(f"Could not write feed cache: {exc}")

        logger.info(
            "Downloaded calendar %s (%d bytes) to %s", item.name, len(result.payload), path
        )
        return result

    def _record_success(self, item: CalendarItem, payload: bytes) -> None:
        # A rejected save leaves the calendar's events untouched.
        item.last_update = self._clock()
        item.num_of_fails = 0
        self._store.update(item)

        try:
            self._hook.apply(item, payload)
        except Exception as exc:
            logger.warning("Failed to update events for %s: %s", item.name, exc)

    def _record_failure(self, item: CalendarItem, last_error: str) -> None:
        logger.warning("Failed to sync calendar %s: %s", item.name, last_error)

        try:
            self._hook.purge(item)
        except Exception as exc:
            logger.warning("Failed to remove events for failed calendar %s: %s", item.name, exc)

        item.num_of_fails += 1
        self._store.update(item)
