"""Batch sync of every active calendar.

:class:`BatchSyncOrchestrator` syncs the active calendars one at a time,
publishing a :class:`~ical_sync.models.sync.SyncProgress` snapshot before
the first calendar, after each calendar, and once more at the end.

A calendar that fails (or raises) is recorded as an
:class:`~ical_sync.models.sync.ItemSyncError` and the batch moves on.  Only
a failure to list the active calendars aborts the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ical_sync.models.sync import (
    BatchResult,
    ItemSyncError,
    SyncProgress,
    SyncStatus,
)
from ical_sync.storage.store import CalendarStore
from ical_sync.sync.progress import ProgressBroadcaster
from ical_sync.sync.syncer import SingleItemSyncer

logger = logging.getLogger(__name__)

OnSyncProgress = Callable[[int, int], None]


class BatchSyncOrchestrator:
    """Runs :class:`SingleItemSyncer` over all active calendars.

    Args:
        store: Source of the active calendars.
        syncer: Per-calendar sync driver.
        broadcaster: Receives progress snapshots; a private one is created
            if omitted.
    """

    def __init__(
        self,
        store: CalendarStore,
        syncer: SingleItemSyncer,
        broadcaster: ProgressBroadcaster | None = None,
    ) -> None:
        self._store = store
        self._syncer = syncer
        self._broadcaster = broadcaster or ProgressBroadcaster()

    @property
    def broadcaster(self) -> ProgressBroadcaster:
        return self._broadcaster

    def sync_all(self, on_progress: OnSyncProgress | None = None) -> BatchResult:
        """Sync every active calendar.

        Args:
            on_progress: Optional ``(synced, total)`` callback invoked once
                per processed calendar.

        Returns:
            The aggregated :class:`BatchResult`.

        Raises:
            StorageError: If the active calendars cannot be listed.  A
                ``FAILED`` snapshot is broadcast first.
        """
        try:
            calendars = self._store.find_active()
        except Exception:
            logger.exception("Could not list active calendars")
            self._broadcaster.emit(
                SyncProgress(
                    status=SyncStatus.FAILED,
                    total_calendars=0,
                    synced_calendars=0,
                    failed_calendars=0,
                )
            )
            raise

        total = len(calendars)
        synced = 0
        failed = 0
        errors: list[ItemSyncError] = []

        logger.info("Starting sync of %d calendar(s)", total)
        self._emit(SyncStatus.IN_PROGRESS, total, synced, failed, errors)

        for calendar in calendars:
            try:
                outcome = self._syncer.sync_item(calendar)
            except Exception as exc:
                logger.exception("Unexpected error syncing calendar %s", calendar.name)
                failed += 1
                errors.append(
                    ItemSyncError(
                        calendar_id=calendar.id,
                        calendar_name=calendar.name,
                        error=str(exc) or type(exc).__name__,
                    )
                )
            else:
                if outcome.success:
                    synced += 1
                else:
                    failed += 1
                    errors.append(
                        ItemSyncError(
                            calendar_id=calendar.id,
                            calendar_name=calendar.name,
                            error=outcome.error or "Unknown error",
                        )
                    )

            if on_progress is not None:
                on_progress(synced, total)
            self._emit(SyncStatus.IN_PROGRESS, total, synced, failed, errors)

        final_status = SyncStatus.COMPLETED if failed == 0 else SyncStatus.COMPLETED_WITH_ERRORS
        self._emit(final_status, total, synced, failed, errors)

        logger.info("Sync completed: %d successful, %d failed", synced, failed)

        return BatchResult(
            success=synced > 0,
            synced_count=synced,
            failed_count=failed,
            errors=tuple(errors),
        )

    def _emit(
        self,
        status: SyncStatus,
        total: int,
        synced: int,
        failed: int,
        errors: list[ItemSyncError],
    ) -> None:
        self._broadcaster.emit(
            SyncProgress(
                status=status,
                total_calendars=total,
                synced_calendars=synced,
                failed_calendars=failed,
                errors=tuple(errors),
            )
        )
