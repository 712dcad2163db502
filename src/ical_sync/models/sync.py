"""Result and progress types produced by the sync engine.

- :class:`SyncStatus` -- lifecycle of a batch as seen by observers.
- :class:`SyncOutcome` -- terminal result of syncing one calendar.
- :class:`ItemSyncError` -- one failed calendar within a batch.
- :class:`BatchResult` -- aggregated result of a batch.
- :class:`SyncProgress` -- snapshot broadcast during a batch.

All of them are frozen; a fresh :class:`SyncProgress` is built for every
emission so observers may keep references.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SyncStatus(Enum):
    """Batch status reported through :class:`SyncProgress`."""

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    COMPLETED_WITH_ERRORS = "completed_with_errors"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncOutcome:
    """Terminal result of syncing a single calendar.

    Attributes:
        success: Whether the feed was downloaded and recorded.
        error: Human-readable failure description, ``None`` on success.
    """

    success: bool
    error: str | None = None


@dataclass(frozen=True)
class ItemSyncError:
    """A calendar that failed during a batch.

    Attributes:
        calendar_id: Identifier of the failed calendar.
        calendar_name: Display name of the failed calendar.
        error: Failure description.
    """

    calendar_id: str
    calendar_name: str
    error: str

    def __str__(self) -> str:
        return f"{self.calendar_name}: {self.error}"


@dataclass(frozen=True)
class BatchResult:
    """Aggregated result of syncing every active calendar.

    ``success`` is ``True`` when at least one calendar synced, even if
    others failed.

    Attributes:
        success: ``synced_count > 0``.
        synced_count: Calendars synced successfully.
        failed_count: Calendars that failed.
        errors: One entry per failed calendar, in processing order.
    """

    success: bool
    synced_count: int
    failed_count: int
    errors: tuple[ItemSyncError, ...] = ()

    @property
    def total(self) -> int:
        """Number of calendars processed."""
        return self.synced_count + self.failed_count


@dataclass(frozen=True)
class SyncProgress:
    """Point-in-time view of a running batch.

    Attributes:
        status: Current batch status.
        total_calendars: Calendars in the batch.
        synced_calendars: Calendars synced so far.
        failed_calendars: Calendars failed so far.
        errors: Failures recorded so far (only the final snapshot of a
            batch is guaranteed to carry the full list).
    """

    status: SyncStatus
    total_calendars: int
    synced_calendars: int
    failed_calendars: int
    errors: tuple[ItemSyncError, ...] = ()

    @property
    def progress_percent(self) -> float:
        """Fraction of calendars synced, in ``[0.0, 1.0]``."""
        if self.total_calendars == 0:
            return 0.0
        return self.synced_calendars / self.total_calendars

    @property
    def is_completed(self) -> bool:
        """Whether the batch has finished (with or without errors)."""
        return self.status in (SyncStatus.COMPLETED, SyncStatus.COMPLETED_WITH_ERRORS)

    @property
    def has_errors(self) -> bool:
        """Whether any calendar has failed so far."""
        return self.failed_calendars > 0 or len(self.errors) > 0
