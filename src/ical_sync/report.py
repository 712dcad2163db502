"""Console formatting for sync progress and results.

:func:`format_progress` renders one live status line per snapshot;
:func:`format_batch_result` renders the end-of-batch summary, listing every
failed calendar with its error.  :func:`print_batch_result` writes the
summary to stdout.
"""

from __future__ import annotations

import sys

from ical_sync.models.sync import BatchResult, SyncProgress, SyncStatus

_BANNER_WIDTH = 60
_SEPARATOR = "=" * _BANNER_WIDTH

_STATUS_LABELS = {
    SyncStatus.IDLE: "idle",
    SyncStatus.IN_PROGRESS: "syncing",
    SyncStatus.COMPLETED: "done",
    SyncStatus.COMPLETED_WITH_ERRORS: "done with errors",
    SyncStatus.FAILED: "failed",
}


def format_progress(progress: SyncProgress) -> str:
    """Render *progress* as ``[ 40%] syncing 2/5 (1 failed)``."""
    percent = round(progress.progress_percent * 100)
    line = (
        f"[{percent:3d}%] {_STATUS_LABELS[progress.status]} "
        f"{progress.synced_calendars}/{progress.total_calendars}"
    )
    if progress.failed_calendars:
        line += f" ({progress.failed_calendars} failed)"
    return line


def format_batch_result(result: BatchResult) -> str:
    """Render *result* as a multi-line summary."""
    lines = [
        _SEPARATOR,
        "  CALENDAR SYNC SUMMARY",
        _SEPARATOR,
        f"  Synced: {result.synced_count}",
        f"  Failed: {result.failed_count}",
    ]

    if result.errors:
        lines.append("")
        lines.append("  Errors:")
        for error in result.errors:
            lines.append(f"    - {error}")

    if result.total == 0:
        lines.append("")
        lines.append("  No active calendars to sync.")

    lines.append(_SEPARATOR)
    return "\n".join(lines)


def print_batch_result(result: BatchResult) -> None:
    sys.stdout.write(format_batch_result(result) + "\n")
