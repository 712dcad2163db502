"""Tests for ical-sync package structure and imports."""

from __future__ import annotations

import re
import subprocess
import sys


def test_package_has_semver_version() -> None:
    import ical_sync

    assert re.match(r"^\d+\.\d+\.\d+$", ical_sync.__version__)


def test_user_agent_tracks_version() -> None:
    import ical_sync
    from ical_sync.config import DEFAULT_USER_AGENT

    assert DEFAULT_USER_AGENT == f"ical-sync/{ical_sync.__version__}"


def test_public_exports() -> None:
    from ical_sync import (  # noqa: F401
        BackoffPolicy,
        BatchResult,
        BatchSyncOrchestrator,
        ItemSyncGuard,
        ProgressBroadcaster,
        SingleItemSyncer,
        SyncProgress,
    )


def test_main_module_runs() -> None:
    """``python -m ical_sync`` with no subcommand prints help and exits 0."""
    result = subprocess.run(
        [sys.executable, "-m", "ical_sync"],
        capture_output=True,
        text=True,
        timeout=10,
    )
    assert result.returncode == 0
    assert "usage" in result.stdout.lower()
    assert "Traceback" not in result.stderr
