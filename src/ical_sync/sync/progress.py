"""Publish/subscribe channel for :class:`~ical_sync.models.sync.SyncProgress`."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from ical_sync.models.sync import SyncProgress

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[SyncProgress], None]


class ProgressBroadcaster:
    """Delivers progress snapshots to every current subscriber.

    Subscribers are called synchronously, in subscription order, on the
    emitting thread.  There is no replay: a late subscriber sees only later
    emissions.  A subscriber that raises is logged and skipped; the others
    still receive the snapshot.  After :meth:`close`, emissions are dropped.
    """

    def __init__(self) -> None:
        self._subscribers: list[ProgressCallback] = []
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        """Register *callback*; returns a function that unsubscribes it."""
        with self._lock:
            if not self._closed:
                self._subscribers.append(callback)

        def _unsubscribe() -> None:
            self.unsubscribe(callback)

        return _unsubscribe

    def unsubscribe(self, callback: ProgressCallback) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def emit(self, progress: SyncProgress) -> None:
        with self._lock:
            if self._closed:
                return
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(progress)
            except Exception:
                logger.exception("Progress subscriber %r failed", callback)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._subscribers.clear()
