"""In-flight tracking that prevents concurrent syncs of one calendar."""

from __future__ import annotations

import threading


class ItemSyncGuard:
    """Set of calendar ids with a sync currently running.

    Scope is this object: it does not coordinate separate processes.
    """

    def __init__(self) -> None:
        self._in_flight: set[str] = set()
        self._lock = threading.Lock()

    def try_acquire(self, item_id: str) -> bool:
        """Mark *item_id* in flight.  Returns ``False`` if it already was."""
        with self._lock:
            if item_id in self._in_flight:
                return False
            self._in_flight.add(item_id)
            return True

    def release(self, item_id: str) -> None:
        """Clear *item_id*; releasing an id that is not held is a no-op."""
        with self._lock:
            self._in_flight.discard(item_id)

    def is_held(self, item_id: str) -> bool:
        with self._lock:
            return item_id in self._in_flight

    @property
    def in_flight(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._in_flight)
