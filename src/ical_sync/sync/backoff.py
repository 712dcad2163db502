"""Exponential backoff with jitter for feed retries."""

from __future__ import annotations

import random
from collections.abc import Callable

DEFAULT_INITIAL_DELAY = 1.0  # seconds
DEFAULT_MAX_DELAY = 30.0  # seconds


class BackoffPolicy:
    """Computes the pause before retry number ``attempt + 1``.

    ``delay(attempt) = min(initial_delay * 2**attempt + jitter, max_delay)``
    where jitter is drawn from ``[0, 1)`` seconds.

    Args:
        initial_delay: Delay for attempt ``0`` before jitter, in seconds.
        max_delay: Cap applied after jitter, in seconds.
        jitter: Zero-argument callable returning the jitter in seconds.
            Defaults to :func:`random.random`.  Pass ``lambda: 0.0`` for
            deterministic delays.
    """

    def __init__(
        self,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        jitter: Callable[[], float] | None = None,
    ) -> None:
        if initial_delay < 0 or max_delay < 0:
            raise ValueError("Backoff delays must be non-negative")
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self._jitter = jitter or random.random

    def base_delay(self, attempt: int) -> float:
        """Jitter-free delay for *attempt*, capped at ``max_delay``."""
        if attempt < 0:
            raise ValueError(f"attempt must be >= 0 (got {attempt})")
        return min(self.initial_delay * (2**attempt), self.max_delay)

    def delay(self, attempt: int) -> float:
        """Delay in seconds to wait after failed attempt number *attempt*."""
        if attempt < 0:
            raise ValueError(f"attempt must be >= 0 (got {attempt})")
        return min(self.initial_delay * (2**attempt) + self._jitter(), self.max_delay)
