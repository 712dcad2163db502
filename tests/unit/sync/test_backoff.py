"""Tests for :class:`ical_sync.sync.backoff.BackoffPolicy`."""

from __future__ import annotations

import pytest

from ical_sync.sync.backoff import BackoffPolicy


class TestDelayFormula:
    """delay = min(initial * 2**attempt + jitter, max)."""

    def test_first_attempt_uses_initial_delay(self) -> None:
        policy = BackoffPolicy(initial_delay=1.0, max_delay=30.0, jitter=lambda: 0.0)

        assert policy.delay(0) == 1.0

    def test_delay_doubles_per_attempt(self) -> None:
        policy = BackoffPolicy(initial_delay=1.0, max_delay=30.0, jitter=lambda: 0.0)

        assert [policy.delay(n) for n in range(4)] == [1.0, 2.0, 4.0, 8.0]

    def test_jitter_is_added(self) -> None:
        policy = BackoffPolicy(initial_delay=1.0, max_delay=30.0, jitter=lambda: 0.25)

        assert policy.delay(1) == pytest.approx(2.25)

    def test_cap_applies_after_jitter(self) -> None:
        policy = BackoffPolicy(initial_delay=1.0, max_delay=30.0, jitter=lambda: 0.999)

        assert policy.delay(10) == 30.0

    def test_value_just_below_cap_is_not_truncated(self) -> None:
        policy = BackoffPolicy(initial_delay=1.0, max_delay=30.0, jitter=lambda: 0.5)

        assert policy.delay(4) == pytest.approx(16.5)

    def test_defaults_are_one_and_thirty_seconds(self) -> None:
        policy = BackoffPolicy()

        assert policy.initial_delay == 1.0
        assert policy.max_delay == 30.0

    def test_default_jitter_stays_below_one_second(self) -> None:
        policy = BackoffPolicy(initial_delay=1.0, max_delay=30.0)

        for _ in range(50):
            value = policy.delay(0)
            assert 1.0 <= value < 2.0


class TestMonotonicity:
    """Jitter-free delays never decrease and never exceed the cap."""

    def test_base_delay_non_decreasing_and_capped(self) -> None:
        policy = BackoffPolicy(initial_delay=0.5, max_delay=10.0)

        delays = [policy.base_delay(n) for n in range(12)]

        assert delays == sorted(delays)
        assert max(delays) == 10.0

    def test_delay_minus_jitter_matches_base_delay(self) -> None:
        policy = BackoffPolicy(initial_delay=1.0, max_delay=30.0, jitter=lambda: 0.0)

        for attempt in range(8):
            assert policy.delay(attempt) == policy.base_delay(attempt)


class TestValidation:
    def test_negative_attempt_raises(self) -> None:
        policy = BackoffPolicy()

        with pytest.raises(ValueError, match="attempt"):
            policy.delay(-1)

    def test_negative_delays_rejected(self) -> None:
        with pytest.raises(ValueError):
            BackoffPolicy(initial_delay=-1.0)
