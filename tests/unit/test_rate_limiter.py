"""Unit tests for the concurrency-capped rate limiter and its request window."""

from __future__ import annotations

import threading

import pytest

from mtbatch.errors import RateLimitTimeout
from mtbatch.llm.rate_limiter import RateLimiter
from tests.doubles import FakeClock


def test_rate_limiter_blocks_excess_callers_until_release() -> None:
    """Acquisitions beyond capacity should block until another caller releases."""

    limiter = RateLimiter(2, acquire_timeout_seconds=5.0)
    limiter.acquire()
    limiter.acquire()

    admitted = threading.Event()

    def _third_caller() -> None:
        """Acquire a third permit and signal admission."""

        limiter.acquire()
        admitted.set()
        limiter.release()

    worker = threading.Thread(target=_third_caller)
    worker.start()

    assert not admitted.wait(0.2)

    limiter.release()
    assert admitted.wait(2.0)
    worker.join(timeout=2.0)
    limiter.release()


def test_rate_limiter_raises_after_bounded_wait() -> None:
    """A caller that cannot get a permit should fail instead of waiting forever."""

    limiter = RateLimiter(1, acquire_timeout_seconds=0.05)
    limiter.acquire()

    with pytest.raises(RateLimitTimeout, match="Failed to acquire rate limit permit"):
        limiter.acquire()

    limiter.release()
    limiter.acquire()
    limiter.release()


def test_rate_limiter_window_forgets_requests_older_than_one_minute() -> None:
    """The trailing window should only count acquisitions from the last 60 seconds."""

    clock = FakeClock()
    limiter = RateLimiter(5, clock=clock)

    with limiter.permit():
        pass
    clock.now = 30.0
    with limiter.permit():
        pass

    assert limiter.recent_request_count() == 2

    clock.now = 61.0
    assert limiter.recent_request_count() == 1

    clock.now = 95.0
    assert limiter.recent_request_count() == 0


def test_rate_limiter_prune_does_not_replenish_permits() -> None:
    """Window pruning is bookkeeping only; permits come back through release."""

    clock = FakeClock()
    limiter = RateLimiter(1, acquire_timeout_seconds=0.05, clock=clock)
    limiter.acquire()

    clock.now = 500.0
    assert limiter.prune() == 1

    with pytest.raises(RateLimitTimeout):
        limiter.acquire()
    limiter.release()


def test_rate_limiter_permit_releases_on_error() -> None:
    """The permit context manager should release capacity on failing paths."""

    limiter = RateLimiter(1, acquire_timeout_seconds=0.05)

    with pytest.raises(RuntimeError):
        with limiter.permit():
            raise RuntimeError("boom")

    with limiter.permit():
        pass


def test_rate_limiter_sweep_thread_is_owned_and_stoppable() -> None:
    """The background sweep should start on demand and stop on close."""

    with RateLimiter(3, sweep_interval_seconds=0.01) as limiter:
        assert limiter.sweeping
    assert not limiter.sweeping

    limiter.close()


def test_rate_limiter_rejects_non_positive_capacity() -> None:
    """Capacity must be a positive number of requests per minute."""

    with pytest.raises(ValueError, match="requests_per_minute"):
        RateLimiter(0)
