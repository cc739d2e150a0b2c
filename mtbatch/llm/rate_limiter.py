"""Rate limiting for provider calls.

Responsibilities:
- Bound the number of provider requests in flight by the requests-per-minute budget.
- Keep a trailing 60-second timestamp log, pruned by an owned background sweep.

Notes:
- Permits come back only through `release()`. The limiter therefore caps
  requests in flight, not strict per-minute throughput.
"""

from __future__ import annotations

from collections import deque
from contextlib import contextmanager
import threading
from time import monotonic
from typing import Callable, Iterator

from ..errors import RateLimitTimeout
from ..telemetry.logger import EventLogger

WINDOW_SECONDS = 60.0
DEFAULT_ACQUIRE_TIMEOUT_SECONDS = 120.0
DEFAULT_SWEEP_INTERVAL_SECONDS = 10.0


class RateLimiter:
    """Concurrency-capped admission counter with a trailing request window."""

    def __init__(
        self,
        requests_per_minute: int,
        *,
        acquire_timeout_seconds: float = DEFAULT_ACQUIRE_TIMEOUT_SECONDS,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        """Initialize permits and the timestamp window; the sweep starts with `start()`."""

        if requests_per_minute <= 0:
            raise ValueError("`requests_per_minute` must be a positive integer.")
        self.capacity = requests_per_minute
        self.acquire_timeout_seconds = acquire_timeout_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self.clock = clock
        self._permits = threading.Semaphore(requests_per_minute)
        self._window: deque[float] = deque()
        self._window_lock = threading.Lock()
        self._stop = threading.Event()
        self._sweeper: threading.Thread | None = None
        self._events = EventLogger("rate_limiter")

    def acquire(self) -> None:
        """Block until a permit is free, or raise `RateLimitTimeout` after the bounded wait."""

        if not self._permits.acquire(timeout=self.acquire_timeout_seconds):
            self._events.warning(
                "acquire_timeout",
                capacity=self.capacity,
                waited_seconds=self.acquire_timeout_seconds,
            )
            raise RateLimitTimeout(
                "Failed to acquire rate limit permit after waiting "
                f"{self.acquire_timeout_seconds:g} seconds."
            )
        with self._window_lock:
            self._window.append(self.clock())

    def release(self) -> None:
        """Return one permit; call exactly once per successful `acquire()`."""

        self.prune()
        self._permits.release()

    @contextmanager
    def permit(self) -> Iterator[None]:
        """Hold one permit for the duration of the block."""

        self.acquire()
        try:
            yield
        finally:
            self.release()

    def prune(self) -> int:
        """Drop timestamps older than the window and return how many were removed."""

        cutoff = self.clock() - WINDOW_SECONDS
        removed = 0
        with self._window_lock:
            while self._window and self._window[0] <= cutoff:
                self._window.popleft()
                removed += 1
        return removed

    def recent_request_count(self) -> int:
        """Return how many acquisitions fall inside the trailing window."""

        self.prune()
        with self._window_lock:
            return len(self._window)

    def start(self) -> RateLimiter:
        """Start the background window sweep if it is not already running."""

        if self._sweeper is not None and self._sweeper.is_alive():
            return self
        self._stop.clear()
        self._sweeper = threading.Thread(
            target=self._sweep_loop,
            name="mtbatch-rate-window-sweep",
            daemon=True,
        )
        self._sweeper.start()
        return self

    def close(self) -> None:
        """Stop the background sweep and wait for it to exit."""

        self._stop.set()
        sweeper = self._sweeper
        self._sweeper = None
        if sweeper is not None and sweeper is not threading.current_thread():
            sweeper.join(timeout=self.sweep_interval_seconds + 1.0)

    @property
    def sweeping(self) -> bool:
        """Return whether the background sweep thread is alive."""

        return self._sweeper is not None and self._sweeper.is_alive()

    def _sweep_loop(self) -> None:
        """Prune the window on a fixed interval until stopped."""

        while not self._stop.wait(self.sweep_interval_seconds):
            removed = self.prune()
            if removed:
                self._events.debug("window_pruned", removed=removed)

    def __enter__(self) -> RateLimiter:
        return self.start()

    def __exit__(self, *_exc_info: object) -> None:
        self.close()
