"""Batch accumulation and result demultiplexing for concurrent callers.

Responsibilities:
- Group pending single-text requests by language pair.
- Dispatch a batch once it reaches the size threshold (or lingers, if enabled).
- Hand each waiting caller its own positional result from the shared response.

Key types:
- `BatchSlot`: one caller's single-assignment result cell.
- `PendingBatch`: lock-protected FIFO list of slots for one `BatchKey`.
- `BatchRegistry`: explicit `BatchKey -> PendingBatch` mapping.
- `BatchCoordinator`: `submit()` entry point used by the facade.
"""

from __future__ import annotations

from concurrent.futures import Future, InvalidStateError
from concurrent.futures import wait as wait_for_futures
import threading
from time import monotonic
from typing import Callable, Protocol, Sequence

from .errors import BatchWaitTimeout
from .models.datatypes import BatchKey, TranslationRequest
from .telemetry.logger import EventLogger


class BatchTranslator(Protocol):
    """Protocol for the component that performs one batched upstream call."""

    def translate_batch(self, texts: Sequence[str], source: str, target: str) -> list[str | None]:
        """Translate texts in order and return one entry per text (or fewer)."""


class BatchSlot:
    """One pending request and its single-assignment result cell."""

    __slots__ = ("text", "_future")

    def __init__(self, text: str) -> None:
        self.text = text
        self._future: Future[str | None] = Future()

    def set_result(self, value: str | None) -> bool:
        """Fulfil the slot with a value; returns `False` if it was already fulfilled."""

        try:
            self._future.set_result(value)
        except InvalidStateError:
            return False
        return True

    def set_exception(self, error: BaseException) -> bool:
        """Fail the slot; returns `False` if it was already fulfilled."""

        try:
            self._future.set_exception(error)
        except InvalidStateError:
            return False
        return True

    def wait(self, timeout: float) -> bool:
        """Wait up to `timeout` seconds and return whether the slot is fulfilled."""

        finished, _ = wait_for_futures([self._future], timeout=max(0.0, timeout))
        return bool(finished)

    def result(self) -> str | None:
        """Return the value of a fulfilled slot, re-raising its failure if any."""

        return self._future.result(timeout=0)


class PendingBatch:
    """Ordered slots waiting for dispatch for one language pair."""

    def __init__(self, key: BatchKey) -> None:
        self.key = key
        self._slots: list[BatchSlot] = []
        self._lock = threading.Lock()

    def add(self, slot: BatchSlot, threshold: int) -> list[BatchSlot] | None:
        """Append a slot and return the whole batch when it reaches `threshold`."""

        with self._lock:
            self._slots.append(slot)
            if len(self._slots) >= threshold:
                return self._take_locked()
        return None

    def take_if_queued(self, slot: BatchSlot) -> list[BatchSlot] | None:
        """Return the whole batch if `slot` has not been dispatched yet."""

        with self._lock:
            if any(queued is slot for queued in self._slots):
                return self._take_locked()
        return None

    def _take_locked(self) -> list[BatchSlot]:
        snapshot = self._slots
        self._slots = []
        return snapshot

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)


class BatchRegistry:
    """Registry of pending batches keyed by language pair.

    Entries are created on first use and kept for the registry lifetime.
    """

    def __init__(self) -> None:
        self._batches: dict[BatchKey, PendingBatch] = {}
        self._lock = threading.Lock()

    def get_or_create(self, key: BatchKey) -> PendingBatch:
        with self._lock:
            batch = self._batches.get(key)
            if batch is None:
                batch = PendingBatch(key)
                self._batches[key] = batch
            return batch

    def pending_count(self, key: BatchKey) -> int:
        """Return how many slots are queued (not yet dispatched) for `key`."""

        with self._lock:
            batch = self._batches.get(key)
        return len(batch) if batch is not None else 0

    def keys(self) -> list[BatchKey]:
        with self._lock:
            return list(self._batches)


class BatchCoordinator:
    """Coalesce concurrent requests per language pair into batched upstream calls."""

    def __init__(
        self,
        translator: BatchTranslator,
        *,
        batch_size: int,
        wait_timeout_seconds: float = 30.0,
        linger_seconds: float = 0.0,
        registry: BatchRegistry | None = None,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        """Initialize batching policy and the registry of pending batches."""

        if batch_size <= 0:
            raise ValueError("`batch_size` must be a positive integer.")
        self.translator = translator
        self.batch_size = batch_size
        self.wait_timeout_seconds = wait_timeout_seconds
        self.linger_seconds = linger_seconds
        self.registry = registry if registry is not None else BatchRegistry()
        self.clock = clock
        self._events = EventLogger("batch_coordinator")
        self._dispatch_lock = threading.Lock()
        self.dispatch_count = 0

    def submit(self, request: TranslationRequest) -> str | None:
        """Queue one request and block until its translation arrives.

        Returns:
            Translated text, or `None` when the provider returned no translation
            for this position.

        Raises:
            BatchWaitTimeout: The result did not arrive within the wait timeout.
            TranslationError: The batched upstream call failed for the whole batch.
        """

        key = request.batch_key
        batch = self.registry.get_or_create(key)
        slot = BatchSlot(request.text)
        deadline = self.clock() + self.wait_timeout_seconds

        snapshot = batch.add(slot, self.batch_size)
        if snapshot is not None:
            self._dispatch(key, snapshot, trigger="size")

        if self.linger_seconds > 0 and not slot.wait(
            min(self.linger_seconds, self.wait_timeout_seconds)
        ):
            lingering = batch.take_if_queued(slot)
            if lingering is not None:
                self._dispatch(key, lingering, trigger="linger")

        if not slot.wait(deadline - self.clock()):
            self._events.warning(
                "batch_wait_timeout",
                source=key.source_language,
                target=key.target_language,
                timeout_seconds=f"{self.wait_timeout_seconds:g}",
            )
            raise BatchWaitTimeout(
                "Timeout waiting for batch translation result after "
                f"{self.wait_timeout_seconds:g} seconds."
            )
        return slot.result()

    def _dispatch(self, key: BatchKey, slots: list[BatchSlot], *, trigger: str) -> None:
        """Run one upstream call for `slots` and fulfil each slot by position."""

        with self._dispatch_lock:
            self.dispatch_count += 1
        self._events.debug(
            "batch_dispatch",
            source=key.source_language,
            target=key.target_language,
            size=len(slots),
            trigger=trigger,
        )
        texts = [slot.text for slot in slots]
        try:
            results = self.translator.translate_batch(
                texts, key.source_language, key.target_language
            )
        except Exception as exc:
            self._events.error(
                "batch_failed",
                source=key.source_language,
                target=key.target_language,
                size=len(slots),
                error_type=type(exc).__name__,
            )
            for slot in slots:
                slot.set_exception(exc)
            return

        for index, slot in enumerate(slots):
            slot.set_result(results[index] if index < len(results) else None)
