"""Retry/backoff wrapper around one provider round trip.

Responsibilities:
- Classify each transport outcome as success, retryable, or permanent.
- Apply a configurable backoff growth law between attempts.
- Acquire and release the rate limiter exactly once per attempt.
"""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable, Mapping

from ..errors import (
    ConnectivityFailure,
    PermanentRequestError,
    QuotaExceeded,
    ResponseMalformed,
    TranslationError,
    UpstreamUnavailable,
)
from ..models.datatypes import TransportResponse, TransportStatus
from ..telemetry.logger import EventLogger
from .rate_limiter import RateLimiter
from .transport import Transport

BACKOFF_STRATEGIES = frozenset({"linear", "exponential"})


@dataclass(frozen=True, slots=True)
class BackoffPolicy:
    """Backoff growth law between attempts.

    Attributes:
        strategy: `linear` (`initial * attempt`) or `exponential`
            (`initial * 2 ** (attempt - 1)`, capped at `max_seconds`).
        initial_seconds: Delay after the first failed attempt.
        max_seconds: Cap for the exponential law.
    """

    strategy: str = "linear"
    initial_seconds: float = 1.0
    max_seconds: float = 10.0

    @classmethod
    def linear(cls, initial_seconds: float = 1.0) -> BackoffPolicy:
        return cls(strategy="linear", initial_seconds=initial_seconds)

    @classmethod
    def exponential(cls, initial_seconds: float = 1.0, max_seconds: float = 10.0) -> BackoffPolicy:
        return cls(strategy="exponential", initial_seconds=initial_seconds, max_seconds=max_seconds)

    def delay_for(self, attempt: int) -> float:
        """Return the delay to sleep after failed attempt number `attempt` (1-based)."""

        if self.strategy == "linear":
            return self.initial_seconds * attempt
        if self.strategy == "exponential":
            return min(self.initial_seconds * (2 ** (attempt - 1)), self.max_seconds)
        raise ValueError(f"Unsupported backoff strategy `{self.strategy}`.")


@dataclass(slots=True)
class RetryContext:
    """Mutable state of one logical call."""

    attempt: int = 0
    last_error: TranslationError | None = None
    backoff_seconds: float = 0.0


class RetryingCaller:
    """Execute provider calls with classification-driven retries."""

    def __init__(
        self,
        transport: Transport,
        rate_limiter: RateLimiter,
        *,
        max_attempts: int = 3,
        backoff: BackoffPolicy | None = None,
        sleeper: Callable[[float], None] | None = None,
    ) -> None:
        """Initialize the caller with its collaborators and retry budget."""

        if max_attempts <= 0:
            raise ValueError("`max_attempts` must be a positive integer.")
        self.transport = transport
        self.rate_limiter = rate_limiter
        self.max_attempts = max_attempts
        self.backoff = backoff if backoff is not None else BackoffPolicy.linear()
        self._sleep = sleeper if sleeper is not None else time.sleep
        self._events = EventLogger("retrying_caller")
        self.retry_attempt_count = 0

    def call(self, endpoint: str, headers: Mapping[str, str], body: bytes) -> bytes:
        """Return the response body of the first successful attempt.

        Raises:
            PermanentRequestError: Client error; never retried.
            ResponseMalformed: Successful status with an empty body; never retried.
            QuotaExceeded, UpstreamUnavailable, ConnectivityFailure: Transient
                failure persisted through every attempt.
            RateLimitTimeout: No permit within the bounded wait.
        """

        context = RetryContext()
        while True:
            context.attempt += 1
            self.rate_limiter.acquire()
            try:
                response = self.transport.post(endpoint, headers, body)
            finally:
                self.rate_limiter.release()

            if response.status is TransportStatus.SUCCESS:
                if not response.body.strip():
                    self._events.error("empty_response", attempt=context.attempt)
                    raise ResponseMalformed(
                        "Provider returned an empty successful response.",
                        status_code=response.status_code,
                        attempts=context.attempt,
                    )
                self._events.debug(
                    "call_succeeded",
                    attempt=context.attempt,
                    status_code=response.status_code,
                )
                return response.body

            error = self._classify_failure(response, context.attempt)
            if not error.is_transient:
                self._events.error(
                    "permanent_failure",
                    attempt=context.attempt,
                    failure_kind=error.failure_kind,
                    status_code=response.status_code,
                )
                raise error

            context.last_error = error
            if context.attempt >= self.max_attempts:
                self._events.error(
                    "attempts_exhausted",
                    attempts=context.attempt,
                    failure_kind=error.failure_kind,
                )
                raise error

            context.backoff_seconds = self.backoff.delay_for(context.attempt)
            self.retry_attempt_count += 1
            self._events.warning(
                "retry_scheduled",
                attempt=context.attempt,
                backoff_seconds=f"{context.backoff_seconds:g}",
                failure_kind=error.failure_kind,
            )
            self._sleep(context.backoff_seconds)

    @staticmethod
    def _classify_failure(response: TransportResponse, attempt: int) -> TranslationError:
        """Convert a failed transport response into the matching domain error."""

        if response.status is TransportStatus.QUOTA_EXCEEDED:
            return QuotaExceeded(
                f"Provider rate limit exceeded: {response.detail}",
                status_code=response.status_code,
                attempts=attempt,
            )
        if response.status is TransportStatus.SERVER_ERROR:
            return UpstreamUnavailable(
                f"Provider server error: {response.detail}",
                status_code=response.status_code,
                attempts=attempt,
            )
        if response.status is TransportStatus.NETWORK_ERROR:
            cause = response.error
            message = f"Provider network error: {response.detail or 'unreachable'}"
            if cause is not None:
                message = f"{message}. Root cause: {type(cause).__name__} - {cause}"
            return ConnectivityFailure(message, cause=cause, attempts=attempt)
        return PermanentRequestError(
            f"Provider client error: {response.detail}",
            status_code=response.status_code,
            attempts=attempt,
        )
