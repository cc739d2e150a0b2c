"""Domain exceptions for translation calls, configuration, and CLI diagnostics."""

from __future__ import annotations


class TranslationError(RuntimeError):
    """Base class for failures raised while translating through the provider."""

    failure_kind = "unknown"
    is_transient = False

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        attempts: int = 0,
    ) -> None:
        """Initialize provider error metadata for caller-facing diagnostics."""

        super().__init__(message)
        self.status_code = status_code
        self.attempts = attempts


class PermanentRequestError(TranslationError):
    """Raised for client errors (bad request, bad credentials) that are never retried."""

    failure_kind = "client_error"


class QuotaExceeded(TranslationError):
    """Raised when the provider keeps answering "too many requests" until attempts run out."""

    failure_kind = "quota_exceeded"
    is_transient = True


class UpstreamUnavailable(TranslationError):
    """Raised when the provider keeps failing with server errors until attempts run out."""

    failure_kind = "server_error"
    is_transient = True


class ConnectivityFailure(TranslationError):
    """Raised when the provider cannot be reached; the transport cause is preserved."""

    failure_kind = "network_error"
    is_transient = True

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        attempts: int = 0,
    ) -> None:
        """Initialize connectivity failure with the underlying transport cause."""

        super().__init__(message, attempts=attempts)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class ResponseMalformed(TranslationError):
    """Raised when a successful response carries no usable completion content."""

    failure_kind = "malformed_response"


class RateLimitTimeout(TranslationError):
    """Raised when a rate limit permit is not granted within the bounded wait."""

    failure_kind = "rate_limit_timeout"


class BatchWaitTimeout(TranslationError):
    """Raised to one batch member whose result did not arrive within the wait timeout."""

    failure_kind = "batch_wait_timeout"


class ConfigurationError(ValueError):
    """Raised when translator configuration is missing or invalid."""


class CommandError(RuntimeError):
    """Raised when a CLI command cannot complete, with an optional operator hint."""

    def __init__(
        self,
        *,
        command: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a command-scoped error."""

        super().__init__(detail)
        self.command = command
        self.detail = detail
        self.hint = hint
