"""Public translation client.

Responsibilities:
- Route each request to the single-call path or to the batch coordinator.
- Score results by source text length.
- Own the lifetime of the rate limiter's background sweep.
"""

from __future__ import annotations

from .batching import BatchCoordinator, BatchRegistry
from .config import TranslatorConfig
from .llm.openai_service import OpenAITranslationService
from .llm.prompts import PromptLibrary
from .llm.rate_limiter import RateLimiter
from .llm.retrying_caller import BackoffPolicy, RetryingCaller
from .llm.transport import RequestsTransport, Transport
from .models.datatypes import TranslationRequest, TranslationResult
from .telemetry.logger import EventLogger


class TranslationClient:
    """Rate-limited, optionally batching translation client."""

    # Empty means every language is supported.
    supported_languages: tuple[str, ...] = ()

    def __init__(
        self,
        config: TranslatorConfig,
        service: OpenAITranslationService,
        *,
        coordinator: BatchCoordinator | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """Initialize the facade from already wired collaborators."""

        self.config = config
        self.service = service
        self.coordinator = coordinator
        self.rate_limiter = rate_limiter
        self._events = EventLogger("translation_client")

    @classmethod
    def from_config(
        cls,
        config: TranslatorConfig,
        *,
        transport: Transport | None = None,
        registry: BatchRegistry | None = None,
        start_sweep: bool = True,
    ) -> TranslationClient:
        """Wire transport, limiter, retrying caller, service, and coordinator."""

        config.validate()
        rate_limiter = RateLimiter(
            config.requests_per_minute,
            acquire_timeout_seconds=config.rate_limit_wait_seconds,
        )
        if start_sweep:
            rate_limiter.start()
        resolved_transport = transport or RequestsTransport(
            connect_timeout_seconds=config.connection_timeout_ms / 1000.0,
            read_timeout_seconds=config.response_timeout_ms / 1000.0,
        )
        caller = RetryingCaller(
            resolved_transport,
            rate_limiter,
            max_attempts=config.max_retry_attempts,
            backoff=BackoffPolicy(
                strategy=config.backoff_strategy,
                initial_seconds=config.initial_backoff_ms / 1000.0,
            ),
        )
        service = OpenAITranslationService(
            caller,
            api_key=config.api_key,
            model=config.model,
            api_endpoint=config.api_endpoint,
            prompts=PromptLibrary(config.prompt, config.batch_prompt),
        )
        coordinator = None
        if config.batching_enabled:
            coordinator = BatchCoordinator(
                service,
                batch_size=config.batch_size,
                wait_timeout_seconds=config.batch_wait_timeout_seconds,
                linger_seconds=config.batch_linger_seconds,
                registry=registry,
            )
        return cls(config, service, coordinator=coordinator, rate_limiter=rate_limiter)

    @property
    def is_enabled(self) -> bool:
        """Return whether an API key is configured and translation is switched on."""

        return self.config.is_enabled

    def is_language_supported(self, tag: str) -> bool:
        """Return whether `tag` can be translated; every tag is accepted."""

        return not self.supported_languages or tag in self.supported_languages

    def translate(self, request: TranslationRequest) -> TranslationResult:
        """Translate one request through the single or batch path."""

        if self.coordinator is None or not request.is_batch:
            self._events.debug(
                "single_path",
                source=request.source_language,
                target=request.target_language,
                text_length=len(request.text),
            )
            translated = self.service.translate(
                request.text, request.source_language, request.target_language
            )
            return TranslationResult.for_request(request, translated)

        translated_or_none = self.coordinator.submit(request)
        return TranslationResult.for_request(request, translated_or_none)

    def close(self) -> None:
        """Stop background work owned by the client."""

        if self.rate_limiter is not None:
            self.rate_limiter.close()

    def __enter__(self) -> TranslationClient:
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()
