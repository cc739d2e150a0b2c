"""Provider-facing building blocks: transport, retries, rate limiting, and parsing."""

from .openai_service import OpenAITranslationService
from .prompts import PromptLibrary
from .rate_limiter import RateLimiter
from .response_parser import BatchDecoding, BatchDecodingKind, ResponseParser
from .retrying_caller import BackoffPolicy, RetryContext, RetryingCaller
from .transport import RequestsTransport, Transport

__all__ = [
    "BackoffPolicy",
    "BatchDecoding",
    "BatchDecodingKind",
    "OpenAITranslationService",
    "PromptLibrary",
    "RateLimiter",
    "RequestsTransport",
    "ResponseParser",
    "RetryContext",
    "RetryingCaller",
    "Transport",
]
