"""Top-level package for mtbatch.

This package provides a rate-limited, retrying translation client for
chat-completions LLM endpoints, with optional batching of concurrent
requests per language pair. The main entry point is `TranslationClient`.
"""

from .client import TranslationClient
from .config import ConfigLoader, TranslatorConfig
from .models.datatypes import TranslationRequest, TranslationResult

__all__ = [
    "ConfigLoader",
    "TranslationClient",
    "TranslationRequest",
    "TranslationResult",
    "TranslatorConfig",
    "__version__",
]

__version__ = "0.1.0"
