"""Typed models used by mtbatch."""

from .datatypes import (
    BatchKey,
    TranslationRequest,
    TranslationResult,
    TransportResponse,
    TransportStatus,
)

__all__ = [
    "BatchKey",
    "TranslationRequest",
    "TranslationResult",
    "TransportResponse",
    "TransportStatus",
]
