"""Core datatypes shared across mtbatch modules.

Responsibilities:
- Represent immutable values exchanged between the facade, batching, and transport.
- Provide a collision-free grouping key for language pairs.

Key types:
- `TranslationRequest`, `BatchKey`, `TranslationResult`, `TransportStatus`,
  and `TransportResponse`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import json

QUALITY_PER_CHARACTER = 100


@dataclass(frozen=True, slots=True)
class BatchKey:
    """Language pair that groups requests sharing one upstream call.

    Attributes:
        source_language: Source language tag.
        target_language: Target language tag.
    """

    source_language: str
    target_language: str

    def to_string(self) -> str:
        """Return a lossless string form, safe for tags containing any separator."""

        return json.dumps([self.source_language, self.target_language], ensure_ascii=False)

    @classmethod
    def from_string(cls, value: str) -> BatchKey:
        """Rebuild a key from `to_string()` output."""

        try:
            parts = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid batch key `{value}`.") from exc
        if (
            not isinstance(parts, list)
            or len(parts) != 2
            or not all(isinstance(part, str) for part in parts)
        ):
            raise ValueError(f"Invalid batch key `{value}`.")
        return cls(source_language=parts[0], target_language=parts[1])


@dataclass(frozen=True, slots=True)
class TranslationRequest:
    """One caller's translation request.

    Attributes:
        text: Source text.
        source_language: Source language tag.
        target_language: Target language tag.
        is_batch: Whether the caller opts into batching.
    """

    text: str
    source_language: str
    target_language: str
    is_batch: bool = False

    @property
    def batch_key(self) -> BatchKey:
        """Return the language-pair key used for batching."""

        return BatchKey(self.source_language, self.target_language)


@dataclass(frozen=True, slots=True)
class TranslationResult:
    """Translated text with its size-derived quality score.

    Attributes:
        translated_text: Translation, or `None` when the provider returned nothing usable.
        quality: Score proportional to the source text length.
    """

    translated_text: str | None
    quality: int

    @classmethod
    def for_request(cls, request: TranslationRequest, translated_text: str | None) -> TranslationResult:
        """Build a result scored from the request source text length."""

        return cls(
            translated_text=translated_text,
            quality=QUALITY_PER_CHARACTER * len(request.text),
        )


class TransportStatus(Enum):
    """Outcome category of one HTTP round trip."""

    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    QUOTA_EXCEEDED = "quota_exceeded"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Classified result of one transport `post`.

    Attributes:
        status: Outcome category.
        status_code: HTTP status code, or `None` for network failures.
        body: Raw response body (empty on network failures).
        error: Underlying transport exception for network failures.
        detail: Concise, redacted provider message for diagnostics.
    """

    status: TransportStatus
    status_code: int | None = None
    body: bytes = b""
    error: BaseException | None = None
    detail: str = ""
