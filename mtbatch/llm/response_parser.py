"""Decoding of chat-completions payloads into translations.

Responsibilities:
- Extract the first choice's message content from a completion payload.
- Decode batch content in two explicit stages: JSON object with a
  `translations` array, then a bare JSON array of strings.
- Demultiplex decoded translations onto the requested positions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import json
from typing import Any

from ..errors import ResponseMalformed
from ..telemetry.logger import EventLogger

TRANSLATIONS_FIELD = "translations"


class BatchDecodingKind(Enum):
    """Which decoding stage accepted the batch content."""

    OBJECT = "object"
    ARRAY = "array"
    UNPARSABLE = "unparsable"


@dataclass(frozen=True, slots=True)
class BatchDecoding:
    """Result of decoding batch completion content."""

    kind: BatchDecodingKind
    translations: tuple[str | None, ...] = field(default_factory=tuple)


def _element_to_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


class ResponseParser:
    """Parse provider completion payloads for single and batch modes."""

    def __init__(self) -> None:
        self._events = EventLogger("response_parser")

    @staticmethod
    def extract_content(body: bytes) -> str:
        """Return `choices[0].message.content` from a completion payload.

        Raises:
            ResponseMalformed: If the payload is not a completion envelope with content.
        """

        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ResponseMalformed("Provider returned invalid JSON payload.") from exc

        if not isinstance(payload, dict):
            raise ResponseMalformed("Provider response is not a JSON object.")
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            raise ResponseMalformed("Provider response missing non-empty `choices` list.")
        first_choice = choices[0]
        if not isinstance(first_choice, dict):
            raise ResponseMalformed("Provider response `choices[0]` is malformed.")
        message = first_choice.get("message")
        if not isinstance(message, dict):
            raise ResponseMalformed("Provider response missing `choices[0].message` object.")
        content = message.get("content")
        if not isinstance(content, str):
            raise ResponseMalformed("Provider response message content is missing.")
        return content

    @staticmethod
    def parse_single(content: str) -> str:
        """Return single-mode content verbatim, rejecting empty content."""

        if not content.strip():
            raise ResponseMalformed("Provider response message content is empty.")
        return content

    @staticmethod
    def decode_batch(content: str) -> BatchDecoding:
        """Decode batch content as an object first, then as a bare string array."""

        try:
            payload = json.loads(content)
        except json.JSONDecodeError:
            return BatchDecoding(BatchDecodingKind.UNPARSABLE)

        if isinstance(payload, dict):
            translations = payload.get(TRANSLATIONS_FIELD)
            if not isinstance(translations, list):
                return BatchDecoding(BatchDecodingKind.OBJECT)
            return BatchDecoding(
                BatchDecodingKind.OBJECT,
                tuple(_element_to_text(item) for item in translations),
            )

        if isinstance(payload, list) and all(
            item is None or isinstance(item, str) for item in payload
        ):
            return BatchDecoding(BatchDecodingKind.ARRAY, tuple(payload))

        return BatchDecoding(BatchDecodingKind.UNPARSABLE)

    def parse_batch(self, content: str | None, expected: int) -> list[str | None]:
        """Map batch content onto `expected` positions; never raises.

        Missing trailing positions are `None`; extra translations are dropped;
        unparsable or blank content yields `None` for every position.
        """

        if content is None or not content.strip():
            self._events.error("empty_batch_content", expected=expected)
            return [None] * expected

        decoding = self.decode_batch(content)
        if decoding.kind is BatchDecodingKind.UNPARSABLE:
            self._events.error("unparsable_batch_content", expected=expected)
            return [None] * expected

        translations = list(decoding.translations)
        received = len(translations)
        if received < expected:
            self._events.warning(
                "translation_undercount",
                decoded_as=decoding.kind.value,
                expected=expected,
                received=received,
            )
            return translations + [None] * (expected - received)
        if received > expected:
            self._events.warning(
                "translation_overcount",
                decoded_as=decoding.kind.value,
                expected=expected,
                received=received,
            )
            return translations[:expected]
        return translations
