"""OpenAI chat-completions translation service.

Responsibilities:
- Build single and batch chat-completions payloads from prompt templates.
- Run every call through the retrying caller (and thus the rate limiter).
- Parse completion content into one translation or an ordered list.
"""

from __future__ import annotations

import json
from typing import Any, Sequence

from ..errors import ResponseMalformed
from ..telemetry.logger import EventLogger
from .prompts import PromptLibrary
from .response_parser import ResponseParser
from .retrying_caller import RetryingCaller


class OpenAITranslationService:
    """Translate one text or a list of texts through a chat-completions endpoint."""

    def __init__(
        self,
        caller: RetryingCaller,
        *,
        api_key: str | None,
        model: str,
        api_endpoint: str,
        prompts: PromptLibrary | None = None,
        parser: ResponseParser | None = None,
    ) -> None:
        """Initialize provider settings and collaborators."""

        self.caller = caller
        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.model = model
        self.api_endpoint = api_endpoint
        self.prompts = prompts if prompts is not None else PromptLibrary()
        self.parser = parser if parser is not None else ResponseParser()
        self._events = EventLogger("openai_service")

    def translate(self, text: str, source: str, target: str) -> str:
        """Translate one text and return the completion content verbatim."""

        self._events.debug(
            "single_call",
            source=source,
            target=target,
            text_length=len(text),
        )
        payload = self._completion_payload(self.prompts.single_prompt(text, source, target))
        body = self.caller.call(self.api_endpoint, self._headers(), self._encode(payload))
        return self.parser.parse_single(self.parser.extract_content(body))

    def translate_batch(self, texts: Sequence[str], source: str, target: str) -> list[str | None]:
        """Translate texts in one call and return results in input order.

        Malformed completion content yields `None` for every position instead
        of raising; transport and provider failures still propagate.
        """

        if not texts:
            return []
        if len(texts) == 1:
            try:
                return [self.translate(texts[0], source, target)]
            except ResponseMalformed as exc:
                self._events.error("malformed_batch_response", size=1, reason=type(exc).__name__)
                return [None]

        self._events.debug("batch_call", source=source, target=target, size=len(texts))
        payload = self._completion_payload(self.prompts.batch_prompt(texts, source, target))
        payload["response_format"] = {"type": "json_object"}
        try:
            body = self.caller.call(self.api_endpoint, self._headers(), self._encode(payload))
            content = self.parser.extract_content(body)
        except ResponseMalformed as exc:
            self._events.error("malformed_batch_response", size=len(texts), reason=type(exc).__name__)
            return [None] * len(texts)
        return self.parser.parse_batch(content, len(texts))

    def _completion_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _encode(payload: dict[str, Any]) -> bytes:
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")
