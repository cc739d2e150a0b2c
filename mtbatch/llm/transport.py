"""HTTP transport for provider calls.

Responsibilities:
- Send one JSON POST request and classify the outcome into a `TransportStatus`.
- Extract short, redacted provider messages for diagnostics.

The transport never raises for HTTP or network failures; classification is
returned to the retrying caller, which owns the retry policy.
"""

from __future__ import annotations

import json
import re
import socket
from typing import Mapping, Protocol

import requests

from ..models.datatypes import TransportResponse, TransportStatus

_TOO_MANY_REQUESTS = 429


class Transport(Protocol):
    """Protocol for one provider round trip."""

    def post(self, endpoint: str, headers: Mapping[str, str], body: bytes) -> TransportResponse:
        """Send a request body and return the classified response."""


class RequestsTransport:
    """`requests`-based transport with connect/read timeouts."""

    _MAX_PROVIDER_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        connect_timeout_seconds: float = 10.0,
        read_timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize timeout settings used for every request."""

        self.connect_timeout_seconds = connect_timeout_seconds
        self.read_timeout_seconds = read_timeout_seconds

    def post(self, endpoint: str, headers: Mapping[str, str], body: bytes) -> TransportResponse:
        """POST `body` to `endpoint` and classify the outcome."""

        try:
            response = requests.post(
                endpoint,
                headers=dict(headers),
                data=body,
                timeout=(self.connect_timeout_seconds, self.read_timeout_seconds),
            )
        except (requests.RequestException, TimeoutError, socket.timeout) as exc:
            return TransportResponse(
                status=TransportStatus.NETWORK_ERROR,
                error=exc,
                detail=self._network_detail(exc),
            )

        status_code = int(response.status_code)
        content = bytes(response.content or b"")
        status = self.classify_status(status_code)
        if status is TransportStatus.SUCCESS:
            return TransportResponse(status=status, status_code=status_code, body=content)

        provider_message, provider_code = self._extract_provider_message(
            content.decode("utf-8", errors="replace").strip()
        )
        detail = f"HTTP {status_code}"
        if provider_code:
            detail = f"{detail} ({provider_code})"
        if provider_message:
            detail = f"{detail}: {provider_message}"
        return TransportResponse(
            status=status,
            status_code=status_code,
            body=content,
            detail=detail,
        )

    @staticmethod
    def classify_status(status_code: int) -> TransportStatus:
        """Map an HTTP status code to a transport outcome category."""

        if 200 <= status_code < 300:
            return TransportStatus.SUCCESS
        if status_code == _TOO_MANY_REQUESTS:
            return TransportStatus.QUOTA_EXCEEDED
        if status_code >= 500:
            return TransportStatus.SERVER_ERROR
        return TransportStatus.CLIENT_ERROR

    @classmethod
    def _network_detail(cls, exc: BaseException) -> str:
        """Describe a network-layer failure without leaking credentials."""

        if isinstance(exc, TimeoutError | socket.timeout | requests.Timeout):
            return "request timed out"
        return f"transport error: {cls._short_message(cls._redact_sensitive_tokens(str(exc)))}"

    @classmethod
    def _redact_sensitive_tokens(cls, text: str) -> str:
        """Redact API-key-like tokens from provider error content."""

        redacted = re.sub(r"\bsk-[A-Za-z0-9_-]{8,}\b", "[redacted-key]", text)
        redacted = re.sub(
            r"(?i)bearer\s+[A-Za-z0-9._-]{12,}",
            "Bearer [redacted-token]",
            redacted,
        )
        return redacted

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap provider message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."

    @classmethod
    def _extract_provider_message(cls, body: str) -> tuple[str, str | None]:
        """Extract a concise provider message and optional provider error code."""

        if not body:
            return "", None

        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(cls._redact_sensitive_tokens(body)), None

        provider_code: str | None = None
        message: str | None = None
        if isinstance(payload, dict):
            error_payload = payload.get("error")
            if isinstance(error_payload, dict):
                code_value = error_payload.get("code")
                if isinstance(code_value, str) and code_value.strip():
                    provider_code = code_value.strip()
                message_value = error_payload.get("message")
                if isinstance(message_value, str) and message_value.strip():
                    message = message_value.strip()

        if message is None:
            message = body

        return cls._short_message(cls._redact_sensitive_tokens(message)), provider_code
