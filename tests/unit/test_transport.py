"""Unit tests for HTTP outcome classification in the requests transport."""

from __future__ import annotations

import pytest
import requests

from mtbatch.llm.transport import RequestsTransport
from mtbatch.models.datatypes import TransportStatus
from tests.doubles import MockRequestsResponse


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [
        (200, TransportStatus.SUCCESS),
        (201, TransportStatus.SUCCESS),
        (400, TransportStatus.CLIENT_ERROR),
        (401, TransportStatus.CLIENT_ERROR),
        (404, TransportStatus.CLIENT_ERROR),
        (429, TransportStatus.QUOTA_EXCEEDED),
        (500, TransportStatus.SERVER_ERROR),
        (503, TransportStatus.SERVER_ERROR),
        (302, TransportStatus.CLIENT_ERROR),
    ],
)
def test_transport_classifies_http_status(
    monkeypatch: pytest.MonkeyPatch, status_code: int, expected: TransportStatus
) -> None:
    """HTTP status codes should map onto transport outcome categories."""

    def _mock_post(_url: str, **_kwargs: object) -> MockRequestsResponse:
        """Return a response with the parametrized status code."""

        return MockRequestsResponse(payload=b"{}", status_code=status_code)

    monkeypatch.setattr("mtbatch.llm.transport.requests.post", _mock_post)

    response = RequestsTransport().post("https://llm.example", {}, b"{}")

    assert response.status is expected
    assert response.status_code == status_code


def test_transport_sends_body_headers_and_timeouts(monkeypatch: pytest.MonkeyPatch) -> None:
    """The transport should forward the raw body, headers, and connect/read timeouts."""

    captured: dict[str, object] = {}

    def _mock_post(url: str, **kwargs: object) -> MockRequestsResponse:
        """Capture request arguments."""

        captured["url"] = url
        captured.update(kwargs)
        return MockRequestsResponse(payload=b'{"ok": true}')

    monkeypatch.setattr("mtbatch.llm.transport.requests.post", _mock_post)

    transport = RequestsTransport(connect_timeout_seconds=2.0, read_timeout_seconds=7.5)
    response = transport.post(
        "https://llm.example/v1/chat/completions",
        {"Authorization": "Bearer key"},
        b'{"model": "m"}',
    )

    assert response.body == b'{"ok": true}'
    assert captured["url"] == "https://llm.example/v1/chat/completions"
    assert captured["data"] == b'{"model": "m"}'
    assert captured["headers"] == {"Authorization": "Bearer key"}
    assert captured["timeout"] == (2.0, 7.5)


def test_transport_extracts_redacted_provider_message(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provider error bodies should be summarised with credentials redacted."""

    def _mock_post(_url: str, **_kwargs: object) -> MockRequestsResponse:
        """Return an authentication failure that echoes the API key."""

        return MockRequestsResponse(
            status_code=401,
            payload=(
                b'{"error": {"message": "Incorrect API key provided: sk-abcdefghijklmnop",'
                b' "code": "invalid_api_key"}}'
            ),
        )

    monkeypatch.setattr("mtbatch.llm.transport.requests.post", _mock_post)

    response = RequestsTransport().post("https://llm.example", {}, b"{}")

    assert response.status is TransportStatus.CLIENT_ERROR
    assert response.detail.startswith("HTTP 401 (invalid_api_key): Incorrect API key provided")
    assert "sk-abcdefghijklmnop" not in response.detail
    assert "[redacted-key]" in response.detail


@pytest.mark.parametrize(
    ("raised", "detail"),
    [
        (requests.Timeout("read timed out"), "request timed out"),
        (requests.ConnectionError("Name or service not known"), "transport error: Name or service not known"),
    ],
)
def test_transport_reports_network_failures_with_cause(
    monkeypatch: pytest.MonkeyPatch, raised: Exception, detail: str
) -> None:
    """Network-layer exceptions should be returned as network errors, not raised."""

    def _mock_post(_url: str, **_kwargs: object) -> MockRequestsResponse:
        """Raise the parametrized transport exception."""

        raise raised

    monkeypatch.setattr("mtbatch.llm.transport.requests.post", _mock_post)

    response = RequestsTransport().post("https://llm.example", {}, b"{}")

    assert response.status is TransportStatus.NETWORK_ERROR
    assert response.status_code is None
    assert response.error is raised
    assert response.detail == detail
