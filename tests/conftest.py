"""Shared pytest fixtures for the full mtbatch test suite."""

from __future__ import annotations

import json
from typing import Callable

import pytest

from tests.doubles import MockRequestsResponse

Responder = Callable[[dict[str, object]], MockRequestsResponse]


@pytest.fixture
def mock_provider(monkeypatch: pytest.MonkeyPatch) -> Callable[[Responder], list[dict[str, object]]]:
    """Patch `requests.post` in the transport with a payload-driven responder.

    Returns a function that installs a responder and returns the list that
    collects every decoded request payload.
    """

    def _install(responder: Responder) -> list[dict[str, object]]:
        """Install `responder` and return the recorded payload list."""

        recorded: list[dict[str, object]] = []

        def _mock_post(_url: str, **kwargs: object) -> MockRequestsResponse:
            """Decode the JSON body, record it, and delegate to the responder."""

            payload = json.loads(bytes(kwargs["data"]).decode("utf-8"))
            recorded.append(payload)
            return responder(payload)

        monkeypatch.setattr("mtbatch.llm.transport.requests.post", _mock_post)
        return recorded

    return _install
