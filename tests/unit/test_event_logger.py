"""Unit tests for deterministic structured event logging."""

from __future__ import annotations

import io

from mtbatch.telemetry.logger import EventLogger, configure_logging


def test_event_logger_emits_sorted_sanitized_context() -> None:
    """Log lines should carry component, event, and sorted shell-safe context."""

    sink = io.StringIO()
    configure_logging(sink, level="DEBUG")
    try:
        EventLogger("batch_coordinator").warning(
            "batch_wait_timeout", timeout_seconds=30, detail='no "result"', note=""
        )
    finally:
        configure_logging(level="WARNING")

    assert sink.getvalue() == (
        "[mt] level=WARNING component=batch_coordinator event=batch_wait_timeout "
        "detail=no__result_ note=none timeout_seconds=30\n"
    )


def test_event_logger_respects_configured_level() -> None:
    """Events below the configured level should be dropped."""

    sink = io.StringIO()
    configure_logging(sink, level="WARNING")
    try:
        EventLogger("retrying_caller").debug("call_succeeded", attempt=1)
        EventLogger("retrying_caller").error("attempts_exhausted", attempts=3)
    finally:
        configure_logging(level="WARNING")

    assert sink.getvalue() == (
        "[mt] level=ERROR component=retrying_caller event=attempts_exhausted attempts=3\n"
    )
