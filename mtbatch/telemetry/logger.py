"""Structured event logging utilities.

Responsibilities:
- Emit concise, deterministic component-level log lines through `loguru`.
- Keep source texts and credentials out of log output.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


def _stderr_sink(message: str) -> None:
    """Write to whatever `sys.stderr` is at emit time."""

    sys.stderr.write(message)


def configure_logging(sink: TextIO | None = None, level: str = "INFO") -> None:
    """Route loguru output to one sink with plain message formatting."""

    _loguru_logger.remove()
    _loguru_logger.add(
        sink if sink is not None else _stderr_sink,
        format="{message}",
        level=level,
        colorize=False,
    )


class EventLogger:
    """Emit deterministic component events for translation activity."""

    def __init__(self, component: str) -> None:
        """Bind the logger to one component name."""

        self.component = component

    def _emit(self, level: str, event: str, **context: object) -> None:
        """Emit one structured log line."""

        line = f"[mt] level={level} component={self.component} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def debug(self, event: str, **context: object) -> None:
        self._emit("DEBUG", event, **context)

    def info(self, event: str, **context: object) -> None:
        self._emit("INFO", event, **context)

    def warning(self, event: str, **context: object) -> None:
        self._emit("WARNING", event, **context)

    def error(self, event: str, **context: object) -> None:
        self._emit("ERROR", event, **context)
