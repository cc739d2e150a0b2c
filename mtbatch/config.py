"""Configuration model and loaders for mtbatch.

Responsibilities:
- Define translator configuration as a typed dataclass with provider defaults.
- Validate values before any component is wired.
- Provide loader entry points for YAML- and environment-based configuration.

Key types:
- `TranslatorConfig`: normalized runtime settings for one translation client.
- `ConfigLoader`: static construction helpers for `TranslatorConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigurationError
from .llm.prompts import (
    BATCH_PLACEHOLDERS,
    DEFAULT_BATCH_PROMPT,
    DEFAULT_SINGLE_PROMPT,
    SINGLE_PLACEHOLDERS,
)
from .llm.retrying_caller import BACKOFF_STRATEGIES
from .parsing import parse_positive_int, parse_positive_number, parse_switch, text_or_none

_DEFAULT_MODEL = "gpt-4o-mini"
_DEFAULT_API_ENDPOINT = "https://api.openai.com/v1/chat/completions"

_INT_FIELDS = frozenset(
    {
        "connection_timeout_ms",
        "response_timeout_ms",
        "max_retry_attempts",
        "requests_per_minute",
        "batch_size",
        "initial_backoff_ms",
    }
)
_FLOAT_FIELDS = frozenset(
    {
        "batch_wait_timeout_seconds",
        "rate_limit_wait_seconds",
    }
)
_NON_NEGATIVE_FLOAT_FIELDS = frozenset({"batch_linger_seconds"})
_BOOL_FIELDS = frozenset({"enabled"})


@dataclass(frozen=True, slots=True)
class TranslatorConfig:
    """Runtime configuration for one translation client.

    Attributes:
        api_key: Provider API key; the client is disabled without it.
        model: Chat-completions model identifier.
        api_endpoint: Full chat-completions endpoint URL.
        prompt: Single-text template with `{source}`, `{target}`, `{text}`.
        batch_prompt: Batch template with `{source}`, `{target}`, `{texts}`.
        connection_timeout_ms: HTTP connect timeout.
        response_timeout_ms: HTTP read timeout.
        max_retry_attempts: Attempt cap per logical call.
        requests_per_minute: Rate limiter capacity.
        batch_size: Batch dispatch threshold; `1` or less disables batching.
        batch_wait_timeout_seconds: How long a batch member waits for its result.
        rate_limit_wait_seconds: Bounded wait for a rate limit permit.
        initial_backoff_ms: Delay after the first failed attempt.
        backoff_strategy: `linear` or `exponential`.
        batch_linger_seconds: Idle time after which a waiter flushes its own
            partial batch; `0` flushes on size only.
        enabled: Explicit switch; the client also requires an API key.
    """

    api_key: str | None = None
    model: str = _DEFAULT_MODEL
    api_endpoint: str = _DEFAULT_API_ENDPOINT
    prompt: str = DEFAULT_SINGLE_PROMPT
    batch_prompt: str = DEFAULT_BATCH_PROMPT
    connection_timeout_ms: int = 10000
    response_timeout_ms: int = 30000
    max_retry_attempts: int = 3
    requests_per_minute: int = 30
    batch_size: int = 20
    batch_wait_timeout_seconds: float = 30.0
    rate_limit_wait_seconds: float = 120.0
    initial_backoff_ms: int = 1000
    backoff_strategy: str = "linear"
    batch_linger_seconds: float = 0.0
    enabled: bool = True

    def validate(self) -> None:
        """Validate configuration values before wiring the client."""

        self._require_non_empty(self.model, "model")
        self._require_non_empty(self.api_endpoint, "api_endpoint")
        self._require_placeholders(self.prompt, "prompt", SINGLE_PLACEHOLDERS)
        self._require_placeholders(self.batch_prompt, "batch_prompt", BATCH_PLACEHOLDERS)
        for name in sorted(_INT_FIELDS):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"`{name}` must be a positive integer.")
        for name in sorted(_FLOAT_FIELDS):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"`{name}` must be a positive number.")
        if self.batch_linger_seconds < 0:
            raise ConfigurationError("`batch_linger_seconds` must be a non-negative number.")
        if self.backoff_strategy not in BACKOFF_STRATEGIES:
            supported = ", ".join(sorted(BACKOFF_STRATEGIES))
            raise ConfigurationError(
                f"Unsupported `backoff_strategy` value `{self.backoff_strategy}`; "
                f"supported: {supported}."
            )

    @property
    def is_enabled(self) -> bool:
        """Return whether translation may be attempted with this configuration."""

        return self.enabled and bool(self.api_key)

    @property
    def batching_enabled(self) -> bool:
        """Return whether the batch path is available at all."""

        return self.batch_size > 1

    def with_overrides(self, **overrides: Any) -> TranslatorConfig:
        """Return a validated copy with `None`-valued overrides ignored."""

        effective = {key: value for key, value in overrides.items() if value is not None}
        updated = replace(self, **effective)
        updated.validate()
        return updated

    def as_display_metadata(self) -> dict[str, str]:
        """Return non-secret settings safe to print or log."""

        metadata: dict[str, str] = {}
        for item in fields(self):
            if item.name in {"api_key", "prompt", "batch_prompt"}:
                continue
            value = getattr(self, item.name)
            if isinstance(value, bool):
                metadata[item.name] = "true" if value else "false"
            elif isinstance(value, float):
                metadata[item.name] = f"{value:g}"
            else:
                metadata[item.name] = str(value)
        metadata["api_key"] = "set" if self.api_key else "missing"
        return metadata

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"`{field_name}` must be a non-empty string.")

    @staticmethod
    def _require_placeholders(template: str, field_name: str, placeholders: tuple[str, ...]) -> None:
        """Validate that a prompt template contains every required placeholder."""

        TranslatorConfig._require_non_empty(template, field_name)
        missing = [placeholder for placeholder in placeholders if placeholder not in template]
        if missing:
            raise ConfigurationError(
                f"`{field_name}` is missing placeholders: {', '.join(missing)}."
            )


class ConfigLoader:
    """Factory methods for creating `TranslatorConfig` from external sources."""

    _SUPPORTED_KEYS = frozenset(item.name for item in fields(TranslatorConfig))
    _ENV_PREFIX = "MTBATCH_"
    _API_KEY_ENV = "OPENAI_API_KEY"

    @staticmethod
    def from_yaml(path: Path) -> TranslatorConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(path_text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ConfigurationError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader.from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> TranslatorConfig:
        """Create a validated config from `MTBATCH_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload: dict[str, Any] = {}
        for key in ConfigLoader._SUPPORTED_KEYS:
            env_key = f"{ConfigLoader._ENV_PREFIX}{key.upper()}"
            if env_key in env_map:
                payload[key] = env_map[env_key]
        if "api_key" not in payload and ConfigLoader._API_KEY_ENV in env_map:
            payload["api_key"] = env_map[ConfigLoader._API_KEY_ENV]
        return ConfigLoader.from_mapping(payload, source_label="environment")

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], source_label: str) -> TranslatorConfig:
        """Build a validated config from a raw mapping payload."""

        unknown = sorted(str(key) for key in payload if key not in ConfigLoader._SUPPORTED_KEYS)
        if unknown:
            raise ConfigurationError(
                f"{source_label} contains unsupported keys: {', '.join(unknown)}."
            )

        values: dict[str, Any] = {}
        for key, raw_value in payload.items():
            try:
                parsed = ConfigLoader._parse_field(key, raw_value)
            except ValueError as exc:
                raise ConfigurationError(f"{source_label} field {exc}") from exc
            if parsed is not None:
                values[key] = parsed

        config = TranslatorConfig(**values)
        config.validate()
        return config

    @staticmethod
    def _parse_field(key: str, raw_value: Any) -> Any:
        """Parse one field value into its declared type; blank values mean default."""

        if key in _BOOL_FIELDS:
            return parse_switch(raw_value, key)
        if key in _INT_FIELDS:
            return parse_positive_int(raw_value, key)
        if key in _FLOAT_FIELDS or key in _NON_NEGATIVE_FLOAT_FIELDS:
            return parse_positive_number(
                raw_value, key, allow_zero=key in _NON_NEGATIVE_FLOAT_FIELDS
            )

        if key in {"prompt", "batch_prompt"}:
            # Templates keep their exact whitespace.
            return raw_value if isinstance(raw_value, str) and raw_value.strip() else None

        normalized_text = text_or_none(raw_value)
        if key == "backoff_strategy" and normalized_text is not None:
            return normalized_text.lower()
        return normalized_text
