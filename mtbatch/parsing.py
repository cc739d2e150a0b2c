"""Typed parsing of raw configuration values.

Responsibilities:
- Turn YAML scalars and environment strings into typed field values.
- Treat blank input as "not provided" so loaders can fall back to defaults.
- Raise `ValueError` with a field-named message for anything unusable.
"""

from __future__ import annotations


_SWITCH_ON = frozenset({"1", "true", "yes", "on"})
_SWITCH_OFF = frozenset({"0", "false", "no", "off"})


def text_or_none(value: object) -> str | None:
    """Return `value` as stripped text, or `None` when it is missing or blank."""

    if value is None:
        return None
    return str(value).strip() or None


def parse_switch(value: object, field_name: str) -> bool | None:
    """Parse an on/off flag such as `true`, `no`, or `1`.

    Returns `None` for blank input.
    """

    if isinstance(value, bool):
        return value
    token = text_or_none(value)
    if token is None:
        return None
    token = token.lower()
    if token in _SWITCH_ON:
        return True
    if token in _SWITCH_OFF:
        return False
    raise ValueError(
        f"`{field_name}` must be a boolean value (`true`/`false`, `1`/`0`, `yes`/`no`)."
    )


def parse_positive_int(value: object, field_name: str) -> int | None:
    """Parse a strictly positive integer; returns `None` for blank input."""

    message = f"`{field_name}` must be a positive integer."
    if isinstance(value, bool):
        raise ValueError(message)
    if isinstance(value, int):
        parsed = value
    else:
        token = text_or_none(value)
        if token is None:
            return None
        try:
            parsed = int(token)
        except ValueError as exc:
            raise ValueError(message) from exc
    if parsed <= 0:
        raise ValueError(message)
    return parsed


def parse_positive_number(
    value: object, field_name: str, *, allow_zero: bool = False
) -> float | None:
    """Parse a positive (or, with `allow_zero`, non-negative) number.

    Args:
        value: Raw numeric or textual value.
        field_name: Field name used in the error message.
        allow_zero: Accept `0` as a valid value.

    Returns:
        Parsed float, or `None` for blank input.

    Raises:
        ValueError: If the value is not numeric or out of range.
    """

    message = f"`{field_name}` must be a {'non-negative' if allow_zero else 'positive'} number."
    if isinstance(value, bool):
        raise ValueError(message)
    if isinstance(value, int | float):
        parsed = float(value)
    else:
        token = text_or_none(value)
        if token is None:
            return None
        try:
            parsed = float(token)
        except ValueError as exc:
            raise ValueError(message) from exc
    if parsed < 0 or (parsed == 0 and not allow_zero):
        raise ValueError(message)
    return parsed
