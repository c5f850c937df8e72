"""Helpers for safe debug logging.

Form stores routinely hold passwords, one-time codes and payment details.
This module redacts sensitive fields before store values reach DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passwordconfirm",
        "confirmpassword",
        "passcode",
        "pin",
        "otp",
        "token",
        "accesstoken",
        "refreshtoken",
        "secret",
        "apikey",
        "authorization",
        "cookie",
        # Payment fields
        "cardnumber",
        "cvc",
        "cvv",
        "iban",
    }
)


def _normalize_key(key: Any) -> str:
    return str(key).lower().replace("_", "").replace("-", "")


def is_sensitive_key(key: Any) -> bool:
    return _normalize_key(key) in _SENSITIVE_VALUE_KEYS


def is_sensitive_name_path(name_path: Sequence[Any]) -> bool:
    """Return True when any key on *name_path* names a sensitive field."""
    return any(isinstance(segment, str) and is_sensitive_key(segment) for segment in name_path)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if is_sensitive_key(key):
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    if callable(value):
        return f"<callable:{getattr(value, '__name__', type(value).__name__)}>"

    # Fallback: represent unknown objects without dumping internals.
    return repr(value)


def redact_path_value(name_path: Sequence[Any], value: Any, *, max_string: int = 512) -> Any:
    """Redact *value* written at *name_path*, masking it entirely for sensitive paths."""
    if is_sensitive_name_path(name_path):
        return "<redacted>"
    return redact_for_log(value, max_string=max_string)
