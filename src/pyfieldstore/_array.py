"""Scalar-or-sequence coercion."""

from __future__ import annotations

from typing import Any


def check_array(value: Any) -> bool:
    """Return ``True`` when *value* is a ``list`` or ``tuple``.

    Strings and bytes are sequences to Python but are treated as scalars
    here: ``"name"`` is a single path segment, not four.
    """
    return isinstance(value, (list, tuple))


def to_array(value: Any) -> Any:
    """Coerce *value* into a sequence.

    - ``None`` -> ``[]``
    - ``list``/``tuple`` -> returned as-is
    - anything else -> ``[value]``
    """
    if value is None:
        return []
    return value if check_array(value) else [value]
