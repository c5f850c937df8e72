"""Value kinds and comparison primitives.

Every path operation dispatches on the *kind* of the node it is looking at
rather than probing types ad hoc:

* :attr:`ValueKind.MAPPING` – any :class:`collections.abc.Mapping`
* :attr:`ValueKind.SEQUENCE` – ``list`` and ``tuple`` (never ``str``/``bytes``)
* :attr:`ValueKind.SCALAR` – everything else, including ``None``

Equality of path segments and shallow values uses :func:`strict_equal`,
which refuses the implicit coercion Python's ``==`` performs between
``bool`` and ``int``: ``True`` and ``1`` are different path segments.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pyfieldstore._array import check_array


class ValueKind(StrEnum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def value_kind(value: Any) -> ValueKind:
    """Classify *value* as a mapping, a sequence or a scalar."""
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if check_array(value):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR


def is_plain_object(value: Any) -> bool:
    """Return ``True`` only for plain ``dict`` instances.

    Subclasses (``OrderedDict``, ``defaultdict``, custom mappings) carry
    behaviour of their own and are assigned, never merged into.
    """
    return type(value) is dict


def is_index(segment: Any) -> bool:
    """Return ``True`` when *segment* addresses a sequence position."""
    return isinstance(segment, int) and not isinstance(segment, bool)


def strict_equal(left: Any, right: Any) -> bool:
    """Identity-or-same-typed-value equality.

    Containers and other objects compare by identity.  Strings, bytes and
    numbers compare by value, but ``True`` never equals ``1`` and ``"0"``
    never equals ``0``.
    """
    if left is right:
        return True
    if isinstance(left, bool) or isinstance(right, bool):
        return False
    if isinstance(left, (str, bytes)) or isinstance(right, (str, bytes)):
        return type(left) is type(right) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return False


def is_falsy(value: Any) -> bool:
    """Object-style truthiness: containers are always truthy.

    ``None``, ``False``, zero and empty strings are falsy; an empty ``dict``
    or ``list`` is still an object and therefore truthy.
    """
    if value_kind(value) is not ValueKind.SCALAR:
        return False
    try:
        return not value
    except (TypeError, ValueError):
        # Objects whose __bool__ refuses to answer (e.g. numpy arrays).
        return False
