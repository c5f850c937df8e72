"""Name path helpers.

A name path is a ``list`` (or ``tuple``) of segments, each either a ``str``
key or an ``int`` index::

    "email"            -> ["email"]
    ["users", 0, "id"] -> ["users", 0, "id"]

Paths may also be written as text for logs and configuration, using dot
notation for keys and ``[idx]`` for indices (``users[0].id``).
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator, Sequence
from typing import Any, TypeAlias

from pyfieldstore._array import to_array
from pyfieldstore.exceptions import InvalidStoreShapeError
from pyfieldstore.kinds import is_index, is_plain_object, strict_equal

NamePathSegment: TypeAlias = str | int
NamePath: TypeAlias = list[NamePathSegment] | tuple[NamePathSegment, ...]

_KEY_RE = re.compile(r"[^.\[\]\"]+")
_BRACKET_RE = re.compile(r"\[(?:(-?\d+)|(\"(?:[^\"\\]|\\.)*\"))\]")


def normalize_path(path: Any) -> Any:
    """Convert a name to its internal list form.

    ``None`` means "no path" and yields ``[]``; a bare key or index is
    wrapped; sequences are returned unchanged.  Dotted strings are *not*
    split, ``"a.b"`` is a single literal key (see :func:`parse_name_path`).
    """
    return to_array(path)


get_name_path = normalize_path


def match_name_path(name_path: Sequence[Any] | None, other: Sequence[Any] | None) -> bool:
    """Return ``True`` when both paths have identical segments in order."""
    if name_path is None or other is None or len(name_path) != len(other):
        return False
    return all(strict_equal(unit, other[i]) for i, unit in enumerate(name_path))


def contains_name_path(name_path_list: Sequence[Sequence[Any]] | None, name_path: Sequence[Any] | None) -> bool:
    """Return ``True`` when *name_path_list* holds a path matching *name_path*."""
    if not name_path_list:
        return False
    return any(match_name_path(path, name_path) for path in name_path_list)


def is_parent_name_path(parent: Sequence[Any] | None, name_path: Sequence[Any] | None) -> bool:
    """Return ``True`` when *parent* equals *name_path* or is a prefix of it."""
    if parent is None or name_path is None or len(parent) > len(name_path):
        return False
    return match_name_path(parent, name_path[: len(parent)])


def _needs_quoting(key: str) -> bool:
    return _KEY_RE.fullmatch(key) is None or key != key.strip()


def format_name_path(name_path: Any) -> str:
    """Render a path as ``a[0].b`` text.

    Keys that are empty, padded with spaces or contain ``.``, ``[``, ``]``
    or ``"`` are written as quoted brackets (``["a.b"]``) so
    :func:`parse_name_path` reads them back unchanged.
    """
    out = ""
    for segment in normalize_path(name_path):
        if is_index(segment):
            out += f"[{segment}]"
        elif isinstance(segment, str) and _needs_quoting(segment):
            out += f"[{json.dumps(segment)}]"
        else:
            out = f"{out}.{segment}" if out else str(segment)
    return out


def parse_name_path(text: str) -> list[NamePathSegment]:
    """Parse ``a[0].b`` text back into ``["a", 0, "b"]``.

    Grammar: a key or bracket first, then any number of ``.key``,
    ``[index]`` or ``["quoted key"]`` parts.  Anything else raises
    :class:`InvalidStoreShapeError`.
    """
    segments: list[NamePathSegment] = []
    pos = 0
    text = text.strip()
    while pos < len(text):
        if text[pos] == "[":
            match = _BRACKET_RE.match(text, pos)
            if match is None:
                raise InvalidStoreShapeError(f"Malformed name path {text!r} at offset {pos}", name_path=text)
            index, quoted = match.groups()
            segments.append(int(index) if index is not None else json.loads(quoted))
        else:
            if segments:
                if text[pos] != ".":
                    raise InvalidStoreShapeError(
                        f"Expected '.' in name path {text!r} at offset {pos}",
                        name_path=text,
                    )
                pos += 1
            match = _KEY_RE.match(text, pos)
            if match is None:
                raise InvalidStoreShapeError(f"Malformed name path {text!r} at offset {pos}", name_path=text)
            segments.append(match.group())
        pos = match.end()
    return segments


def iter_name_paths(store: Any, *, prefix: Sequence[Any] = ()) -> Iterator[list[NamePathSegment]]:
    """Yield the path of every leaf below *store*.

    Non-empty plain dicts are descended into; every other value, lists
    included, is a leaf.  An empty dict is reported as a leaf of its own so
    that "set this branch to ``{}``" is still visible as a change.
    """
    if is_plain_object(store) and store:
        for key, value in store.items():
            yield from iter_name_paths(value, prefix=[*prefix, key])
        return
    if prefix:
        yield list(prefix)
