"""Path-addressed reads and writes on nested form stores.

A store is a tree of ``dict``/``list`` containers.  These helpers read a
value at a name path, write one (materialising missing branches), merge
patches and clone a subset of a store.

Ownership contract for the mutating helpers (:func:`set_value`,
:func:`set_values`):

* containers that already exist on the path are mutated **in place** and
  the same root object is returned;
* containers missing from the path are freshly allocated;
* merged values are assigned by reference, never copied.

:func:`set_value_copy` and :func:`set_values_copy` offer the same semantics
without touching their input, sharing every subtree they do not rewrite.
"""

from __future__ import annotations

import copy
from collections.abc import Hashable, Iterable, Mapping, MutableMapping, Sequence
from typing import Any

from pyfieldstore.batch import record_mutation
from pyfieldstore.exceptions import InvalidStoreShapeError
from pyfieldstore.kinds import ValueKind, is_falsy, is_index, is_plain_object, strict_equal, value_kind
from pyfieldstore.paths import format_name_path, normalize_path

# ---------------------------------------------------------------------------
# Node access
# ---------------------------------------------------------------------------


def _child(node: Any, segment: Any) -> Any:
    """Return ``node[segment]`` or ``None`` when it cannot be reached."""
    kind = value_kind(node)
    if kind is ValueKind.MAPPING:
        return node.get(segment)
    if kind is ValueKind.SEQUENCE:
        if is_index(segment) and 0 <= segment < len(node):
            return node[segment]
        return None
    return None


def _own_members(node: Any) -> Mapping[Any, Any] | None:
    """Return the shallow key/value view of *node*, or ``None`` for scalars.

    Plain objects expose their instance ``__dict__``; callables and
    primitives have no members to compare.
    """
    kind = value_kind(node)
    if kind is ValueKind.MAPPING:
        return node
    if kind is ValueKind.SEQUENCE:
        return dict(enumerate(node))
    if node is None or callable(node) or isinstance(node, (str, bytes, int, float)):
        return None
    members = getattr(node, "__dict__", None)
    return members if isinstance(members, Mapping) else None


def _pad(items: list[Any], index: int) -> None:
    if index >= len(items):
        items.extend([None] * (index + 1 - len(items)))


def _shape_error(message: str, store: Any, name_path: Sequence[Any]) -> InvalidStoreShapeError:
    return InvalidStoreShapeError(
        f"{message} (remaining path {format_name_path(list(name_path))!r})",
        name_path=list(name_path),
        value_type=type(store),
    )


def _new_container(head: Any, child: Any) -> dict[Any, Any] | list[Any]:
    """Allocate the container *head* needs.

    Non-negative indices get a list; keys and negative indices get a dict,
    so the value stays readable at the same path.
    """
    if is_index(head) and head >= 0:
        items: list[Any] = [None] * head
        items.append(child)
        return items
    return {head: child}


# ---------------------------------------------------------------------------
# Get
# ---------------------------------------------------------------------------


def get_value(store: Any, name_path: Any) -> Any:
    """Read the value at *name_path*.

    The walk stops at the first ``None`` node and returns it.  Missing keys,
    out-of-range indices and segments applied to scalars all resolve to
    ``None``; this function never raises.
    """
    current = store
    for segment in normalize_path(name_path):
        if current is None:
            break
        current = _child(current, segment)
    return current


# ---------------------------------------------------------------------------
# Set
# ---------------------------------------------------------------------------


def _set_value(store: Any, name_path: Sequence[Any], value: Any) -> Any:
    if not name_path:
        return value
    head, tail = name_path[0], name_path[1:]

    kind = value_kind(store)
    if kind is ValueKind.SCALAR:
        # None and scalars occupying a container slot are replaced.
        return _new_container(head, _set_value(None, tail, value))

    if kind is ValueKind.MAPPING:
        if not isinstance(store, MutableMapping):
            raise _shape_error("Cannot write into an immutable mapping", store, name_path)
        store[head] = _set_value(store.get(head), tail, value)
        return store

    if not isinstance(store, list):
        raise _shape_error("Cannot write into an immutable sequence", store, name_path)
    if not is_index(head) or head < 0:
        raise _shape_error(f"Cannot address a list with {head!r}", store, name_path)
    child = _set_value(_child(store, head), tail, value)
    _pad(store, head)
    store[head] = child
    return store


def set_value(store: Any, name_path: Any, value: Any, *, owner: Hashable | None = None) -> Any:
    """Write *value* at *name_path* and return the resulting root.

    An empty path replaces the root: *value* itself is returned.  Existing
    containers are mutated in place; missing ones are created as a ``list``
    when the segment addressing them is an ``int`` and as a ``dict``
    otherwise, so ``set_value(None, ["a", 0], "x") == {"a": ["x"]}``.

    The write is recorded as a single change on the active mutation batch,
    under *owner* (see :mod:`pyfieldstore.batch`).
    """
    path = normalize_path(name_path)
    result = _set_value(store, path, value)
    record_mutation(path, owner=owner)
    return result


def _set_value_copy(store: Any, name_path: Sequence[Any], value: Any) -> Any:
    if not name_path:
        return value
    head, tail = name_path[0], name_path[1:]

    kind = value_kind(store)
    if kind is ValueKind.SCALAR:
        return _new_container(head, _set_value_copy(None, tail, value))

    if kind is ValueKind.MAPPING:
        clone = copy.copy(store) if isinstance(store, MutableMapping) else dict(store)
        clone[head] = _set_value_copy(store.get(head), tail, value)
        return clone

    if not is_index(head) or head < 0:
        raise _shape_error(f"Cannot address a list with {head!r}", store, name_path)
    items = list(store)
    child = _set_value_copy(_child(store, head), tail, value)
    _pad(items, head)
    items[head] = child
    return items if isinstance(store, list) else type(store)(items)


def set_value_copy(store: Any, name_path: Any, value: Any, *, owner: Hashable | None = None) -> Any:
    """Like :func:`set_value` but never mutates *store*.

    Each container on the path is shallow-copied; untouched siblings are
    shared with the input.  Tuples and read-only mappings are accepted.
    """
    path = normalize_path(name_path)
    result = _set_value_copy(store, path, value)
    record_mutation(path, owner=owner)
    return result


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def _check_merge_operands(target: Any, source: Any, prefix: list[Any]) -> bool:
    """Return ``False`` when *source* carries nothing to merge."""
    if is_falsy(source):
        return False
    if not isinstance(source, Mapping):
        raise _shape_error("Patch must be a mapping", source, prefix)
    if not source:
        return False
    if not isinstance(target, Mapping):
        raise _shape_error("Cannot merge a patch into a non-mapping", target, prefix)
    return True


def _merge_into(target: Any, source: Any, prefix: list[Any], owner: Hashable | None) -> Any:
    if not _check_merge_operands(target, source, prefix):
        return target
    if not isinstance(target, MutableMapping):
        raise _shape_error("Cannot merge a patch into an immutable mapping", target, prefix)

    for key in source:
        prev = target.get(key)
        incoming = source[key]
        if is_plain_object(prev) and is_plain_object(incoming):
            target[key] = _merge_into(prev, incoming, [*prefix, key], owner)
        else:
            target[key] = incoming
            record_mutation([*prefix, key], owner=owner)
    return target


def set_values(store: Any, *patches: Any, owner: Hashable | None = None) -> Any:
    """Merge *patches* into *store*, left to right, and return *store*.

    ``({"a": 1, "b": {"c": 2}}, {"a": 4, "b": {"d": 5}}) -> {"a": 4, "b": {"c": 2, "d": 5}}``

    Plain dicts on both sides are merged recursively; everything else,
    lists included, is replaced wholesale.  Falsy patches are skipped.
    Each assigned key is recorded on the active mutation batch under *owner*.
    """
    for patch in patches:
        store = _merge_into(store, patch, [], owner)
    return store


def _merge_copy(target: Any, source: Any, prefix: list[Any], owner: Hashable | None) -> Any:
    if not _check_merge_operands(target, source, prefix):
        return target

    merged = copy.copy(target) if isinstance(target, MutableMapping) else dict(target)
    for key in source:
        prev = merged.get(key)
        incoming = source[key]
        if is_plain_object(prev) and is_plain_object(incoming):
            merged[key] = _merge_copy(prev, incoming, [*prefix, key], owner)
        else:
            merged[key] = incoming
            record_mutation([*prefix, key], owner=owner)
    return merged


def set_values_copy(store: Any, *patches: Any, owner: Hashable | None = None) -> Any:
    """Like :func:`set_values` but returns a new root and leaves *store* intact."""
    for patch in patches:
        store = _merge_copy(store, patch, [], owner)
    return store


# ---------------------------------------------------------------------------
# Clone / compare
# ---------------------------------------------------------------------------


def clone_by_name_path_list(store: Any, name_path_list: Iterable[Any] | None) -> Any:
    """Build a new store holding only the values found at *name_path_list*.

    Values are deep-copied, so writing into the clone never reaches a
    container of *store*.  When a path is listed twice the later read wins.
    """
    new_store: Any = {}
    for name_path in name_path_list or ():
        path = normalize_path(name_path)
        new_store = _set_value(new_store, path, copy.deepcopy(get_value(store, path)))
    return new_store


def is_similar(source: Any, target: Any) -> bool:
    """Shallow comparison that tolerates re-created callables.

    Two containers (or two plain objects, through their ``__dict__``) are
    similar when every key in either of them maps to strictly equal values,
    where any two callables count as equal.  Nested containers must be the
    same object.
    """
    if strict_equal(source, target):
        return True
    if is_falsy(source) != is_falsy(target):
        return False
    source_members = _own_members(source)
    target_members = _own_members(target)
    if source_members is None or target_members is None:
        return False

    keys = dict.fromkeys([*source_members, *target_members])
    for key in keys:
        source_value = source_members.get(key)
        target_value = target_members.get(key)
        if callable(source_value) and callable(target_value):
            continue
        if not strict_equal(source_value, target_value):
            return False
    return True


# ---------------------------------------------------------------------------
# Misc helpers
# ---------------------------------------------------------------------------


def _member(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _has_member(obj: Any, name: str) -> bool:
    if isinstance(obj, Mapping):
        return name in obj
    return hasattr(obj, name)


def default_get_value_from_event(value_prop_name: str, *args: Any) -> Any:
    """Extract a field value from the first argument of a change callback.

    Event-like objects (anything with a ``target`` object that has
    *value_prop_name*) yield ``event.target.<value_prop_name>``; any other
    argument is taken to be the value itself.
    """
    event = args[0] if args else None
    if event is None:
        return event
    target = _member(event, "target")
    if target is None or isinstance(target, (str, bytes, int, float)):
        return event
    if _has_member(target, value_prop_name):
        return _member(target, value_prop_name)
    return event


def move(array: Sequence[Any], move_index: int, to_index: int) -> Any:
    """Return a new list with the item at *move_index* moved to *to_index*.

    Out-of-range indices (negative or past the end) and no-op moves return
    *array* itself.  The input is never modified.
    """
    length = len(array)
    if move_index < 0 or move_index >= length or to_index < 0 or to_index >= length:
        return array
    if move_index == to_index:
        return array
    items = list(array)
    items.insert(to_index, items.pop(move_index))
    return items
