from __future__ import annotations

from types import MappingProxyType, SimpleNamespace

import pytest

from pyfieldstore.exceptions import InvalidStoreShapeError
from pyfieldstore.values import (
    clone_by_name_path_list,
    default_get_value_from_event,
    get_value,
    is_similar,
    move,
    set_value,
    set_value_copy,
    set_values,
    set_values_copy,
)


def test_get_value_walks_mappings_and_lists() -> None:
    store = {"users": [{"name": "Ada"}, {"name": "Grace"}]}
    assert get_value(store, ["users", 1, "name"]) == "Grace"
    assert get_value(store, "users") is store["users"]
    assert get_value(store, None) is store
    assert get_value(store, []) is store


def test_get_value_short_circuits_on_none() -> None:
    assert get_value(None, ["a", "b", 0]) is None
    assert get_value({"a": None}, ["a", "b", "c"]) is None
    assert get_value({"a": {}}, ["a", "missing", "deeper"]) is None


def test_get_value_unreachable_segments_resolve_to_none() -> None:
    store = {"items": [1, 2], "count": 3}
    assert get_value(store, ["items", 5]) is None
    assert get_value(store, ["items", -1]) is None
    assert get_value(store, ["items", "0"]) is None
    assert get_value(store, ["count", "x"]) is None


def test_set_value_round_trip_from_none() -> None:
    value = object()
    store = set_value(None, ["a", "b", 2, "c"], value)
    assert get_value(store, ["a", "b", 2, "c"]) is value
    assert store == {"a": {"b": [None, None, {"c": value}]}}


def test_set_value_numeric_segment_creates_list() -> None:
    assert set_value(None, ["a", 0], "x") == {"a": ["x"]}
    assert set_value(None, [0], "x") == ["x"]


def test_set_value_negative_segment_creates_mapping() -> None:
    value = object()
    store = set_value(None, ["a", -1], value)
    assert store == {"a": {-1: value}}
    assert get_value(store, ["a", -1]) is value
    assert set_value_copy(None, [-2], "x") == {-2: "x"}


def test_set_value_empty_path_replaces_root() -> None:
    value = {"fresh": True}
    assert set_value({"old": 1}, [], value) is value
    assert set_value(None, None, value) is value


def test_set_value_mutates_existing_containers_in_place() -> None:
    inner = {"c": 1}
    store = {"a": {"b": inner}}
    result = set_value(store, ["a", "b", "d"], 2)
    assert result is store
    assert inner == {"c": 1, "d": 2}


def test_set_value_allocates_missing_branches() -> None:
    store: dict = {}
    result = set_value(store, ["profile", "tags", 1], "python")
    assert result is store
    assert store == {"profile": {"tags": [None, "python"]}}


def test_set_value_replaces_scalar_in_container_slot() -> None:
    store = {"a": 5}
    set_value(store, ["a", "b"], 1)
    assert store == {"a": {"b": 1}}
    assert set_value("scalar", ["k"], 1) == {"k": 1}


def test_set_value_pads_existing_list() -> None:
    store = {"items": ["a"]}
    set_value(store, ["items", 3], "d")
    assert store == {"items": ["a", None, None, "d"]}


def test_set_value_dotted_key_is_literal() -> None:
    store: dict = {}
    set_value(store, "a.b", 1)
    assert store == {"a.b": 1}
    assert get_value(store, "a.b") == 1


def test_set_value_rejects_unroutable_shapes() -> None:
    with pytest.raises(InvalidStoreShapeError):
        set_value({"items": []}, ["items", "name"], 1)
    with pytest.raises(InvalidStoreShapeError):
        set_value({"items": (1, 2)}, ["items", 0], 1)
    with pytest.raises(InvalidStoreShapeError) as exc_info:
        set_value(MappingProxyType({"a": 1}), ["a"], 2)
    assert exc_info.value.name_path == ["a"]
    assert exc_info.value.value_type is MappingProxyType


def test_set_value_failure_leaves_store_untouched() -> None:
    store = {"a": {"items": []}}
    with pytest.raises(InvalidStoreShapeError):
        set_value(store, ["a", "items", "x", "y"], 1)
    assert store == {"a": {"items": []}}


def test_set_value_copy_shares_untouched_subtrees() -> None:
    untouched = {"keep": True}
    store = {"a": {"b": 1}, "other": untouched}
    result = set_value_copy(store, ["a", "c"], 2)

    assert store == {"a": {"b": 1}, "other": untouched}
    assert result == {"a": {"b": 1, "c": 2}, "other": {"keep": True}}
    assert result is not store
    assert result["other"] is untouched


def test_set_value_copy_accepts_immutable_containers() -> None:
    result = set_value_copy(MappingProxyType({"items": (1, 2)}), ["items", 1], 9)
    assert result == {"items": (1, 9)}


def test_set_values_merges_nested_and_overwrites_scalars() -> None:
    store = {"a": 1, "b": {"c": 2}}
    result = set_values(store, {"a": 4, "b": {"d": 5}})
    assert result is store
    assert store == {"a": 4, "b": {"c": 2, "d": 5}}


def test_set_values_replaces_lists_wholesale() -> None:
    assert set_values({"a": [1, 2, 3]}, {"a": [9]}) == {"a": [9]}


def test_set_values_applies_patches_in_order() -> None:
    store = set_values({"a": 1}, {"a": 2, "b": 1}, None, {"a": 3})
    assert store == {"a": 3, "b": 1}


def test_set_values_without_patches_is_noop() -> None:
    store = {"a": 1}
    assert set_values(store) is store
    assert set_values(store, None, {}) == {"a": 1}


def test_set_values_assigns_non_plain_objects() -> None:
    class Custom(dict):
        pass

    patch_value = Custom(x=1)
    store = {"a": {"y": 2}}
    set_values(store, {"a": patch_value})
    assert store["a"] is patch_value


def test_set_values_rejects_non_mapping_operands() -> None:
    with pytest.raises(InvalidStoreShapeError):
        set_values({"a": 1}, [1, 2])
    with pytest.raises(InvalidStoreShapeError):
        set_values(None, {"a": 1})


def test_set_values_copy_leaves_input_intact() -> None:
    store = {"a": 1, "b": {"c": 2}, "d": {"e": 3}}
    result = set_values_copy(store, {"a": 4, "b": {"d": 5}})
    assert store == {"a": 1, "b": {"c": 2}, "d": {"e": 3}}
    assert result == {"a": 4, "b": {"c": 2, "d": 5}, "d": {"e": 3}}
    assert result["d"] is store["d"]


def test_clone_by_name_path_list_keeps_only_listed_paths() -> None:
    store = {"a": 1, "b": {"c": 2, "d": 3}}
    assert clone_by_name_path_list(store, [["b", "c"]]) == {"b": {"c": 2}}


def test_clone_by_name_path_list_is_independent_of_source() -> None:
    store = {"b": {"c": [1, 2]}}
    clone = clone_by_name_path_list(store, [["b"], "b"])
    set_value(clone, ["b", "c", 0], 99)
    assert store == {"b": {"c": [1, 2]}}
    assert clone == {"b": {"c": [99, 2]}}


def test_clone_by_name_path_list_missing_values_become_none() -> None:
    assert clone_by_name_path_list({}, [["x", "y"]]) == {"x": {"y": None}}
    assert clone_by_name_path_list({"a": 1}, []) == {}


def test_is_similar() -> None:
    def fn1() -> None: ...

    def fn2() -> None: ...

    nested = {"n": 1}
    assert is_similar({"f": fn1}, {"f": fn2})
    assert not is_similar({"x": 1}, {"x": 2})
    assert is_similar({"x": nested}, {"x": nested})
    assert not is_similar({"x": {"n": 1}}, {"x": {"n": 1}})
    assert not is_similar({"x": 1}, {"x": 1, "y": 2})
    assert is_similar({}, {})
    assert is_similar(1, 1)
    assert not is_similar(None, {})
    assert not is_similar("a", "b")
    assert is_similar([1, 2], [1, 2])


def test_is_similar_compares_plain_object_attributes() -> None:
    def fn1() -> None: ...

    def fn2() -> None: ...

    assert is_similar(SimpleNamespace(a=1, f=fn1), SimpleNamespace(a=1, f=fn2))
    assert not is_similar(SimpleNamespace(a=1), SimpleNamespace(a=2))
    assert not is_similar(SimpleNamespace(a=1), SimpleNamespace(a=1, b=2))


def test_default_get_value_from_event() -> None:
    event = SimpleNamespace(target=SimpleNamespace(value="typed", checked=True))
    assert default_get_value_from_event("value", event) == "typed"
    assert default_get_value_from_event("checked", event, "extra") is True
    assert default_get_value_from_event("value", {"target": {"value": 3}}) == 3


def test_default_get_value_from_event_passes_plain_values_through() -> None:
    assert default_get_value_from_event("value", "typed") == "typed"
    assert default_get_value_from_event("value", {"value": 1}) == {"value": 1}
    no_member = SimpleNamespace(target=SimpleNamespace())
    assert default_get_value_from_event("value", no_member) is no_member
    assert default_get_value_from_event("value") is None


def test_move() -> None:
    items = [1, 2, 3, 4]
    assert move(items, 1, 3) == [1, 3, 4, 2]
    assert move(items, 3, 0) == [4, 1, 2, 3]
    assert items == [1, 2, 3, 4]


def test_move_noop_returns_same_array() -> None:
    items = [1, 2, 3]
    assert move(items, -1, 0) is items
    assert move(items, 0, 3) is items
    assert move(items, 2, 2) is items
