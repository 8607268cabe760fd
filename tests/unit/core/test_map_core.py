# tests/unit/core/test_map_core.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Unit tests for MappingCore and its sorted-key index maintenance."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from collectkit.core.compare import as_sort_key
from collectkit.core.errors import NilFuncError, NotHaveValCompareFuncError
from collectkit.core.map_core import MappingCore
from tests.helpers import int_compare, str_compare


def test_index_is_lazy(abc_map):
    core = MappingCore(abc_map, key_compare=str_compare)
    assert not core.materialized
    assert core.check_index()

    assert core.ensure_sorted_keys() == ["a", "b", "c"]
    assert core.materialized


def test_ensure_sorted_keys_is_idempotent(abc_map):
    core = MappingCore(abc_map, key_compare=str_compare)
    first = core.ensure_sorted_keys()
    assert core.ensure_sorted_keys() is first


def test_without_comparator_keeps_dict_order(abc_map):
    core = MappingCore(abc_map)
    assert core.ensure_sorted_keys() == ["c", "a", "b"]


def test_insert_key_without_index_does_not_build_it(abc_map):
    core = MappingCore(abc_map, key_compare=str_compare)
    core.data["d"] = 4
    core.insert_key("d")
    assert core.sorted_keys is None


def test_insert_key_keeps_sorted_position(abc_map):
    core = MappingCore(dict(abc_map), key_compare=str_compare)
    core.ensure_sorted_keys()
    for key in ["bb", "0", "z"]:
        core.data[key] = 0
        core.insert_key(key)
    assert core.sorted_keys == ["0", "a", "b", "bb", "c", "z"]
    assert core.check_index()


def test_insert_key_without_comparator_appends(abc_map):
    core = MappingCore(dict(abc_map))
    core.ensure_sorted_keys()
    core.data["a0"] = 0
    core.insert_key("a0")
    assert core.sorted_keys == ["c", "a", "b", "a0"]


def test_remove_keys_preserves_survivor_order(abc_map):
    core = MappingCore(abc_map, key_compare=str_compare)
    core.ensure_sorted_keys()
    for key in ("a", "c", "missing"):
        core.data.pop(key, None)
    core.remove_keys("a", "c", "missing")
    assert core.sorted_keys == ["b"]


def test_filter_sorted_keys(abc_map):
    core = MappingCore(abc_map, key_compare=str_compare)
    assert core.filter_sorted_keys({"a": 1}) is None
    core.ensure_sorted_keys()
    assert core.filter_sorted_keys({"c": 3, "a": 1}) == ["a", "c"]


def test_merge_keys_sorted_sides():
    core = MappingCore({"a": 1, "c": 3, "e": 5}, key_compare=str_compare)
    core.ensure_sorted_keys()
    assert core.merge_keys(["b", "c", "d", "f"]) == ["a", "b", "c", "d", "e", "f"]
    # The current index is untouched.
    assert core.sorted_keys == ["a", "c", "e"]


def test_merge_keys_without_comparator_appends_unseen():
    core = MappingCore({"x": 1, "y": 2})
    core.ensure_sorted_keys()
    assert core.merge_keys(["y", "a", "x", "b"]) == ["x", "y", "a", "b"]


def test_merge_keys_distinct_keys_comparing_equal():
    def by_length(a, b):
        return int_compare(len(a), len(b))

    core = MappingCore({"aa": 1, "b": 2}, key_compare=by_length)
    core.ensure_sorted_keys()
    merged = core.merge_keys(["c", "dd"])
    assert sorted(merged) == ["aa", "b", "c", "dd"]
    assert [len(k) for k in merged] == [1, 1, 2, 2]


def test_merge_keys_after_value_ordering_stays_a_permutation():
    core = MappingCore({"a": 3, "b": 2, "c": 1}, key_compare=str_compare, val_compare=int_compare)
    core.sort_by_value()
    assert core.sorted_keys == ["c", "b", "a"]
    merged = core.merge_keys(["a", "b", "d"])
    assert sorted(merged) == ["a", "b", "c", "d"]
    assert len(merged) == 4


def test_sorted_incoming():
    assert MappingCore({}, key_compare=str_compare).sorted_incoming({"b": 1, "a": 2}) == ["a", "b"]
    assert MappingCore({}).sorted_incoming(["b", "a"]) == ["b", "a"]


def test_sort_by_value_requires_comparator(abc_map):
    core = MappingCore(abc_map)
    with pytest.raises(NotHaveValCompareFuncError):
        core.sort_by_value()
    assert core.sorted_keys is None


def test_sort_by_value_func(users):
    core = MappingCore({u.name: u for u in users})
    core.sort_by_value_func(lambda u: u.age, int_compare)
    assert core.sorted_keys == ["bob", "alice", "carol"]

    with pytest.raises(NilFuncError):
        core.sort_by_value_func(None, int_compare)


def test_clone_with_copies_index(abc_map):
    core = MappingCore(abc_map, key_compare=str_compare)
    core.ensure_sorted_keys()
    clone = core.clone_with(dict(abc_map))
    clone.sorted_keys.append("zzz")
    assert core.sorted_keys == ["a", "b", "c"]
    assert clone.key_compare is core.key_compare


keys_strategy = st.lists(st.text(max_size=4), unique=True, max_size=30)


@pytest.mark.property
@given(initial=keys_strategy, added=keys_strategy)
def test_incremental_insert_matches_full_sort(initial, added):
    core = MappingCore({k: None for k in initial}, key_compare=str_compare)
    core.ensure_sorted_keys()
    for key in added:
        if key not in core.data:
            core.data[key] = None
            core.insert_key(key)
    expected = sorted(core.data, key=as_sort_key(str_compare))
    assert core.sorted_keys == expected


@pytest.mark.property
@given(current=keys_strategy, incoming=keys_strategy)
def test_merge_keys_is_sorted_permutation(current, incoming):
    core = MappingCore({k: None for k in current}, key_compare=str_compare)
    core.ensure_sorted_keys()
    merged = core.merge_keys(core.sorted_incoming(incoming))
    assert merged == sorted(set(current) | set(incoming))


@pytest.mark.property
@given(keys=keys_strategy, removed=st.data())
def test_remove_keeps_permutation(keys, removed):
    core = MappingCore({k: None for k in keys}, key_compare=str_compare)
    core.ensure_sorted_keys()
    drop = removed.draw(st.lists(st.sampled_from(keys), unique=True) if keys else st.just([]))
    for key in drop:
        del core.data[key]
    core.remove_keys(*drop)
    assert core.check_index()
    assert core.sorted_keys == sorted(core.data)
