# tests/unit/core/test_seq_collection.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Unit tests for SeqCollection."""

import io
import random

import pytest

from collectkit.core.errors import (
    ElementNoComputableError,
    InvalidArgumentError,
    InvalidTypeError,
    KeyUnComparableError,
    NilFuncError,
    NoComparableError,
    NoComputableError,
    NotFoundError,
)
from collectkit.core.seq_collection import SeqCollection
from tests.helpers import User, str_compare


@pytest.fixture
def numbers():
    return SeqCollection([3, 1, 2, 3])


def test_basic_accessors(numbers):
    assert numbers.count() == 4
    assert numbers.first() == 3
    assert numbers.last() == 3
    assert numbers.index(1) == 1
    assert numbers.index(10) is None
    assert SeqCollection().first() is None
    assert SeqCollection().is_empty()


def test_values_are_copied():
    source = [1, 2]
    coll = SeqCollection(source)
    coll.append(3)
    assert source == [1, 2]
    assert coll.values() == [1, 2, 3]


def test_append_prepend_insert(numbers):
    assert numbers.push(4) is numbers
    assert numbers.values() == [3, 1, 2, 3, 4]
    assert numbers.prepend(0).values() == [0, 3, 1, 2, 3, 4]
    assert numbers.insert(1, 9).values() == [3, 9, 1, 2, 3, 4]
    assert numbers.insert(5, 9).last() == 9
    with pytest.raises(InvalidArgumentError):
        numbers.insert(7, 9)


def test_remove_pop_set_index(numbers):
    numbers.remove(0).set_index(0, 10).set_index(99, 0)
    assert numbers.values() == [10, 2, 3]
    assert numbers.pop() == 3
    with pytest.raises(InvalidArgumentError):
        numbers.remove(5)
    assert SeqCollection().pop() is None


def test_search(numbers):
    assert numbers.search(3) == 0
    assert numbers.search(2) == 2
    with pytest.raises(NotFoundError):
        numbers.search(42)
    with pytest.raises(NoComparableError):
        SeqCollection(["a"]).search("a")
    assert SeqCollection(["b", "a"], str_compare).search("a") == 1


def test_slice_and_paging():
    coll = SeqCollection(list(range(10)))
    assert coll.slice(2, 5).values() == [2, 3, 4]
    assert coll.slice(8).values() == [8, 9]
    for start, end in [(-1, 3), (10, None), (5, 11), (6, 5)]:
        with pytest.raises(InvalidArgumentError):
            coll.slice(start, end)

    assert coll.for_page(2, 3).values() == [3, 4, 5]
    assert coll.for_page(5, 3).values() == []
    with pytest.raises(InvalidArgumentError):
        coll.for_page(0, 3)

    assert coll.nth(4).values() == [0, 4, 8]
    assert coll.nth(4, 1).values() == [1, 5, 9]
    with pytest.raises(InvalidArgumentError):
        coll.nth(0)


def test_pad_split_merge():
    coll = SeqCollection([1, 2, 3])
    assert coll.pad(5, 0).values() == [1, 2, 3, 0, 0]
    assert coll.pad(2, 0).values() == [1, 2, 3]
    assert [c.values() for c in coll.split(2)] == [[1, 2], [3]]
    assert coll.split(0) == []
    assert coll.merge(SeqCollection([4])).values() == [1, 2, 3, 4]
    assert coll.merge(None) == coll


def test_functional_helpers(numbers):
    assert numbers.filter(lambda v, i: v > 1).values() == [3, 2, 3]
    assert numbers.reject(lambda v, i: v > 1).values() == [1]
    assert numbers.map(lambda v, i: v * i).values() == [0, 1, 4, 9]
    assert numbers.map_filter(lambda v, i: (v * 10, v != 3)).values() == [10, 20]
    assert numbers.every(lambda v, i: v > 0)
    assert not numbers.every(lambda v, i: v > 1)


def test_each_stops_on_false(numbers):
    seen = []

    def visit(v, i):
        seen.append(v)
        return i < 1

    numbers.each(visit)
    assert seen == [3, 1]

    every = []
    numbers.foreach(lambda v, i: every.append(i))
    assert every == [0, 1, 2, 3]


def test_reduce(numbers):
    assert numbers.reduce(lambda acc, v: acc + v) == 9
    assert numbers.reduce(lambda acc, v: acc + v, 100) == 109
    assert SeqCollection().reduce(lambda acc, v: acc + v) is None
    assert SeqCollection().reduce(lambda acc, v: acc + v, 0) == 0


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.filter(None),
        lambda c: c.reject(None),
        lambda c: c.each(None),
        lambda c: c.foreach(None),
        lambda c: c.map(None),
        lambda c: c.map_filter(None),
        lambda c: c.reduce(None),
        lambda c: c.every(None),
        lambda c: c.group_by(None),
        lambda c: c.sort_by_func(None),
    ],
)
def test_nil_callbacks_rejected(numbers, call):
    with pytest.raises(NilFuncError):
        call(numbers)


def test_group_by(users):
    groups = SeqCollection(users).group_by(lambda u, i: u.age >= 30)
    assert [u.name for u in groups[True]] == ["carol", "alice"]
    assert [u.name for u in groups[False]] == ["bob"]
    with pytest.raises(KeyUnComparableError):
        SeqCollection([1]).group_by(lambda v, i: [v])


def test_random_and_shuffle_use_rng(numbers):
    assert numbers.random(random.Random(1)) in numbers.values()
    assert SeqCollection().random() is None
    shuffled = numbers.shuffle(random.Random(7))
    assert sorted(shuffled.values()) == sorted(numbers.values())
    assert numbers.values() == [3, 1, 2, 3]


def test_reverse_and_join(numbers):
    assert numbers.reverse().values() == [3, 2, 1, 3]
    assert numbers.join(",") == "3,1,2,3"
    assert numbers.join("-", lambda v: f"<{v}>") == "<3>-<1>-<2>-<3>"


def test_pluck(users):
    coll = SeqCollection(users)
    assert coll.pluck("name").values() == ["carol", "alice", "bob"]
    assert coll.pluck("age", int).values() == [35, 30, 25]
    with pytest.raises(InvalidTypeError):
        coll.pluck("missing")
    with pytest.raises(InvalidTypeError):
        coll.pluck("name", int)


def test_key_by(users):
    keyed = SeqCollection(users + [{"other": 1}]).key_by("name")
    assert list(keyed) == ["carol", "alice", "bob"]
    assert keyed["bob"].age == 25
    with pytest.raises(KeyUnComparableError):
        SeqCollection([{"tags": ["x"]}]).key_by("tags")


def test_sort_by_field(users):
    coll = SeqCollection(users)
    assert [u.name for u in coll.sort_by("age")] == ["bob", "alice", "carol"]
    assert [u.name for u in coll.sort_by_desc("score")] == ["alice", "carol", "bob"]
    assert [u.name for u in coll.sort_by("name")] == ["alice", "bob", "carol"]


def test_sort_by_is_stable():
    coll = SeqCollection([User("x", 1), User("y", 0), User("z", 1)])
    assert [u.name for u in coll.sort_by("age")] == ["y", "x", "z"]
    assert [u.name for u in coll.sort_by_desc("age")] == ["x", "z", "y"]


def test_sort_by_errors():
    with pytest.raises(InvalidTypeError):
        SeqCollection([User("a", 1), {"name": "b"}]).sort_by("age")
    with pytest.raises(KeyUnComparableError):
        SeqCollection([{"v": 1}, {"v": "a"}]).sort_by("v")
    assert SeqCollection().sort_by("anything").is_empty()


def test_sort_by_func(users):
    coll = SeqCollection(users).sort_by_func(lambda a, b: a.score < b.score)
    assert [u.name for u in coll] == ["bob", "carol", "alice"]


def test_sort_with_comparator(numbers):
    assert numbers.sort().values() == [1, 2, 3, 3]
    assert numbers.sort_desc().values() == [3, 3, 2, 1]
    with pytest.raises(NoComparableError):
        SeqCollection(["b", "a"]).sort()
    assert SeqCollection(["b", "a"]).set_compare(str_compare).sort().values() == ["a", "b"]


def test_comparator_based_queries(numbers):
    assert numbers.unique().values() == [3, 1, 2]
    assert numbers.max() == 3
    assert numbers.min() == 1
    assert numbers.contains(2)
    assert not numbers.contains(5)
    assert numbers.contains_count(3) == 2
    assert numbers.mode() == 3
    assert SeqCollection([1, 2]).mode() == 1
    assert SeqCollection([], str_compare).max() is None


def test_set_operations(numbers):
    other = SeqCollection([2, 5])
    assert numbers.diff(other).values() == [3, 1, 3]
    assert numbers.intersect(other).values() == [2]
    assert numbers.union(other).values() == [3, 1, 2, 3, 5]
    assert numbers.diff(SeqCollection()).values() == [3, 1, 2, 3]


def test_mixed_int_and_float_elements():
    coll = SeqCollection([1, 2.5, 0])
    assert coll.sort().values() == [0, 1, 2.5]
    assert coll.max() == 2.5
    assert coll.min() == 0
    assert coll.contains(2.5)
    assert coll.median() == 1.0
    assert SeqCollection([1, 2.5]).union(SeqCollection([2.5, 4])).values() == [1, 2.5, 4]
    assert SeqCollection([3, 1.5, 2]).sort_desc().values() == [3, 2, 1.5]


def test_numeric_aggregates():
    coll = SeqCollection([4, 1, 3, 2])
    assert coll.sum() == 10.0
    assert coll.avg() == 2.5
    assert coll.median() == 2.5
    assert SeqCollection([5, 1, 3]).median() == 3.0
    assert SeqCollection().sum() == 0.0
    assert SeqCollection().avg() == 0.0
    assert SeqCollection().median() == 0.0
    with pytest.raises(NoComputableError):
        SeqCollection([1, "two"]).sum()
    with pytest.raises(ElementNoComputableError) as exc_info:
        SeqCollection([1, 2, None]).avg()
    assert exc_info.value.details["index"] == 2
    with pytest.raises(NoComputableError):
        SeqCollection([True]).median()


def test_json():
    coll = SeqCollection([1, 2])
    assert coll.to_json() == "[1, 2]"
    assert coll.from_json('["a", "b"]').values() == ["a", "b"]
    with pytest.raises(InvalidTypeError):
        coll.from_json('{"a": 1}')


def test_dd():
    stream = io.StringIO()
    SeqCollection([1, 2]).dd(stream)
    output = stream.getvalue()
    assert output.startswith("Collection(2, int):{")
    assert "\t1:\t2" in output
    SeqCollection().dd(stream)
    assert "Collection(0, empty)" in stream.getvalue()


def test_python_protocols(numbers):
    assert len(numbers) == 4
    assert list(numbers) == [3, 1, 2, 3]
    assert numbers[2] == 2
    assert numbers == SeqCollection([3, 1, 2, 3])
    assert repr(SeqCollection([1])) == "SeqCollection([1])"
