# collectkit/core/seq_collection.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import json
import random as _random
import sys
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, TextIO, Tuple, TypeVar

from collectkit.core.compare import as_sort_key, default_compare_for, kind_of, natural_compare
from collectkit.core.errors import (
    ElementNoComputableError,
    InvalidArgumentError,
    InvalidTypeError,
    KeyUnComparableError,
    NilFuncError,
    NoComparableError,
    NotFoundError,
)
from collectkit.core.fields import MISSING, extract_field, pluck_typed

T = TypeVar("T")

_NO_INIT = object()


class SeqCollection(Generic[T]):
    """
    Chainable collection over a list.

    A three-way comparator drives search, dedup, sort and min/max. If none is
    set explicitly, the comparator registry is consulted with the first
    element's kind, which covers plain numbers. Strings and objects need
    set_compare().

    In-place methods return self: append, push, remove, set_index, pop, sort,
    sort_desc and the sort_by family. Everything else returns a new collection.
    """

    def __init__(self, values: Optional[Iterable[T]] = None, compare: Optional[Callable[[Any, Any], int]] = None) -> None:
        self._values: List[T] = list(values) if values is not None else []
        self._compare = compare

    def _new(self, values: Iterable[T]) -> "SeqCollection[T]":
        return SeqCollection(values, self._compare)

    @property
    def compare(self) -> Optional[Callable[[Any, Any], int]]:
        """The explicit comparator, or the registry default for the element kind."""
        if self._compare is not None:
            return self._compare
        if self._values:
            return default_compare_for(self._values[0])
        return None

    def _require_compare(self) -> Callable[[Any, Any], int]:
        compare = self.compare
        if compare is None:
            raise NoComparableError()
        return compare

    def _require_computable(self) -> None:
        for i, item in enumerate(self._values):
            if kind_of(item) is None:
                raise ElementNoComputableError(details={"index": i, "item": item})

    def set_compare(self, fn: Optional[Callable[[Any, Any], int]]) -> "SeqCollection[T]":
        self._compare = fn
        return self

    def copy(self) -> "SeqCollection[T]":
        return self._new(self._values)

    def is_empty(self) -> bool:
        return not self._values

    def is_not_empty(self) -> bool:
        return bool(self._values)

    def count(self) -> int:
        return len(self._values)

    def values(self) -> List[T]:
        return list(self._values)

    # ------------------------------------------------------------------
    # Element access and mutation
    # ------------------------------------------------------------------

    def append(self, item: T) -> "SeqCollection[T]":
        self._values.append(item)
        return self

    push = append

    def prepend(self, item: T) -> "SeqCollection[T]":
        return self._new([item, *self._values])

    def insert(self, index: int, item: T) -> "SeqCollection[T]":
        """Copy with ``item`` inserted before position ``index``."""
        if not 0 <= index <= len(self._values):
            raise InvalidArgumentError(f"invalid index {index}", {"index": index})
        values = list(self._values)
        values.insert(index, item)
        return self._new(values)

    def remove(self, index: int) -> "SeqCollection[T]":
        """Drop the element at ``index``. In place."""
        if not 0 <= index < len(self._values):
            raise InvalidArgumentError(f"invalid index {index}", {"index": index})
        del self._values[index]
        return self

    def pop(self) -> Optional[T]:
        """Remove and return the last element, or None when empty."""
        if not self._values:
            return None
        return self._values.pop()

    def first(self) -> Optional[T]:
        return self._values[0] if self._values else None

    def last(self) -> Optional[T]:
        return self._values[-1] if self._values else None

    def index(self, i: int) -> Optional[T]:
        """Element at ``i``, or None when out of range."""
        if 0 <= i < len(self._values):
            return self._values[i]
        return None

    def set_index(self, i: int, val: T) -> "SeqCollection[T]":
        """Overwrite position ``i``; out-of-range indexes are ignored. In place."""
        if 0 <= i < len(self._values):
            self._values[i] = val
        return self

    def search(self, item: T) -> int:
        """
        Position of the first element comparing equal to ``item``.

        :raises NoComparableError: If no comparator is available.
        :raises NotFoundError: If nothing matches.
        """
        compare = self._require_compare()
        for i, v in enumerate(self._values):
            if compare(v, item) == 0:
                return i
        raise NotFoundError(details={"item": item})

    def slice(self, start: int, end: Optional[int] = None) -> "SeqCollection[T]":
        """
        Elements ``start`` up to ``end`` (exclusive; to the end when omitted).

        :raises InvalidArgumentError: If the bounds are out of range or reversed.
        """
        n = len(self._values)
        if start < 0 or start >= n:
            raise InvalidArgumentError("invalid start index", {"start": start})
        if end is None:
            return self._new(self._values[start:])
        if end < 0 or end > n:
            raise InvalidArgumentError("invalid end index", {"end": end})
        if start > end:
            raise InvalidArgumentError("start index should be less than end index", {"start": start, "end": end})
        return self._new(self._values[start:end])

    def for_page(self, page: int, per_page: int) -> "SeqCollection[T]":
        """One-based page of ``per_page`` elements; empty past the end."""
        if page <= 0 or per_page <= 0:
            raise InvalidArgumentError("invalid page or perPage", {"page": page, "per_page": per_page})
        start = (page - 1) * per_page
        return self._new(self._values[start:start + per_page])

    def nth(self, n: int, offset: int = 0) -> "SeqCollection[T]":
        """Every ``n``-th element starting at ``offset``."""
        if n <= 0:
            raise InvalidArgumentError("invalid n", {"n": n})
        if offset < 0:
            raise InvalidArgumentError("invalid offset", {"offset": offset})
        return self._new(self._values[offset::n])

    def pad(self, count: int, default: T) -> "SeqCollection[T]":
        """Copy extended with ``default`` up to ``count`` elements."""
        missing = count - len(self._values)
        if missing <= 0:
            return self.copy()
        return self._new([*self._values, *([default] * missing)])

    def split(self, size: int) -> List["SeqCollection[T]"]:
        """Chunks of ``size`` elements; the last one may be shorter."""
        if size <= 0:
            return []
        return [self._new(self._values[i:i + size]) for i in range(0, len(self._values), size)]

    def merge(self, other: Optional["SeqCollection[T]"]) -> "SeqCollection[T]":
        """Concatenation of this collection and ``other``."""
        if other is None:
            return self.copy()
        return self._new([*self._values, *other._values])

    # ------------------------------------------------------------------
    # Functional helpers
    # ------------------------------------------------------------------

    def filter(self, fn: Callable[[T, int], bool]) -> "SeqCollection[T]":
        if fn is None:
            raise NilFuncError()
        return self._new(v for i, v in enumerate(self._values) if fn(v, i))

    def reject(self, fn: Callable[[T, int], bool]) -> "SeqCollection[T]":
        if fn is None:
            raise NilFuncError()
        return self._new(v for i, v in enumerate(self._values) if not fn(v, i))

    def each(self, fn: Callable[[T, int], bool]) -> None:
        """Visit elements in order until ``fn`` returns False."""
        if fn is None:
            raise NilFuncError()
        for i, v in enumerate(self._values):
            if fn(v, i) is False:
                return

    def foreach(self, fn: Callable[[T, int], None]) -> None:
        """Visit every element in order."""
        if fn is None:
            raise NilFuncError()
        for i, v in enumerate(self._values):
            fn(v, i)

    def map(self, fn: Callable[[T, int], Any]) -> "SeqCollection[Any]":
        if fn is None:
            raise NilFuncError()
        return SeqCollection([fn(v, i) for i, v in enumerate(self._values)])

    def map_filter(self, fn: Callable[[T, int], Tuple[Any, bool]]) -> "SeqCollection[Any]":
        """Map, keeping results whose second tuple item is true."""
        if fn is None:
            raise NilFuncError()
        result = []
        for i, v in enumerate(self._values):
            mapped, keep = fn(v, i)
            if keep:
                result.append(mapped)
        return SeqCollection(result)

    def reduce(self, fn: Callable[[Any, T], Any], init: Any = _NO_INIT) -> Any:
        """
        Fold left. Without ``init`` the first element seeds the fold and an
        empty collection yields None.
        """
        if fn is None:
            raise NilFuncError()
        items = iter(self._values)
        if init is _NO_INIT:
            if not self._values:
                return None
            acc = next(items)
        else:
            acc = init
        for item in items:
            acc = fn(acc, item)
        return acc

    def every(self, fn: Callable[[T, int], bool]) -> bool:
        if fn is None:
            raise NilFuncError()
        return all(fn(v, i) for i, v in enumerate(self._values))

    def group_by(self, fn: Callable[[T, int], Any]) -> Dict[Any, "SeqCollection[T]"]:
        """Partition by ``fn(item, index)``; groups keep element order."""
        if fn is None:
            raise NilFuncError()
        groups: Dict[Any, SeqCollection[T]] = {}
        for i, v in enumerate(self._values):
            key = fn(v, i)
            try:
                group = groups.setdefault(key, self._new([]))
            except TypeError as e:
                raise KeyUnComparableError(f"group key {key!r} is not hashable") from e
            group.append(v)
        return groups

    def random(self, rng: Optional[_random.Random] = None) -> Optional[T]:
        if not self._values:
            return None
        return (rng or _random).choice(self._values)

    def reverse(self) -> "SeqCollection[T]":
        return self._new(reversed(self._values))

    def shuffle(self, rng: Optional[_random.Random] = None) -> "SeqCollection[T]":
        values = list(self._values)
        (rng or _random).shuffle(values)
        return self._new(values)

    def join(self, sep: str, fmt: Optional[Callable[[T], str]] = None) -> str:
        """Join elements, formatting them with ``fmt`` or ``str``."""
        return sep.join((fmt or str)(v) for v in self._values)

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def pluck(self, field: str, expect: Optional[type] = None) -> "SeqCollection[Any]":
        """
        Collection of ``field`` read from every element.

        :raises InvalidTypeError: If an element lacks the field, or the field
            is not an ``expect`` instance when ``expect`` is given.
        """
        if expect is not None:
            return SeqCollection(pluck_typed(self._values, field, expect))
        result = []
        for v in self._values:
            extracted = extract_field(v, field)
            if extracted is MISSING:
                raise InvalidTypeError(f"value {v!r} has no field '{field}'", {"field": field})
            result.append(extracted)
        return SeqCollection(result)

    def key_by(self, field: str) -> Dict[Any, T]:
        """
        Dict from ``field`` to element; later elements win on duplicate keys.
        Elements without the field are skipped.
        """
        result: Dict[Any, T] = {}
        for v in self._values:
            key = extract_field(v, field)
            if key is MISSING:
                continue
            try:
                result[key] = v
            except TypeError as e:
                raise KeyUnComparableError(f"field '{field}' value {key!r} is not hashable") from e
        return result

    def _field_sort(self, field: str, descending: bool) -> "SeqCollection[T]":
        if not self._values:
            return self
        extracted = []
        for v in self._values:
            value = extract_field(v, field)
            if value is MISSING:
                raise InvalidTypeError(f"field {field} does not exist", {"field": field})
            extracted.append(value)
        compare = default_compare_for(extracted[0]) or natural_compare
        sort_key = as_sort_key(compare)
        try:
            order = sorted(range(len(extracted)), key=lambda i: sort_key(extracted[i]), reverse=descending)
        except (TypeError, InvalidTypeError) as e:
            raise KeyUnComparableError(details={"field": field}) from e
        self._values = [self._values[i] for i in order]
        return self

    def sort_by(self, field: str) -> "SeqCollection[T]":
        """
        Stable ascending sort by ``field``. In place.

        :raises InvalidTypeError: If an element lacks the field.
        :raises KeyUnComparableError: If field values cannot be ordered.
        """
        return self._field_sort(field, descending=False)

    def sort_by_desc(self, field: str) -> "SeqCollection[T]":
        """Stable descending sort by ``field``. In place."""
        return self._field_sort(field, descending=True)

    def sort_by_func(self, less: Callable[[T, T], bool]) -> "SeqCollection[T]":
        """Sort with a less-than predicate. In place."""
        if less is None:
            raise NilFuncError()

        def _compare(a: T, b: T) -> int:
            if less(a, b):
                return -1
            if less(b, a):
                return 1
            return 0

        self._values.sort(key=as_sort_key(_compare))
        return self

    # ------------------------------------------------------------------
    # Comparator-based
    # ------------------------------------------------------------------

    def sort(self) -> "SeqCollection[T]":
        """Ascending sort with the comparator. In place."""
        self._values.sort(key=as_sort_key(self._require_compare()))
        return self

    def sort_desc(self) -> "SeqCollection[T]":
        """Descending sort with the comparator. In place."""
        self._values.sort(key=as_sort_key(self._require_compare()), reverse=True)
        return self

    def unique(self) -> "SeqCollection[T]":
        """Copy without later duplicates, by comparator equality."""
        compare = self._require_compare()
        result: List[T] = []
        for v in self._values:
            if not any(compare(v, seen) == 0 for seen in result):
                result.append(v)
        return self._new(result)

    def max(self) -> Optional[T]:
        compare = self._require_compare()
        if not self._values:
            return None
        best = self._values[0]
        for v in self._values[1:]:
            if compare(v, best) > 0:
                best = v
        return best

    def min(self) -> Optional[T]:
        compare = self._require_compare()
        if not self._values:
            return None
        best = self._values[0]
        for v in self._values[1:]:
            if compare(v, best) < 0:
                best = v
        return best

    def contains(self, obj: T) -> bool:
        compare = self._require_compare()
        return any(compare(v, obj) == 0 for v in self._values)

    def contains_count(self, obj: T) -> int:
        compare = self._require_compare()
        return sum(1 for v in self._values if compare(v, obj) == 0)

    def diff(self, other: "SeqCollection[T]") -> "SeqCollection[T]":
        """Elements of this collection not contained in ``other``."""
        self._require_compare()
        other = other._with_compare_of(self)
        return self._new(v for v in self._values if not other.contains(v))

    def union(self, other: "SeqCollection[T]") -> "SeqCollection[T]":
        """This collection followed by elements of ``other`` it does not contain."""
        self._require_compare()
        result = self.copy()
        for v in other._values:
            if not self.contains(v):
                result.append(v)
        return result

    def intersect(self, other: "SeqCollection[T]") -> "SeqCollection[T]":
        """Elements of this collection also contained in ``other``."""
        self._require_compare()
        other = other._with_compare_of(self)
        return self._new(v for v in self._values if other.contains(v))

    def _with_compare_of(self, source: "SeqCollection[T]") -> "SeqCollection[T]":
        if self.compare is not None:
            return self
        return SeqCollection(self._values, source.compare)

    def mode(self) -> Optional[T]:
        """Most frequent element; the earliest one wins ties."""
        compare = self._require_compare()
        if not self._values:
            return None
        counts: List[List[Any]] = []
        for v in self._values:
            for entry in counts:
                if compare(entry[0], v) == 0:
                    entry[1] += 1
                    break
            else:
                counts.append([v, 1])
        best = counts[0]
        for entry in counts[1:]:
            if entry[1] > best[1]:
                best = entry
        return best[0]

    # ------------------------------------------------------------------
    # Numeric aggregates
    # ------------------------------------------------------------------

    def sum(self) -> float:
        """
        :raises NoComputableError: If an element is not a number.
        """
        if not self._values:
            return 0.0
        self._require_computable()
        return float(sum(self._values))

    def avg(self) -> float:
        if not self._values:
            return 0.0
        return self.sum() / len(self._values)

    def median(self) -> float:
        self._require_computable()
        if not self._values:
            return 0.0
        ordered = sorted(self._values, key=as_sort_key(self.compare or natural_compare))
        mid = len(ordered) // 2
        if len(ordered) % 2 == 0:
            return float(ordered[mid - 1] + ordered[mid]) / 2
        return float(ordered[mid])

    # ------------------------------------------------------------------
    # Serialization and debugging
    # ------------------------------------------------------------------

    def to_json(self) -> str:
        return json.dumps(self._values)

    def from_json(self, text: str) -> "SeqCollection[T]":
        """
        Replace the contents with the JSON array in ``text``. In place.

        :raises InvalidTypeError: If ``text`` does not hold a JSON array.
        """
        decoded = json.loads(text)
        if not isinstance(decoded, list):
            raise InvalidTypeError(f"expected a JSON array, got {type(decoded).__name__}")
        self._values = decoded
        return self

    def dd(self, stream: Optional[TextIO] = None) -> None:
        """Print index and value of every element for debugging."""
        out = stream or sys.stdout
        type_name = type(self._values[0]).__name__ if self._values else "empty"
        lines = [f"Collection({len(self._values)}, {type_name}):{{"]
        lines.extend(f"\t{i}:\t{v!r}" for i, v in enumerate(self._values))
        lines.append("}")
        print("\n".join(lines), file=out)

    # ------------------------------------------------------------------
    # Python protocols
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(list(self._values))

    def __getitem__(self, i: int) -> T:
        return self._values[i]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SeqCollection):
            return NotImplemented
        return self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"
