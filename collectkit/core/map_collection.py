# collectkit/core/map_collection.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import json
import sys
from typing import Any, Callable, Dict, Generic, Hashable, Iterable, Iterator, List, Optional, TextIO, Tuple, TypeVar

from collectkit.core import map_func
from collectkit.core.errors import InvalidTypeError, NilFuncError, NotHaveKeyCompareFuncError
from collectkit.core.fields import MISSING, extract_field
from collectkit.core.map_core import MappingCore
from collectkit.core.options import CollectionOption
from collectkit.interfaces.types import (
    CompareFunc,
    Extractor,
    KeyCompare,
    KeyValuePredicate,
    ValCompare,
    ValueKeyPredicate,
    ValueKeyVisitor,
)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class MapCollection(Generic[K, V]):
    """
    Chainable collection over a dict with a stable, comparator-driven order.

    Methods documented "in place" mutate this collection and return it.
    Methods documented "returns a new collection" leave this collection alone
    and return one that shares no mutable state with it.

    Order-dependent reads (first, last, foreach, the *_where finders, ordered
    iteration) build the sorted-key index on first use; other methods keep an
    existing index up to date without re-sorting.

    Not thread-safe; wrap in SafeMapCollection for concurrent access.
    """

    def __init__(
        self,
        data: Optional[Dict[K, V]] = None,
        *options: CollectionOption,
        materialize: bool = False,
    ) -> None:
        """
        Wrap ``data`` (the dict is used as is, not copied).

        :param data: Initial key-value pairs.
        :param options: Functional options such as with_key_compare.
        :param materialize: Build the sorted-key index immediately instead of on
            first ordered read.
        """
        core: MappingCore[K, V] = MappingCore(data if data is not None else {})
        for option in options:
            option(core)
        if materialize:
            core.ensure_sorted_keys()
        self._core = core

    @classmethod
    def _from_core(cls, core: MappingCore[K, V]) -> "MapCollection[K, V]":
        coll = cls.__new__(cls)
        coll._core = core
        return coll

    def _derive(self, data: Dict[K, V]) -> "MapCollection[K, V]":
        return self._from_core(self._core.clone_with(data))

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def copy(self) -> "MapCollection[K, V]":
        """Independent copy with the same comparators and order. Returns a new collection."""
        return self._derive(dict(self._core.data))

    def is_empty(self) -> bool:
        return not self._core.data

    def is_not_empty(self) -> bool:
        return bool(self._core.data)

    def count(self) -> int:
        return len(self._core.data)

    def keys(self) -> List[K]:
        """Keys in index order if the index exists, otherwise in dict order."""
        if self._core.sorted_keys is not None:
            return list(self._core.sorted_keys)
        return list(self._core.data)

    def values(self) -> List[V]:
        """Values in the same order as keys()."""
        data = self._core.data
        return [data[k] for k in self.keys()]

    def sorted_keys(self) -> List[K]:
        """Copy of the sorted-key index, building it if needed."""
        return list(self._core.ensure_sorted_keys())

    def all(self) -> Dict[K, V]:
        """The underlying dict. This is a reference: changing it bypasses the index."""
        return self._core.data

    @property
    def key_compare(self) -> Optional[KeyCompare[K]]:
        return self._core.key_compare

    @property
    def val_compare(self) -> Optional[ValCompare[V]]:
        return self._core.val_compare

    @property
    def is_materialized(self) -> bool:
        """True once the sorted-key index exists."""
        return self._core.materialized

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, key: K) -> Tuple[Optional[V], bool]:
        """Return ``(value, True)`` or ``(None, False)`` when the key is absent."""
        if key in self._core.data:
            return self._core.data[key], True
        return None, False

    def get_value(self, key: K) -> Optional[V]:
        return self._core.data.get(key)

    def get_or(self, key: K, default: V) -> V:
        return map_func.get_or(self._core.data, key, default)

    def has(self, key: K) -> bool:
        return key in self._core.data

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set(self, key: K, val: V) -> "MapCollection[K, V]":
        """
        Insert or overwrite ``key``. In place. If the key comparator raises,
        the collection is left unchanged.
        """
        core = self._core
        if key not in core.data:
            # Index first: a failing comparator must not leave an unindexed key.
            core.insert_key(key)
        core.data[key] = val
        return self

    def put(self, key: K, val: V) -> "MapCollection[K, V]":
        """Like set(), on a copy. Returns a new collection."""
        coll = self._derive(dict(self._core.data))
        return coll.set(key, val)

    def remove(self, key: K) -> "MapCollection[K, V]":
        """Delete ``key`` if present. In place."""
        core = self._core
        if key in core.data:
            del core.data[key]
            core.remove_keys(key)
        return self

    def delete(self, key: K) -> "MapCollection[K, V]":
        """Like remove(), on a copy. Returns a new collection."""
        coll = self._derive(map_func.delete(self._core.data, key))
        coll._core.remove_keys(key)
        return coll

    def delete_by_func(self, fn: KeyValuePredicate[K, V]) -> "MapCollection[K, V]":
        """
        Drop every pair for which ``fn(key, value)`` is true. Returns a new collection.

        :raises NilFuncError: If ``fn`` is None.
        """
        if fn is None:
            raise NilFuncError()
        new_data: Dict[K, V] = {}
        deleted: List[K] = []
        for k, v in self._core.data.items():
            if fn(k, v):
                deleted.append(k)
            else:
                new_data[k] = v
        coll = self._derive(new_data)
        coll._core.remove_keys(*deleted)
        return coll

    def merge(self, other: Optional[Dict[K, V]]) -> "MapCollection[K, V]":
        """
        Union with ``other``; its values win on conflicts. Returns a new collection.
        """
        other = other or {}
        coll = self._derive(map_func.merge(self._core.data, other) or {})
        core = coll._core
        if core.sorted_keys is not None:
            core.sorted_keys = core.merge_keys(core.sorted_incoming(other))
        return coll

    def merge_collection(self, other: Optional["MapCollection[K, V]"]) -> "MapCollection[K, V]":
        """
        Union with another collection; its values win on conflicts. When both
        sides carry an index, the other side's index is merged in directly.
        Returns a new collection.
        """
        if other is None:
            return self.copy()
        coll = self._derive(map_func.merge(self._core.data, other._core.data) or {})
        core = coll._core
        if core.sorted_keys is not None:
            if other._core.sorted_keys is not None and other._core.key_compare is core.key_compare:
                incoming = other._core.sorted_keys
            else:
                incoming = core.sorted_incoming(other._core.data)
            core.sorted_keys = core.merge_keys(incoming)
        return coll

    def merge_in_place(self, other: Optional[Dict[K, V]]) -> "MapCollection[K, V]":
        """Union with ``other``; its values win on conflicts. In place."""
        if not other:
            return self
        core = self._core
        merged_keys = None
        if core.sorted_keys is not None:
            new_keys = [k for k in other if k not in core.data]
            merged_keys = core.merge_keys(core.sorted_incoming(new_keys))
        map_func.merge_in_place(core.data, other)
        if merged_keys is not None:
            core.sorted_keys = merged_keys
        return self

    def only(self, keys: Iterable[K]) -> "MapCollection[K, V]":
        """Keep just ``keys``, in their current relative order. Returns a new collection."""
        return self._project(map_func.only(self._core.data, keys))

    def except_(self, keys: Iterable[K]) -> "MapCollection[K, V]":
        """Drop ``keys``, keeping the rest in order. Returns a new collection."""
        return self._project(map_func.except_(self._core.data, keys))

    def filter(self, fn: ValueKeyPredicate[V, K]) -> "MapCollection[K, V]":
        """
        Keep pairs for which ``fn(value, key)`` is true. Returns a new collection.

        :raises NilFuncError: If ``fn`` is None.
        """
        if fn is None:
            raise NilFuncError()
        return self._project(map_func.filter(self._core.data, fn))

    def _project(self, new_data: Dict[K, V]) -> "MapCollection[K, V]":
        core = MappingCore(
            new_data,
            key_compare=self._core.key_compare,
            val_compare=self._core.val_compare,
            sorted_keys=self._core.filter_sorted_keys(new_data),
        )
        return self._from_core(core)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def each(self, fn: ValueKeyVisitor[V, K]) -> "MapCollection[K, V]":
        """Call ``fn(value, key)`` for every pair in dict order."""
        if fn is None:
            raise NilFuncError()
        map_func.each(self._core.data, fn)
        return self

    def foreach(self, fn: ValueKeyVisitor[V, K]) -> "MapCollection[K, V]":
        """Call ``fn(value, key)`` for every pair in index order."""
        if fn is None:
            raise NilFuncError()
        data = self._core.data
        for k in list(self._core.ensure_sorted_keys()):
            fn(data[k], k)
        return self

    def map(self, fn: Callable[[V, K], Any]) -> "MapCollection[K, Any]":
        """
        Transform every value. Returns a new collection without comparators or index.
        """
        if fn is None:
            raise NilFuncError()
        return MapCollection(map_func.map_values(self._core.data, fn))

    def reduce(self, init: Any, fn: Callable[[Any, V, K], Any]) -> Any:
        if fn is None:
            raise NilFuncError()
        return map_func.reduce(self._core.data, init, fn)

    def first(self) -> Tuple[Optional[K], Optional[V], bool]:
        """First pair in index order, or ``(None, None, False)`` when empty."""
        keys = self._core.ensure_sorted_keys()
        if not keys:
            return None, None, False
        key = keys[0]
        return key, self._core.data[key], True

    def last(self) -> Tuple[Optional[K], Optional[V], bool]:
        """Last pair in index order, or ``(None, None, False)`` when empty."""
        keys = self._core.ensure_sorted_keys()
        if not keys:
            return None, None, False
        key = keys[-1]
        return key, self._core.data[key], True

    def first_where(self, fn: ValueKeyPredicate[V, K]) -> Tuple[Optional[K], Optional[V], bool]:
        """First pair in index order matching ``fn(value, key)``."""
        if fn is None:
            raise NilFuncError()
        data = self._core.data
        for k in self._core.ensure_sorted_keys():
            v = data[k]
            if fn(v, k):
                return k, v, True
        return None, None, False

    def last_where(self, fn: ValueKeyPredicate[V, K]) -> Tuple[Optional[K], Optional[V], bool]:
        """Last pair in index order matching ``fn(value, key)``."""
        if fn is None:
            raise NilFuncError()
        data = self._core.data
        for k in reversed(self._core.ensure_sorted_keys()):
            v = data[k]
            if fn(v, k):
                return k, v, True
        return None, None, False

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def set_key_compare(self, fn: Optional[KeyCompare[K]]) -> "MapCollection[K, V]":
        """Set the key comparator without sorting. In place."""
        self._core.key_compare = fn
        return self

    def set_val_compare(self, fn: Optional[ValCompare[V]]) -> "MapCollection[K, V]":
        """Set the value comparator without sorting. In place."""
        self._core.val_compare = fn
        return self

    def order_key(self) -> "MapCollection[K, V]":
        """
        Sort the index with the key comparator. In place.

        :raises NotHaveKeyCompareFuncError: If no key comparator is set.
        """
        if self._core.key_compare is None:
            raise NotHaveKeyCompareFuncError()
        self._core.sort_by_key(self._core.key_compare)
        return self

    def order_key_by_func(self, fn: KeyCompare[K]) -> "MapCollection[K, V]":
        """
        Install ``fn`` as the key comparator and sort by it. In place.

        :raises NilFuncError: If ``fn`` is None.
        """
        if fn is None:
            raise NilFuncError()
        self._core.key_compare = fn
        self._core.sort_by_key(fn)
        return self

    def order_value(self) -> "MapCollection[K, V]":
        """
        Sort the index by value with the value comparator. In place.

        :raises NotHaveValCompareFuncError: If no value comparator is set.
        """
        self._core.sort_by_value()
        return self

    def order_by_value_func(
        self, extract: Extractor[V], compare: CompareFunc
    ) -> "MapCollection[K, V]":
        """
        Sort the index by ``compare(extract(a), extract(b))`` over values. In place.

        :raises NilFuncError: If either callback is None.
        """
        self._core.sort_by_value_func(extract, compare)
        return self

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def pluck(self, field: str) -> List[Any]:
        """
        Read ``field`` from every value, skipping values without it. Follows the
        index order when an index exists.
        """
        result = []
        for v in self._ordered_values():
            extracted = extract_field(v, field)
            if extracted is not MISSING:
                result.append(extracted)
        return result

    def pluck_func(self, fn: Extractor[V]) -> List[Any]:
        """Apply ``fn`` to every value, following the index order when one exists."""
        if fn is None:
            raise NilFuncError()
        return [fn(v) for v in self._ordered_values()]

    def _ordered_values(self) -> Iterator[V]:
        data = self._core.data
        if self._core.sorted_keys is not None:
            return (data[k] for k in self._core.sorted_keys)
        return iter(data.values())

    # ------------------------------------------------------------------
    # Serialization and debugging
    # ------------------------------------------------------------------

    def to_json(self) -> str:
        """Encode the pairs as a JSON object."""
        return json.dumps(self._core.data)

    def from_json(self, text: str) -> "MapCollection[K, V]":
        """
        Replace the contents with the JSON object in ``text``. The index is
        dropped and rebuilt on the next ordered read. In place.

        :raises InvalidTypeError: If ``text`` does not hold a JSON object.
        """
        decoded = json.loads(text)
        if not isinstance(decoded, dict):
            raise InvalidTypeError(f"expected a JSON object, got {type(decoded).__name__}")
        self._core.data = decoded
        self._core.sorted_keys = None
        return self

    def dd(self, stream: Optional[TextIO] = None) -> "MapCollection[K, V]":
        """Print the contents for debugging."""
        print(f"Collection: {self._core.data!r}", file=stream or sys.stdout)
        return self

    # ------------------------------------------------------------------
    # Python protocols
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._core.data)

    def __contains__(self, key: object) -> bool:
        return key in self._core.data

    def __iter__(self) -> Iterator[K]:
        """Iterate keys in index order."""
        return iter(list(self._core.ensure_sorted_keys()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MapCollection):
            return NotImplemented
        return self._core.data == other._core.data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._core.data!r})"
