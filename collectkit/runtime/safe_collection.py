# collectkit/runtime/safe_collection.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Callable, Dict, Generic, Hashable, Iterable, Iterator, List, Optional, TextIO, Tuple, TypeVar, Union

from collectkit.core.map_collection import MapCollection
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
from collectkit.runtime.concurrency import RWLock, get_rw_lock, read_locked, write_locked

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
R = TypeVar("R")


class SafeMapCollection(Generic[K, V]):
    """
    Thread-safe wrapper around a MapCollection.

    Read-only operations take the read lock, in-place operations take the write
    lock and return this wrapper, clone operations copy under the read lock and
    return a new, independent wrapper. The wrapped collection is never handed
    out by reference.

    Callbacks (predicates, comparators, visitors) run while the lock is held
    and must not call back into the same wrapper.
    """

    def __init__(
        self,
        data: Optional[Dict[K, V]] = None,
        *options: CollectionOption,
        materialize: bool = False,
    ) -> None:
        self._coll: MapCollection[K, V] = MapCollection(data, *options, materialize=materialize)
        self._lock: RWLock = get_rw_lock()

    @classmethod
    def _wrap(cls, coll: MapCollection[K, V]) -> "SafeMapCollection[K, V]":
        safe = cls.__new__(cls)
        safe._coll = coll
        safe._lock = get_rw_lock()
        return safe

    def _read(self, fn: Callable[[MapCollection[K, V]], R]) -> R:
        with read_locked(self._lock):
            return fn(self._coll)

    def _write(self, fn: Callable[[MapCollection[K, V]], Any]) -> "SafeMapCollection[K, V]":
        with write_locked(self._lock):
            fn(self._coll)
        return self

    def _clone(self, fn: Callable[[MapCollection[K, V]], MapCollection[K, V]]) -> "SafeMapCollection[K, V]":
        with read_locked(self._lock):
            coll = fn(self._coll)
        return self._wrap(coll)

    def _ordered(self, fn: Callable[[MapCollection[K, V]], R]) -> R:
        # Reads that need the sorted-key index build it on first use, which
        # mutates the core. Only that first build needs the write side.
        with read_locked(self._lock):
            if self._coll.is_materialized:
                return fn(self._coll)
        with write_locked(self._lock):
            return fn(self._coll)

    # ------------------------------------------------------------------
    # Read-only
    # ------------------------------------------------------------------

    def copy(self) -> "SafeMapCollection[K, V]":
        return self._clone(lambda c: c.copy())

    def is_empty(self) -> bool:
        return self._read(lambda c: c.is_empty())

    def is_not_empty(self) -> bool:
        return self._read(lambda c: c.is_not_empty())

    def count(self) -> int:
        return self._read(lambda c: c.count())

    def keys(self) -> List[K]:
        return self._read(lambda c: c.keys())

    def values(self) -> List[V]:
        return self._read(lambda c: c.values())

    def sorted_keys(self) -> List[K]:
        return self._ordered(lambda c: c.sorted_keys())

    def all(self) -> Dict[K, V]:
        """Snapshot of the pairs. Changing it does not affect the collection."""
        return self._read(lambda c: dict(c.all()))

    @property
    def key_compare(self) -> Optional[KeyCompare[K]]:
        return self._read(lambda c: c.key_compare)

    @property
    def val_compare(self) -> Optional[ValCompare[V]]:
        return self._read(lambda c: c.val_compare)

    @property
    def is_materialized(self) -> bool:
        """True once the sorted-key index exists."""
        return self._read(lambda c: c.is_materialized)

    def get(self, key: K) -> Tuple[Optional[V], bool]:
        return self._read(lambda c: c.get(key))

    def get_value(self, key: K) -> Optional[V]:
        return self._read(lambda c: c.get_value(key))

    def get_or(self, key: K, default: V) -> V:
        return self._read(lambda c: c.get_or(key, default))

    def has(self, key: K) -> bool:
        return self._read(lambda c: c.has(key))

    def each(self, fn: ValueKeyVisitor[V, K]) -> "SafeMapCollection[K, V]":
        self._read(lambda c: c.each(fn))
        return self

    def foreach(self, fn: ValueKeyVisitor[V, K]) -> "SafeMapCollection[K, V]":
        self._ordered(lambda c: c.foreach(fn))
        return self

    def reduce(self, init: Any, fn: Callable[[Any, V, K], Any]) -> Any:
        return self._read(lambda c: c.reduce(init, fn))

    def first(self) -> Tuple[Optional[K], Optional[V], bool]:
        return self._ordered(lambda c: c.first())

    def last(self) -> Tuple[Optional[K], Optional[V], bool]:
        return self._ordered(lambda c: c.last())

    def first_where(self, fn: ValueKeyPredicate[V, K]) -> Tuple[Optional[K], Optional[V], bool]:
        return self._ordered(lambda c: c.first_where(fn))

    def last_where(self, fn: ValueKeyPredicate[V, K]) -> Tuple[Optional[K], Optional[V], bool]:
        return self._ordered(lambda c: c.last_where(fn))

    def pluck(self, field: str) -> List[Any]:
        return self._read(lambda c: c.pluck(field))

    def pluck_func(self, fn: Extractor[V]) -> List[Any]:
        return self._read(lambda c: c.pluck_func(fn))

    def to_json(self) -> str:
        return self._read(lambda c: c.to_json())

    def dd(self, stream: Optional[TextIO] = None) -> "SafeMapCollection[K, V]":
        self._read(lambda c: c.dd(stream))
        return self

    # ------------------------------------------------------------------
    # Clone
    # ------------------------------------------------------------------

    def put(self, key: K, val: V) -> "SafeMapCollection[K, V]":
        return self._clone(lambda c: c.put(key, val))

    def delete(self, key: K) -> "SafeMapCollection[K, V]":
        return self._clone(lambda c: c.delete(key))

    def delete_by_func(self, fn: KeyValuePredicate[K, V]) -> "SafeMapCollection[K, V]":
        return self._clone(lambda c: c.delete_by_func(fn))

    def merge(self, other: Optional[Dict[K, V]]) -> "SafeMapCollection[K, V]":
        return self._clone(lambda c: c.merge(other))

    def merge_collection(
        self, other: Optional[Union["SafeMapCollection[K, V]", MapCollection[K, V]]]
    ) -> "SafeMapCollection[K, V]":
        """
        Union with another collection; its values win on conflicts. A wrapped
        ``other`` is snapshotted under its own read lock before this wrapper's
        lock is taken, so two wrappers merging into each other cannot deadlock.
        """
        if other is None:
            return self.copy()
        if isinstance(other, SafeMapCollection):
            snapshot = other._read(lambda c: c.copy())
        else:
            snapshot = other
        return self._clone(lambda c: c.merge_collection(snapshot))

    def only(self, keys: Iterable[K]) -> "SafeMapCollection[K, V]":
        keys = list(keys)
        return self._clone(lambda c: c.only(keys))

    def except_(self, keys: Iterable[K]) -> "SafeMapCollection[K, V]":
        keys = list(keys)
        return self._clone(lambda c: c.except_(keys))

    def filter(self, fn: ValueKeyPredicate[V, K]) -> "SafeMapCollection[K, V]":
        return self._clone(lambda c: c.filter(fn))

    def map(self, fn: Callable[[V, K], Any]) -> "SafeMapCollection[K, Any]":
        return self._clone(lambda c: c.map(fn))

    # ------------------------------------------------------------------
    # In place
    # ------------------------------------------------------------------

    def set(self, key: K, val: V) -> "SafeMapCollection[K, V]":
        return self._write(lambda c: c.set(key, val))

    def remove(self, key: K) -> "SafeMapCollection[K, V]":
        return self._write(lambda c: c.remove(key))

    def merge_in_place(self, other: Optional[Dict[K, V]]) -> "SafeMapCollection[K, V]":
        return self._write(lambda c: c.merge_in_place(other))

    def set_key_compare(self, fn: Optional[KeyCompare[K]]) -> "SafeMapCollection[K, V]":
        return self._write(lambda c: c.set_key_compare(fn))

    def set_val_compare(self, fn: Optional[ValCompare[V]]) -> "SafeMapCollection[K, V]":
        return self._write(lambda c: c.set_val_compare(fn))

    def order_key(self) -> "SafeMapCollection[K, V]":
        return self._write(lambda c: c.order_key())

    def order_key_by_func(self, fn: KeyCompare[K]) -> "SafeMapCollection[K, V]":
        return self._write(lambda c: c.order_key_by_func(fn))

    def order_value(self) -> "SafeMapCollection[K, V]":
        return self._write(lambda c: c.order_value())

    def order_by_value_func(
        self, extract: Extractor[V], compare: CompareFunc
    ) -> "SafeMapCollection[K, V]":
        return self._write(lambda c: c.order_by_value_func(extract, compare))

    def from_json(self, text: str) -> "SafeMapCollection[K, V]":
        return self._write(lambda c: c.from_json(text))

    # ------------------------------------------------------------------
    # Python protocols
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: object) -> bool:
        return self._read(lambda c: key in c)

    def __iter__(self) -> Iterator[K]:
        """Iterate over a snapshot of the keys in index order."""
        return iter(self.sorted_keys())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SafeMapCollection):
            return NotImplemented
        # One lock at a time, as in merge_collection.
        theirs = other.all()
        return self._read(lambda c: c.all() == theirs)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return self._read(lambda c: f"{type(self).__name__}({c.all()!r})")
