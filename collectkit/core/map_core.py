# collectkit/core/map_core.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from bisect import bisect_left
from typing import Any, Callable, Dict, Generic, Hashable, Iterable, List, Optional, TypeVar

from collectkit.core.compare import as_sort_key
from collectkit.core.errors import NilFuncError, NotHaveValCompareFuncError

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

logger = logging.getLogger(__name__)


class _KeySearchView:
    """
    Read-only sequence view over the sorted keys that ``bisect`` can search
    with a three-way comparator. Indexing returns wrapped keys so the plain
    ``<`` used by bisect is routed to the comparator.
    """

    def __init__(self, keys: List[Any], wrap: Callable[[Any], Any]) -> None:
        self._keys = keys
        self._wrap = wrap

    def __len__(self) -> int:
        return len(self._keys)

    def __getitem__(self, index: int) -> Any:
        return self._wrap(self._keys[index])


class MappingCore(Generic[K, V]):
    """
    Key-value store plus comparator configuration and a lazily built
    sorted-key index.

    Runtime Invariants:
    - When ``sorted_keys`` is not None it holds every key of ``data`` exactly
      once and nothing else.
    - Mutations keep ``sorted_keys`` consistent only if it already exists; they
      never build it.
    - ``ensure_sorted_keys`` is the only place the index is built from scratch.

    Not synchronized; see SafeMapCollection for concurrent use.
    """

    __slots__ = ("data", "key_compare", "val_compare", "sorted_keys")

    def __init__(
        self,
        data: Optional[Dict[K, V]] = None,
        key_compare: Optional[Callable[[K, K], int]] = None,
        val_compare: Optional[Callable[[V, V], int]] = None,
        sorted_keys: Optional[List[K]] = None,
    ) -> None:
        self.data: Dict[K, V] = data if data is not None else {}
        self.key_compare = key_compare
        self.val_compare = val_compare
        self.sorted_keys: Optional[List[K]] = sorted_keys

    @property
    def materialized(self) -> bool:
        return self.sorted_keys is not None

    def ensure_sorted_keys(self) -> List[K]:
        """
        Build the index if it does not exist yet: every key of ``data``, stably
        sorted by ``key_compare`` when one is set. Calling it again without an
        intervening mutation is a no-op.

        :return: The index list (not a copy).
        """
        if self.sorted_keys is None:
            keys = list(self.data)
            if self.key_compare is not None:
                keys.sort(key=as_sort_key(self.key_compare))
            self.sorted_keys = keys
            logger.debug("Materialized sorted-key index with %d keys", len(keys))
        return self.sorted_keys

    def insert_key(self, key: K) -> None:
        """
        Record a newly inserted key in the index. Must only be called for keys
        that were not in ``data`` before the insert.
        """
        if self.sorted_keys is None:
            return
        if self.key_compare is None:
            self.sorted_keys.append(key)
            return
        view = _KeySearchView(self.sorted_keys, as_sort_key(self.key_compare))
        # First position whose key compares >= the new key.
        index = bisect_left(view, as_sort_key(self.key_compare)(key))
        self.sorted_keys.insert(index, key)

    def remove_keys(self, *keys: K) -> None:
        """Drop ``keys`` from the index in one pass, survivors keep their order."""
        if self.sorted_keys is None or not keys:
            return
        removed = frozenset(keys)
        self.sorted_keys = [k for k in self.sorted_keys if k not in removed]

    def filter_sorted_keys(self, new_data: Dict[K, V]) -> Optional[List[K]]:
        """
        Keys of the current index that survive in ``new_data``, in index order.

        :return: The filtered list, or None if no index exists.
        """
        if self.sorted_keys is None:
            return None
        return [k for k in self.sorted_keys if k in new_data]

    def merge_keys(self, incoming: Iterable[K]) -> List[K]:
        """
        Combine the current index with ``incoming`` keys.

        With a key comparator both sides must already be sorted by it and are
        merged in a single linear pass; a key present on both sides is emitted
        once. Without one, the current order is kept and unseen incoming keys
        are appended in their given order.

        :param incoming: Keys to merge in.
        :return: A new list; the current index is left untouched.
        """
        current = self.sorted_keys if self.sorted_keys is not None else []
        incoming = list(incoming)

        if self.key_compare is None:
            seen = set(current)
            result = list(current)
            for k in incoming:
                if k not in seen:
                    seen.add(k)
                    result.append(k)
            return result

        compare = self.key_compare
        result: List[K] = []
        # Guards the permutation invariant when a side is not sorted by
        # key_compare (e.g. after order_value), where equal keys never meet.
        emitted = set()

        def _emit(k: K) -> None:
            if k not in emitted:
                emitted.add(k)
                result.append(k)

        i = j = 0
        while i < len(current) and j < len(incoming):
            cmp = compare(current[i], incoming[j])
            if cmp < 0:
                _emit(current[i])
                i += 1
            elif cmp > 0:
                _emit(incoming[j])
                j += 1
            elif current[i] == incoming[j]:
                _emit(incoming[j])
                i += 1
                j += 1
            else:
                # Distinct keys the comparator ranks equal: existing one first.
                _emit(current[i])
                i += 1
        for k in current[i:]:
            _emit(k)
        for k in incoming[j:]:
            _emit(k)
        logger.debug("Merged key index: %d existing + %d incoming -> %d", len(current), len(incoming), len(result))
        return result

    def sorted_incoming(self, keys: Iterable[K]) -> List[K]:
        """Return ``keys`` as a list, sorted by ``key_compare`` when one is set."""
        keys = list(keys)
        if self.key_compare is not None:
            keys.sort(key=as_sort_key(self.key_compare))
        return keys

    def sort_by_key(self, fn: Callable[[K, K], int]) -> None:
        """Stable full re-sort of the index with ``fn``; builds it if needed."""
        keys = self.sorted_keys if self.sorted_keys is not None else list(self.data)
        keys.sort(key=as_sort_key(fn))
        self.sorted_keys = keys
        logger.debug("Re-sorted %d keys by key", len(keys))

    def sort_by_value(self) -> None:
        """
        Re-sort the index by the values the keys map to, using ``val_compare``.

        :raises NotHaveValCompareFuncError: If no value comparator is set.
        """
        if self.val_compare is None:
            raise NotHaveValCompareFuncError()
        val_compare = self.val_compare
        data = self.data
        self.sort_by_key(lambda a, b: val_compare(data[a], data[b]))

    def sort_by_value_func(self, extract: Callable[[V], Any], compare: Callable[[Any, Any], int]) -> None:
        """
        Re-sort the index by ``compare(extract(value_a), extract(value_b))``.

        :raises NilFuncError: If either callback is None.
        """
        if extract is None or compare is None:
            raise NilFuncError(details={"extract": extract is not None, "compare": compare is not None})
        data = self.data
        self.sort_by_key(lambda a, b: compare(extract(data[a]), extract(data[b])))

    def clone_with(self, data: Dict[K, V]) -> "MappingCore[K, V]":
        """
        New core owning ``data`` with the same comparators and a private copy
        of the current index.
        """
        return MappingCore(
            data,
            key_compare=self.key_compare,
            val_compare=self.val_compare,
            sorted_keys=list(self.sorted_keys) if self.sorted_keys is not None else None,
        )

    def check_index(self) -> bool:
        """True if the index is absent or an exact permutation of the keys."""
        if self.sorted_keys is None:
            return True
        return len(self.sorted_keys) == len(self.data) and set(self.sorted_keys) == set(self.data)
