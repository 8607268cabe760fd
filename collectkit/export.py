# collectkit/export.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, Iterable, Optional, TypeVar

from collectkit.core.map_collection import MapCollection
from collectkit.core.options import CollectionOption
from collectkit.core.seq_collection import SeqCollection
from collectkit.runtime.safe_collection import SafeMapCollection

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
T = TypeVar("T")


def new_slice_collect(values: Optional[Iterable[T]] = None, compare: Optional[Callable[[Any, Any], int]] = None) -> SeqCollection[T]:
    """
    Create a sequence collection. Plain numbers get a default comparator from
    the registry; other element types need ``compare`` or set_compare().
    """
    return SeqCollection(values, compare)


def new_empty_collection() -> SeqCollection[Any]:
    return SeqCollection()


def new_map_collect(
    values: Optional[Dict[K, V]] = None, *options: CollectionOption, materialize: bool = False
) -> MapCollection[K, V]:
    """
    Create an ordered map collection.

    Example:
        new_map_collect(m)
        new_map_collect(m, with_key_compare(natural_compare))
        new_map_collect(m, with_key_compare(natural_compare), materialize=True)
    """
    return MapCollection(values, *options, materialize=materialize)


def new_empty_map_collection(*options: CollectionOption) -> MapCollection[Any, Any]:
    return MapCollection({}, *options)


def new_safe_map_collect(
    values: Optional[Dict[K, V]] = None, *options: CollectionOption, materialize: bool = False
) -> SafeMapCollection[K, V]:
    """Create an ordered map collection guarded by a reader/writer lock."""
    return SafeMapCollection(values, *options, materialize=materialize)
