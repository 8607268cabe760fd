# collectkit/core/map_func.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Stateless helpers over plain dicts.

Every function returns a new dict or a derived value and leaves its argument
alone, except the ``*_in_place`` variants which modify the dict they are given.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Type, TypeVar

from collectkit.core.fields import pluck_typed, pluck_values

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
R = TypeVar("R")
NK = TypeVar("NK", bound=Hashable)


def keys(m: Dict[K, V]) -> List[K]:
    return list(m)


def values(m: Dict[K, V]) -> List[V]:
    return list(m.values())


def clone(m: Optional[Dict[K, V]]) -> Optional[Dict[K, V]]:
    """Shallow copy; None stays None."""
    if m is None:
        return None
    return dict(m)


def equal(m1: Dict[K, V], m2: Dict[K, V]) -> bool:
    return m1 == m2


def has(m: Dict[K, V], key: K) -> bool:
    return key in m


def get(m: Dict[K, V], key: K) -> Optional[V]:
    """Value for ``key``, or None when absent."""
    return m.get(key)


def get_or(m: Dict[K, V], key: K, default: V) -> V:
    if key in m:
        return m[key]
    return default


def set(m: Dict[K, V], key: K, val: V) -> Dict[K, V]:  # noqa: A001
    nm = dict(m)
    nm[key] = val
    return nm


def set_in_place(m: Dict[K, V], key: K, val: V) -> None:
    m[key] = val


def delete(m: Dict[K, V], key: K) -> Dict[K, V]:
    nm = dict(m)
    nm.pop(key, None)
    return nm


def delete_in_place(m: Dict[K, V], key: K) -> None:
    m.pop(key, None)


def merge(m: Optional[Dict[K, V]], other: Optional[Dict[K, V]]) -> Optional[Dict[K, V]]:
    """
    Union of ``m`` and ``other``; ``other`` wins on key conflicts. Returns None
    only when both arguments are None.
    """
    if m is None and other is None:
        return None
    nm = dict(m or {})
    nm.update(other or {})
    return nm


def merge_in_place(m: Dict[K, V], other: Optional[Dict[K, V]]) -> None:
    if other:
        m.update(other)


def only(m: Dict[K, V], keep: Iterable[K]) -> Dict[K, V]:
    """New dict holding just the listed keys that exist in ``m``."""
    return {k: m[k] for k in keep if k in m}


def except_(m: Dict[K, V], drop: Iterable[K]) -> Dict[K, V]:
    """New dict without the listed keys."""
    nm = dict(m)
    for k in drop:
        nm.pop(k, None)
    return nm


def map_values(m: Dict[K, V], fn: Callable[[V, K], R]) -> Dict[K, R]:
    return {k: fn(v, k) for k, v in m.items()}


def map_keys(m: Dict[K, V], fn: Callable[[K, V], NK]) -> Dict[NK, V]:
    """
    Re-key the dict. When two keys map to the same new key the later one wins.
    """
    return {fn(k, v): v for k, v in m.items()}


def filter(m: Dict[K, V], fn: Callable[[V, K], bool]) -> Dict[K, V]:  # noqa: A001
    return {k: v for k, v in m.items() if fn(v, k)}


def each(m: Dict[K, V], fn: Callable[[V, K], None]) -> None:
    for k, v in m.items():
        fn(v, k)


def reduce(m: Dict[K, V], init: R, fn: Callable[[R, V, K], R]) -> R:
    acc = init
    for k, v in m.items():
        acc = fn(acc, v, k)
    return acc


def pluck(m: Dict[K, V], field: str, expect: Optional[Type] = None) -> List[Any]:
    """
    Extract ``field`` from every value.

    Without ``expect`` values lacking the field are skipped. With ``expect``
    every value must carry the field with that type.

    :raises InvalidTypeError: If ``expect`` is given and a value does not match.
    """
    if expect is None:
        return pluck_values(m.values(), field)
    return pluck_typed(m.values(), field, expect)
