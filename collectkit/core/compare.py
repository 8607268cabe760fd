# collectkit/core/compare.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import math
import threading
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from functools import cmp_to_key
from typing import Any, Callable, Dict, Optional, Tuple, Type

from collectkit.core.errors import InvalidTypeError
from collectkit.interfaces.protocols import Comparable
from collectkit.interfaces.types import CompareFunc


class ScalarKind(Enum):
    """
    Scalar kinds that have a built-in default ordering. Fixed-width kinds accept
    Python ints or floats inside the kind's range; the unbounded kinds map to the
    Python numeric types directly.
    """

    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    INT = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    FRACTION = "fraction"


def _int_range(bits: int, signed: bool) -> Tuple[int, int]:
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


_INT_RANGES: Dict[ScalarKind, Tuple[int, int]] = {
    ScalarKind.INT8: _int_range(8, True),
    ScalarKind.INT16: _int_range(16, True),
    ScalarKind.INT32: _int_range(32, True),
    ScalarKind.INT64: _int_range(64, True),
    ScalarKind.UINT8: _int_range(8, False),
    ScalarKind.UINT16: _int_range(16, False),
    ScalarKind.UINT32: _int_range(32, False),
    ScalarKind.UINT64: _int_range(64, False),
}

# Largest finite float32 magnitude.
_FLOAT32_MAX = 3.4028234663852886e38


def natural_compare(a: Any, b: Any) -> int:
    """
    Three-way comparison using the values' own ``<`` and ``>`` operators.
    Values implementing ``Comparable`` are asked via ``compare_to``.
    """
    if isinstance(a, Comparable):
        result = a.compare_to(b)
        return (result > 0) - (result < 0)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def reverse_compare(fn: CompareFunc) -> CompareFunc:
    """Return a comparator ordering in the opposite direction of ``fn``."""

    def _reversed(a: Any, b: Any) -> int:
        return fn(b, a)

    return _reversed


def _float_compare(a: float, b: float) -> int:
    # NaN sorts after every other value and equal to itself.
    a_nan = math.isnan(a)
    b_nan = math.isnan(b)
    if a_nan or b_nan:
        return (a_nan and not b_nan) - (b_nan and not a_nan)
    return (a > b) - (a < b)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def _make_int_compare(kind: ScalarKind) -> CompareFunc:
    low, high = _INT_RANGES[kind]

    def _check(value: Any) -> int:
        if not _is_int(value) or not low <= value <= high:
            raise InvalidTypeError(
                f"value {value!r} is not a {kind.value}",
                {"kind": kind.value, "value": value},
            )
        return value

    def _compare(a: Any, b: Any) -> int:
        a, b = _check(a), _check(b)
        return (a > b) - (a < b)

    _compare.__name__ = f"compare_{kind.value}"
    return _compare


def _make_float_compare(kind: ScalarKind) -> CompareFunc:
    def _check(value: Any) -> float:
        if not (_is_int(value) or isinstance(value, float)):
            raise InvalidTypeError(
                f"value {value!r} is not a {kind.value}",
                {"kind": kind.value, "value": value},
            )
        if kind is ScalarKind.FLOAT32 and math.isfinite(value) and abs(value) > _FLOAT32_MAX:
            raise InvalidTypeError(
                f"value {value!r} overflows {kind.value}",
                {"kind": kind.value, "value": value},
            )
        return float(value)

    def _compare(a: Any, b: Any) -> int:
        return _float_compare(_check(a), _check(b))

    _compare.__name__ = f"compare_{kind.value}"
    return _compare


def _make_typed_compare(kind: ScalarKind, types: Tuple[Type, ...]) -> CompareFunc:
    def _check(value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, types):
            raise InvalidTypeError(
                f"value {value!r} is not a {kind.value}",
                {"kind": kind.value, "value": value},
            )
        return value

    def _compare(a: Any, b: Any) -> int:
        a, b = _check(a), _check(b)
        a_nan, b_nan = _is_nan(a), _is_nan(b)
        if a_nan or b_nan:
            return (a_nan and not b_nan) - (b_nan and not a_nan)
        return (a > b) - (a < b)

    _compare.__name__ = f"compare_{kind.value}"
    return _compare


def _default_comparators() -> Dict[ScalarKind, CompareFunc]:
    comparators: Dict[ScalarKind, CompareFunc] = {}
    for kind in _INT_RANGES:
        comparators[kind] = _make_int_compare(kind)
    comparators[ScalarKind.FLOAT32] = _make_float_compare(ScalarKind.FLOAT32)
    comparators[ScalarKind.FLOAT64] = _make_float_compare(ScalarKind.FLOAT64)
    # Plain ints and floats mix in ordinary data; either default orders both.
    comparators[ScalarKind.INT] = _make_typed_compare(ScalarKind.INT, (int, float))
    comparators[ScalarKind.FLOAT] = _make_typed_compare(ScalarKind.FLOAT, (float, int))
    comparators[ScalarKind.DECIMAL] = _make_typed_compare(ScalarKind.DECIMAL, (Decimal, int))
    comparators[ScalarKind.FRACTION] = _make_typed_compare(ScalarKind.FRACTION, (Fraction, int))
    return comparators


def kind_of(value: Any) -> Optional[ScalarKind]:
    """
    Classify a Python value into the scalar kind whose default comparator
    applies to it, or None when the value has no default ordering (bools,
    strings, containers, arbitrary objects and None).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return ScalarKind.INT
    if isinstance(value, float):
        return ScalarKind.FLOAT
    if isinstance(value, Decimal):
        return ScalarKind.DECIMAL
    if isinstance(value, Fraction):
        return ScalarKind.FRACTION
    return None


class ComparatorRegistry:
    """
    Maps scalar kinds to three-way comparators. Starts out with a comparator
    for every ScalarKind; entries can be overridden or dropped.
    """

    def __init__(self) -> None:
        self._comparators = _default_comparators()
        self._lock = threading.Lock()

    def get(self, kind: Optional[ScalarKind]) -> Optional[CompareFunc]:
        """
        Return the comparator for ``kind``, or None if the kind is unsupported.

        :param kind: The scalar kind, or None.
        """
        if kind is None:
            return None
        with self._lock:
            return self._comparators.get(kind)

    def register(self, kind: ScalarKind, fn: CompareFunc) -> None:
        """
        Install ``fn`` as the comparator for ``kind``, replacing any previous one.
        """
        if fn is None:
            raise ValueError("Comparator cannot be None")
        with self._lock:
            self._comparators[kind] = fn

    def unregister(self, kind: ScalarKind) -> None:
        """Remove the comparator for ``kind``; later lookups return None."""
        with self._lock:
            self._comparators.pop(kind, None)

    def reset(self) -> None:
        """Restore the built-in comparators."""
        with self._lock:
            self._comparators = _default_comparators()

    def for_value(self, value: Any) -> Optional[CompareFunc]:
        """Return the comparator for ``value``'s kind, or None."""
        return self.get(kind_of(value))


default_registry = ComparatorRegistry()


def compare_func_for(kind: Optional[ScalarKind]) -> Optional[CompareFunc]:
    """Look up ``kind`` in the default registry."""
    return default_registry.get(kind)


def default_compare_for(value: Any) -> Optional[CompareFunc]:
    """Look up the default registry comparator for ``value``'s kind."""
    return default_registry.for_value(value)


def as_sort_key(fn: CompareFunc) -> Callable[[Any], Any]:
    """
    Adapt a three-way comparator for ``sorted``/``list.sort``. Wraps
    functools.cmp_to_key.
    """
    return cmp_to_key(fn)
