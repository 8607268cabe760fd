# collectkit/core/fields.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, List, Type

from collectkit.core.errors import InvalidTypeError
from collectkit.interfaces.protocols import FieldExtractable


class _Missing:
    """Sentinel type marking an absent field."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def extract_field(obj: Any, name: str) -> Any:
    """
    Read field ``name`` from ``obj``.

    FieldExtractable objects are asked through ``get_field``, mappings through
    item lookup and everything else through attribute lookup.

    :param obj: The value to read from.
    :param name: Field name.
    :return: The field value, or MISSING if ``obj`` is None or has no such field.
    """
    if obj is None:
        return MISSING
    if isinstance(obj, FieldExtractable):
        try:
            return obj.get_field(name)
        except KeyError:
            return MISSING
    if isinstance(obj, Mapping):
        return obj.get(name, MISSING)
    return getattr(obj, name, MISSING)


def has_field(obj: Any, name: str) -> bool:
    return extract_field(obj, name) is not MISSING


def pluck_values(values: Iterable[Any], name: str) -> List[Any]:
    """Extract ``name`` from every value, skipping values lacking the field."""
    result = []
    for value in values:
        extracted = extract_field(value, name)
        if extracted is not MISSING:
            result.append(extracted)
    return result


def pluck_typed(values: Iterable[Any], name: str, expect: Type) -> List[Any]:
    """
    Extract ``name`` from every value and check it is an ``expect`` instance.

    :raises InvalidTypeError: If a value lacks the field or the field has the
        wrong type.
    """
    result = []
    for value in values:
        extracted = extract_field(value, name)
        if extracted is MISSING:
            raise InvalidTypeError(
                f"value {value!r} has no field '{name}'",
                {"field": name},
            )
        if not _is_instance(extracted, expect):
            raise InvalidTypeError(
                f"field '{name}' is {type(extracted).__name__}, expected {expect.__name__}",
                {"field": name, "expected": expect.__name__, "actual": type(extracted).__name__},
            )
        result.append(extracted)
    return result


def _is_instance(value: Any, expect: Type) -> bool:
    # bool is an int subclass but never counts as a number field.
    if isinstance(value, bool) and expect in (int, float):
        return False
    if expect is float and isinstance(value, int):
        return True
    return isinstance(value, expect)
