# collectkit/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Comparable(Protocol):
    """
    Capability protocol for values that know how to order themselves.

    Methods:
        compare_to(other): Returns a negative number, zero or a positive number
        when self sorts before, equal to or after ``other``.

    Runtime Invariants:
    - compare_to(x) == 0 for x equal to self.
    - compare_to is antisymmetric and transitive.
    """

    def compare_to(self, other: Any) -> int: ...


@runtime_checkable
class FieldExtractable(Protocol):
    """
    Capability protocol for values exposing named fields to pluck, sort-by and
    key-by operations without attribute inspection.

    Methods:
        get_field(name): Returns the field's value. Raises KeyError when the
        field does not exist.
    """

    def get_field(self, name: str) -> Any: ...
