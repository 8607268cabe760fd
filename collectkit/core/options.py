# collectkit/core/options.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

from collectkit.core.compare import ComparatorRegistry, default_registry

if TYPE_CHECKING:
    from collectkit.core.map_core import MappingCore

# An option configures a freshly built core before the collection uses it.
CollectionOption = Callable[["MappingCore"], None]


def with_key_compare(fn: Callable[[Any, Any], int]) -> CollectionOption:
    """
    Use ``fn`` to order keys. Returns a negative number, zero or a positive
    number for less, equal, greater.
    """

    def _apply(core: "MappingCore") -> None:
        core.key_compare = fn

    return _apply


def with_val_compare(fn: Callable[[Any, Any], int]) -> CollectionOption:
    """Use ``fn`` to order values for ``order_value``."""

    def _apply(core: "MappingCore") -> None:
        core.val_compare = fn

    return _apply


def with_registry_compare(registry: Optional[ComparatorRegistry] = None) -> CollectionOption:
    """
    Pick key and value comparators from the registry, based on the kinds of
    the first key and value in the data. Comparators already set by earlier
    options are kept. Does nothing for empty data.
    """

    def _apply(core: "MappingCore") -> None:
        reg = registry if registry is not None else default_registry
        for key, value in core.data.items():
            if core.key_compare is None:
                core.key_compare = reg.for_value(key)
            if core.val_compare is None:
                core.val_compare = reg.for_value(value)
            break

    return _apply
