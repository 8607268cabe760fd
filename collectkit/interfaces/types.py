# collectkit/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, TypeVar

K = TypeVar("K")
V = TypeVar("V")

# Three-way comparators: negative, zero or positive for less, equal, greater.
CompareFunc = Callable[[Any, Any], int]
KeyCompare = Callable[[K, K], int]
ValCompare = Callable[[V, V], int]

# Callback Types
ValueKeyPredicate = Callable[[V, K], bool]
KeyValuePredicate = Callable[[K, V], bool]
ValueKeyVisitor = Callable[[V, K], None]
Extractor = Callable[[V], Any]
