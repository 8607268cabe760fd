"""collectkit: chainable collections over lists and ordered dicts

This package provides Laravel/Lodash-style collection operations (filter, map,
reduce, sort, pluck, set algebra) over two shapes: sequences and key-value
mappings with a stable, comparator-driven iteration order.

Responsibilities:
    - Ordered map collection with an incrementally maintained sorted-key index
    - Thread-safe wrapper guarded by a reader/writer lock
    - Sequence collection
    - Stateless dict helpers
    - Default comparators for numeric kinds

Cross-cutting Concerns:
    Thread Safety:
        - Collections are not synchronized; SafeMapCollection is
        - Derived collections never share mutable state

    Error Handling:
        - One exception class per ErrorKind, all derived from CollectionError
        - Lookup misses reported as (value, found) pairs, not exceptions

    Logging:
        - Module loggers under the "collectkit" namespace, DEBUG only
        - No handlers installed by the library
"""

import logging

from collectkit.core.compare import (
    ComparatorRegistry,
    ScalarKind,
    compare_func_for,
    default_compare_for,
    default_registry,
    kind_of,
    natural_compare,
    reverse_compare,
)
from collectkit.core.errors import (
    CollectionError,
    ElementNoComputableError,
    ErrorKind,
    InvalidArgumentError,
    InvalidTypeError,
    KeyUnComparableError,
    NilFuncError,
    NoComparableError,
    NoComputableError,
    NotFoundError,
    NotHaveKeyCompareFuncError,
    NotHaveValCompareFuncError,
    error_for,
)
from collectkit.core.map_collection import MapCollection
from collectkit.core.options import with_key_compare, with_registry_compare, with_val_compare
from collectkit.core.seq_collection import SeqCollection
from collectkit.export import (
    new_empty_collection,
    new_empty_map_collection,
    new_map_collect,
    new_safe_map_collect,
    new_slice_collect,
)
from collectkit.runtime.safe_collection import SafeMapCollection

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Collections
    "MapCollection",
    "SafeMapCollection",
    "SeqCollection",
    # Constructors and options
    "new_map_collect",
    "new_empty_map_collection",
    "new_safe_map_collect",
    "new_slice_collect",
    "new_empty_collection",
    "with_key_compare",
    "with_val_compare",
    "with_registry_compare",
    # Comparators
    "ComparatorRegistry",
    "ScalarKind",
    "compare_func_for",
    "default_compare_for",
    "default_registry",
    "kind_of",
    "natural_compare",
    "reverse_compare",
    # Errors
    "CollectionError",
    "ElementNoComputableError",
    "ErrorKind",
    "InvalidArgumentError",
    "InvalidTypeError",
    "KeyUnComparableError",
    "NilFuncError",
    "NoComparableError",
    "NoComputableError",
    "NotFoundError",
    "NotHaveKeyCompareFuncError",
    "NotHaveValCompareFuncError",
    "error_for",
]
