"""
Core package providing the collection types and their building blocks.

Architecture:
- errors: error kinds and exception hierarchy
- compare: comparator registry for scalar kinds
- fields: field extraction used by pluck, sort-by and key-by
- map_func: stateless dict helpers
- map_core: key-value store with the sorted-key index
- map_collection: ordered map collection built on map_core
- seq_collection: list-backed collection
"""
