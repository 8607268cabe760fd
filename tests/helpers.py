# tests/helpers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Shared comparators and record types for the collection tests."""

from dataclasses import dataclass


def str_compare(a, b):
    """Ascending three-way comparison for strings."""
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def int_compare(a, b):
    return (a > b) - (a < b)


@dataclass
class User:
    """Record type for pluck and sort-by tests."""

    name: str
    age: int
    score: float = 0.0
