"""
Interfaces package: callback type aliases and capability protocols.
"""

from .protocols import Comparable, FieldExtractable

__all__ = ["Comparable", "FieldExtractable"]
