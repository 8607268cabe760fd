# collectkit/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Type


class ErrorKind(Enum):
    """
    Closed set of failure categories reported by the library. Every raised
    CollectionError carries exactly one of these.
    """

    NO_COMPUTABLE = "collection is not computable"
    ELEMENT_NO_COMPUTABLE = "element can not be computable"
    KEY_UNCOMPARABLE = "key has unComparable type"
    NO_COMPARABLE = "collection is not comparable"
    NOT_FOUND = "not found"
    INVALID_TYPE = "invalid type"
    NOT_HAVE_KEY_COMPARE_FUNC = "not have key compare func"
    NOT_HAVE_VAL_COMPARE_FUNC = "not have value compare func"
    NIL_FUNC = "func param is nil"
    INVALID_ARGUMENT = "invalid argument"


class CollectionError(Exception):
    """
    Base exception class for errors raised by collectkit.

    :param message: Human readable message. Defaults to the kind's description.
    :param details: Optional dictionary of extra context.
    """

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message if message is not None else self.kind.value
        self.details = details or {}
        super().__init__(self.message)


class NoComputableError(CollectionError):
    """
    Raised when a numeric aggregate is requested on a collection whose
    elements are not numbers.
    """

    kind = ErrorKind.NO_COMPUTABLE


class ElementNoComputableError(NoComputableError):
    """
    Raised when a single element cannot take part in a computation. Callers
    catching NoComputableError see it too.
    """

    kind = ErrorKind.ELEMENT_NO_COMPUTABLE


class KeyUnComparableError(CollectionError):
    """
    Raised when keys extracted for grouping or sorting cannot be compared.
    """

    kind = ErrorKind.KEY_UNCOMPARABLE


class NoComparableError(CollectionError):
    """
    Raised when an operation needs a comparator and none is configured.
    """

    kind = ErrorKind.NO_COMPARABLE


class NotFoundError(CollectionError):
    """
    Raised when a search does not find the requested element.
    """

    kind = ErrorKind.NOT_FOUND


class InvalidTypeError(CollectionError):
    """
    Raised when a value does not have the type an operation requires.
    """

    kind = ErrorKind.INVALID_TYPE


class NotHaveKeyCompareFuncError(CollectionError):
    """
    Raised when ordering by key is requested without a key comparator.
    """

    kind = ErrorKind.NOT_HAVE_KEY_COMPARE_FUNC


class NotHaveValCompareFuncError(CollectionError):
    """
    Raised when ordering by value is requested without a value comparator.
    """

    kind = ErrorKind.NOT_HAVE_VAL_COMPARE_FUNC


class NilFuncError(CollectionError):
    """
    Raised when a required callback argument is None.
    """

    kind = ErrorKind.NIL_FUNC


class InvalidArgumentError(CollectionError):
    """
    Raised for out-of-range indexes, page sizes and similar arguments.
    """

    kind = ErrorKind.INVALID_ARGUMENT


_ERRORS_BY_KIND: Dict[ErrorKind, Type[CollectionError]] = {
    cls.kind: cls
    for cls in (
        NoComputableError,
        ElementNoComputableError,
        KeyUnComparableError,
        NoComparableError,
        NotFoundError,
        InvalidTypeError,
        NotHaveKeyCompareFuncError,
        NotHaveValCompareFuncError,
        NilFuncError,
        InvalidArgumentError,
    )
}


def error_for(kind: ErrorKind, message: Optional[str] = None, **details: Any) -> CollectionError:
    """
    Build a fresh exception instance of the class registered for ``kind``.

    :param kind: The error category.
    :param message: Optional message overriding the kind's description.
    :return: A new CollectionError subclass instance.
    """
    return _ERRORS_BY_KIND[kind](message, details)
