"""Module containing all the exceptions used in `typson`

All exception are subclasses of `TypsonError`, except for `TypsonInternalError`.
This is intended, as `TypsonInternalError` is only raised in case of bugs and
should not be catched. Please make a bug report if you ever encounter `TypsonInternalError`
"""
from __future__ import annotations

from typing import Any, Tuple

import attr

from typson.aliases import TypeForm
from typson.utils import autoformat

__all__ = [
    "TypsonInternalError",
    "TypsonError",
    "UnsupportedShapeError",
    "SchemaCycleError",
    "FormatError",
    "NumberFormatError",
    "ShapeMismatchError",
]


@attr.dataclass(auto_exc=True)
class TypsonInternalError(BaseException):
    """
    Raised when typson encounters an internal error

    If you see this exception, please make a bug report

    Attributes:
        msg: explanation of the error
    """

    msg: str


class TypsonError(Exception):
    """
    Base exception in typson for all other exceptions
    """

    msg: str

    def __str__(self):
        return self.msg


@autoformat
@attr.dataclass(auto_exc=True)
class UnsupportedShapeError(TypsonError, TypeError):
    """
    Raised when a type is neither a string, a timestamp, a supported number,
    a sequence nor a record

    Attributes:
        type: type that could not be classified
        msg: explanation of the error
    """

    type: TypeForm
    msg: str = "{type!r} is not supported for (de)serializing"


@autoformat
@attr.dataclass(auto_exc=True)
class SchemaCycleError(UnsupportedShapeError):
    """
    Raised when a record type contains itself through its fields

    Attributes:
        type: type that closes the cycle
        cycle: types on the cycle, outermost first
        msg: explanation of the error
    """

    cycle: Tuple[TypeForm, ...] = ()
    msg: str = "{type!r} contains itself through the cycle {cycle!r}"


@autoformat
@attr.dataclass(auto_exc=True)
class FormatError(TypsonError, ValueError):
    """
    Raised when a JSON text does not match the grammar of the expected type

    Attributes:
        doc: text that failed to match
        type: expected type
        msg: explanation of the error
    """

    doc: str
    type: TypeForm
    msg: str = "{doc!r} is not a valid JSON text for {type!r}"


@autoformat
@attr.dataclass(auto_exc=True)
class NumberFormatError(TypsonError, ValueError):
    """
    Raised when a number cannot be parsed or formatted as its numeric kind,
    either because the text is malformed or because the value is out of range

    Attributes:
        value: offending text or value
        kind: name of the numeric kind
        msg: explanation of the error
    """

    value: Any
    kind: str
    msg: str = "{value!r} is not a valid {kind} number"


@autoformat
@attr.dataclass(auto_exc=True)
class ShapeMismatchError(TypsonError, TypeError):
    """
    Raised when a value to encode doesn't have the excepted type

    Attributes:
        type: expected type
        value: invalid value
        msg: explanation of the error
    """

    type: TypeForm
    value: Any
    msg: str = "{value!r} doesn't have type {type!r}"
