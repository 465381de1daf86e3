"""
Numeric kinds supported by typson

Python has a single arbitrary-precision `int`, so fixed-width integers and
single precision floats are expressed as `typing.Annotated` type hints
carrying a `NumberKind`::

    from typson import UInt8

    @attr.s(auto_attribs=True)
    class Pixel:
        red: UInt8
        green: UInt8
        blue: UInt8

Each kind maps to a parser (text to value) and a formatter (value to text)
in a closed table. Parsers and formatters raise `NumberFormatError` on
malformed text and on values outside the range of the kind.
"""
from __future__ import annotations

import decimal
import enum
import math
import re
import struct
from typing import Annotated, Any, Callable, Dict, Optional, Union

import attr

from typson.exceptions import NumberFormatError, ShapeMismatchError

__all__ = [
    "NumberKind",
    "NumericCodec",
    "Int8",
    "UInt8",
    "Int16",
    "UInt16",
    "Int32",
    "UInt32",
    "Int64",
    "UInt64",
    "Float32",
    "Float64",
    "Decimal128",
    "builtin_kind",
    "get_codec",
    "parse_number",
    "format_number",
]

Number = Union[int, float, decimal.Decimal]  # pylint: disable=unsubscriptable-object

_INTEGER_RE = re.compile(r"-?\d+", re.ASCII)
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d*)?", re.ASCII)
_DECIMAL_MAX = decimal.Decimal(2 ** 96 - 1)


class NumberKind(enum.Enum):
    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    DECIMAL = "decimal"


Int8 = Annotated[int, NumberKind.INT8]
UInt8 = Annotated[int, NumberKind.UINT8]
Int16 = Annotated[int, NumberKind.INT16]
UInt16 = Annotated[int, NumberKind.UINT16]
Int32 = Annotated[int, NumberKind.INT32]
UInt32 = Annotated[int, NumberKind.UINT32]
Int64 = Annotated[int, NumberKind.INT64]
UInt64 = Annotated[int, NumberKind.UINT64]
Float32 = Annotated[float, NumberKind.FLOAT32]
Float64 = Annotated[float, NumberKind.FLOAT64]
Decimal128 = Annotated[decimal.Decimal, NumberKind.DECIMAL]

_BUILTIN_KINDS = {
    int: NumberKind.INT64,
    float: NumberKind.FLOAT64,
    decimal.Decimal: NumberKind.DECIMAL,
}


def builtin_kind(tp: Any) -> Optional[NumberKind]:
    """Return the kind used for a builtin numeric class, or `None`"""
    if not isinstance(tp, type) or tp is bool:
        return None
    return _BUILTIN_KINDS.get(tp)


@attr.dataclass(frozen=True)
class NumericCodec:
    """
    Parser and formatter for a single numeric kind
    """

    kind: NumberKind
    parse: Callable[[str], Number]
    format: Callable[[Number], str]


############
# INTEGERS #
############


def _integer_codec(kind: NumberKind, bits: int, signed: bool) -> NumericCodec:
    if signed:
        low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    else:
        low, high = 0, 2 ** bits - 1

    def parse(text: str) -> int:
        if not _INTEGER_RE.fullmatch(text):
            raise NumberFormatError(text, kind.value)
        if len(text.lstrip("-").lstrip("0")) > 20:
            raise NumberFormatError(
                text, kind.value, msg="{value} overflows the {kind} range"
            )
        value = int(text)
        if not low <= value <= high:
            raise NumberFormatError(
                text, kind.value, msg="{value} overflows the {kind} range"
            )
        return value

    def format_(value: int) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ShapeMismatchError(kind.value, value)
        if not low <= value <= high:
            raise NumberFormatError(
                value, kind.value, msg="{value} overflows the {kind} range"
            )
        return str(value)

    return NumericCodec(kind, parse, format_)


##########
# FLOATS #
##########


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _reads_back(digits: str, single: float) -> bool:
    try:
        return _to_float32(float(digits)) == single
    except OverflowError:
        return False


def _positional(digits: str) -> str:
    """Render the shortest repr of a float without exponent"""
    text = format(decimal.Decimal(digits), "f")
    if "." not in text:
        text += ".0"
    return text


def _check_text(text: str, kind: NumberKind) -> str:
    if not isinstance(text, str) or not _NUMBER_RE.fullmatch(text):
        raise NumberFormatError(text, kind.value)
    return text


def _check_float(value: Any, kind: NumberKind) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ShapeMismatchError(kind.value, value)
    value = float(value)
    if not math.isfinite(value):
        raise NumberFormatError(value, kind.value)
    return value


def _parse_float64(text: str) -> float:
    value = float(_check_text(text, NumberKind.FLOAT64))
    if not math.isfinite(value):
        raise NumberFormatError(
            text, NumberKind.FLOAT64.value, msg="{value} overflows the {kind} range"
        )
    return value


def _format_float64(value: float) -> str:
    return _positional(repr(_check_float(value, NumberKind.FLOAT64)))


def _parse_float32(text: str) -> float:
    value = float(_check_text(text, NumberKind.FLOAT32))
    try:
        if not math.isfinite(value):
            raise OverflowError(text)
        return _to_float32(value)
    except OverflowError:
        raise NumberFormatError(
            text, NumberKind.FLOAT32.value, msg="{value} overflows the {kind} range"
        ) from None


def _format_float32(value: float) -> str:
    value = _check_float(value, NumberKind.FLOAT32)
    try:
        single = _to_float32(value)
    except OverflowError:
        raise NumberFormatError(
            value, NumberKind.FLOAT32.value, msg="{value} overflows the {kind} range"
        ) from None
    # shortest digits that read back as the same single precision value
    for precision in range(1, 10):
        digits = "%.*g" % (precision, single)
        if _reads_back(digits, single):
            return _positional(digits)
    return _positional(repr(single))


############
# DECIMALS #
############


def _parse_decimal(text: str) -> decimal.Decimal:
    value = decimal.Decimal(_check_text(text, NumberKind.DECIMAL))
    if value.copy_abs() > _DECIMAL_MAX:
        raise NumberFormatError(
            text, NumberKind.DECIMAL.value, msg="{value} overflows the {kind} range"
        )
    return value


def _format_decimal(value: decimal.Decimal) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, decimal.Decimal)):
        raise ShapeMismatchError(NumberKind.DECIMAL.value, value)
    value = decimal.Decimal(value)
    if not value.is_finite() or value.copy_abs() > _DECIMAL_MAX:
        raise NumberFormatError(value, NumberKind.DECIMAL.value)
    return format(value, "f")


_NUMERIC_TABLE: Dict[NumberKind, NumericCodec] = {
    codec.kind: codec
    for codec in (
        _integer_codec(NumberKind.INT8, 8, signed=True),
        _integer_codec(NumberKind.UINT8, 8, signed=False),
        _integer_codec(NumberKind.INT16, 16, signed=True),
        _integer_codec(NumberKind.UINT16, 16, signed=False),
        _integer_codec(NumberKind.INT32, 32, signed=True),
        _integer_codec(NumberKind.UINT32, 32, signed=False),
        _integer_codec(NumberKind.INT64, 64, signed=True),
        _integer_codec(NumberKind.UINT64, 64, signed=False),
        NumericCodec(NumberKind.FLOAT32, _parse_float32, _format_float32),
        NumericCodec(NumberKind.FLOAT64, _parse_float64, _format_float64),
        NumericCodec(NumberKind.DECIMAL, _parse_decimal, _format_decimal),
    )
}


def get_codec(kind: NumberKind) -> NumericCodec:
    """Return the parser and formatter of a numeric kind"""
    return _NUMERIC_TABLE[kind]


def parse_number(kind: NumberKind, text: str) -> Number:
    """
    Parse the text of a JSON number as the given kind

    Raises:
        NumberFormatError: the text is malformed or overflows the kind
    """
    return _NUMERIC_TABLE[kind].parse(text)


def format_number(kind: NumberKind, value: Number) -> str:
    """
    Format a number of the given kind as JSON text

    Raises:
        NumberFormatError: the value is not finite or overflows the kind
        ShapeMismatchError: the value is not a number of that kind
    """
    return _NUMERIC_TABLE[kind].format(value)
