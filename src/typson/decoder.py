"""
Decoding of JSON text into typed values

Decoding works one nesting level at a time: the top-level pattern of a shape
is matched against the whole text, then the raw text captured for each child
is decoded again, recursively, with a fresh top-level pattern for the child's
shape. Strings, timestamps and numbers end the recursion.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from typson.exceptions import FormatError, TypsonInternalError
from typson.numeric import parse_number
from typson.options import CodecOptions, resolve_options
from typson.patterns import CONTENT, compile_pattern
from typson.shapes import NumberShape, RecordShape, SequenceShape, Shape, StringShape
from typson.timestamps import parse_timestamp

__all__ = ["decode_shape"]

logger = logging.getLogger(__name__)


def _unescape(content: str) -> str:
    return content.replace('\\"', '"')


def _decode(text: str, shape: Shape, options: CodecOptions) -> Any:
    match = compile_pattern(shape).fullmatch(text)
    if match is None:
        raise FormatError(text, shape.type)

    if isinstance(shape, StringShape):
        if shape.timestamp:
            return parse_timestamp(match[CONTENT], local=options.local_timestamps)
        return _unescape(match[CONTENT])
    elif isinstance(shape, NumberShape):
        return parse_number(shape.kind, match[0])
    elif isinstance(shape, SequenceShape):
        schema = options.schema
        element = compile_pattern(shape.element, top_level=False)
        result = schema.new_sequence(schema.element_type(shape.type))
        for submatch in element.finditer(match[CONTENT]):
            result.append(_decode(submatch[0], shape.element, options))
        return result
    elif isinstance(shape, RecordShape):
        # decode every field before building the instance, so that errors
        # never leave a partially populated instance behind
        values = [
            (field.name, _decode(match[field.name], field.shape, options))
            for field in shape.fields
        ]
        schema = options.schema
        instance = schema.new_instance(shape.type)
        for name, value in values:
            schema.set_field(instance, name, value)
        return instance
    raise TypsonInternalError(f"Unhandled shape {shape!r} in decode_shape()")


def decode_shape(
    text: str, shape: Shape, options: Optional[CodecOptions] = None
) -> Any:
    """Decode a JSON text into a value of the given shape

    The whole text must match: leading or trailing characters, including
    whitespace, are errors.

    Args:
        text: JSON text to decode
        shape: shape of the expected value, see `typson.shapes.classify`
        options: codec options, the defaults are used if `None`

    Returns:
        A new value of type ``shape.type``

    Raises:
        FormatError: ``text`` doesn't match the grammar of ``shape``
        NumberFormatError: a number is invalid for its numeric kind
    """
    if not isinstance(text, str):
        raise TypeError(f"JSON text must be str, not {type(text).__name__}")
    logger.debug("Decoding %d characters as %r", len(text), shape.type)
    return _decode(text, shape, resolve_options(options))
