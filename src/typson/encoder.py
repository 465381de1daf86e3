"""
Encoding of typed values into compact JSON text

The encoder traverses the value following its shape and builds the text
bottom-up: leaves first, then sequences and records wrapping the text of
their children. The output has no insignificant whitespace.
"""
from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from typing import Any, Optional

from typson.exceptions import ShapeMismatchError, TypsonInternalError
from typson.numeric import format_number
from typson.options import CodecOptions, resolve_options
from typson.shapes import NumberShape, RecordShape, SequenceShape, Shape, StringShape
from typson.timestamps import format_timestamp

__all__ = ["encode_shape"]

logger = logging.getLogger(__name__)


def _encode(value: Any, shape: Shape, options: CodecOptions) -> str:
    if isinstance(shape, StringShape):
        if shape.timestamp:
            if not isinstance(value, datetime.datetime):
                raise ShapeMismatchError(shape.type, value)
            return '"%s"' % format_timestamp(value, signed=options.signed_offsets)
        if not isinstance(value, str):
            raise ShapeMismatchError(shape.type, value)
        return '"%s"' % value.replace('"', '\\"')
    elif isinstance(shape, NumberShape):
        return format_number(shape.kind, value)
    elif isinstance(shape, SequenceShape):
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            raise ShapeMismatchError(shape.type, value)
        items = [_encode(item, shape.element, options) for item in value]
        return "[%s]" % ",".join(items)
    elif isinstance(shape, RecordShape):
        schema = options.schema
        members = []
        for field in shape.fields:
            try:
                field_value = schema.get_field(value, field.name)
            except AttributeError as err:
                raise ShapeMismatchError(shape.type, value) from err
            members.append(
                "%s:%s" % (field.name, _encode(field_value, field.shape, options))
            )
        return "{%s}" % ",".join(members)
    raise TypsonInternalError(f"Unhandled shape {shape!r} in encode_shape()")


def encode_shape(
    value: Any, shape: Shape, options: Optional[CodecOptions] = None
) -> str:
    """Encode a value of the given shape into compact JSON text

    Args:
        value: value to encode
        shape: shape of the value, see `typson.shapes.classify`
        options: codec options, the defaults are used if `None`

    Returns:
        The JSON text of ``value``

    Raises:
        ShapeMismatchError: ``value`` or one of its children doesn't fit its shape
        NumberFormatError: a number doesn't fit its numeric kind
    """
    logger.debug("Encoding %r", shape.type)
    return _encode(value, shape, resolve_options(options))
