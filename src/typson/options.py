"""
Per-call configuration of the codec
"""
from __future__ import annotations

from typing import Optional

import attr
from attr import Factory

from typson.schema import ReflectionSchema, SchemaProvider

__all__ = ["CodecOptions", "DEFAULT_OPTIONS", "resolve_options"]


@attr.dataclass(frozen=True)
class CodecOptions:
    """
    Options shared by a whole decode or encode call

    Attributes:
        schema: provider used to inspect and build sequences and records
        signed_offsets: render negative UTC offsets of timestamps with a ``-``
            sign. By default the offset is always prefixed by ``+``.
        local_timestamps: decode timestamps as naive datetimes in local time,
            matching how naive datetimes are encoded. By default decoded
            timestamps are aware when the text has an offset.
    """

    schema: SchemaProvider = Factory(ReflectionSchema)
    signed_offsets: bool = False
    local_timestamps: bool = False


DEFAULT_OPTIONS = CodecOptions()


def resolve_options(options: Optional[CodecOptions]) -> CodecOptions:
    return DEFAULT_OPTIONS if options is None else options
