"""
Regular expressions matching the JSON text of a shape

A pattern only decomposes one level of nesting: at top level, it has a named
group for each immediate child (a group per record field, or a single
``content`` group for strings and sequences). The internal structure of
nested records and sequences is matched, but not captured; the decoder
rebuilds a fresh top-level pattern to decode each captured child.
"""
from __future__ import annotations

import functools
import logging
import re

from typson.exceptions import TypsonInternalError
from typson.shapes import NumberShape, RecordShape, SequenceShape, Shape, StringShape

__all__ = ["CONTENT", "build_pattern", "compile_pattern"]

logger = logging.getLogger(__name__)

CONTENT = "content"
"""Name of the group capturing strings and the elements of sequences"""

_STRING_BODY = r'(?:\\"|[^"])*'
_NUMBER = r"(?:-?\d+(?:\.\d*)?)"

_CACHE_SIZE = 1024


def _group(pattern: str, name: str, top_level: bool) -> str:
    if top_level:
        return f"(?P<{name}>{pattern})"
    return f"(?:{pattern})"


def _hashable(shape: Shape) -> bool:
    try:
        hash(shape)
    except TypeError:
        # e.g. Annotated metadata holding a dict
        return False
    return True


def _memoize(func):
    """Cache ``func(shape, top_level)``, computing it directly for unhashable shapes"""
    cached = functools.lru_cache(maxsize=_CACHE_SIZE)(func)

    @functools.wraps(func)
    def wrapper(shape: Shape, top_level: bool = True):
        if _hashable(shape):
            return cached(shape, top_level)
        return func(shape, top_level)

    wrapper.cache_info = cached.cache_info
    wrapper.cache_clear = cached.cache_clear
    return wrapper


@_memoize
def build_pattern(shape: Shape, top_level: bool = True) -> str:
    """Build the source of the regular expression matching a shape

    Elements of sequences and fields of records are separated by exactly
    one comma.

    Args:
        shape: shape of the values to match
        top_level: whether to add named groups for the immediate children of
            ``shape``

    Returns:
        The source of the regular expression
    """
    if isinstance(shape, StringShape):
        return f'"{_group(_STRING_BODY, CONTENT, top_level)}"'
    elif isinstance(shape, NumberShape):
        return _NUMBER
    elif isinstance(shape, SequenceShape):
        element = "(?:%s)" % build_pattern(shape.element, top_level=False)
        return r"\[%s\]" % _group(
            f"(?:{element}(?:,{element})*)?", CONTENT, top_level
        )
    elif isinstance(shape, RecordShape):
        members = []
        for field in shape.fields:
            value = build_pattern(field.shape, top_level=False)
            members.append(
                "%s:%s" % (re.escape(field.name), _group(value, field.name, top_level))
            )
        return r"\{%s\}" % ",".join(members)
    raise TypsonInternalError(f"Unhandled shape {shape!r} in build_pattern()")


@_memoize
def compile_pattern(shape: Shape, top_level: bool = True) -> re.Pattern:
    """Return the compiled regular expression matching a shape

    Digits only match ASCII ``0-9``. See `build_pattern`
    """
    source = build_pattern(shape, top_level)
    logger.debug("Compiling pattern for %r: %s", shape.type, source)
    return re.compile(source, re.ASCII)
