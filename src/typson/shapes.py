"""
Classification of types into shapes

A shape is the part of a type that matters to the codec: whether it is a
string-like leaf, a number of a given kind, a sequence or a record, and the
shapes of its children. Shapes are derived once per decode or encode call by
`classify` and are immutable and hashable.
"""
from __future__ import annotations

import datetime
import logging
from typing import Annotated, Optional, Tuple, get_args, get_origin

import attr

from typson.aliases import TypeForm
from typson.exceptions import SchemaCycleError, UnsupportedShapeError
from typson.numeric import NumberKind, builtin_kind
from typson.schema import ReflectionSchema, SchemaProvider

__all__ = [
    "Shape",
    "StringShape",
    "NumberShape",
    "SequenceShape",
    "RecordShape",
    "Field",
    "classify",
]

logger = logging.getLogger(__name__)


@attr.dataclass(frozen=True)
class Shape:
    """
    Base class of all shapes

    Attributes:
        type: type hint the shape was derived from
    """

    type: TypeForm


@attr.dataclass(frozen=True)
class StringShape(Shape):
    """Shape of strings and timestamps, both written as quoted JSON strings"""

    timestamp: bool = False


@attr.dataclass(frozen=True)
class NumberShape(Shape):
    """Shape of numbers of a given kind"""

    kind: NumberKind


@attr.dataclass(frozen=True)
class SequenceShape(Shape):
    """Shape of homogeneous ordered sequences"""

    element: Shape


@attr.dataclass(frozen=True)
class Field:
    """
    Named field of a record

    Attributes:
        name: name of the field, used both as JSON key and attribute name
        shape: shape of the field's values
    """

    name: str
    shape: Shape


@attr.dataclass(frozen=True)
class RecordShape(Shape):
    """Shape of records, with their fields in declaration order"""

    fields: Tuple[Field, ...]


def _number_kind(tp: TypeForm) -> Optional[NumberKind]:
    if get_origin(tp) is Annotated:
        for meta in tp.__metadata__:
            if isinstance(meta, NumberKind):
                return meta
    return builtin_kind(tp)


def _classify(tp: TypeForm, schema: SchemaProvider, guard: Tuple[TypeForm, ...]):
    """
    Internal implementation of classify

    Has a guard to reject cyclic records
    """
    if (kind := _number_kind(tp)) is not None:
        return NumberShape(tp, kind)
    if get_origin(tp) is Annotated:
        # metadata unrelated to typson
        return _classify(get_args(tp)[0], schema, guard)
    if tp is datetime.datetime:
        return StringShape(tp, timestamp=True)
    if tp is str:
        return StringShape(tp)
    if tp is bool:
        raise UnsupportedShapeError(tp, msg="{type!r} has no JSON literal in typson")
    if tp in guard:
        raise SchemaCycleError(tp, cycle=guard[guard.index(tp) :])
    if schema.is_sequence(tp):
        element = _classify(schema.element_type(tp), schema, (*guard, tp))
        return SequenceShape(tp, element)
    if fields := schema.fields(tp):
        guard = (*guard, tp)
        return RecordShape(
            tp,
            tuple(
                Field(name, _classify(field_tp, schema, guard))
                for name, field_tp in fields
            ),
        )
    raise UnsupportedShapeError(tp)


def classify(tp: TypeForm, schema: Optional[SchemaProvider] = None) -> Shape:
    """Classify a type into the shape that drives its (de)serialization

    Args:
        tp: type hint to classify
        schema: schema provider to inspect sequences and records. Defaults to
            `ReflectionSchema`

    Returns:
        A `StringShape`, `NumberShape`, `SequenceShape` or `RecordShape`

    Raises:
        UnsupportedShapeError: ``tp`` or one of the types it contains is
            not supported
        SchemaCycleError: ``tp`` contains itself
    """
    if schema is None:
        schema = ReflectionSchema()
    shape = _classify(tp, schema, ())
    logger.debug("Classified %r as %s", tp, type(shape).__name__)
    return shape
