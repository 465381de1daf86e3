"""
Module for the schema providers

A schema provider is the only way typson inspects the types it (de)serializes:
it tells which types are sequences and records, lists the fields of records
and builds new instances. `ReflectionSchema` is the default provider and relies
on python introspection. Subclass `SchemaProvider` to serialize types that
python cannot introspect, or to restrict or rename the fields of a record.
"""
from __future__ import annotations

import collections.abc
import dataclasses
import typing
from abc import ABC, abstractmethod
from typing import Any, ClassVar, MutableSequence, Tuple, get_args, get_origin

import attr

from typson.aliases import TypeForm
from typson.exceptions import UnsupportedShapeError

__all__ = [
    "FieldSpec",
    "SchemaProvider",
    "ReflectionSchema",
]

FieldSpec = Tuple[str, TypeForm]
"""Name and type of a record field"""

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)


class SchemaProvider(ABC):
    """
    Capability interface used by typson to inspect and build values

    Implementations must be safe for concurrent reads if the codec is used
    from several threads, and must only describe finite, acyclic type graphs.
    """

    @abstractmethod
    def is_sequence(self, tp: TypeForm) -> bool:
        """Return `True` if ``tp`` is an homogeneous ordered sequence type"""

    @abstractmethod
    def element_type(self, tp: TypeForm) -> TypeForm:
        """Return the type of the elements of the sequence type ``tp``"""

    @abstractmethod
    def new_sequence(self, element_type: TypeForm) -> MutableSequence:
        """Return a new empty sequence for elements of type ``element_type``"""

    @abstractmethod
    def fields(self, tp: TypeForm) -> Tuple[FieldSpec, ...]:
        """
        Return the fields of a record type, in declaration order

        An empty tuple means ``tp`` is not a record. Field names must be unique
        valid python identifiers.
        """

    @abstractmethod
    def new_instance(self, tp: TypeForm) -> Any:
        """Return a blank instance of the record type ``tp``"""

    @abstractmethod
    def get_field(self, instance: Any, name: str) -> Any:
        """Read the field ``name`` of a record instance"""

    @abstractmethod
    def set_field(self, instance: Any, name: str, value: Any) -> None:
        """Write the field ``name`` of a record instance"""


class ReflectionSchema(SchemaProvider):
    """
    Schema provider based on python introspection

    Supported sequences are ``list[T]``, ``typing.List[T]``, ``Sequence[T]`` and
    ``MutableSequence[T]``; they are always decoded as `list`. Supported records
    are attrs classes, dataclasses and plain classes with annotations.

    Instances are created without calling ``__init__`` and their fields are set
    with `object.__setattr__`, so frozen and slotted classes are supported.
    """

    def is_sequence(self, tp: TypeForm) -> bool:
        orig = get_origin(tp)
        return (
            isinstance(orig, type)
            and orig in _SEQUENCE_ORIGINS
            and len(get_args(tp)) == 1
        )

    def element_type(self, tp: TypeForm) -> TypeForm:
        return get_args(tp)[0]

    def new_sequence(self, element_type: TypeForm) -> MutableSequence:
        return []

    def fields(self, tp: TypeForm) -> Tuple[FieldSpec, ...]:
        if not isinstance(tp, type) or tp.__module__ == "builtins":
            return ()
        try:
            hints = typing.get_type_hints(
                tp, localns={tp.__name__: tp}, include_extras=True
            )
        except NameError as err:
            raise UnsupportedShapeError(
                tp, msg="{type!r} has unresolvable annotations"
            ) from err
        if attr.has(tp):
            return tuple(
                (field.name, hints.get(field.name, field.type))
                for field in attr.fields(tp)
            )
        elif dataclasses.is_dataclass(tp):
            names = [field.name for field in dataclasses.fields(tp)]
        else:
            names = [
                name
                for name, hint in hints.items()
                if get_origin(hint) is not ClassVar and hint is not ClassVar
            ]
        return tuple((name, hints[name]) for name in names)

    def new_instance(self, tp: TypeForm) -> Any:
        return tp.__new__(tp)

    def get_field(self, instance: Any, name: str) -> Any:
        return getattr(instance, name)

    def set_field(self, instance: Any, name: str, value: Any) -> None:
        object.__setattr__(instance, name, value)
