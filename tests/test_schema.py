import dataclasses
from typing import ClassVar, List

import attr
import pytest

import typson
from typson import (
    CodecOptions,
    FormatError,
    NumberFormatError,
    ReflectionSchema,
    SchemaProvider,
    ShapeMismatchError,
    UInt16,
)


class DictSchema(SchemaProvider):
    """
    Records are dicts, record types are names and sequence types are
    ``("list", element)`` tuples
    """

    records = {
        "Point": (("x", int), ("y", int)),
        "Path": (("name", str), ("points", ("list", "Point"))),
    }

    def is_sequence(self, tp):
        return isinstance(tp, tuple) and tp[0] == "list"

    def element_type(self, tp):
        return tp[1]

    def new_sequence(self, element_type):
        return []

    def fields(self, tp):
        if isinstance(tp, str):
            return self.records.get(tp, ())
        return ()

    def new_instance(self, tp):
        return {"__type__": tp}

    def get_field(self, instance, name):
        try:
            return instance[name]
        except KeyError:
            raise AttributeError(name) from None

    def set_field(self, instance, name, value):
        instance[name] = value


DICT_OPTIONS = CodecOptions(schema=DictSchema())


def test_custom_schema():
    text = '{name:"zigzag",points:[{x:0,y:0},{x:1,y:-1}]}'
    path = typson.decode(text, "Path", DICT_OPTIONS)
    assert path == {
        "__type__": "Path",
        "name": "zigzag",
        "points": [
            {"__type__": "Point", "x": 0, "y": 0},
            {"__type__": "Point", "x": 1, "y": -1},
        ],
    }
    assert typson.encode(path, "Path", DICT_OPTIONS) == text


def test_custom_schema_errors():
    with pytest.raises(ShapeMismatchError):
        typson.encode({"x": 1}, "Point", DICT_OPTIONS)
    with pytest.raises(FormatError):
        typson.decode("{x:1}", "Point", DICT_OPTIONS)
    with pytest.raises(typson.UnsupportedShapeError):
        typson.decode("{x:1}", "Circle", DICT_OPTIONS)


@dataclasses.dataclass(frozen=True)
class FrozenPoint:
    x: int
    y: int


@attr.s(auto_attribs=True, frozen=True, slots=True)
class SlottedPoint:
    x: int
    y: int


@pytest.mark.parametrize("tp", [FrozenPoint, SlottedPoint])
def test_frozen_records(tp):
    assert typson.decode("{x:1,y:-2}", tp) == tp(1, -2)
    assert typson.encode(tp(3, 4), tp) == "{x:3,y:4}"


class Plain:
    kind: ClassVar[str] = "plain"
    label: str
    size: UInt16

    def __init__(self, label, size):
        self.label = label
        self.size = size


def test_plain_annotated_class():
    assert ReflectionSchema().fields(Plain) == (("label", str), ("size", UInt16))
    value = typson.decode('{label:"a",size:3}', Plain)
    assert isinstance(value, Plain)
    assert (value.label, value.size) == ("a", 3)
    assert typson.encode(Plain("b", 65535), Plain) == '{label:"b",size:65535}'


def test_unresolvable_annotations():
    class Broken:
        other: "DoesNotExist"  # noqa: F821

    with pytest.raises(typson.UnsupportedShapeError, match="unresolvable"):
        typson.decode("{other:1}", Broken)


@attr.s(auto_attribs=True)
class Item:
    name: str
    stock: UInt16


@attr.s(auto_attribs=True)
class Shelf:
    items: List[Item]
    capacity: UInt16


class CountingSchema(ReflectionSchema):
    def __init__(self):
        self.created = []

    def new_instance(self, tp):
        self.created.append(tp)
        return super().new_instance(tp)


def test_no_instance_on_failure():
    schema = CountingSchema()
    options = CodecOptions(schema=schema)
    with pytest.raises(NumberFormatError):
        typson.decode('{items:[{name:"a",stock:1}],capacity:70000}', Shelf, options)
    assert Shelf not in schema.created
    assert schema.created == [Item]

    shelf = typson.decode('{items:[{name:"a",stock:1}],capacity:7}', Shelf, options)
    assert shelf == Shelf([Item("a", 1)], 7)
    assert schema.created == [Item, Item, Shelf]
