import datetime
import decimal
from typing import (
    Annotated,
    Dict,
    List,
    MutableSequence,
    Optional,
    Sequence,
    Tuple,
)

import attr
import pytest

from typson import (
    Decimal128,
    Float32,
    Int8,
    NumberKind,
    SchemaCycleError,
    UInt64,
    UnsupportedShapeError,
)
from typson.patterns import build_pattern, compile_pattern
from typson.shapes import (
    Field,
    NumberShape,
    RecordShape,
    SequenceShape,
    StringShape,
    classify,
)


@attr.s(auto_attribs=True)
class Inner:
    name: str


@attr.s(auto_attribs=True)
class Outer:
    inner: Inner
    count: Annotated[int, NumberKind.INT32]


@attr.s(auto_attribs=True)
class Node:
    label: str
    children: List["Node"]


@attr.s(auto_attribs=True)
class Left:
    right: "Right"


@attr.s(auto_attribs=True)
class Right:
    left: List[Left]


class Empty:
    pass


@pytest.mark.parametrize(
    "tp, kind",
    [
        (int, NumberKind.INT64),
        (float, NumberKind.FLOAT64),
        (decimal.Decimal, NumberKind.DECIMAL),
        (Int8, NumberKind.INT8),
        (UInt64, NumberKind.UINT64),
        (Float32, NumberKind.FLOAT32),
        (Decimal128, NumberKind.DECIMAL),
        (Annotated[int, "doc", NumberKind.UINT16], NumberKind.UINT16),
    ],
)
def test_numbers(tp, kind):
    assert classify(tp) == NumberShape(tp, kind)


def test_leaves():
    assert classify(str) == StringShape(str)
    assert classify(datetime.datetime) == StringShape(datetime.datetime, timestamp=True)
    assert classify(Annotated[str, "doc"]) == StringShape(str)


def test_sequences():
    for tp in (List[int], list[int], Sequence[int], MutableSequence[int]):
        assert classify(tp) == SequenceShape(tp, NumberShape(int, NumberKind.INT64))
    nested = classify(List[List[str]])
    assert nested.element == SequenceShape(List[str], StringShape(str))


def test_records():
    assert classify(Outer) == RecordShape(
        Outer,
        (
            Field("inner", RecordShape(Inner, (Field("name", StringShape(str)),))),
            Field(
                "count",
                NumberShape(Annotated[int, NumberKind.INT32], NumberKind.INT32),
            ),
        ),
    )


def test_shapes_are_hashable():
    assert hash(classify(List[Outer])) == hash(classify(List[Outer]))


@pytest.mark.parametrize(
    "tp",
    [
        bool,
        dict,
        Dict[str, int],
        Optional[int],
        Tuple[int, ...],
        Empty,
        Empty(),
        List[bool],
        bytes,
        None,
    ],
)
def test_unsupported(tp):
    with pytest.raises(UnsupportedShapeError):
        classify(tp)


def test_bool_message():
    with pytest.raises(UnsupportedShapeError, match="no JSON literal"):
        classify(bool)


def test_cycles():
    with pytest.raises(SchemaCycleError) as exc_info:
        classify(Node)
    assert exc_info.value.type is Node
    assert exc_info.value.cycle == (Node, List[Node])
    with pytest.raises(SchemaCycleError) as exc_info:
        classify(Left)
    assert exc_info.value.cycle == (Left, Right, List[Left])
    # cycles are unsupported shapes
    with pytest.raises(UnsupportedShapeError):
        classify(List[Node])


def test_repeated_type_is_not_a_cycle():
    @attr.s(auto_attribs=True)
    class Pair:
        first: Inner
        second: Inner
        many: List[Inner]

    shape = classify(Pair)
    assert [field.name for field in shape.fields] == ["first", "second", "many"]


def test_string_pattern():
    assert build_pattern(classify(str)) == r'"(?P<content>(?:\\"|[^"])*)"'
    assert build_pattern(classify(str), top_level=False) == r'"(?:(?:\\"|[^"])*)"'


NUMBER = r"(?:-?\d+(?:\.\d*)?)"


def test_number_pattern():
    assert build_pattern(classify(int)) == NUMBER
    assert build_pattern(classify(Float32)) == build_pattern(classify(int))


def test_record_pattern():
    assert build_pattern(classify(Inner)) == r'\{name:(?P<name>"(?:(?:\\"|[^"])*)")\}'


def test_sequence_pattern():
    element = f"(?:{NUMBER})"
    assert build_pattern(classify(List[int])) == (
        r"\[(?P<content>(?:%s(?:,%s)*)?)\]" % (element, element)
    )


def test_only_immediate_children_are_captured():
    pattern = compile_pattern(classify(Outer))
    assert set(pattern.groupindex) == {"inner", "count"}
    match = pattern.fullmatch('{inner:{name:"x"},count:3}')
    assert match["inner"] == '{name:"x"}'
    assert match["count"] == "3"
    assert not compile_pattern(classify(Outer), top_level=False).groupindex


def test_patterns_are_memoized():
    assert compile_pattern(classify(List[Inner])) is compile_pattern(
        classify(List[Inner])
    )


def test_unhashable_annotations():
    tp = List[Annotated[str, {"doc": "a name"}]]
    shape = classify(tp)
    assert shape == SequenceShape(tp, StringShape(str))
    assert compile_pattern(shape).fullmatch('["a","b"]')
    assert build_pattern(shape) == build_pattern(classify(List[str]))


def test_ascii_digits_only():
    assert compile_pattern(classify(int)).fullmatch("12")
    assert compile_pattern(classify(int)).fullmatch("١٢") is None


def test_pattern_cache_is_bounded():
    assert build_pattern.cache_info().maxsize is not None
    assert compile_pattern.cache_info().maxsize is not None
    for _ in range(3):
        record = attr.make_class("Temporary", {"value": attr.ib(type=int)})
        compile_pattern(classify(record))
    info = compile_pattern.cache_info()
    assert info.currsize <= info.maxsize
