from hypothesis import given, settings

import typson
from typson import CodecOptions, TypedCodec

from .strategies import text, timestamps, typed_values


@settings(deadline=None)
@given(typed_values())
def test_roundtrip(tp_value):
    tp, value = tp_value
    assert typson.decode(typson.encode(value, tp), tp) == value


@settings(deadline=None)
@given(typed_values())
def test_typed_codec_roundtrip(tp_value):
    tp, value = tp_value
    codec = TypedCodec[tp]
    assert codec.decode(codec.encode(value)) == value


@given(text)
def test_string_roundtrip(value):
    assert typson.decode(typson.encode(value, str), str) == value


@given(timestamps(signed=True))
def test_signed_timestamp_roundtrip(value):
    options = CodecOptions(signed_offsets=True)
    encoded = typson.encode(value, type(value), options)
    assert typson.decode(encoded, type(value), options) == value
