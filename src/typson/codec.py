"""
Public (de)serialization API of typson

Usage::

    @attr.s(auto_attribs=True)
    class Inner:
        name: str

    typson.encode([Inner("a"), Inner("b")], List[Inner])
    # '[{name:"a"},{name:"b"}]'

    typson.decode('{name:"x"}', Inner)
    # Inner(name='x')

    InnerList = typson.TypedCodec[List[Inner]]
    InnerList.decode('[{name:"a"}]')
"""
from __future__ import annotations

import functools
import logging
import types
from typing import IO, Any, ClassVar, Optional

from typson.aliases import TypeForm
from typson.decoder import decode_shape
from typson.encoder import encode_shape
from typson.options import CodecOptions, resolve_options
from typson.shapes import classify
from typson.utils import MISSING, exec_body_factory, type_repr

__all__ = [
    "decode",
    "encode",
    "load",
    "dump",
    "TypedCodec",
]

logger = logging.getLogger(__name__)


def decode(text: str, tp: TypeForm, options: Optional[CodecOptions] = None) -> Any:
    """
    Parse the text representing a single JSON value into a value of type ``tp``

    Arguments:
        text: JSON text to decode
        tp: type to decode the text into
        options: codec options, the defaults are used if `None`

    Returns:
        A new value of type ``tp``

    Raises:
        UnsupportedShapeError: ``tp`` is not supported
        FormatError: ``text`` is not a valid JSON text for ``tp``
        NumberFormatError: a number is invalid for its numeric kind
    """
    options = resolve_options(options)
    return decode_shape(text, classify(tp, options.schema), options)


def encode(value: Any, tp: TypeForm, options: Optional[CodecOptions] = None) -> str:
    """
    Convert a value of type ``tp`` into a compact JSON text

    Arguments:
        value: value to encode
        tp: type of ``value``
        options: codec options, the defaults are used if `None`

    Returns:
        The JSON text of ``value``

    Raises:
        UnsupportedShapeError: ``tp`` is not supported
        ShapeMismatchError: ``value`` doesn't have type ``tp``
        NumberFormatError: a number doesn't fit its numeric kind
    """
    options = resolve_options(options)
    return encode_shape(value, classify(tp, options.schema), options)


def load(fp: IO[str], tp: TypeForm, options: Optional[CodecOptions] = None) -> Any:
    """Read a whole text file-like object and decode it, see `decode`"""
    return decode(fp.read(), tp, options)


def dump(
    value: Any, tp: TypeForm, fp: IO[str], options: Optional[CodecOptions] = None
) -> None:
    """Encode a value and write it to a text file-like object, see `encode`"""
    fp.write(encode(value, tp, options))


class ParametrizedTypedCodecMeta(type):
    """
    Metaclass for parametrized TypedCodec classes -- provides a nice repr()
    """

    def __repr__(cls):
        if cls.type_hint is MISSING:
            return super().__repr__()
        return f"{cls.__qualname__}[{type_repr(cls.type_hint)}]"


class TypedCodec(metaclass=ParametrizedTypedCodecMeta):
    """
    Codec for a fixed type

    The type must be provided by indexing this class with the type hint::

        codec = TypedCodec[List[Inner]]
        codec.decode('[{name:"a"}]')

    Parametrizations are cached.
    """

    type_hint: ClassVar[TypeForm] = MISSING

    @classmethod
    @functools.lru_cache(maxsize=None)
    def _class_getitem_cache(cls, tp):
        logger.debug("Parametrizing %s with %r", cls.__name__, tp)
        return types.new_class(
            cls.__name__,
            (cls,),
            exec_body=exec_body_factory(
                __module__=cls.__module__,
                __qualname__=cls.__qualname__,
                type_hint=tp,
            ),
        )

    def __class_getitem__(cls, tp):
        """
        Parametrize the TypedCodec with a type hint

        Arguments:
            tp: type hint to (de)serialize

        Returns:
            A special subclass of TypedCodec bound to ``tp``
        """
        if cls.type_hint is not MISSING:
            raise TypeError(f"{cls!r} is already parametrized")
        return cls._class_getitem_cache(tp)

    @classmethod
    def _check_parametrized(cls):
        if cls.type_hint is MISSING:
            raise TypeError(f"You must parametrize {cls.__name__} before using it")

    @classmethod
    def shape(cls, options: Optional[CodecOptions] = None):
        """Return the shape of the type of this codec"""
        cls._check_parametrized()
        return classify(cls.type_hint, resolve_options(options).schema)

    @classmethod
    def decode(cls, text: str, options: Optional[CodecOptions] = None) -> Any:
        """Decode a JSON text, see `typson.decode`"""
        options = resolve_options(options)
        return decode_shape(text, cls.shape(options), options)

    @classmethod
    def encode(cls, value: Any, options: Optional[CodecOptions] = None) -> str:
        """Encode a value, see `typson.encode`"""
        options = resolve_options(options)
        return encode_shape(value, cls.shape(options), options)

    @classmethod
    def load(cls, fp: IO[str], options: Optional[CodecOptions] = None) -> Any:
        """Read a whole text file-like object and decode it"""
        return cls.decode(fp.read(), options)

    @classmethod
    def dump(
        cls, value: Any, fp: IO[str], options: Optional[CodecOptions] = None
    ) -> None:
        """Encode a value and write it to a text file-like object"""
        fp.write(cls.encode(value, options))
