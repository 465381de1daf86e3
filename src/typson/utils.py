"""
Various utilities used in typson yet unrelated to (de)serialization
"""
from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, Dict, Iterable, Union

__all__ = [
    # Constants
    "MISSING",
    # Decorators
    "autoformat",
    # functions
    "exec_body_factory",
    "type_repr",
]

Namespace = Dict[str, Any]


class _MissingType:
    """Type of the `MISSING` sentinel"""

    __slots__ = ()
    _instance_ = None

    def __new__(cls):
        if cls._instance_ is None:
            cls._instance_ = super().__new__(cls)
        return cls._instance_

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"{__name__}.MISSING"

    def __reduce__(self):
        return (_MissingType, ())


MISSING: Any = _MissingType()
"""Sentinel object used when `None` cannot be used"""


def type_repr(tp) -> str:
    """Return the repr() of type hints, using qualified names for classes"""
    if isinstance(tp, tuple):
        return ", ".join(map(type_repr, tp))
    if isinstance(tp, type):
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)


def exec_body_factory(**members: Any) -> Callable[[Namespace], None]:
    """
    Helper factory for the ``exec_body`` argument of ``types.new_class``
    """

    def exec_body(namespace: Namespace):
        namespace.update(members)

    return exec_body


def autoformat(
    cls: type = None,
    /,
    params: Union[str, Iterable[str]] = ("msg",),  # pylint: disable=unsubscriptable-object
):
    """
    Class decorator formatting message arguments of ``__init__``

    The ``__init__`` method of the class is wrapped so that each argument named
    in ``params`` is formatted with str.format(), using all the other arguments
    of ``__init__`` as keywords. Default values are formatted too.

    Arguments:
        params: names of the arguments to format

    Usage::

        @autoformat
        @attr.dataclass(auto_exc=True)
        class MyError(Exception):
            elem: Any
            msg: str = "{elem!r} is invalid"

        assert MyError(8).msg == "8 is invalid"
    """
    if cls is None:
        return functools.partial(autoformat, params=params)
    if isinstance(params, str):
        params = (params,)

    init = cls.__init__
    signature = inspect.signature(init)
    targets = [name for name in params if name in signature.parameters]

    @functools.wraps(init)
    def wrapped_init(*args, **kwargs):
        bound = signature.bind(*args, **kwargs)
        bound.apply_defaults()
        arguments = bound.arguments
        templates = {name: arguments.pop(name) for name in targets}
        for name, template in templates.items():
            arguments[name] = template.format(**arguments)
        init(*bound.args, **bound.kwargs)

    cls.__init__ = wrapped_init
    return cls
