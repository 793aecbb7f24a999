"""Type helpers shared by introspection, classification and the step pipeline.

Python has no separate notion of "declared" and "runtime" types, so declared
types are whatever annotation describes a member (``int``, ``list[Item]``,
``Box[int] | None``).  These helpers turn such annotations into classes and
answer the handful of type questions the engine asks:

- Is this annotation a closed generic of some open generic (``Box[int]`` of ``Box``)?
- Is this value a number that may be widened (``np.int32`` vs ``int``)?
- Is this value a raw scalar buffer (``bytes``, ``array.array``, 1-D ndarray)?
- Is this value a collection, and is it dictionary-like?
"""

from __future__ import annotations

import array
import numbers
import types
import typing
from collections.abc import Iterable, Mapping
from typing import Any, Union

import numpy as np

__all__ = [
    "describe_type",
    "generic_origin",
    "is_closed_generic_of",
    "is_collection",
    "is_dictionary_like",
    "is_number",
    "is_same_or_inherits",
    "is_scalar_buffer",
    "resolve_class",
    "type_arguments",
]

_UNION_ORIGINS: tuple[Any, ...] = (Union, types.UnionType)

# str is iterable but always compared as a scalar
_SCALAR_ITERABLES: tuple[type, ...] = (str,)

_BUFFER_TYPES: tuple[type, ...] = (bytes, bytearray, memoryview, array.array)


def generic_origin(tp: Any) -> Any:
    """Return the open generic behind ``tp`` (``list`` for ``list[int]``), or None."""
    origin = typing.get_origin(tp)
    if origin is types.UnionType:
        return Union
    return origin


def type_arguments(tp: Any) -> tuple[Any, ...]:
    """Return the type arguments of a closed generic, or an empty tuple."""
    return typing.get_args(tp)


def is_closed_generic_of(tp: Any, open_type: Any) -> bool:
    """True when ``tp`` is a parameterized form of ``open_type``.

    ``typing.Optional`` and ``typing.Union`` are treated as the same open
    generic, as are ``X | None`` forms.
    """
    if open_type is typing.Optional:
        open_type = Union
    origin = generic_origin(tp)
    return origin is not None and origin is open_type


def resolve_class(tp: Any) -> type | None:
    """Turn an annotation into the class instances of it would have.

    ``Optional[X]`` and ``X | None`` resolve to ``X``; any other union, ``Any``,
    string forward references and type variables resolve to None.
    """
    if tp is None or tp is Any:
        return None
    if isinstance(tp, type) and not typing.get_args(tp):
        return tp
    origin = typing.get_origin(tp)
    if origin in _UNION_ORIGINS:
        arms = [arg for arg in typing.get_args(tp) if arg is not type(None)]
        if len(arms) == 1:
            return resolve_class(arms[0])
        return None
    if isinstance(origin, type):
        return origin
    return None


def is_same_or_inherits(cls: type | None, base: Any) -> bool:
    """``issubclass`` that tolerates non-class arguments and open generics."""
    if cls is None:
        return False
    if isinstance(base, type):
        try:
            return issubclass(cls, base)
        except TypeError:
            return False
    return False


def describe_type(tp: Any) -> str:
    """Short, readable name for a class or annotation."""
    if isinstance(tp, type) and not typing.get_args(tp):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")


def is_number(value: Any) -> bool:
    """True for Python and numpy numbers, except booleans."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (numbers.Number, np.number))


def is_scalar_buffer(value: Any) -> bool:
    """True for raw scalar buffers, which are always compared index-aligned."""
    if isinstance(value, _BUFFER_TYPES):
        return True
    return isinstance(value, np.ndarray) and value.ndim == 1 and value.dtype != object


def is_dictionary_like(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_collection(value: Any) -> bool:
    """True for iterables that are compared element by element."""
    if isinstance(value, _SCALAR_ITERABLES) or isinstance(value, Mapping):
        return False
    if isinstance(value, np.ndarray):
        return True
    return isinstance(value, Iterable)
