"""Auto-conversion of a subject value to the expectation's scalar type.

Applied by the validator before any step runs, for the nodes selected by the
options' ``ConversionSelector``.  A conversion that fails (or would lose
information) leaves the subject unchanged, so the regular comparison then
reports the difference.
"""

from __future__ import annotations

import datetime as dt
import enum
import uuid
from decimal import Decimal
from typing import Any

from equivalency.graph.types import is_number

__all__ = ["try_convert"]

_TRUE = frozenset({"true", "yes", "1"})
_FALSE = frozenset({"false", "no", "0"})


def _to_bool(value: Any) -> tuple[bool, Any]:
    if isinstance(value, str):
        text = value.strip().casefold()
        if text in _TRUE:
            return True, True
        if text in _FALSE:
            return True, False
        return False, value
    if is_number(value) and value in (0, 1):
        return True, bool(value)
    return False, value


def _to_int(value: Any) -> tuple[bool, Any]:
    if isinstance(value, str):
        return True, int(value.strip())
    if is_number(value):
        if float(value).is_integer():
            return True, int(value)
        return False, value
    return False, value


def _to_enum(value: Any, target: type[enum.Enum]) -> tuple[bool, Any]:
    if isinstance(value, str) and value in target.__members__:
        return True, target[value]
    return True, target(value)


def _to_temporal(value: Any, target: type) -> tuple[bool, Any]:
    if not isinstance(value, str):
        return False, value
    return True, target.fromisoformat(value.strip())


def try_convert(value: Any, target: type) -> tuple[bool, Any]:
    """Convert ``value`` to ``target`` if possible.

    Returns:
        ``(True, converted)`` on success, ``(False, value)`` otherwise.
    """
    if value is None or isinstance(value, target):
        return False, value
    try:
        if target is bool:
            return _to_bool(value)
        if isinstance(target, type) and issubclass(target, enum.Enum):
            return _to_enum(value, target)
        if target is int:
            return _to_int(value)
        if target in (float, complex, Decimal):
            if isinstance(value, (str, Decimal)) or is_number(value):
                return True, target(value.strip() if isinstance(value, str) else value)
            return False, value
        if target in (dt.datetime, dt.date, dt.time):
            return _to_temporal(value, target)
        if target is str:
            return True, str(value)
        if target is uuid.UUID and isinstance(value, str):
            return True, uuid.UUID(value)
    except (TypeError, ValueError, ArithmeticError, KeyError):
        return False, value
    return False, value
