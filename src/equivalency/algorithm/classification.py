"""TypeClassifier: by-value vs by-members classification of compared types.

Resolution order for a class (and the annotation that declared it):

1. An explicit registration of the exact declared annotation (``Box[int]``).
2. An explicit registration of the class or of any class in its MRO.  Open
   generic registrations (``Box``) therefore cover every instantiation that
   has no more specific closed registration.
3. Built-in defaults: classes, primitives, enums, numpy scalars and classes
   from well-known standard-library modules are compared by value, except
   collections and mappings, which go through the collection steps.
4. Dataclasses follow ``compare_records_by_value``.
5. Everything else is compared by members.

Results are cached per classifier in an ``LRUCache``; the validator creates
one classifier per comparison (see ``TraversalContext``).
"""

from __future__ import annotations

import dataclasses
import enum
import typing
from collections.abc import Iterable, Mapping
from enum import StrEnum, auto
from typing import Any

import numpy as np
from cachetools import LRUCache

from equivalency.algorithm.config import EquivalencyOptions

__all__ = ["EqualityStrategy", "TypeClassifier", "is_primitive"]

_PRIMITIVES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    type(None),
)

# Top-level modules whose classes default to by-value comparison.
_SYSTEM_MODULES = frozenset(
    {
        "builtins",
        "datetime",
        "decimal",
        "fractions",
        "ipaddress",
        "numbers",
        "pathlib",
        "re",
        "types",
        "uuid",
        "zoneinfo",
    }
)


class EqualityStrategy(StrEnum):
    """How a class is compared.

    - VALUE:         Default by-value (``==``) comparison.
    - MEMBERS:       Default member-wise (or collection) comparison.
    - FORCE_VALUE:   Registered as by-value; wins over every collection step.
    - FORCE_MEMBERS: Registered as by-members; wins over the collection steps.
    """

    VALUE = auto()
    MEMBERS = auto()
    FORCE_VALUE = auto()
    FORCE_MEMBERS = auto()

    @property
    def is_by_value(self) -> bool:
        return self in (EqualityStrategy.VALUE, EqualityStrategy.FORCE_VALUE)


def is_primitive(cls: Any) -> bool:
    """True for intrinsic scalar classes, which can never be compared by members."""
    if not isinstance(cls, type) or typing.get_args(cls):
        return False
    return issubclass(cls, _PRIMITIVES) or issubclass(cls, np.generic)


def _is_system_type(cls: type) -> bool:
    module = getattr(cls, "__module__", "") or ""
    return module.split(".", 1)[0] in _SYSTEM_MODULES


class TypeClassifier:
    """Classifies classes for one options instance.

    Args:
        options: The options whose registrations and toggles apply.
        max_size: Maximum number of classifications to cache.  Defaults to 256.
    """

    def __init__(self, options: EquivalencyOptions, max_size: int = 256) -> None:
        self._options = options
        self._cache: LRUCache[tuple[Any, Any], EqualityStrategy] = LRUCache(maxsize=max_size)

    def strategy_for(self, cls: type, declared_type: Any = None) -> EqualityStrategy:
        """Return how instances of ``cls`` (declared as ``declared_type``) are compared."""
        key = (cls, declared_type)
        try:
            return self._cache[key]
        except KeyError:
            pass
        except TypeError:  # unhashable annotation
            return self._classify(cls, declared_type)
        strategy = self._classify(cls, declared_type)
        self._cache[key] = strategy
        return strategy

    def is_by_value(self, cls: type, declared_type: Any = None) -> bool:
        return self.strategy_for(cls, declared_type).is_by_value

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _registered(self, candidate: Any) -> EqualityStrategy | None:
        if candidate in self._options.value_types:
            return EqualityStrategy.FORCE_VALUE
        if candidate in self._options.member_types:
            return EqualityStrategy.FORCE_MEMBERS
        return None

    def _classify(self, cls: type, declared_type: Any) -> EqualityStrategy:
        if declared_type is not None and not isinstance(declared_type, type):
            registered = self._registered(declared_type)
            if registered is not None:
                return registered

        for klass in getattr(cls, "__mro__", (cls,)):
            if klass is object:
                continue
            registered = self._registered(klass)
            if registered is not None:
                return registered

        if isinstance(cls, type) and issubclass(cls, type):
            return EqualityStrategy.VALUE
        if is_primitive(cls) or issubclass(cls, enum.Enum):
            return EqualityStrategy.VALUE
        if issubclass(cls, (Mapping, np.ndarray)):
            return EqualityStrategy.MEMBERS
        if _is_system_type(cls):
            if issubclass(cls, Iterable):
                return EqualityStrategy.MEMBERS
            return EqualityStrategy.VALUE
        if dataclasses.is_dataclass(cls):
            if self._options.compare_records_by_value:
                return EqualityStrategy.VALUE
            return EqualityStrategy.MEMBERS
        return EqualityStrategy.MEMBERS
