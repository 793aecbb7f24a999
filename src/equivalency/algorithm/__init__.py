"""algorithm subpackage: public API for the equivalency engine.

Provides the validator, its configuration snapshot and the per-comparison
traversal context.  Import from this module (not from sub-modules directly)
to stay on the stable public interface.

Example::

    from equivalency.algorithm import EquivalencyOptions, EquivalencyValidator

    validator = EquivalencyValidator(EquivalencyOptions())
    result = validator.validate({"A": 1, "B": 2}, {"B": 2, "A": 1})
    # result.is_equivalent is True
"""

from __future__ import annotations

from equivalency.algorithm.classification import EqualityStrategy, TypeClassifier
from equivalency.algorithm.config import (
    ConversionSelector,
    CyclicReferenceHandling,
    EnumEquivalencyHandling,
    EquivalencyOptions,
)
from equivalency.algorithm.context import TraversalContext
from equivalency.algorithm.validator import EquivalencyValidator

__all__ = [
    "ConversionSelector",
    "CyclicReferenceHandling",
    "EnumEquivalencyHandling",
    "EqualityStrategy",
    "EquivalencyOptions",
    "EquivalencyValidator",
    "TraversalContext",
    "TypeClassifier",
]
