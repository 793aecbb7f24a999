"""Built-in equivalency steps, in the order the validator runs them.

1. ReferenceEqualityStep      identical objects, or a None on either side
2. assertion rules            ``using(...).when(...)`` overrides, most recent first
3. ValueTypeStep              pairs classified as by-value
4. MultiDimensionalArrayStep  ``numpy.ndarray`` with ``ndim != 1``
5. DictionaryStep             ``Mapping`` expectations
6. EnumerableStep             other collections
7. StructuralEqualityStep     member-wise recursion
"""

from __future__ import annotations

from equivalency.algorithm.steps.arrays import MultiDimensionalArrayStep
from equivalency.algorithm.steps.dictionaries import DictionaryStep
from equivalency.algorithm.steps.enumerables import EnumerableStep
from equivalency.algorithm.steps.members import StructuralEqualityStep
from equivalency.algorithm.steps.overrides import AssertionRule, EqualityComparerStep
from equivalency.algorithm.steps.reference import ReferenceEqualityStep
from equivalency.algorithm.steps.values import ValueTypeStep

__all__ = [
    "AssertionRule",
    "DictionaryStep",
    "EnumerableStep",
    "EqualityComparerStep",
    "MultiDimensionalArrayStep",
    "ReferenceEqualityStep",
    "StructuralEqualityStep",
    "ValueTypeStep",
]
