"""Difference and EquivalencyResult: the output of one comparison.

Differences are value objects collected in discovery order (depth-first,
member order, then collection index order) and never deduplicated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto

from equivalency.graph.nodes import Node

__all__ = ["Difference", "DifferenceKind", "EquivalencyResult"]


class DifferenceKind(StrEnum):
    """Category of a structural difference.

    - MISSING_MEMBER:            Expectation member has no subject counterpart.
    - VALUE_MISMATCH:            By-value comparison failed.
    - TYPE_MISMATCH:             Subject is not of a shape the expectation requires.
    - COUNT_MISMATCH:            Collections have different lengths.
    - ORDER_MISMATCH:            Strict ordering: element found at another index.
    - KEY_MISMATCH:              Dictionaries have missing and/or additional keys.
    - INCOMPATIBLE_DICTIONARY:   Subject keys cannot be matched to expectation keys.
    - MISMATCHED_RANK:           Multi-dimensional arrays differ in dimension count.
    - DIMENSION_LENGTH_MISMATCH: Multi-dimensional arrays differ in one dimension length.
    - CYCLIC_REFERENCE:          Subject object reappears among its own ancestors.
    - MAXIMUM_DEPTH_EXCEEDED:    Traversal went deeper than the configured maximum.
    - ASSERTION_FAILED:          A user assertion override raised ``AssertionError``.
    """

    MISSING_MEMBER = auto()
    VALUE_MISMATCH = auto()
    TYPE_MISMATCH = auto()
    COUNT_MISMATCH = auto()
    ORDER_MISMATCH = auto()
    KEY_MISMATCH = auto()
    INCOMPATIBLE_DICTIONARY = auto()
    MISMATCHED_RANK = auto()
    DIMENSION_LENGTH_MISMATCH = auto()
    CYCLIC_REFERENCE = auto()
    MAXIMUM_DEPTH_EXCEEDED = auto()
    ASSERTION_FAILED = auto()


@dataclass(frozen=True, slots=True)
class Difference:
    """One difference, tied to the node where it was discovered."""

    node: Node
    kind: DifferenceKind
    message: str

    @property
    def path(self) -> str:
        return self.node.description

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(frozen=True, slots=True)
class EquivalencyResult:
    """Result of a compare() call.

    Attributes:
        differences: Every difference found, in discovery order.
        trace: Step decisions recorded when tracing is enabled (empty otherwise).
        computation_time_ms: Wall-clock duration of the comparison in milliseconds.
    """

    differences: tuple[Difference, ...]
    trace: tuple[str, ...] = ()
    computation_time_ms: float = 0.0

    @property
    def is_equivalent(self) -> bool:
        return not self.differences

    def __bool__(self) -> bool:
        return self.is_equivalent

    def of_kind(self, kind: DifferenceKind) -> list[Difference]:
        return [d for d in self.differences if d.kind == kind]
