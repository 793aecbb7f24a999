"""Equivalency - structural comparison of object graphs."""

from __future__ import annotations

from equivalency.algorithm.config import (
    CyclicReferenceHandling,
    EnumEquivalencyHandling,
    EquivalencyOptions,
)
from equivalency.algorithm.validator import EquivalencyValidator
from equivalency.api import assert_equivalent, compare, is_equivalent
from equivalency.builder import EquivalencyOptionsBuilder, Restriction
from equivalency.exceptions import (
    AmbiguousInterfaceError,
    ConfigurationError,
    EquivalencyError,
    InvalidArgumentError,
    MissingMemberError,
    NoMembersFoundError,
)
from equivalency.graph import Comparands, MemberInfo, MemberPath, Node, ObjectInfo, non_browsable
from equivalency.protocols import (
    Describable,
    EquivalencyStep,
    MemberMatchingRule,
    MemberSelectionRule,
    OrderingRule,
    OrderStrictness,
    StepResult,
)
from equivalency.result import Difference, DifferenceKind, EquivalencyResult
from equivalency.rules import (
    ExcludeMemberByPathSelectionRule,
    IncludeMemberByPathSelectionRule,
    MatchByNameRule,
    PathBasedOrderingRule,
    PredicateBasedOrderingRule,
)

__version__: str = "0.1.0"
__all__: list[str] = [
    "AmbiguousInterfaceError",
    "Comparands",
    "ConfigurationError",
    "CyclicReferenceHandling",
    "Describable",
    "Difference",
    "DifferenceKind",
    "EnumEquivalencyHandling",
    "EquivalencyError",
    "EquivalencyOptions",
    "EquivalencyOptionsBuilder",
    "EquivalencyResult",
    "EquivalencyStep",
    "EquivalencyValidator",
    "ExcludeMemberByPathSelectionRule",
    "IncludeMemberByPathSelectionRule",
    "InvalidArgumentError",
    "MatchByNameRule",
    "MemberInfo",
    "MemberMatchingRule",
    "MemberPath",
    "MemberSelectionRule",
    "MissingMemberError",
    "NoMembersFoundError",
    "Node",
    "ObjectInfo",
    "OrderStrictness",
    "OrderingRule",
    "PathBasedOrderingRule",
    "PredicateBasedOrderingRule",
    "Restriction",
    "StepResult",
    "assert_equivalent",
    "compare",
    "is_equivalent",
    "non_browsable",
]
