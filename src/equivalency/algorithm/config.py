"""EquivalencyOptions and its enums: the finalized configuration snapshot.

EquivalencyOptions is a frozen (immutable) dataclass holding every rule list
and toggle the engine consumes.  It is read-only during traversal and may be
shared across any number of comparisons.  Build one with
``EquivalencyOptionsBuilder`` rather than by hand.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any

from equivalency.cache import MemberCache
from equivalency.exceptions import ConfigurationError
from equivalency.graph.members import MemberVisibility
from equivalency.graph.types import describe_type
from equivalency.rules.matching import MatchByNameRule
from equivalency.rules.ordering import OrderingRuleCollection
from equivalency.rules.selection import AllFieldsSelectionRule, AllPropertiesSelectionRule

if TYPE_CHECKING:
    from equivalency.graph.nodes import ObjectInfo
    from equivalency.protocols import EquivalencyStep, MemberMatchingRule, MemberSelectionRule

__all__ = [
    "ConversionSelector",
    "CyclicReferenceHandling",
    "EnumEquivalencyHandling",
    "EquivalencyOptions",
]


class CyclicReferenceHandling(StrEnum):
    """What to do when a subject object reappears among its own ancestors.

    - FAIL:   Record a CYCLIC_REFERENCE difference.
    - IGNORE: Skip the subtree (treat it as equivalent).
    """

    FAIL = auto()
    IGNORE = auto()


class EnumEquivalencyHandling(StrEnum):
    """How enum members are compared.

    - BY_VALUE: Compare ``.value`` (enums of different classes may match).
    - BY_NAME:  Compare ``.name``.
    """

    BY_VALUE = auto()
    BY_NAME = auto()


@dataclass(frozen=True, slots=True)
class ConversionSelector:
    """Decides for which nodes the subject is auto-converted to the expectation's type.

    Conversion applies when any inclusion predicate matches and no exclusion
    predicate does.
    """

    inclusions: tuple[Callable[[ObjectInfo], bool], ...] = ()
    exclusions: tuple[Callable[[ObjectInfo], bool], ...] = ()

    def including(self, predicate: Callable[[ObjectInfo], bool]) -> ConversionSelector:
        return ConversionSelector((*self.inclusions, predicate), self.exclusions)

    def excluding(self, predicate: Callable[[ObjectInfo], bool]) -> ConversionSelector:
        return ConversionSelector(self.inclusions, (*self.exclusions, predicate))

    def requires_conversion(self, info: ObjectInfo) -> bool:
        if not any(predicate(info) for predicate in self.inclusions):
            return False
        return not any(predicate(info) for predicate in self.exclusions)


def _default_selection_rules() -> tuple[MemberSelectionRule, ...]:
    return (AllPropertiesSelectionRule(), AllFieldsSelectionRule())


def _default_matching_rules() -> tuple[MemberMatchingRule, ...]:
    return (MatchByNameRule(),)


@dataclass(frozen=True, slots=True)
class EquivalencyOptions:
    """Immutable configuration for one or more comparisons.

    Options are read-only during traversal and may be shared by any number of
    comparisons, including concurrent ones: ``member_cache`` guards its
    ``LRUCache`` with a lock, and the type classifier is created per comparison.

    Attributes:
        selection_rules: Selection rules in evaluation order (built-ins first).
        matching_rules: Matching rules in evaluation order (user rules first).
        ordering_rules: Ordering rules in registration order.
        user_steps: Steps that run before every built-in step, in order.
        assertion_rules: Assertion overrides, most recently registered first.
        included_properties: Property visibilities admitted by the built-in rule.
        included_fields: Field visibilities admitted by the built-in rule.
        ignore_non_browsable_on_subject: Skip expectation members whose subject
            counterpart is non-browsable.
        respect_runtime_types: Introspect runtime classes (True) or declared
            annotations (False).
        ignore_missing_members: Silently skip members missing on the subject.
        recurse: When False, every object below the root is compared with ``==``.
        cyclic_reference_handling: What to do on a cyclic reference.
        allow_infinite_recursion: Disable the depth limit.
        max_recursion_depth: Maximum number of structural descents (>= 1).
        enum_handling: Compare enums by value or by name.
        compare_records_by_value: Compare dataclasses with ``==`` instead of by members.
        value_types: Classes (or generic aliases) forced to be compared by value.
        member_types: Classes (or generic aliases) forced to be compared by members.
        ignore_case: Compare strings case-insensitively.
        ignore_leading_whitespace: Strip leading whitespace from strings.
        ignore_trailing_whitespace: Strip trailing whitespace from strings.
        ignore_newline_style: Treat ``\\r\\n``, ``\\r`` and ``\\n`` alike.
        ignore_member_name_casing: Match member names and string dictionary keys
            case-insensitively.
        conversion: Which nodes get their subject auto-converted.
        tracing: Record step decisions on the result.
        member_cache: Per-options cache of class introspection results.
    """

    selection_rules: tuple[MemberSelectionRule, ...] = field(default_factory=_default_selection_rules)
    matching_rules: tuple[MemberMatchingRule, ...] = field(default_factory=_default_matching_rules)
    ordering_rules: OrderingRuleCollection = field(default_factory=OrderingRuleCollection)
    user_steps: tuple[EquivalencyStep, ...] = ()
    assertion_rules: tuple[EquivalencyStep, ...] = ()
    included_properties: MemberVisibility = MemberVisibility.PUBLIC
    included_fields: MemberVisibility = MemberVisibility.PUBLIC
    ignore_non_browsable_on_subject: bool = False
    respect_runtime_types: bool = True
    ignore_missing_members: bool = False
    recurse: bool = True
    cyclic_reference_handling: CyclicReferenceHandling = CyclicReferenceHandling.FAIL
    allow_infinite_recursion: bool = False
    max_recursion_depth: int = 10
    enum_handling: EnumEquivalencyHandling = EnumEquivalencyHandling.BY_VALUE
    compare_records_by_value: bool = False
    value_types: tuple[Any, ...] = ()
    member_types: tuple[Any, ...] = ()
    ignore_case: bool = False
    ignore_leading_whitespace: bool = False
    ignore_trailing_whitespace: bool = False
    ignore_newline_style: bool = False
    ignore_member_name_casing: bool = False
    conversion: ConversionSelector = field(default_factory=ConversionSelector)
    tracing: bool = False
    member_cache: MemberCache = field(default_factory=MemberCache, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_recursion_depth < 1:
            msg = f"max_recursion_depth must be >= 1, got {self.max_recursion_depth}"
            raise ValueError(msg)
        conflicting = [t for t in self.value_types if t in self.member_types]
        if conflicting:
            names = ", ".join(describe_type(t) for t in conflicting)
            msg = f"{names} cannot be compared both by value and by members"
            raise ConfigurationError(msg)
