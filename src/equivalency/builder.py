"""EquivalencyOptionsBuilder: the fluent configuration surface.

Every method returns the builder, so calls chain; ``build()`` produces the
immutable ``EquivalencyOptions`` snapshot the engine consumes.  Invalid
registrations fail immediately with a ``ConfigurationError`` subclass,
before any comparison starts.

Precedence of the rule lists:

- Selection rules: built-ins first, user rules appended in registration order.
- Matching rules: user rules and mappings are inserted in front, so the most
  recently registered one is tried first; the by-name rule comes last.
- Ordering rules: appended; the most recently registered matching rule wins.
- Steps: user steps run before every built-in step, in registration order;
  equality comparers are inserted in front of earlier user steps.
- Assertion overrides: the most recently registered one is tried first.

Example::

    from equivalency import EquivalencyOptionsBuilder

    options = (
        EquivalencyOptionsBuilder()
        .excluding("Audit.ModifiedAt")
        .with_strict_ordering_for("Lines")
        .using(float, lambda s, e: abs(s - e) < 0.01).when_type_is(float)
        .build()
    )
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any

from equivalency.algorithm.classification import is_primitive
from equivalency.algorithm.config import (
    ConversionSelector,
    CyclicReferenceHandling,
    EnumEquivalencyHandling,
    EquivalencyOptions,
)
from equivalency.algorithm.steps.overrides import AssertionRule, EqualityComparerStep
from equivalency.exceptions import ConfigurationError, InvalidArgumentError
from equivalency.graph.members import MemberVisibility
from equivalency.graph.nodes import MemberInfo, ObjectInfo
from equivalency.graph.paths import MemberPath, to_member_path
from equivalency.graph.types import describe_type, is_same_or_inherits
from equivalency.protocols import EquivalencyStep, MemberMatchingRule, MemberSelectionRule, OrderingRule
from equivalency.rules.matching import MappedMemberMatchingRule, MappedPathMatchingRule
from equivalency.rules.ordering import (
    MatchAllOrderingRule,
    OrderingRuleCollection,
    PathBasedOrderingRule,
    PredicateBasedOrderingRule,
)
from equivalency.rules.selection import (
    AllFieldsSelectionRule,
    AllPropertiesSelectionRule,
    ExcludeMemberByPathSelectionRule,
    ExcludeMemberByPredicateSelectionRule,
    ExcludeMembersNamedSelectionRule,
    ExcludeMembersOfTypeSelectionRule,
    ExcludeNonBrowsableMembersRule,
    IncludeMemberByPathSelectionRule,
    IncludeMemberByPredicateSelectionRule,
)

__all__ = ["EquivalencyOptionsBuilder", "Restriction"]

PathLike = MemberPath | str | Callable[[Any], Any]


def _require(value: Any, name: str) -> None:
    if value is None:
        msg = f"{name} cannot be None"
        raise InvalidArgumentError(msg)


class Restriction:
    """Pending assertion override returned by ``EquivalencyOptionsBuilder.using``.

    Completed by ``when`` or ``when_type_is``, which register the override and
    return the builder.
    """

    def __init__(
        self,
        builder: EquivalencyOptionsBuilder,
        expected_type: type | None,
        action: Callable[[Any, Any], Any],
    ) -> None:
        self._builder = builder
        self._expected_type = expected_type
        self._action = action

    def when(self, predicate: Callable[[ObjectInfo], bool]) -> EquivalencyOptionsBuilder:
        _require(predicate, "The predicate")
        self._builder._add_assertion_rule(AssertionRule(predicate, self._action, self._expected_type))
        return self._builder

    def when_type_is(self, cls: type) -> EquivalencyOptionsBuilder:
        """Apply the override to every node whose compared type is ``cls`` or a subclass."""
        _require(cls, "The type")
        return self.when(lambda info: is_same_or_inherits(info.type, cls))


class EquivalencyOptionsBuilder:
    """Mutable, fluent builder of ``EquivalencyOptions``.

    Args:
        defaults: Options whose rules and toggles seed the builder.  When None
            the library defaults are used.
    """

    def __init__(self, defaults: EquivalencyOptions | None = None) -> None:
        base = defaults if defaults is not None else EquivalencyOptions()
        builtin = (AllPropertiesSelectionRule, AllFieldsSelectionRule, ExcludeNonBrowsableMembersRule)
        self._selection_rules: list[MemberSelectionRule] = [
            rule for rule in base.selection_rules if not isinstance(rule, builtin)
        ]
        self._exclude_non_browsable = any(
            isinstance(rule, ExcludeNonBrowsableMembersRule) for rule in base.selection_rules
        )
        self._matching_rules: list[MemberMatchingRule] = list(base.matching_rules)
        self._ordering_rules: list[OrderingRule] = list(base.ordering_rules)
        self._user_steps: list[EquivalencyStep] = list(base.user_steps)
        self._assertion_rules: list[EquivalencyStep] = list(base.assertion_rules)
        self._value_types: list[Any] = list(base.value_types)
        self._member_types: list[Any] = list(base.member_types)
        self._settings: dict[str, Any] = {
            f.name: getattr(base, f.name)
            for f in dataclasses.fields(EquivalencyOptions)
            if f.name
            not in {
                "selection_rules",
                "matching_rules",
                "ordering_rules",
                "user_steps",
                "assertion_rules",
                "value_types",
                "member_types",
                "member_cache",
            }
        }

    def _set(self, **settings: Any) -> EquivalencyOptionsBuilder:
        self._settings.update(settings)
        return self

    # ------------------------------------------------------------------
    # Member inclusion
    # ------------------------------------------------------------------

    def including_fields(self) -> EquivalencyOptionsBuilder:
        return self._set(included_fields=MemberVisibility.PUBLIC)

    def including_internal_fields(self) -> EquivalencyOptionsBuilder:
        return self._set(included_fields=MemberVisibility.PUBLIC | MemberVisibility.INTERNAL)

    def excluding_fields(self) -> EquivalencyOptionsBuilder:
        return self._set(included_fields=MemberVisibility.NONE)

    def including_properties(self) -> EquivalencyOptionsBuilder:
        return self._set(included_properties=MemberVisibility.PUBLIC)

    def including_internal_properties(self) -> EquivalencyOptionsBuilder:
        return self._set(included_properties=MemberVisibility.PUBLIC | MemberVisibility.INTERNAL)

    def excluding_properties(self) -> EquivalencyOptionsBuilder:
        return self._set(included_properties=MemberVisibility.NONE)

    def excluding_members_named(self, *names: str) -> EquivalencyOptionsBuilder:
        if not names or any(not name for name in names):
            msg = "At least one non-empty member name must be specified"
            raise InvalidArgumentError(msg)
        return self.using_selection_rule(ExcludeMembersNamedSelectionRule(names))

    def excluding_non_browsable_members(self) -> EquivalencyOptionsBuilder:
        self._exclude_non_browsable = True
        return self

    def ignoring_non_browsable_members_on_subject(self) -> EquivalencyOptionsBuilder:
        return self._set(ignore_non_browsable_on_subject=True)

    # ------------------------------------------------------------------
    # Typing
    # ------------------------------------------------------------------

    def respecting_runtime_types(self) -> EquivalencyOptionsBuilder:
        return self._set(respect_runtime_types=True)

    def respecting_declared_types(self) -> EquivalencyOptionsBuilder:
        return self._set(respect_runtime_types=False)

    # ------------------------------------------------------------------
    # Path, predicate and type based selection
    # ------------------------------------------------------------------

    def excluding(self, path: PathLike) -> EquivalencyOptionsBuilder:
        """Exclude the member at ``path`` (a string, ``MemberPath`` or ``lambda e: e.A.B``)."""
        return self.using_selection_rule(ExcludeMemberByPathSelectionRule(to_member_path(path)))

    def including(self, path: PathLike) -> EquivalencyOptionsBuilder:
        """Include only explicitly included members, starting with the one at ``path``."""
        return self.using_selection_rule(IncludeMemberByPathSelectionRule(to_member_path(path)))

    def excluding_members_where(self, predicate: Callable[[MemberInfo], bool]) -> EquivalencyOptionsBuilder:
        _require(predicate, "The predicate")
        return self.using_selection_rule(ExcludeMemberByPredicateSelectionRule(predicate))

    def including_members_where(self, predicate: Callable[[MemberInfo], bool]) -> EquivalencyOptionsBuilder:
        _require(predicate, "The predicate")
        return self.using_selection_rule(IncludeMemberByPredicateSelectionRule(predicate))

    def excluding_members_of_type(self, cls: Any) -> EquivalencyOptionsBuilder:
        """Exclude members of ``cls`` or, for an open generic, of any of its instantiations."""
        _require(cls, "The type")
        return self.using_selection_rule(ExcludeMembersOfTypeSelectionRule(cls))

    def excluding_members_deriving_from(self, cls: type) -> EquivalencyOptionsBuilder:
        _require(cls, "The type")
        return self.using_selection_rule(ExcludeMembersOfTypeSelectionRule(cls, include_derived=True))

    # ------------------------------------------------------------------
    # Missing members
    # ------------------------------------------------------------------

    def excluding_missing_members(self) -> EquivalencyOptionsBuilder:
        return self._set(ignore_missing_members=True)

    def throwing_on_missing_members(self) -> EquivalencyOptionsBuilder:
        return self._set(ignore_missing_members=False)

    # ------------------------------------------------------------------
    # Recursion
    # ------------------------------------------------------------------

    def including_nested_objects(self) -> EquivalencyOptionsBuilder:
        return self._set(recurse=True)

    def without_recursing(self) -> EquivalencyOptionsBuilder:
        """Compare objects below the root with ``==`` instead of by members."""
        return self._set(recurse=False)

    def ignoring_cyclic_references(self) -> EquivalencyOptionsBuilder:
        return self._set(cyclic_reference_handling=CyclicReferenceHandling.IGNORE)

    def allowing_infinite_recursion(self) -> EquivalencyOptionsBuilder:
        """Lift the depth limit.

        Graphs nested deeper than the interpreter's recursion limit (a few
        hundred levels by default) are still reported as MAXIMUM_DEPTH_EXCEEDED.
        """
        return self._set(allow_infinite_recursion=True)

    def with_max_recursion_depth(self, depth: int) -> EquivalencyOptionsBuilder:
        if depth < 1:
            msg = f"The maximum recursion depth must be >= 1, got {depth}"
            raise InvalidArgumentError(msg)
        return self._set(max_recursion_depth=depth, allow_infinite_recursion=False)

    # ------------------------------------------------------------------
    # Rule and step registration
    # ------------------------------------------------------------------

    def without_selection_rules(self) -> EquivalencyOptionsBuilder:
        """Remove every user-registered selection rule."""
        self._selection_rules.clear()
        return self

    def without_matching_rules(self) -> EquivalencyOptionsBuilder:
        """Remove every matching rule, including the built-in by-name rule."""
        self._matching_rules.clear()
        return self

    def using_selection_rule(self, rule: MemberSelectionRule) -> EquivalencyOptionsBuilder:
        _require(rule, "The selection rule")
        self._selection_rules.append(rule)
        return self

    def using_matching_rule(self, rule: MemberMatchingRule) -> EquivalencyOptionsBuilder:
        _require(rule, "The matching rule")
        self._matching_rules.insert(0, rule)
        return self

    def using_ordering_rule(self, rule: OrderingRule) -> EquivalencyOptionsBuilder:
        _require(rule, "The ordering rule")
        self._ordering_rules.append(rule)
        return self

    def using_step(self, step: EquivalencyStep) -> EquivalencyOptionsBuilder:
        _require(step, "The equivalency step")
        self._user_steps.append(step)
        return self

    def using(self, cls: type | None, action: Callable[[Any, Any], Any]) -> Restriction:
        """Start an assertion override: ``action(subject, expectation)`` for matching nodes.

        Pass ``cls=None`` to accept values of any type.
        """
        _require(action, "The action")
        return Restriction(self, cls, action)

    def _add_assertion_rule(self, rule: AssertionRule) -> None:
        self._assertion_rules.insert(0, rule)

    def using_comparer(self, cls: type, comparer: Callable[[Any, Any], bool]) -> EquivalencyOptionsBuilder:
        """Compare expectations of ``cls`` with ``comparer(subject, expectation) -> bool``."""
        _require(cls, "The type")
        _require(comparer, "The comparer")
        self._user_steps.insert(0, EqualityComparerStep(cls, comparer))
        return self

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    @staticmethod
    def _ordering_rule(
        target: MemberPath | str | Callable[[ObjectInfo], bool],
        invert: bool,
    ) -> OrderingRule:
        _require(target, "The member path or predicate")
        if isinstance(target, (str, MemberPath)):
            return PathBasedOrderingRule(to_member_path(target), invert)
        return PredicateBasedOrderingRule(target, invert)

    def with_strict_ordering(self) -> EquivalencyOptionsBuilder:
        return self.using_ordering_rule(MatchAllOrderingRule())

    def with_strict_ordering_for(
        self, target: MemberPath | str | Callable[[ObjectInfo], bool]
    ) -> EquivalencyOptionsBuilder:
        """Strict ordering for a member path (string) or for nodes matching a predicate."""
        return self.using_ordering_rule(self._ordering_rule(target, invert=False))

    def without_strict_ordering(self) -> EquivalencyOptionsBuilder:
        """Remove every ordering rule registered so far."""
        self._ordering_rules.clear()
        return self

    def without_strict_ordering_for(
        self, target: MemberPath | str | Callable[[ObjectInfo], bool]
    ) -> EquivalencyOptionsBuilder:
        return self.using_ordering_rule(self._ordering_rule(target, invert=True))

    # ------------------------------------------------------------------
    # Enums, records and classification
    # ------------------------------------------------------------------

    def comparing_enums_by_name(self) -> EquivalencyOptionsBuilder:
        return self._set(enum_handling=EnumEquivalencyHandling.BY_NAME)

    def comparing_enums_by_value(self) -> EquivalencyOptionsBuilder:
        return self._set(enum_handling=EnumEquivalencyHandling.BY_VALUE)

    def comparing_records_by_value(self) -> EquivalencyOptionsBuilder:
        return self._set(compare_records_by_value=True)

    def comparing_records_by_members(self) -> EquivalencyOptionsBuilder:
        return self._set(compare_records_by_value=False)

    def comparing_by_value(self, cls: Any) -> EquivalencyOptionsBuilder:
        """Compare ``cls`` (a class, open generic or closed generic alias) with ``==``."""
        _require(cls, "The type")
        if cls in self._member_types:
            msg = f"Can't compare {describe_type(cls)} by value if it is already set up to be compared by its members"
            raise ConfigurationError(msg)
        if cls not in self._value_types:
            self._value_types.append(cls)
        return self

    def comparing_by_members(self, cls: Any) -> EquivalencyOptionsBuilder:
        """Compare ``cls`` (a class, open generic or closed generic alias) member by member."""
        _require(cls, "The type")
        if is_primitive(cls):
            msg = f"Cannot compare a primitive type such as {describe_type(cls)} by its members"
            raise ConfigurationError(msg)
        if cls in self._value_types:
            msg = f"Can't compare {describe_type(cls)} by its members if it is already set up to be compared by value"
            raise ConfigurationError(msg)
        if cls not in self._member_types:
            self._member_types.append(cls)
        return self

    # ------------------------------------------------------------------
    # Strings and member names
    # ------------------------------------------------------------------

    def ignoring_case(self) -> EquivalencyOptionsBuilder:
        return self._set(ignore_case=True)

    def ignoring_leading_whitespace(self) -> EquivalencyOptionsBuilder:
        return self._set(ignore_leading_whitespace=True)

    def ignoring_trailing_whitespace(self) -> EquivalencyOptionsBuilder:
        return self._set(ignore_trailing_whitespace=True)

    def ignoring_newline_style(self) -> EquivalencyOptionsBuilder:
        return self._set(ignore_newline_style=True)

    def ignoring_member_name_casing(self) -> EquivalencyOptionsBuilder:
        """Match member names and string dictionary keys case-insensitively."""
        return self._set(ignore_member_name_casing=True)

    # ------------------------------------------------------------------
    # Auto-conversion and tracing
    # ------------------------------------------------------------------

    def with_auto_conversion(self) -> EquivalencyOptionsBuilder:
        return self.with_auto_conversion_for(lambda info: True)

    def with_auto_conversion_for(self, predicate: Callable[[ObjectInfo], bool]) -> EquivalencyOptionsBuilder:
        _require(predicate, "The predicate")
        selector: ConversionSelector = self._settings["conversion"]
        return self._set(conversion=selector.including(predicate))

    def without_auto_conversion_for(self, predicate: Callable[[ObjectInfo], bool]) -> EquivalencyOptionsBuilder:
        _require(predicate, "The predicate")
        selector: ConversionSelector = self._settings["conversion"]
        return self._set(conversion=selector.excluding(predicate))

    def with_tracing(self) -> EquivalencyOptionsBuilder:
        return self._set(tracing=True)

    # ------------------------------------------------------------------
    # Member mappings
    # ------------------------------------------------------------------

    def with_mapping(self, expectation_path: PathLike, subject_path: PathLike) -> EquivalencyOptionsBuilder:
        """Compare the expectation member at ``expectation_path`` with the subject member at ``subject_path``."""
        return self.using_matching_rule(MappedPathMatchingRule(expectation_path, subject_path))

    def with_member_mapping(
        self,
        expectation_type: type,
        subject_type: type,
        expectation_member: str,
        subject_member: str,
    ) -> EquivalencyOptionsBuilder:
        """Compare ``expectation_type.expectation_member`` with ``subject_type.subject_member``."""
        return self.using_matching_rule(
            MappedMemberMatchingRule(expectation_type, expectation_member, subject_type, subject_member)
        )

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self) -> EquivalencyOptions:
        """Produce the immutable options snapshot."""
        selection: list[MemberSelectionRule] = []
        includes_members = any(getattr(rule, "includes_members", False) for rule in self._selection_rules)
        if not includes_members:
            if self._settings["included_properties"] != MemberVisibility.NONE:
                selection.append(AllPropertiesSelectionRule())
            if self._settings["included_fields"] != MemberVisibility.NONE:
                selection.append(AllFieldsSelectionRule())
        if self._exclude_non_browsable:
            selection.append(ExcludeNonBrowsableMembersRule())
        selection.extend(self._selection_rules)

        return EquivalencyOptions(
            selection_rules=tuple(selection),
            matching_rules=tuple(self._matching_rules),
            ordering_rules=OrderingRuleCollection(self._ordering_rules),
            user_steps=tuple(self._user_steps),
            assertion_rules=tuple(self._assertion_rules),
            value_types=tuple(self._value_types),
            member_types=tuple(self._member_types),
            **self._settings,
        )
