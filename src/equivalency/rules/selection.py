"""Member selection rules.

Selection starts from an empty list; each rule receives the output of the
previous one and returns the members to keep.  The built-in rules run first
and add the public (or internal) fields and properties of the expectation;
exclusion rules then filter them, and inclusion rules add members back.

When any configured rule has ``includes_members = True`` the built-in "all
fields" / "all properties" rules are left out, so only explicitly included
members take part.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from equivalency.graph.members import Member, MemberKind, MemberVisibility
from equivalency.graph.nodes import MemberInfo, Node
from equivalency.graph.paths import MemberPath, PathSegment, SegmentKind
from equivalency.graph.types import describe_type, is_closed_generic_of, is_same_or_inherits

if TYPE_CHECKING:
    from equivalency.algorithm.config import EquivalencyOptions

__all__ = [
    "AllFieldsSelectionRule",
    "AllPropertiesSelectionRule",
    "ExcludeMemberByPathSelectionRule",
    "ExcludeMemberByPredicateSelectionRule",
    "ExcludeMembersNamedSelectionRule",
    "ExcludeMembersOfTypeSelectionRule",
    "ExcludeNonBrowsableMembersRule",
    "IncludeMemberByPathSelectionRule",
    "IncludeMemberByPredicateSelectionRule",
    "MemberSelectionContext",
]


@dataclass(frozen=True, slots=True)
class MemberSelectionContext:
    """What selection rules know about the object whose members are selected.

    Attributes:
        expectation: The expectation object.
        type:        The class compared against (runtime or declared).
        members:     Every member the expectation object exposes.
        options:     The active options.
    """

    expectation: Any
    type: type
    members: tuple[Member, ...]
    options: EquivalencyOptions

    def runtime_type_of(self, member: Member) -> type | None:
        try:
            return type(member.get_value(self.expectation))
        except AttributeError:
            return None


def _member_path(node: Node, member: Member) -> MemberPath:
    return MemberPath((*node.path.segments, PathSegment(SegmentKind.MEMBER, member.name)))


def _add_missing(selected: list[Member], candidates: Iterable[Member]) -> list[Member]:
    names = {m.name for m in selected}
    return selected + [m for m in candidates if m.name not in names]


# ---------------------------------------------------------------------------
# Built-in inclusion
# ---------------------------------------------------------------------------


class AllPropertiesSelectionRule:
    """Adds every property whose getter visibility the options admit."""

    includes_members = False

    def select_members(
        self,
        node: Node,
        members: list[Member],
        context: MemberSelectionContext,
    ) -> list[Member]:
        visibility: MemberVisibility = context.options.included_properties
        return _add_missing(
            members,
            (
                m
                for m in context.members
                if m.kind == MemberKind.PROPERTY and visibility.admits(m.getter_visibility)
            ),
        )

    def __str__(self) -> str:
        return "Include all non-private properties"


class AllFieldsSelectionRule:
    """Adds every field whose visibility the options admit."""

    includes_members = False

    def select_members(
        self,
        node: Node,
        members: list[Member],
        context: MemberSelectionContext,
    ) -> list[Member]:
        visibility: MemberVisibility = context.options.included_fields
        return _add_missing(
            members,
            (
                m
                for m in context.members
                if m.kind == MemberKind.FIELD and visibility.admits(m.getter_visibility)
            ),
        )

    def __str__(self) -> str:
        return "Include all non-private fields"


class ExcludeNonBrowsableMembersRule:
    includes_members = False

    def select_members(
        self,
        node: Node,
        members: list[Member],
        context: MemberSelectionContext,
    ) -> list[Member]:
        return [m for m in members if m.browsable]

    def __str__(self) -> str:
        return "Exclude non-browsable members"


# ---------------------------------------------------------------------------
# Path-based
# ---------------------------------------------------------------------------


class ExcludeMemberByPathSelectionRule:
    """Removes the member at ``path`` (``[]`` segments match every index or key)."""

    includes_members = False

    def __init__(self, path: MemberPath) -> None:
        self._path = path

    def select_members(
        self,
        node: Node,
        members: list[Member],
        context: MemberSelectionContext,
    ) -> list[Member]:
        return [m for m in members if not self._path.is_same_as(_member_path(node, m))]

    def __str__(self) -> str:
        return f"Exclude member {self._path}"


class IncludeMemberByPathSelectionRule:
    """Adds the member at ``path``, along with its ancestors and descendants."""

    includes_members = True

    def __init__(self, path: MemberPath) -> None:
        self._path = path

    def select_members(
        self,
        node: Node,
        members: list[Member],
        context: MemberSelectionContext,
    ) -> list[Member]:
        matching = []
        for member in context.members:
            path = _member_path(node, member)
            if self._path.is_same_as(path) or self._path.is_parent_or_child_of(path):
                matching.append(member)
        return _add_missing(members, matching)

    def __str__(self) -> str:
        return f"Include member {self._path}"


# ---------------------------------------------------------------------------
# Predicate-based
# ---------------------------------------------------------------------------


class ExcludeMemberByPredicateSelectionRule:
    includes_members = False

    def __init__(self, predicate: Callable[[MemberInfo], bool]) -> None:
        self._predicate = predicate

    def select_members(
        self,
        node: Node,
        members: list[Member],
        context: MemberSelectionContext,
    ) -> list[Member]:
        return [
            m
            for m in members
            if not self._predicate(MemberInfo.of(m, node, context.runtime_type_of(m)))
        ]

    def __str__(self) -> str:
        return "Exclude members matching a predicate"


class IncludeMemberByPredicateSelectionRule:
    includes_members = True

    def __init__(self, predicate: Callable[[MemberInfo], bool]) -> None:
        self._predicate = predicate

    def select_members(
        self,
        node: Node,
        members: list[Member],
        context: MemberSelectionContext,
    ) -> list[Member]:
        admitted = MemberVisibility.PUBLIC | MemberVisibility.INTERNAL
        return _add_missing(
            members,
            (
                m
                for m in context.members
                if admitted.admits(m.getter_visibility)
                and self._predicate(MemberInfo.of(m, node, context.runtime_type_of(m)))
            ),
        )

    def __str__(self) -> str:
        return "Include members matching a predicate"


# ---------------------------------------------------------------------------
# Name- and type-based
# ---------------------------------------------------------------------------


class ExcludeMembersNamedSelectionRule:
    """Removes members with any of the given names, at every depth."""

    includes_members = False

    def __init__(self, names: Iterable[str]) -> None:
        self._names = frozenset(names)

    def select_members(
        self,
        node: Node,
        members: list[Member],
        context: MemberSelectionContext,
    ) -> list[Member]:
        return [m for m in members if m.name not in self._names]

    def __str__(self) -> str:
        return f"Exclude members named {', '.join(sorted(self._names))}"


class ExcludeMembersOfTypeSelectionRule:
    """Removes members of a type, at every depth.

    A member is of the excluded type when its annotation is that type or a
    closed generic of it (``Box[int]`` for ``Box``, ``int | None`` for
    ``Optional``), or when its runtime value is an instance of exactly that
    type.  With ``include_derived`` subclasses are excluded as well.
    """

    includes_members = False

    def __init__(self, excluded_type: Any, include_derived: bool = False) -> None:
        self._type = excluded_type
        self._include_derived = include_derived

    def _excludes(self, member: Member, runtime_type: type | None) -> bool:
        declared = member.value_type
        if declared is not None:
            if declared is self._type or is_closed_generic_of(declared, self._type):
                return True
            if self._include_derived and is_same_or_inherits(
                declared if isinstance(declared, type) else None, self._type
            ):
                return True
        if runtime_type is None:
            return False
        if runtime_type is self._type:
            return True
        return self._include_derived and is_same_or_inherits(runtime_type, self._type)

    def select_members(
        self,
        node: Node,
        members: list[Member],
        context: MemberSelectionContext,
    ) -> list[Member]:
        return [m for m in members if not self._excludes(m, context.runtime_type_of(m))]

    def __str__(self) -> str:
        qualifier = "deriving from" if self._include_derived else "of type"
        return f"Exclude members {qualifier} {describe_type(self._type)}"
