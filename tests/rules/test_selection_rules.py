"""Tests for member selection rules.

Covers:
- Built-in field/property rules honour the included visibilities
- Path exclusion at the node and through [] wildcards
- Path inclusion adds the member, its ancestors and descendants
- Predicate exclusion / inclusion over MemberInfo
- Name exclusion and type exclusion (exact, closed generic, derived)
- Non-browsable exclusion
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from equivalency.algorithm.config import EquivalencyOptions
from equivalency.cache import MemberCache
from equivalency.graph.members import Member, MemberVisibility, members_of
from equivalency.graph.nodes import Node
from equivalency.graph.paths import MemberPath
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
    MemberSelectionContext,
)

T = TypeVar("T")


class Box(Generic[T]):
    def __init__(self, value: T) -> None:
        self.value = value


class Animal:
    pass


class Dog(Animal):
    pass


@dataclass
class Person:
    Name: str
    Age: int
    _note: str = "n"
    Secret: str = field(default="s", metadata={"browsable": False})
    Score: Optional[int] = None
    Wrapped: Box[int] | None = None
    Pet: Animal | None = None

    @property
    def Label(self) -> str:
        return self.Name


def _context(obj: object, options: EquivalencyOptions | None = None) -> MemberSelectionContext:
    opts = options or EquivalencyOptions()
    return MemberSelectionContext(obj, type(obj), members_of(obj, MemberCache()), opts)


def _defaults(node: Node, context: MemberSelectionContext) -> list[Member]:
    selected: list[Member] = []
    for rule in (AllPropertiesSelectionRule(), AllFieldsSelectionRule()):
        selected = rule.select_members(node, selected, context)
    return selected


def _names(members: list[Member]) -> list[str]:
    return [m.name for m in members]


class TestBuiltInRules:
    """AllPropertiesSelectionRule and AllFieldsSelectionRule."""

    def test_public_members_by_default(self) -> None:
        selected = _defaults(Node.root(), _context(Person("A", 1)))
        assert set(_names(selected)) == {"Name", "Age", "Secret", "Score", "Wrapped", "Pet", "Label"}

    def test_internal_fields_when_admitted(self) -> None:
        options = EquivalencyOptions(included_fields=MemberVisibility.PUBLIC | MemberVisibility.INTERNAL)
        selected = _defaults(Node.root(), _context(Person("A", 1), options))
        assert "_note" in _names(selected)

    def test_no_properties(self) -> None:
        options = EquivalencyOptions(included_properties=MemberVisibility.NONE)
        selected = _defaults(Node.root(), _context(Person("A", 1), options))
        assert "Label" not in _names(selected)

    def test_rules_do_not_duplicate(self) -> None:
        context = _context(Person("A", 1))
        once = AllFieldsSelectionRule().select_members(Node.root(), [], context)
        twice = AllFieldsSelectionRule().select_members(Node.root(), once, context)
        assert _names(once) == _names(twice)


class TestPathRules:
    """Exclusion and inclusion by path."""

    def test_exclude_root_member(self) -> None:
        context = _context(Person("A", 1))
        rule = ExcludeMemberByPathSelectionRule(MemberPath.parse("Age"))
        assert "Age" not in _names(rule.select_members(Node.root(), _defaults(Node.root(), context), context))

    def test_exclude_with_wildcard_at_depth(self) -> None:
        node = Node.root().child_item(3)
        context = _context(Person("A", 1))
        rule = ExcludeMemberByPathSelectionRule(MemberPath.parse("[].Age"))
        assert "Age" not in _names(rule.select_members(node, _defaults(node, context), context))

    def test_exclude_does_not_touch_other_depths(self) -> None:
        member = Member(name="Owner")
        node = Node.root().child_member(member, member, None)
        context = _context(Person("A", 1))
        rule = ExcludeMemberByPathSelectionRule(MemberPath.parse("Age"))
        assert "Age" in _names(rule.select_members(node, _defaults(node, context), context))

    def test_include_adds_member(self) -> None:
        rule = IncludeMemberByPathSelectionRule(MemberPath.parse("Name"))
        assert rule.includes_members
        assert _names(rule.select_members(Node.root(), [], _context(Person("A", 1)))) == ["Name"]

    def test_include_adds_ancestor_of_nested_path(self) -> None:
        rule = IncludeMemberByPathSelectionRule(MemberPath.parse("Pet.Name"))
        assert _names(rule.select_members(Node.root(), [], _context(Person("A", 1)))) == ["Pet"]


class TestPredicateRules:
    """Exclusion and inclusion by MemberInfo predicate."""

    def test_exclude_where(self) -> None:
        context = _context(Person("A", 1))
        rule = ExcludeMemberByPredicateSelectionRule(lambda info: info.type is int)
        selected = rule.select_members(Node.root(), _defaults(Node.root(), context), context)
        assert "Age" not in _names(selected)
        assert "Name" in _names(selected)

    def test_exclude_where_sees_path(self) -> None:
        node = Node.root().child_item(0)
        context = _context(Person("A", 1))
        rule = ExcludeMemberByPredicateSelectionRule(lambda info: info.path == "[0].Name")
        assert "Name" not in _names(rule.select_members(node, _defaults(node, context), context))

    def test_include_where_admits_internal(self) -> None:
        rule = IncludeMemberByPredicateSelectionRule(lambda info: info.name.startswith("_"))
        assert rule.includes_members
        assert _names(rule.select_members(Node.root(), [], _context(Person("A", 1)))) == ["_note"]


class TestNameAndTypeRules:
    """Exclusion by name and by member type."""

    def test_exclude_named(self) -> None:
        context = _context(Person("A", 1))
        rule = ExcludeMembersNamedSelectionRule(["Age", "Label"])
        selected = _names(rule.select_members(Node.root(), _defaults(Node.root(), context), context))
        assert "Age" not in selected
        assert "Label" not in selected

    def test_exclude_exact_type(self) -> None:
        context = _context(Person("A", 1))
        rule = ExcludeMembersOfTypeSelectionRule(str)
        selected = _names(rule.select_members(Node.root(), _defaults(Node.root(), context), context))
        assert "Name" not in selected
        assert "Age" in selected

    def test_exclude_open_generic_optional(self) -> None:
        context = _context(Person("A", 1))
        rule = ExcludeMembersOfTypeSelectionRule(Optional)
        selected = _names(rule.select_members(Node.root(), _defaults(Node.root(), context), context))
        assert "Score" not in selected
        assert "Wrapped" not in selected
        assert "Name" in selected

    def test_exclude_user_open_generic_by_runtime_value(self) -> None:
        obj = Person("A", 1, Wrapped=Box(3))
        context = _context(obj)
        rule = ExcludeMembersOfTypeSelectionRule(Box)
        assert "Wrapped" not in _names(rule.select_members(Node.root(), _defaults(Node.root(), context), context))

    def test_exact_type_does_not_exclude_subclass(self) -> None:
        context = _context(Person("A", 1, Pet=Dog()))
        rule = ExcludeMembersOfTypeSelectionRule(Animal)
        assert "Pet" in _names(rule.select_members(Node.root(), _defaults(Node.root(), context), context))

    def test_deriving_from_excludes_subclass(self) -> None:
        context = _context(Person("A", 1, Pet=Dog()))
        rule = ExcludeMembersOfTypeSelectionRule(Animal, include_derived=True)
        assert "Pet" not in _names(rule.select_members(Node.root(), _defaults(Node.root(), context), context))


class TestNonBrowsable:
    """ExcludeNonBrowsableMembersRule."""

    def test_non_browsable_removed(self) -> None:
        context = _context(Person("A", 1))
        rule = ExcludeNonBrowsableMembersRule()
        assert "Secret" not in _names(rule.select_members(Node.root(), _defaults(Node.root(), context), context))
