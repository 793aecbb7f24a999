"""Tests for member-wise comparison (StructuralEqualityStep).

Covers:
- Only expectation members are compared; extra subject members are ignored
- Missing members: reported by default, skipped when excluded
- Types without selectable members raise NoMembersFoundError
- Non-recursive mode compares nested objects with ==
- Non-browsable members on either side
- Mapping subjects expose their string keys as members
- Runtime versus declared typing
- Properties and instance attributes
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from equivalency import DifferenceKind, NoMembersFoundError, compare, non_browsable

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@dataclass
class Customer:
    Name: str
    Age: int


@dataclass
class CustomerDto:
    Name: str


class Empty:
    pass


class Point:
    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y


@dataclass
class Shape:
    Origin: Point


class Source:
    def __init__(self, secret: str) -> None:
        self.id = 1
        self._secret = secret

    @non_browsable
    @property
    def secret(self) -> str:
        return self._secret


class Target:
    def __init__(self, secret: str) -> None:
        self.id = 1
        self.secret = secret


@dataclass
class Base:
    Id: int


@dataclass
class Derived(Base):
    Extra: str


@dataclass
class Holder:
    Item: Base


class Temperature:
    def __init__(self, celsius: float) -> None:
        self._celsius = celsius

    @property
    def fahrenheit(self) -> float:
        return self._celsius * 9 / 5 + 32


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestMemberSelection:
    """Which members take part."""

    def test_extra_subject_members_ignored(self) -> None:
        assert compare(Customer("Ann", 30), CustomerDto("Ann")).is_equivalent

    def test_missing_member_reported(self) -> None:
        result = compare(CustomerDto("Ann"), Customer("Ann", 30))
        assert [d.kind for d in result.differences] == [DifferenceKind.MISSING_MEMBER]
        assert str(result.differences[0]) == (
            "Age: expectation has member Age that the other object (CustomerDto) does not have"
        )

    def test_excluding_missing_members(self) -> None:
        assert compare(CustomerDto("Ann"), Customer("Ann", 30), lambda o: o.excluding_missing_members()).is_equivalent

    def test_no_members_found(self) -> None:
        with pytest.raises(NoMembersFoundError, match="No members were found for comparison of Empty"):
            compare(Empty(), Empty())

    def test_everything_excluded(self) -> None:
        with pytest.raises(NoMembersFoundError):
            compare(CustomerDto("Ann"), CustomerDto("Ann"), lambda o: o.excluding("Name"))

    def test_property_compared(self) -> None:
        assert compare(Temperature(100), Temperature(100)).is_equivalent
        result = compare(Temperature(0), Temperature(100))
        assert {d.path for d in result.differences} == {"fahrenheit"}

    def test_including_internal_fields(self) -> None:
        result = compare(Temperature(0), Temperature(100), lambda o: o.excluding_properties().including_internal_fields())
        assert [d.path for d in result.differences] == ["_celsius"]


class TestRecursion:
    """Nested objects."""

    def test_nested_object_by_members(self) -> None:
        assert compare(Shape(Point(1, 2)), Shape(Point(1, 2))).is_equivalent

    def test_nested_difference_path(self) -> None:
        result = compare(Shape(Point(1, 2)), Shape(Point(1, 3)))
        assert [str(d) for d in result.differences] == ["Origin.y: expected 3, found 2"]

    def test_without_recursing_uses_equality(self) -> None:
        result = compare(Shape(Point(1, 2)), Shape(Point(1, 2)), lambda o: o.without_recursing())
        assert [d.path for d in result.differences] == ["Origin"]
        assert result.differences[0].kind == DifferenceKind.VALUE_MISMATCH


class TestNonBrowsable:
    """Non-browsable members."""

    def test_non_browsable_compared_by_default(self) -> None:
        assert not compare(Source("x"), Target("y")).is_equivalent

    def test_ignoring_non_browsable_on_subject(self) -> None:
        assert compare(Source("x"), Target("y"), lambda o: o.ignoring_non_browsable_members_on_subject()).is_equivalent

    def test_excluding_non_browsable_expectation_members(self) -> None:
        assert compare(Target("y"), Source("x"), lambda o: o.excluding_non_browsable_members()).is_equivalent


class TestSubjectShapes:
    """Subjects of a different shape than the expectation."""

    def test_mapping_subject(self) -> None:
        assert compare({"Name": "Ann", "Age": 30}, Customer("Ann", 30)).is_equivalent

    def test_mapping_subject_missing_key(self) -> None:
        result = compare({"Name": "Ann"}, Customer("Ann", 30))
        assert result.differences[0].kind == DifferenceKind.MISSING_MEMBER

    def test_mapping_subject_case_insensitive(self) -> None:
        assert compare({"name": "Ann"}, CustomerDto("Ann"), lambda o: o.ignoring_member_name_casing()).is_equivalent


class TestTyping:
    """Runtime versus declared types."""

    def test_runtime_types_by_default(self) -> None:
        result = compare(Holder(Derived(1, "a")), Holder(Derived(1, "b")))
        assert [d.path for d in result.differences] == ["Item.Extra"]

    def test_declared_types(self) -> None:
        subject, expectation = Holder(Derived(1, "a")), Holder(Derived(1, "b"))
        assert compare(subject, expectation, lambda o: o.respecting_declared_types()).is_equivalent

    def test_declared_type_of_root(self) -> None:
        result = compare(Derived(1, "a"), Derived(1, "b"), lambda o: o.respecting_declared_types(), declared_type=Base)
        assert result.is_equivalent
