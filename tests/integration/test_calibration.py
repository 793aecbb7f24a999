"""Calibration tests: end-to-end behaviors the engine must always exhibit.

Covers:
- Reflexivity against a deep copy of a rich graph, NaN values included
- Order-insensitive collections and the count-mismatch message
- Order-insensitive dictionaries and the missing-key message
- Cycle safety with and without ignoring cyclic references
- Exclusion, and re-inclusion through a more specific rule
- Closest-match reporting
- Raw scalar buffers compared index-aligned regardless of ordering rules
- Numeric widening across integer widths
- Open generic type exclusion at every depth
"""

from __future__ import annotations

import copy
import datetime as dt
import enum
import typing
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Generic, TypeVar

import numpy as np

from equivalency import DifferenceKind, compare, is_equivalent

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


class Status(enum.Enum):
    ACTIVE = 1
    CLOSED = 2


@dataclass
class Home:
    Street: str
    Zip: str


@dataclass
class Person:
    Name: str
    Born: dt.date
    Balance: Decimal
    Status: Status
    Home: Home
    Tags: set[str]
    Scores: dict[str, list[int]]
    Grid: np.ndarray
    History: tuple[float, ...]
    Friends: list[Person] = field(default_factory=list)


@dataclass
class Entry:
    Id: int
    V: int


@dataclass
class Customer:
    Name: str
    Age: int


class TreeNode:
    def __init__(self, name: str) -> None:
        self.name = name
        self.child: TreeNode | None = None
        self.parent: TreeNode | None = None


@dataclass
class Box(Generic[T]):
    Content: T


@dataclass
class Leaf:
    Name: str
    Tag: Box[str]
    Note: int | None = None


@dataclass
class Branch:
    Label: str
    Count: Box[int]
    Leaves: list[Leaf]


def _person() -> Person:
    friend = Person(
        Name="Bob",
        Born=dt.date(1990, 1, 2),
        Balance=Decimal("10.50"),
        Status=Status.CLOSED,
        Home=Home("Elm St", "12345"),
        Tags={"x"},
        Scores={},
        Grid=np.zeros((1, 1)),
        History=(),
    )
    return Person(
        Name="Ann",
        Born=dt.date(1985, 6, 7),
        Balance=Decimal("99.99"),
        Status=Status.ACTIVE,
        Home=Home("Oak Ave", "54321"),
        Tags={"a", "b", "c"},
        Scores={"math": [90, 85], "art": [70]},
        Grid=np.arange(6).reshape(2, 3),
        History=(1.5, 2.5),
        Friends=[friend],
    )


def _tree(names: tuple[str, str]) -> TreeNode:
    parent, child = TreeNode(names[0]), TreeNode(names[1])
    parent.child = child
    child.parent = parent
    return parent


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestReflexivity:
    """A graph is equivalent to its deep copy."""

    def test_deep_copy(self) -> None:
        original = _person()
        assert compare(original, copy.deepcopy(original)).is_equivalent

    def test_deep_copy_of_nested_containers(self) -> None:
        original = {"a": [1, {"b": (2, 3)}], "c": {4, 5}}
        assert is_equivalent(original, copy.deepcopy(original))

    def test_deep_copy_of_array_holding_nan(self) -> None:
        original = {"arr": np.array([1.0, np.nan])}
        assert compare(original, copy.deepcopy(original)).is_equivalent

    def test_distinct_nan_objects(self) -> None:
        assert is_equivalent([float("nan")], [float("nan")])
        assert is_equivalent({"x": Decimal("NaN")}, {"x": Decimal("NaN")})
        assert is_equivalent(complex(1, float("nan")), complex(1, float("nan")))

    def test_nan_against_number_differs(self) -> None:
        result = compare([float("nan")], [1.0])
        assert [d.kind for d in result.differences] == [DifferenceKind.VALUE_MISMATCH]


class TestOrderInsensitivity:
    """Collections ignore order by default."""

    def test_reordered(self) -> None:
        assert is_equivalent([Entry(1, 1), Entry(2, 2)], [Entry(2, 2), Entry(1, 1)])

    def test_count_mismatch(self) -> None:
        result = compare([1, 2], [3, 2, 1])
        assert len(result.differences) == 1
        assert "1 item(s) less than" in result.differences[0].message


class TestDictionaryOrderInsensitivity:
    """Dictionaries ignore key order."""

    def test_reordered_keys(self) -> None:
        assert is_equivalent({"A": 1, "B": 2}, {"B": 2, "A": 1})

    def test_missing_key_listed(self) -> None:
        result = compare({"A": 1}, {"A": 1, "B": 2})
        assert [d.kind for d in result.differences] == [DifferenceKind.KEY_MISMATCH]
        assert "'B'" in result.differences[0].message


class TestCycleSafety:
    """Self-referencing graphs never overflow the stack."""

    def test_cycle_reported(self) -> None:
        result = compare(_tree(("a", "b")), _tree(("a", "b")))
        assert [d.kind for d in result.differences] == [DifferenceKind.CYCLIC_REFERENCE]
        assert result.differences[0].path == "child.parent"

    def test_cycle_ignored(self) -> None:
        assert compare(_tree(("a", "b")), _tree(("a", "b")), lambda o: o.ignoring_cyclic_references()).is_equivalent

    def test_ignored_cycle_still_finds_differences(self) -> None:
        result = compare(_tree(("a", "b")), _tree(("a", "c")), lambda o: o.ignoring_cyclic_references())
        assert [d.path for d in result.differences] == ["child.name"]


class TestExclusion:
    """Excluding and re-including a member."""

    def test_excluded_member_ignored(self) -> None:
        assert is_equivalent(Customer("A", 1), Customer("A", 2), lambda o: o.excluding("Age"))

    def test_reincluded_member_compared(self) -> None:
        result = compare(Customer("A", 1), Customer("A", 2), lambda o: o.excluding("Age").including("Age"))
        assert [d.path for d in result.differences] == ["Age"]


class TestClosestMatch:
    """Unordered collections report the closest counterpart."""

    def test_single_difference_on_closest_element(self) -> None:
        subject = [Entry(Id=1, V=27), Entry(Id=2, V=30)]
        expectation = [Entry(Id=2, V=30), Entry(Id=1, V=28)]
        result = compare(subject, expectation)
        assert [str(d) for d in result.differences] == ["[1].V: expected 28, found 27"]


class TestScalarBufferStrictness:
    """Raw scalar buffers are always compared index-aligned."""

    def test_reversed_bytes_fail_regardless_of_ordering(self) -> None:
        subject, expectation = bytes([1, 2, 3, 4, 5, 6]), bytes([6, 5, 4, 3, 2, 1])
        assert not is_equivalent(subject, expectation)
        assert not is_equivalent(subject, expectation, lambda o: o.with_strict_ordering())
        assert not is_equivalent(subject, expectation, lambda o: o.without_strict_ordering())


class TestNumericWidening:
    """Integers of different widths compare by value."""

    def test_int64_against_int32(self) -> None:
        assert is_equivalent({"1": np.int64(1)}, {"1": np.int32(1)})

    def test_int_against_numpy(self) -> None:
        assert is_equivalent([np.uint8(200)], [200])


class TestTypeExclusionBreadth:
    """Excluding an open generic excludes every closed form at every depth."""

    def _graphs(self) -> tuple[Branch, Branch]:
        subject = Branch("x", Box(1), [Leaf("a", Box("p"), 1)])
        expectation = Branch("x", Box(2), [Leaf("a", Box("q"), 2)])
        return subject, expectation

    def test_without_exclusion(self) -> None:
        result = compare(*self._graphs())
        assert {d.path for d in result.differences} == {"Count.Content", "Leaves[0].Tag.Content", "Leaves[0].Note"}

    def test_open_generic_excluded_everywhere(self) -> None:
        result = compare(*self._graphs(), lambda o: o.excluding_members_of_type(Box))
        assert [d.path for d in result.differences] == ["Leaves[0].Note"]

    def test_optional_excluded(self) -> None:
        result = compare(
            *self._graphs(),
            lambda o: o.excluding_members_of_type(Box).excluding_members_of_type(typing.Optional),
        )
        assert result.is_equivalent
