"""Unit tests for Difference and EquivalencyResult.

Tests cover:
- Difference path and string rendering, including the root
- EquivalencyResult truthiness and is_equivalent
- Filtering differences by kind
- Immutability of both records
"""

from __future__ import annotations

import dataclasses

import pytest

from equivalency import Difference, DifferenceKind, EquivalencyResult, Node


def _difference(node: Node, kind: DifferenceKind = DifferenceKind.VALUE_MISMATCH, message: str = "x") -> Difference:
    return Difference(node=node, kind=kind, message=message)


class TestDifference:
    """Difference rendering."""

    def test_root_path(self) -> None:
        difference = _difference(Node.root(), message="expected 2, found 1")
        assert difference.path == "<root>"
        assert str(difference) == "<root>: expected 2, found 1"

    def test_nested_path(self) -> None:
        node = Node.root().child_item(3)
        assert _difference(node).path == "[3]"

    def test_is_frozen(self) -> None:
        difference = _difference(Node.root())
        with pytest.raises(dataclasses.FrozenInstanceError):
            difference.message = "changed"  # type: ignore[misc]


class TestEquivalencyResult:
    """EquivalencyResult queries."""

    def test_empty_result_is_equivalent(self) -> None:
        result = EquivalencyResult(differences=())
        assert result.is_equivalent
        assert bool(result)
        assert result.trace == ()
        assert result.computation_time_ms == 0.0

    def test_result_with_differences(self) -> None:
        result = EquivalencyResult(differences=(_difference(Node.root()),))
        assert not result.is_equivalent
        assert not result

    def test_of_kind(self) -> None:
        missing = _difference(Node.root().child_item(0), DifferenceKind.MISSING_MEMBER)
        value = _difference(Node.root().child_item(1))
        result = EquivalencyResult(differences=(missing, value))
        assert result.of_kind(DifferenceKind.MISSING_MEMBER) == [missing]
        assert result.of_kind(DifferenceKind.CYCLIC_REFERENCE) == []

    def test_difference_kinds_are_strings(self) -> None:
        assert DifferenceKind.VALUE_MISMATCH == "value_mismatch"
