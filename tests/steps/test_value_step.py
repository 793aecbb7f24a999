"""Tests for by-value comparison (ValueTypeStep) and the reference fast path.

Covers:
- Identical objects, None on one side
- Numeric widening across Python and numpy scalars; bool never equals a number
- Enums by value (default) and by name
- String options: case, leading/trailing whitespace, newline style
- Type note in mismatch messages
- Registered value types compared with ==
"""

from __future__ import annotations

import enum

import numpy as np
import pytest

from equivalency import DifferenceKind, compare


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class Colour(enum.Enum):
    RED = 1
    GREEN = 3


class Money:
    def __init__(self, amount: int, currency: str) -> None:
        self.amount = amount
        self.currency = currency
        self.audit = object()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Money) and (self.amount, self.currency) == (other.amount, other.currency)

    __hash__ = None  # type: ignore[assignment]


class TestReferenceAndNone:
    """ReferenceEqualityStep."""

    def test_same_object(self) -> None:
        obj = object()
        assert compare(obj, obj).is_equivalent

    def test_both_none(self) -> None:
        assert compare(None, None).is_equivalent

    @pytest.mark.parametrize(("subject", "expectation"), [(None, 1), (1, None)])
    def test_one_none(self, subject: object, expectation: object) -> None:
        result = compare(subject, expectation)
        assert [d.kind for d in result.differences] == [DifferenceKind.VALUE_MISMATCH]


class TestNumbers:
    """Numeric comparison."""

    @pytest.mark.parametrize(
        ("subject", "expectation"),
        [(np.int64(1), 1), (np.int32(7), np.int64(7)), (1, 1.0), (np.float32(0.5), 0.5)],
    )
    def test_widening(self, subject: object, expectation: object) -> None:
        assert compare(subject, expectation).is_equivalent

    def test_bool_is_not_int(self) -> None:
        assert not compare(True, 1).is_equivalent
        assert not compare(0, False).is_equivalent

    def test_mismatch_message(self) -> None:
        result = compare(27, 28)
        assert str(result.differences[0]) == "<root>: expected 28, found 27"

    def test_type_note_for_different_types(self) -> None:
        result = compare("1", 1)
        assert "expected type int, found type str" in result.differences[0].message


class TestEnums:
    """Enum handling."""

    def test_by_value_across_enum_types(self) -> None:
        assert compare(Colour.RED, Color.RED).is_equivalent

    def test_by_value_mismatch(self) -> None:
        result = compare(Colour.GREEN, Color.GREEN)
        assert "Color.GREEN" in result.differences[0].message

    def test_by_name(self) -> None:
        assert compare(Colour.GREEN, Color.GREEN, lambda o: o.comparing_enums_by_name()).is_equivalent

    def test_enum_against_raw_value(self) -> None:
        assert compare(1, Color.RED).is_equivalent


class TestStrings:
    """String options."""

    def test_case_sensitive_by_default(self) -> None:
        result = compare("Hello", "hello")
        assert "differs near index 0" in result.differences[0].message

    def test_ignoring_case(self) -> None:
        assert compare("HELLO", "hello", lambda o: o.ignoring_case()).is_equivalent

    def test_ignoring_leading_whitespace(self) -> None:
        assert compare("  a", "a", lambda o: o.ignoring_leading_whitespace()).is_equivalent
        assert not compare("a  ", "a", lambda o: o.ignoring_leading_whitespace()).is_equivalent

    def test_ignoring_trailing_whitespace(self) -> None:
        assert compare("a \n", "a", lambda o: o.ignoring_trailing_whitespace()).is_equivalent

    def test_ignoring_newline_style(self) -> None:
        assert compare("a\r\nb", "a\nb", lambda o: o.ignoring_newline_style()).is_equivalent
        assert not compare("a\r\nb", "a\nb").is_equivalent


class TestRegisteredValueTypes:
    """Classes registered with comparing_by_value use ==."""

    def test_by_members_by_default(self) -> None:
        assert not compare(Money(1, "EUR"), Money(1, "EUR")).is_equivalent

    def test_by_value_when_registered(self) -> None:
        assert compare(Money(1, "EUR"), Money(1, "EUR"), lambda o: o.comparing_by_value(Money)).is_equivalent
        assert not compare(Money(1, "EUR"), Money(2, "EUR"), lambda o: o.comparing_by_value(Money)).is_equivalent
