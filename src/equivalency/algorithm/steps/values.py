"""By-value comparison of scalars, enums, strings and registered value types."""

from __future__ import annotations

import enum
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import numpy as np

from equivalency.algorithm.config import EnumEquivalencyHandling
from equivalency.graph.types import describe_type, is_number
from equivalency.protocols import StepResult
from equivalency.report import format_value
from equivalency.result import DifferenceKind

if TYPE_CHECKING:
    from equivalency.algorithm.config import EquivalencyOptions
    from equivalency.algorithm.context import TraversalContext
    from equivalency.graph.nodes import Comparands, Node
    from equivalency.protocols import NestedValidator

__all__ = ["ValueTypeStep"]


def _values_equal(subject: Any, expectation: Any) -> bool:
    result = expectation == subject
    if isinstance(result, np.ndarray):
        return bool(result.all()) and np.shape(subject) == np.shape(expectation)
    return bool(result)


def _is_nan(value: Any) -> bool:
    if isinstance(value, Decimal):
        return value.is_nan()
    if isinstance(value, (float, complex, np.inexact)):
        return bool(np.isnan(value))
    return False


def _numbers_equal(subject: Any, expectation: Any) -> bool:
    # bool is a number in Python, but never equals a non-bool
    if isinstance(subject, (bool, np.bool_)) != isinstance(expectation, (bool, np.bool_)):
        return False
    if _is_nan(subject) and _is_nan(expectation):
        return True
    return _values_equal(subject, expectation)


def _normalize(text: str, options: EquivalencyOptions) -> str:
    if options.ignore_newline_style:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
    if options.ignore_leading_whitespace:
        text = text.lstrip()
    if options.ignore_trailing_whitespace:
        text = text.rstrip()
    if options.ignore_case:
        text = text.casefold()
    return text


def _first_difference(a: str, b: str) -> int:
    for index, (left, right) in enumerate(zip(a, b)):
        if left != right:
            return index
    return min(len(a), len(b))


def _describe_enum(value: Any) -> str:
    if isinstance(value, enum.Enum):
        return f"{type(value).__name__}.{value.name} ({format_value(value.value)})"
    return format_value(value)


class ValueTypeStep:
    """Compares pairs classified as by-value."""

    def handle(
        self,
        comparands: Comparands,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> StepResult:
        if not context.is_by_value(node, comparands):
            return StepResult.CONTINUE

        subject, expectation = comparands.subject, comparands.expectation

        if isinstance(expectation, enum.Enum) or isinstance(subject, enum.Enum):
            self._compare_enums(subject, expectation, node, context)
        elif isinstance(expectation, str) and isinstance(subject, str):
            self._compare_strings(subject, expectation, node, context)
        elif is_number(expectation) or is_number(subject):
            if not _numbers_equal(subject, expectation):
                self._mismatch(subject, expectation, node, context)
        elif not _values_equal(subject, expectation):
            self._mismatch(subject, expectation, node, context)

        context.trace(node, f"compared by value ({describe_type(type(expectation))})")
        return StepResult.HANDLED

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _mismatch(subject: Any, expectation: Any, node: Node, context: TraversalContext) -> None:
        message = f"expected {format_value(expectation)}, found {format_value(subject)}"
        subject_type, expectation_type = type(subject), type(expectation)
        if subject_type is not expectation_type and not (is_number(subject) and is_number(expectation)):
            message += (
                f" (expected type {describe_type(expectation_type)},"
                f" found type {describe_type(subject_type)})"
            )
        context.record(node, DifferenceKind.VALUE_MISMATCH, message)

    @staticmethod
    def _compare_strings(subject: str, expectation: str, node: Node, context: TraversalContext) -> None:
        left = _normalize(subject, context.options)
        right = _normalize(expectation, context.options)
        if left == right:
            return
        index = _first_difference(left, right)
        context.record(
            node,
            DifferenceKind.VALUE_MISMATCH,
            f"expected {format_value(expectation)}, found {format_value(subject)} "
            f"(differs near index {index})",
        )

    def _compare_enums(self, subject: Any, expectation: Any, node: Node, context: TraversalContext) -> None:
        by_name = context.options.enum_handling == EnumEquivalencyHandling.BY_NAME

        def key(value: Any) -> Any:
            if isinstance(value, enum.Enum):
                return value.name if by_name else value.value
            return value

        left, right = key(subject), key(expectation)
        equal = _numbers_equal(left, right) if is_number(left) and is_number(right) else left == right
        if not equal:
            context.record(
                node,
                DifferenceKind.VALUE_MISMATCH,
                f"expected {_describe_enum(expectation)}, found {_describe_enum(subject)}",
            )

    def __str__(self) -> str:
        return "Compare by value"
