"""User overrides: assertion rules and equality comparers.

``AssertionRule`` is what ``builder.using(cls, action).when(predicate)``
registers.  The action receives ``(subject, expectation)`` and signals a
difference by raising ``AssertionError``; any other exception propagates.

``EqualityComparerStep`` is what ``builder.using_comparer(cls, comparer)``
registers: a ``comparer(subject, expectation) -> bool`` replaces every other
comparison for expectations of that class.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from equivalency.graph.nodes import ObjectInfo
from equivalency.graph.types import describe_type
from equivalency.protocols import StepResult
from equivalency.report import format_value
from equivalency.result import DifferenceKind

if TYPE_CHECKING:
    from equivalency.algorithm.context import TraversalContext
    from equivalency.graph.nodes import Comparands, Node
    from equivalency.protocols import NestedValidator

__all__ = ["AssertionRule", "EqualityComparerStep"]


def _callable_name(func: Any) -> str:
    return getattr(func, "__qualname__", None) or type(func).__qualname__


class AssertionRule:
    """Runs ``action`` for every node matching ``predicate``.

    Args:
        predicate: Decides, from the node's ``ObjectInfo``, whether the rule applies.
        action: ``action(subject, expectation)``; raise ``AssertionError`` to fail.
        expected_type: When given, both sides must be instances of it (or None);
            otherwise a TYPE_MISMATCH naming the offending side is recorded.
    """

    def __init__(
        self,
        predicate: Callable[[ObjectInfo], bool],
        action: Callable[[Any, Any], Any],
        expected_type: type | None = None,
    ) -> None:
        self._predicate = predicate
        self._action = action
        self._expected_type = expected_type

    def handle(
        self,
        comparands: Comparands,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> StepResult:
        if not self._predicate(context.object_info(node, comparands)):
            return StepResult.CONTINUE

        subject, expectation = comparands.subject, comparands.expectation
        if self._expected_type is not None:
            incompatible = [
                (side, value)
                for side, value in (("subject", subject), ("expectation", expectation))
                if value is not None and not isinstance(value, self._expected_type)
            ]
            if incompatible:
                notes = ", ".join(
                    f"the {side} is of type {describe_type(type(value))}" for side, value in incompatible
                )
                context.record(
                    node,
                    DifferenceKind.TYPE_MISMATCH,
                    f"expected {format_value(expectation)}, found {format_value(subject)}, "
                    f"but {notes} which is not compatible with {describe_type(self._expected_type)}",
                )
                return StepResult.HANDLED

        try:
            self._action(subject, expectation)
        except AssertionError as exc:
            context.record(
                node,
                DifferenceKind.ASSERTION_FAILED,
                str(exc) or f"assertion {_callable_name(self._action)} failed",
            )
        context.trace(node, f"applied {self}")
        return StepResult.HANDLED

    def __str__(self) -> str:
        target = describe_type(self._expected_type) if self._expected_type else "any type"
        return f"Invoke {_callable_name(self._action)} for {target} when the predicate matches"


class EqualityComparerStep:
    """Compares expectations of ``compared_type`` with ``comparer``."""

    def __init__(self, compared_type: type, comparer: Callable[[Any, Any], bool]) -> None:
        self._type = compared_type
        self._comparer = comparer

    def handle(
        self,
        comparands: Comparands,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> StepResult:
        subject, expectation = comparands.subject, comparands.expectation
        if not isinstance(expectation, self._type):
            return StepResult.CONTINUE
        if not self._comparer(subject, expectation):
            context.record(
                node,
                DifferenceKind.VALUE_MISMATCH,
                f"expected {format_value(expectation)}, found {format_value(subject)} "
                f"(compared using {_callable_name(self._comparer)})",
            )
        return StepResult.HANDLED

    def __str__(self) -> str:
        return f"Use {_callable_name(self._comparer)} for objects of type {describe_type(self._type)}"
