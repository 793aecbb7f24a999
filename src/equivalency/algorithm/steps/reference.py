"""Reference and null fast path."""

from __future__ import annotations

from typing import TYPE_CHECKING

from equivalency.protocols import StepResult
from equivalency.report import format_value
from equivalency.result import DifferenceKind

if TYPE_CHECKING:
    from equivalency.algorithm.context import TraversalContext
    from equivalency.graph.nodes import Comparands, Node
    from equivalency.protocols import NestedValidator

__all__ = ["ReferenceEqualityStep"]


class ReferenceEqualityStep:
    """Identical objects (including two Nones) are equivalent; one None is a mismatch."""

    def handle(
        self,
        comparands: Comparands,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> StepResult:
        subject, expectation = comparands.subject, comparands.expectation
        if subject is expectation:
            return StepResult.HANDLED
        if subject is None or expectation is None:
            context.record(
                node,
                DifferenceKind.VALUE_MISMATCH,
                f"expected {format_value(expectation)}, found {format_value(subject)}",
            )
            return StepResult.HANDLED
        return StepResult.CONTINUE

    def __str__(self) -> str:
        return "Reference equality"
