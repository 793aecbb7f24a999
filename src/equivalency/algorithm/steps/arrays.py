"""Multi-dimensional array comparison (``numpy.ndarray`` with ``ndim != 1``)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from equivalency.graph.nodes import Comparands
from equivalency.graph.types import describe_type
from equivalency.protocols import StepResult
from equivalency.result import DifferenceKind

if TYPE_CHECKING:
    from equivalency.algorithm.context import TraversalContext
    from equivalency.graph.nodes import Node
    from equivalency.protocols import NestedValidator

__all__ = ["MultiDimensionalArrayStep"]


class MultiDimensionalArrayStep:
    """Checks rank, then every dimension's length, then each element by full multi-index."""

    def handle(
        self,
        comparands: Comparands,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> StepResult:
        expectation = comparands.expectation
        if not isinstance(expectation, np.ndarray) or expectation.ndim == 1:
            return StepResult.CONTINUE

        subject = comparands.subject
        if not isinstance(subject, np.ndarray):
            context.record(
                node,
                DifferenceKind.TYPE_MISMATCH,
                f"expected a {expectation.ndim}-dimensional array, "
                f"found {describe_type(type(subject))}",
            )
            return StepResult.HANDLED

        if subject.ndim != expectation.ndim:
            context.record(
                node,
                DifferenceKind.MISMATCHED_RANK,
                f"expected an array with {expectation.ndim} dimension(s), "
                f"found {subject.ndim} dimension(s)",
            )
            return StepResult.HANDLED

        mismatched = False
        for dimension, (found, expected) in enumerate(zip(subject.shape, expectation.shape, strict=True)):
            if found != expected:
                mismatched = True
                context.record(
                    node,
                    DifferenceKind.DIMENSION_LENGTH_MISMATCH,
                    f"expected dimension {dimension} to have {expected} item(s), found {found} item(s)",
                )
        if mismatched:
            return StepResult.HANDLED

        context.trace(node, f"comparing {expectation.shape} array element-wise")
        for index in np.ndindex(expectation.shape):
            validator.assert_equivalency_of(
                Comparands(subject[index], expectation[index]),
                node.child_array_item(index),
                context,
            )
        return StepResult.HANDLED

    def __str__(self) -> str:
        return "Compare multi-dimensional arrays"
