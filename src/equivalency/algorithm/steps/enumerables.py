"""Collection comparison.

After the counts are checked, a collection is compared either index-aligned
(strict ordering, and always for raw scalar buffers) or as a bag, in which
case every expectation element is paired with the subject element that
produces the fewest differences (the closest match).  Only the differences
of the chosen pairs are reported, under the expectation element's index.

Comparison stops after ``FAILED_ITEMS_FAST_FAIL_THRESHOLD`` failed elements.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import numpy as np

from equivalency.algorithm.classification import EqualityStrategy
from equivalency.algorithm.matcher import closest_match
from equivalency.graph.nodes import Comparands
from equivalency.graph.types import describe_type, is_collection, is_scalar_buffer, type_arguments
from equivalency.protocols import StepResult
from equivalency.report import MAX_REPORTED_DIFFERENCES, format_value
from equivalency.result import Difference, DifferenceKind

if TYPE_CHECKING:
    from equivalency.algorithm.context import TraversalContext
    from equivalency.graph.nodes import Node
    from equivalency.protocols import NestedValidator

__all__ = ["FAILED_ITEMS_FAST_FAIL_THRESHOLD", "EnumerableStep"]

logger = logging.getLogger(__name__)

FAILED_ITEMS_FAST_FAIL_THRESHOLD = 10

_UNORDERED_TYPES: tuple[type, ...] = (set, frozenset)


def _format_items(items: list[Any]) -> str:
    shown = ", ".join(format_value(item) for item in items[:MAX_REPORTED_DIFFERENCES])
    if len(items) > MAX_REPORTED_DIFFERENCES:
        shown += ", …"
    return f"[{shown}]"


def _element_type(declared_type: Any) -> Any:
    arguments = type_arguments(declared_type) if declared_type is not None else ()
    if len(arguments) == 1:
        return arguments[0]
    if len(arguments) == 2 and arguments[1] is Ellipsis:
        return arguments[0]
    return None


class EnumerableStep:
    """Compares collection expectations element by element."""

    def handle(
        self,
        comparands: Comparands,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> StepResult:
        expectation = comparands.expectation
        if not is_collection(expectation):
            return StepResult.CONTINUE
        if context.strategy_for(node, comparands) == EqualityStrategy.FORCE_MEMBERS:
            return StepResult.CONTINUE

        subject = comparands.subject
        if not is_collection(subject):
            context.record(
                node,
                DifferenceKind.TYPE_MISMATCH,
                f"expected a collection, found {format_value(subject)} "
                f"of type {describe_type(type(subject))}",
            )
            return StepResult.HANDLED

        subject_items = list(subject)
        expected_items = list(expectation)

        if len(subject_items) != len(expected_items):
            self._report_count(subject_items, expected_items, node, context)
            return StepResult.HANDLED

        element_type = _element_type(node.declared_type)
        if is_scalar_buffer(expectation) or is_scalar_buffer(subject):
            context.trace(node, "comparing scalar buffer index-aligned")
            self._compare_buffers(subject_items, expected_items, element_type, node, context, validator)
        elif not isinstance(expectation, _UNORDERED_TYPES) and context.options.ordering_rules.is_order_strict(
            context.object_info(node, comparands)
        ):
            context.trace(node, "comparing collection with strict ordering")
            self._compare_strictly(subject_items, expected_items, element_type, node, context, validator)
        else:
            context.trace(node, "comparing collection without strict ordering")
            self._compare_loosely(subject_items, expected_items, element_type, node, context, validator)
        return StepResult.HANDLED

    # ------------------------------------------------------------------
    # Count
    # ------------------------------------------------------------------

    @staticmethod
    def _report_count(
        subject_items: list[Any],
        expected_items: list[Any],
        node: Node,
        context: TraversalContext,
    ) -> None:
        delta = len(subject_items) - len(expected_items)
        direction = "more" if delta > 0 else "less"
        context.record(
            node,
            DifferenceKind.COUNT_MISMATCH,
            f"expected a collection with {len(expected_items)} item(s), "
            f"but found {len(subject_items)} item(s) "
            f"({abs(delta)} item(s) {direction} than expected): {_format_items(subject_items)}",
        )

    # ------------------------------------------------------------------
    # Index-aligned
    # ------------------------------------------------------------------

    @staticmethod
    def _compare_buffers(
        subject_items: list[Any],
        expected_items: list[Any],
        element_type: Any,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> None:
        failed = 0
        for index, (found, expected) in enumerate(zip(subject_items, expected_items, strict=True)):
            before = len(context.differences)
            validator.assert_equivalency_of(
                Comparands(found, expected),
                node.child_item(index, declared_type=element_type),
                context,
            )
            if len(context.differences) > before:
                failed += 1
                if failed >= FAILED_ITEMS_FAST_FAIL_THRESHOLD:
                    break

    @staticmethod
    def _trial(
        found: Any,
        expected: Any,
        child: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> list[Difference]:
        with context.trial() as differences:
            validator.assert_equivalency_of(Comparands(found, expected), child, context)
        return differences

    def _compare_strictly(
        self,
        subject_items: list[Any],
        expected_items: list[Any],
        element_type: Any,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> None:
        failed = 0
        for index, expected in enumerate(expected_items):
            child = node.child_item(index, declared_type=element_type)
            differences = self._trial(subject_items[index], expected, child, context, validator)
            if not differences:
                continue

            failed += 1
            elsewhere = next(
                (
                    other
                    for other, found in enumerate(subject_items)
                    if other != index
                    and not self._trial(
                        found,
                        expected,
                        node.child_item(index, other, element_type),
                        context,
                        validator,
                    )
                ),
                None,
            )
            if elsewhere is None:
                context.differences.extend(differences)
            else:
                context.record(
                    child,
                    DifferenceKind.ORDER_MISMATCH,
                    f"expected {format_value(expected)} at index {index}, "
                    f"but found it at index {elsewhere}",
                )
            if failed >= FAILED_ITEMS_FAST_FAIL_THRESHOLD:
                break

    # ------------------------------------------------------------------
    # Best pairing
    # ------------------------------------------------------------------

    def _compare_loosely(
        self,
        subject_items: list[Any],
        expected_items: list[Any],
        element_type: Any,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> None:
        size = len(expected_items)
        trials: dict[tuple[int, int], list[Difference]] = {}

        def run(i: int, j: int) -> list[Difference]:
            if (i, j) not in trials:
                trials[(i, j)] = self._trial(
                    subject_items[j],
                    expected_items[i],
                    node.child_item(i, j, element_type),
                    context,
                    validator,
                )
            return trials[(i, j)]

        if all(not run(i, i) for i in range(size)):
            return

        cost = np.zeros((size, size), dtype=float)
        for i in range(size):
            for j in range(size):
                cost[i, j] = len(run(i, j))

        pairs = closest_match(cost)
        logger.debug("%s: closest-match pairing %s", node, pairs)

        failed = 0
        for i, j in pairs:
            differences = trials[(i, j)]
            if not differences:
                continue
            context.differences.extend(differences)
            failed += 1
            if failed >= FAILED_ITEMS_FAST_FAIL_THRESHOLD:
                break

    def __str__(self) -> str:
        return "Compare collections"
