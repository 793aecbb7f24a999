"""EquivalencyValidator: drives the step pipeline over two object graphs.

For every node the validator:

1. auto-converts the subject when the options select the node for conversion,
2. enforces the maximum recursion depth (unless infinite recursion is allowed;
   the interpreter's recursion limit then still applies and is reported as a
   MAXIMUM_DEPTH_EXCEEDED difference),
3. checks the active path for a cyclic reference (by-members pairs only),
4. runs the steps in order until one reports HANDLED.

Step order: user steps (registration order, comparers in front), the
reference fast path, assertion overrides (most recent first), then the
by-value, multi-dimensional array, dictionary, collection and member steps.

Differences are collected into the context and never raised; configuration
errors raised by rules or steps propagate to the caller unchanged.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from equivalency.algorithm.config import CyclicReferenceHandling, EquivalencyOptions
from equivalency.algorithm.context import TraversalContext
from equivalency.algorithm.conversion import try_convert
from equivalency.algorithm.steps import (
    DictionaryStep,
    EnumerableStep,
    MultiDimensionalArrayStep,
    ReferenceEqualityStep,
    StructuralEqualityStep,
    ValueTypeStep,
)
from equivalency.exceptions import InvalidArgumentError
from equivalency.graph.nodes import Comparands, Node
from equivalency.protocols import EquivalencyStep, StepResult
from equivalency.report import format_value
from equivalency.result import DifferenceKind, EquivalencyResult

__all__ = ["EquivalencyValidator"]

logger = logging.getLogger(__name__)


class EquivalencyValidator:
    """Compares object graphs under one ``EquivalencyOptions`` snapshot.

    The validator holds no per-comparison state; every ``validate()`` call
    creates its own ``TraversalContext``, so one validator may be reused.

    Example::

        from equivalency.algorithm import EquivalencyOptions, EquivalencyValidator

        validator = EquivalencyValidator(EquivalencyOptions())
        result = validator.validate([1, 2, 3], [3, 2, 1])
        print(result.is_equivalent)  # True
    """

    def __init__(self, options: EquivalencyOptions | None) -> None:
        if options is None:
            msg = "The equivalency options cannot be None"
            raise InvalidArgumentError(msg)
        self._options = options
        self._steps: tuple[EquivalencyStep, ...] = (
            *options.user_steps,
            ReferenceEqualityStep(),
            *options.assertion_rules,
            ValueTypeStep(),
            MultiDimensionalArrayStep(),
            DictionaryStep(),
            EnumerableStep(),
            StructuralEqualityStep(),
        )

    @property
    def options(self) -> EquivalencyOptions:
        return self._options

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate(self, subject: Any, expectation: Any, declared_type: Any = None) -> EquivalencyResult:
        """Compare ``subject`` with ``expectation`` and collect every difference.

        Args:
            subject:       The object graph under test.
            expectation:   The object graph it should be equivalent to.
            declared_type: Annotation describing the root (used with declared typing).

        Returns:
            An ``EquivalencyResult``; ``is_equivalent`` is True when no
            differences were found.
        """
        t0 = time.perf_counter()
        context = TraversalContext(self._options)
        self.assert_equivalency_of(Comparands(subject, expectation), Node.root(declared_type), context)
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.debug(
            "compared %s with %s: %d difference(s) in %.2f ms",
            type(subject).__name__,
            type(expectation).__name__,
            len(context.differences),
            elapsed_ms,
        )
        return EquivalencyResult(
            differences=context.differences.differences,
            trace=context.tracer.lines,
            computation_time_ms=elapsed_ms,
        )

    def assert_equivalency_of(self, comparands: Comparands, node: Node, context: TraversalContext) -> None:
        """Compare one pair at ``node``, recording differences into ``context``."""
        comparands = self._convert(comparands, node, context)

        options = self._options
        if not options.allow_infinite_recursion and node.depth > options.max_recursion_depth:
            context.record(
                node,
                DifferenceKind.MAXIMUM_DEPTH_EXCEEDED,
                f"the maximum recursion depth of {options.max_recursion_depth} was reached. "
                "The comparison may contain a deep or infinitely nested object graph",
            )
            return

        track = self._tracks_cycles(comparands, node, context)
        if track and context.cycles.is_cyclic(comparands):
            if options.cyclic_reference_handling == CyclicReferenceHandling.IGNORE:
                context.trace(node, "ignoring cyclic reference")
                return
            context.record(
                node,
                DifferenceKind.CYCLIC_REFERENCE,
                f"expected {format_value(comparands.expectation)}, "
                "but it contains a cyclic reference",
            )
            return

        with context.cycles.visiting(comparands, track):
            try:
                self._run_steps(comparands, node, context)
            except RecursionError:
                context.record(
                    node,
                    DifferenceKind.MAXIMUM_DEPTH_EXCEEDED,
                    "the object graph is nested deeper than the interpreter's recursion limit allows",
                )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run_steps(self, comparands: Comparands, node: Node, context: TraversalContext) -> None:
        for step in self._steps:
            if step.handle(comparands, node, context, self) == StepResult.HANDLED:
                context.trace(node, f"handled by {step}")
                return

    @staticmethod
    def _tracks_cycles(comparands: Comparands, node: Node, context: TraversalContext) -> bool:
        if comparands.subject is None or comparands.expectation is None:
            return False
        return not context.is_by_value(node, comparands)

    def _convert(self, comparands: Comparands, node: Node, context: TraversalContext) -> Comparands:
        conversion = self._options.conversion
        if not conversion.inclusions or comparands.expectation is None:
            return comparands
        if not conversion.requires_conversion(context.object_info(node, comparands)):
            return comparands
        converted, value = try_convert(comparands.subject, type(comparands.expectation))
        if not converted:
            return comparands
        context.trace(
            node,
            f"converted subject {format_value(comparands.subject)} to {type(comparands.expectation).__name__}",
        )
        return comparands.with_subject(value)
