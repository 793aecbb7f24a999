"""Per-comparison traversal state.

A ``TraversalContext`` is created by the validator for one top-level
comparison and discarded afterwards.  It is threaded explicitly through every
step and recursive call; nothing here is global or thread-local.

It holds:

- ``DifferenceCollector``: the ordered list of differences found so far,
  with a ``capture()`` scope used for trial comparisons.
- ``CyclicReferenceDetector``: the identities of the subject objects on the
  active path, pushed on descent and popped on return, so sibling subtrees
  never see each other's marks.
- ``Tracer``: step decisions, logged at DEBUG and kept when tracing is on.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from equivalency.algorithm.classification import EqualityStrategy, TypeClassifier
from equivalency.algorithm.config import EquivalencyOptions
from equivalency.graph.nodes import Comparands, Node, ObjectInfo
from equivalency.result import Difference, DifferenceKind

__all__ = ["CyclicReferenceDetector", "DifferenceCollector", "Tracer", "TraversalContext"]

logger = logging.getLogger(__name__)


class DifferenceCollector:
    """Ordered accumulator of differences."""

    def __init__(self) -> None:
        self._differences: list[Difference] = []

    def add(self, node: Node, kind: DifferenceKind, message: str) -> None:
        self._differences.append(Difference(node, kind, message))

    def extend(self, differences: list[Difference]) -> None:
        self._differences.extend(differences)

    @contextmanager
    def capture(self) -> Iterator[list[Difference]]:
        """Collect differences into a separate list for the duration of the block.

        The captured differences are not added to the outer list; the caller
        decides whether to ``extend`` with them.
        """
        outer = self._differences
        scoped: list[Difference] = []
        self._differences = scoped
        try:
            yield scoped
        finally:
            self._differences = outer

    @property
    def differences(self) -> tuple[Difference, ...]:
        return tuple(self._differences)

    def __len__(self) -> int:
        return len(self._differences)


class CyclicReferenceDetector:
    """Identities of the subject objects on the active traversal path.

    A cyclic reference is a subject object that reappears among its own
    ancestors, whatever the expectation holds at that position.
    """

    def __init__(self) -> None:
        self._stack: list[int] = []
        self._active: set[int] = set()

    @staticmethod
    def _key(comparands: Comparands) -> int:
        return id(comparands.subject)

    def is_cyclic(self, comparands: Comparands) -> bool:
        return self._key(comparands) in self._active

    @contextmanager
    def visiting(self, comparands: Comparands, track: bool = True) -> Iterator[None]:
        """Mark ``comparands`` as an ancestor of everything compared inside the block."""
        if not track:
            yield
            return
        key = self._key(comparands)
        self._stack.append(key)
        self._active.add(key)
        try:
            yield
        finally:
            self._stack.pop()
            if key not in self._stack:
                self._active.discard(key)

    @property
    def depth(self) -> int:
        return len(self._stack)


class Tracer:
    """Records step decisions."""

    def __init__(self, enabled: bool = False) -> None:
        self._enabled = enabled
        self._muted = 0
        self._lines: list[str] = []

    def write(self, node: Node, message: str) -> None:
        if self._muted:
            return
        logger.debug("%s: %s", node, message)
        if self._enabled:
            self._lines.append(f"{node}: {message}")

    @contextmanager
    def muted(self) -> Iterator[None]:
        self._muted += 1
        try:
            yield
        finally:
            self._muted -= 1

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)


class TraversalContext:
    """Mutable state of one top-level comparison.

    Args:
        options: The (read-only) options of the comparison.
        classifier: Classifier to use; a new one is created when None.
    """

    def __init__(
        self,
        options: EquivalencyOptions,
        classifier: TypeClassifier | None = None,
    ) -> None:
        self.options = options
        self.classifier = classifier if classifier is not None else TypeClassifier(options)
        self.differences = DifferenceCollector()
        self.cycles = CyclicReferenceDetector()
        self.tracer = Tracer(options.tracing)

    def record(self, node: Node, kind: DifferenceKind, message: str) -> None:
        logger.debug("difference at %s (%s): %s", node, kind, message)
        self.differences.add(node, kind, message)

    def trace(self, node: Node, message: str) -> None:
        self.tracer.write(node, message)

    @contextmanager
    def trial(self) -> Iterator[list[Difference]]:
        """Compare without recording: differences go to the yielded list only."""
        with self.tracer.muted(), self.differences.capture() as scoped:
            yield scoped

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def object_info(self, node: Node, comparands: Comparands) -> ObjectInfo:
        return ObjectInfo.of(node, comparands, self.options.respect_runtime_types)

    def expected_type(self, node: Node, comparands: Comparands) -> type:
        return comparands.expected_type(node, self.options.respect_runtime_types)

    def strategy_for(self, node: Node, comparands: Comparands) -> EqualityStrategy:
        return self.classifier.strategy_for(self.expected_type(node, comparands), node.declared_type)

    def is_by_value(self, node: Node, comparands: Comparands) -> bool:
        return self.strategy_for(node, comparands).is_by_value
