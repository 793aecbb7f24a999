"""Extension-point protocols for the equivalency engine.

Every pluggable category is a structural Protocol: user rules and steps need
no base class, any object with a conformant method passes ``isinstance``
checks.

Example::

    from equivalency.protocols import EquivalencyStep, StepResult

    class TreatNoneAsEmptyString:
        def handle(self, comparands, node, context, validator):
            if comparands.subject is None and comparands.expectation == "":
                return StepResult.HANDLED
            return StepResult.CONTINUE

    assert isinstance(TreatNoneAsEmptyString(), EquivalencyStep)
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from equivalency.algorithm.config import EquivalencyOptions
    from equivalency.algorithm.context import TraversalContext
    from equivalency.graph.members import Member
    from equivalency.graph.nodes import Comparands, Node, ObjectInfo
    from equivalency.rules.selection import MemberSelectionContext

__all__ = [
    "Describable",
    "EquivalencyStep",
    "MemberMatchingRule",
    "MemberSelectionRule",
    "NestedValidator",
    "OrderStrictness",
    "OrderingRule",
    "StepResult",
]


class StepResult(StrEnum):
    """Outcome of one equivalency step.

    - HANDLED:  The pair was fully compared; no later step runs for this node.
    - CONTINUE: The step does not apply; the next step is tried.
    """

    HANDLED = auto()
    CONTINUE = auto()


class OrderStrictness(StrEnum):
    """Decision of one ordering rule for one collection.

    - STRICT:     Index-aligned comparison.
    - NOT_STRICT: Best-pairing comparison.
    - IRRELEVANT: The rule does not apply to this collection.
    """

    STRICT = auto()
    NOT_STRICT = auto()
    IRRELEVANT = auto()


@runtime_checkable
class MemberSelectionRule(Protocol):
    """Decides which expectation members take part in the comparison.

    A rule whose ``includes_members`` is True adds members instead of only
    filtering them; when any such rule is configured, the built-in "all
    public fields/properties" rules are left out.
    """

    includes_members: bool

    def select_members(
        self,
        node: Node,
        members: list[Member],
        context: MemberSelectionContext,
    ) -> list[Member]: ...


@runtime_checkable
class MemberMatchingRule(Protocol):
    """Maps an expectation member to the corresponding subject member."""

    def match(
        self,
        expectation_member: Member,
        subject: Any,
        parent: Node,
        options: EquivalencyOptions,
    ) -> Member | None: ...


@runtime_checkable
class OrderingRule(Protocol):
    """Decides whether element order matters for one collection."""

    def evaluate(self, info: ObjectInfo) -> OrderStrictness: ...


@runtime_checkable
class NestedValidator(Protocol):
    """Re-enters the traversal for a child pair."""

    def assert_equivalency_of(
        self,
        comparands: Comparands,
        node: Node,
        context: TraversalContext,
    ) -> None: ...


@runtime_checkable
class EquivalencyStep(Protocol):
    """One stage of the step pipeline."""

    def handle(
        self,
        comparands: Comparands,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> StepResult: ...


@runtime_checkable
class Describable(Protocol):
    """An object that describes its own members instead of being introspected."""

    def describe_members(self) -> Iterable[Member]: ...
