"""Member-wise recursion: the fallback step for everything compared by members."""

from __future__ import annotations

from typing import TYPE_CHECKING

from equivalency.exceptions import NoMembersFoundError
from equivalency.graph.members import Member, members_of
from equivalency.graph.nodes import Comparands
from equivalency.graph.types import describe_type
from equivalency.protocols import StepResult
from equivalency.report import format_value
from equivalency.result import DifferenceKind
from equivalency.rules.selection import MemberSelectionContext

if TYPE_CHECKING:
    from equivalency.algorithm.context import TraversalContext
    from equivalency.graph.nodes import Node
    from equivalency.protocols import NestedValidator

__all__ = ["StructuralEqualityStep"]


class StructuralEqualityStep:
    """Selects the expectation's members, matches them on the subject and recurses into each pair."""

    def handle(
        self,
        comparands: Comparands,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> StepResult:
        subject, expectation = comparands.subject, comparands.expectation
        options = context.options

        if not options.recurse and not node.is_root:
            if expectation != subject:
                context.record(
                    node,
                    DifferenceKind.VALUE_MISMATCH,
                    f"expected {format_value(expectation)}, found {format_value(subject)}",
                )
            return StepResult.HANDLED

        compared_type = context.expected_type(node, comparands)
        selected = self._select_members(compared_type, comparands, node, context)
        if not selected:
            msg = (
                f"No members were found for comparison of {describe_type(compared_type)} at {node}. "
                "Please specify some members to include in the comparison "
                "or choose a more meaningful assertion."
            )
            raise NoMembersFoundError(msg)

        for member in selected:
            subject_member = self._match_member(member, subject, node, context)
            if subject_member is None:
                if not options.ignore_missing_members:
                    context.record(
                        node.child_member(member, member, compared_type),
                        DifferenceKind.MISSING_MEMBER,
                        f"expectation has member {member.name} "
                        f"that the other object ({describe_type(type(subject))}) does not have",
                    )
                continue
            if options.ignore_non_browsable_on_subject and not subject_member.browsable:
                context.trace(node, f"ignoring non-browsable subject member {subject_member.name}")
                continue

            validator.assert_equivalency_of(
                Comparands(subject_member.get_value(subject), member.get_value(expectation)),
                node.child_member(member, subject_member, compared_type),
                context,
            )
        return StepResult.HANDLED

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _select_members(
        compared_type: type,
        comparands: Comparands,
        node: Node,
        context: TraversalContext,
    ) -> list[Member]:
        options = context.options
        declared_class = None if options.respect_runtime_types else compared_type
        available = members_of(comparands.expectation, options.member_cache, declared_class)
        selection = MemberSelectionContext(comparands.expectation, compared_type, available, options)

        selected: list[Member] = []
        for rule in options.selection_rules:
            selected = list(rule.select_members(node, selected, selection))
        context.trace(node, f"selected members {[m.name for m in selected]}")
        return selected

    @staticmethod
    def _match_member(
        member: Member,
        subject: object,
        node: Node,
        context: TraversalContext,
    ) -> Member | None:
        for rule in context.options.matching_rules:
            match = rule.match(member, subject, node, context.options)
            if match is not None:
                return match
        return None

    def __str__(self) -> str:
        return "Compare by members"
