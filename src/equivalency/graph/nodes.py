"""Node and Comparands: the position and the values being compared.

A ``Node`` is created once per recursion level and never mutated; descending
into a member, element or key produces a new child node.  Every node carries
two paths: ``path`` is expressed in expectation-side names (what reports and
configured rules see), ``subject_path`` in subject-side names (they differ
only when a member mapping renames something).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any

from equivalency.graph.paths import MemberPath, PathSegment, SegmentKind
from equivalency.graph.types import resolve_class

if TYPE_CHECKING:
    from equivalency.graph.members import Member

__all__ = ["Comparands", "MemberInfo", "Node", "NodeKind", "ObjectInfo"]

ROOT_DESCRIPTION = "<root>"


class NodeKind(StrEnum):
    ROOT = auto()
    MEMBER = auto()
    ITEM = auto()
    KEY = auto()


@dataclass(frozen=True, slots=True)
class Comparands:
    """The subject and expectation values at one node."""

    subject: Any
    expectation: Any

    def with_subject(self, subject: Any) -> Comparands:
        return Comparands(subject, self.expectation)

    @property
    def runtime_type(self) -> type:
        """Class of the expectation (subject when the expectation is None)."""
        if self.expectation is None:
            return type(self.subject)
        return type(self.expectation)

    def expected_type(self, node: Node, respect_runtime_types: bool) -> type:
        """The class used to classify and introspect this pair."""
        if not respect_runtime_types:
            declared = resolve_class(node.declared_type)
            if declared is not None:
                return declared
        return self.runtime_type


@dataclass(frozen=True, slots=True)
class Node:
    """A position in the object graph.

    Attributes:
        path:          Path from the root in expectation-side names.
        subject_path:  Path from the root in subject-side names.
        declared_type: Annotation that declared this position (None when unknown).
        parent_type:   Class of the object owning this member, if any.
        depth:         Number of structural descents from the root.
        kind:          How the node was reached.
        member:        The expectation member for MEMBER nodes.
    """

    path: MemberPath = field(default_factory=lambda: MemberPath(()))
    subject_path: MemberPath = field(default_factory=lambda: MemberPath(()))
    declared_type: Any = None
    parent_type: type | None = None
    depth: int = 0
    kind: NodeKind = NodeKind.ROOT
    member: Member | None = None

    @classmethod
    def root(cls, declared_type: Any = None) -> Node:
        return cls(declared_type=declared_type)

    # ------------------------------------------------------------------
    # Descent
    # ------------------------------------------------------------------

    def child_member(
        self,
        expectation_member: Member,
        subject_member: Member,
        parent_type: type | None,
    ) -> Node:
        return Node(
            path=self._extend(self.path, PathSegment(SegmentKind.MEMBER, expectation_member.name)),
            subject_path=self._extend(
                self.subject_path, PathSegment(SegmentKind.MEMBER, subject_member.name)
            ),
            declared_type=expectation_member.value_type,
            parent_type=parent_type,
            depth=self.depth + 1,
            kind=NodeKind.MEMBER,
            member=expectation_member,
        )

    def child_item(self, index: int, subject_index: int | None = None, declared_type: Any = None) -> Node:
        """Child for the element at ``index`` of the expectation collection."""
        return Node(
            path=self._extend(self.path, PathSegment(SegmentKind.INDEX, index)),
            subject_path=self._extend(
                self.subject_path,
                PathSegment(SegmentKind.INDEX, index if subject_index is None else subject_index),
            ),
            declared_type=declared_type,
            parent_type=self.parent_type,
            depth=self.depth + 1,
            kind=NodeKind.ITEM,
        )

    def child_array_item(self, indices: tuple[int, ...]) -> Node:
        """Child for one element of a multi-dimensional array."""
        text = ",".join(str(i) for i in indices)
        return Node(
            path=self._extend(self.path, PathSegment(SegmentKind.INDEX, text)),
            subject_path=self._extend(self.subject_path, PathSegment(SegmentKind.INDEX, text)),
            parent_type=self.parent_type,
            depth=self.depth + 1,
            kind=NodeKind.ITEM,
        )

    def child_key(self, key: Any, subject_key: Any = None, declared_type: Any = None) -> Node:
        return Node(
            path=self._extend(self.path, PathSegment(SegmentKind.KEY, key)),
            subject_path=self._extend(
                self.subject_path,
                PathSegment(SegmentKind.KEY, key if subject_key is None else subject_key),
            ),
            declared_type=declared_type,
            parent_type=self.parent_type,
            depth=self.depth + 1,
            kind=NodeKind.KEY,
        )

    @staticmethod
    def _extend(path: MemberPath, segment: PathSegment) -> MemberPath:
        return MemberPath((*path.segments, segment))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_root(self) -> bool:
        return self.path.is_empty

    @property
    def name(self) -> str | None:
        return self.member.name if self.member is not None else None

    @property
    def description(self) -> str:
        return str(self.path) if not self.path.is_empty else ROOT_DESCRIPTION

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True, slots=True)
class ObjectInfo:
    """What a predicate sees about the object at a node.

    Attributes:
        path:          The node path as a string (``""`` for the root).
        member_path:   The node path as a parsed ``MemberPath``.
        type:          The class used for the comparison (runtime or declared).
        runtime_type:  The class of the expectation value.
        declared_type: The annotation that declared this position.
        parent_type:   The class owning this member, if any.
    """

    path: str
    type: type
    runtime_type: type
    declared_type: Any = None
    parent_type: type | None = None
    member_path: MemberPath = field(default_factory=lambda: MemberPath(()), compare=False, repr=False)

    @classmethod
    def of(cls, node: Node, comparands: Comparands, respect_runtime_types: bool = True) -> ObjectInfo:
        return cls(
            path=str(node.path),
            type=comparands.expected_type(node, respect_runtime_types),
            runtime_type=comparands.runtime_type,
            declared_type=node.declared_type,
            parent_type=node.parent_type,
            member_path=node.path,
        )


@dataclass(frozen=True, slots=True)
class MemberInfo:
    """What a member predicate sees about a candidate member."""

    path: str
    name: str
    declaring_type: type | None
    type: Any
    runtime_type: type | None = None

    @classmethod
    def of(cls, member: Member, parent: Node, value_type: type | None = None) -> MemberInfo:
        path = MemberPath((*parent.path.segments, PathSegment(SegmentKind.MEMBER, member.name)))
        return cls(
            path=str(path),
            name=member.name,
            declaring_type=member.declaring_type,
            type=member.value_type,
            runtime_type=value_type,
        )
