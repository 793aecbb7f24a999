"""Graph subpackage: positions, paths and members of compared object graphs.

Re-exports the public API for the graph module:
- Node / Comparands: one position in the traversal and the two values at it
- ObjectInfo / MemberInfo: what user predicates see about a node or member
- MemberPath: parsed ``Level.Collection[].Number`` paths
- Member: read-only description of a field or property
- non_browsable: decorator hiding a property from comparison
"""

from equivalency.graph.members import (
    Member,
    MemberKind,
    MemberVisibility,
    Visibility,
    non_browsable,
)
from equivalency.graph.nodes import Comparands, MemberInfo, Node, NodeKind, ObjectInfo
from equivalency.graph.paths import MemberPath, PathSegment, SegmentKind

__all__ = [
    "Comparands",
    "Member",
    "MemberInfo",
    "MemberKind",
    "MemberPath",
    "MemberVisibility",
    "Node",
    "NodeKind",
    "ObjectInfo",
    "PathSegment",
    "SegmentKind",
    "Visibility",
    "non_browsable",
]
