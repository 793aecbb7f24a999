"""MemberPath: explicit, ordered path segments identifying a (nested) member.

Paths are written as ``Level.Collection[].Number``:

- ``Name``   selects a field or property.
- ``[]``     selects every element (or every entry) of a collection.
- ``[3]``    selects one literal index.
- ``[key]``  selects one dictionary key (stringified).

Node paths produced during traversal use the same notation
(``a.b[2].c``), so configured paths and traversal paths can be compared
segment by segment.  A path can also be recorded from an expression such as
``lambda e: e.Level.Collection[...].Number``; the expression is evaluated
against a recorder once, at registration time.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

from equivalency.exceptions import InvalidArgumentError

__all__ = ["MemberPath", "PathSegment", "SegmentKind", "to_member_path"]

_INDEX = re.compile(r"^-?\d+$")


class SegmentKind(StrEnum):
    MEMBER = auto()
    INDEX = auto()
    KEY = auto()
    ANY = auto()


@dataclass(frozen=True, slots=True)
class PathSegment:
    kind: SegmentKind
    value: Any = None

    def matches(self, other: PathSegment) -> bool:
        """True when this (configured) segment selects ``other`` (traversal) segment."""
        if self.kind == SegmentKind.MEMBER or other.kind == SegmentKind.MEMBER:
            return self.kind == other.kind and self.value == other.value
        if self.kind == SegmentKind.ANY or other.kind == SegmentKind.ANY:
            return True
        return str(self.value) == str(other.value)

    def __str__(self) -> str:
        if self.kind == SegmentKind.MEMBER:
            return str(self.value)
        if self.kind == SegmentKind.ANY:
            return "[]"
        return f"[{self.value}]"


def _parse(path: str) -> tuple[PathSegment, ...]:
    segments: list[PathSegment] = []
    i = 0
    name = ""
    while i < len(path):
        ch = path[i]
        if ch == ".":
            if name:
                segments.append(PathSegment(SegmentKind.MEMBER, name))
                name = ""
            elif not segments:
                msg = f"Member path {path!r} cannot start with a '.'"
                raise InvalidArgumentError(msg)
            i += 1
        elif ch == "[":
            if name:
                segments.append(PathSegment(SegmentKind.MEMBER, name))
                name = ""
            end = path.find("]", i)
            if end == -1:
                msg = f"Member path {path!r} has an unterminated '['"
                raise InvalidArgumentError(msg)
            content = path[i + 1 : end]
            if content == "":
                segments.append(PathSegment(SegmentKind.ANY))
            elif _INDEX.match(content):
                segments.append(PathSegment(SegmentKind.INDEX, int(content)))
            else:
                segments.append(PathSegment(SegmentKind.KEY, content))
            i = end + 1
        else:
            name += ch
            i += 1
    if name:
        segments.append(PathSegment(SegmentKind.MEMBER, name))
    return tuple(segments)


@dataclass(frozen=True, slots=True)
class MemberPath:
    """An immutable, parsed member path."""

    segments: tuple[PathSegment, ...]

    @classmethod
    def parse(cls, path: str | None) -> MemberPath:
        """Parse a dotted/bracketed path string.

        Raises:
            InvalidArgumentError: If ``path`` is None, empty or malformed.
        """
        if path is None or not str(path).strip():
            msg = "A member path cannot be null or empty"
            raise InvalidArgumentError(msg)
        return cls(_parse(str(path).strip()))

    @classmethod
    def from_expression(cls, expression: Callable[[Any], Any]) -> MemberPath:
        """Record the member accesses performed by ``expression``.

        ``e[...]`` and ``e[:]`` record "every element"; integers record a
        literal index; anything else records a key.
        """
        result = expression(_PathRecorder(()))
        if not isinstance(result, _PathRecorder):
            msg = "The expression must only access (nested) members, e.g. lambda e: e.Parent.Child"
            raise InvalidArgumentError(msg)
        segments = object.__getattribute__(result, "_segments")
        if not segments:
            msg = "The expression must select at least one member"
            raise InvalidArgumentError(msg)
        return cls(segments)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def last_name(self) -> str | None:
        """Name of the last member segment, or None when the path ends in an index."""
        if self.segments and self.segments[-1].kind == SegmentKind.MEMBER:
            return str(self.segments[-1].value)
        return None

    @property
    def parent(self) -> MemberPath:
        return MemberPath(self.segments[:-1])

    @property
    def has_literal_index(self) -> bool:
        return any(s.kind == SegmentKind.INDEX for s in self.segments)

    @property
    def is_nested(self) -> bool:
        return len(self.segments) > 1

    def without_indices(self) -> MemberPath:
        """Replace every index and key segment with ``[]``."""
        return MemberPath(
            tuple(
                s if s.kind == SegmentKind.MEMBER else PathSegment(SegmentKind.ANY)
                for s in self.segments
            )
        )

    def is_same_as(self, other: MemberPath) -> bool:
        if len(self.segments) != len(other.segments):
            return False
        return all(
            mine.matches(theirs)
            for mine, theirs in zip(self.segments, other.segments, strict=True)
        )

    def is_parent_of(self, other: MemberPath) -> bool:
        if len(self.segments) >= len(other.segments):
            return False
        return MemberPath(self.segments).is_same_as(
            MemberPath(other.segments[: len(self.segments)])
        )

    def is_child_of(self, other: MemberPath) -> bool:
        return other.is_parent_of(self)

    def is_parent_or_child_of(self, other: MemberPath) -> bool:
        return self.is_parent_of(other) or self.is_child_of(other)

    def __str__(self) -> str:
        parts: list[str] = []
        for segment in self.segments:
            text = str(segment)
            if segment.kind == SegmentKind.MEMBER and parts:
                parts.append(".")
            parts.append(text)
        return "".join(parts)


def to_member_path(value: MemberPath | str | Callable[[Any], Any] | None) -> MemberPath:
    """Coerce a string, path expression or MemberPath into a MemberPath."""
    if isinstance(value, MemberPath):
        return value
    if callable(value):
        return MemberPath.from_expression(value)
    return MemberPath.parse(value)


class _PathRecorder:
    """Records attribute and item accesses into path segments."""

    __slots__ = ("_segments",)

    def __init__(self, segments: tuple[PathSegment, ...]) -> None:
        object.__setattr__(self, "_segments", segments)

    def _extend(self, segment: PathSegment) -> _PathRecorder:
        return _PathRecorder((*object.__getattribute__(self, "_segments"), segment))

    def __getattr__(self, name: str) -> _PathRecorder:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return self._extend(PathSegment(SegmentKind.MEMBER, name))

    def __getitem__(self, item: Any) -> _PathRecorder:
        if item is Ellipsis or item == slice(None):
            return self._extend(PathSegment(SegmentKind.ANY))
        if isinstance(item, int) and not isinstance(item, bool):
            return self._extend(PathSegment(SegmentKind.INDEX, item))
        return self._extend(PathSegment(SegmentKind.KEY, item))
