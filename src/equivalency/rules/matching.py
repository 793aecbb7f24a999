"""Member matching rules.

A matching rule maps a selected expectation member to the subject member it
should be compared with.  Rules are tried in order and the first non-None
answer wins; user rules and mappings are placed in front of the built-in
by-name rule.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from equivalency.exceptions import InvalidArgumentError, MissingMemberError
from equivalency.graph.members import Member, MemberKind, class_members, find_member
from equivalency.graph.nodes import Node
from equivalency.graph.paths import MemberPath, to_member_path
from equivalency.graph.types import describe_type

if TYPE_CHECKING:
    from equivalency.algorithm.config import EquivalencyOptions

__all__ = ["MappedMemberMatchingRule", "MappedPathMatchingRule", "MatchByNameRule"]


def _mapping_entry(subject: Mapping[Any, Any], name: str, ignore_case: bool) -> Member | None:
    """Expose a string key of a loosely-typed mapping subject as a member."""
    wanted = name.casefold() if ignore_case else name
    for key in subject:
        if isinstance(key, str) and (key.casefold() if ignore_case else key) == wanted:
            return Member(
                name=key,
                declaring_type=type(subject),
                kind=MemberKind.FIELD,
                getter=lambda owner, key=key: owner[key],
            )
    return None


def _find_subject_member(subject: Any, name: str, options: EquivalencyOptions) -> Member | None:
    ignore_case = options.ignore_member_name_casing
    if isinstance(subject, Mapping):
        return _mapping_entry(subject, name, ignore_case)
    return find_member(subject, name, options.member_cache, ignore_case=ignore_case)


class MatchByNameRule:
    """Matches the subject member with the same name (case-insensitive when configured)."""

    def match(
        self,
        expectation_member: Member,
        subject: Any,
        parent: Node,
        options: EquivalencyOptions,
    ) -> Member | None:
        return _find_subject_member(subject, expectation_member.name, options)

    def __str__(self) -> str:
        return "Match member by name (or throw)"


class MappedPathMatchingRule:
    """Maps ``expectation_path`` to ``subject_path``.

    Both paths must end in a member name, share the same parent path and may
    only use ``[]`` (never a literal index) to address collection elements.

    Example::

        MappedPathMatchingRule("Order.Lines[].Sku", "Order.Lines[].ProductCode")
    """

    def __init__(
        self,
        expectation_path: MemberPath | str | Callable[[Any], Any],
        subject_path: MemberPath | str | Callable[[Any], Any],
    ) -> None:
        expectation = to_member_path(expectation_path)
        subject = to_member_path(subject_path)

        for label, path in (("expectation", expectation), ("subject", subject)):
            if path.has_literal_index:
                msg = (
                    f"The {label} member path {path} must be specified without specific index, "
                    "use [] to address every element"
                )
                raise InvalidArgumentError(msg)
            if path.last_name is None:
                msg = f"The {label} member path {path} must end with a member name"
                raise InvalidArgumentError(msg)

        if not expectation.parent.is_same_as(subject.parent):
            msg = (
                f"The subject path {subject} and expectation path {expectation} "
                "must have the same parent"
            )
            raise InvalidArgumentError(msg)

        self._expectation_path = expectation
        self._subject_path = subject
        self._subject_name = str(subject.last_name)

    def match(
        self,
        expectation_member: Member,
        subject: Any,
        parent: Node,
        options: EquivalencyOptions,
    ) -> Member | None:
        if expectation_member.name != self._expectation_path.last_name:
            return None
        if not self._expectation_path.parent.is_same_as(parent.path):
            return None

        member = _find_subject_member(subject, self._subject_name, options)
        if member is None:
            msg = (
                f"Subject of type {describe_type(type(subject))} "
                f"does not have member {self._subject_name}"
            )
            raise MissingMemberError(msg)
        return member

    def __str__(self) -> str:
        return f"Match {self._subject_path} to {self._expectation_path}"


class MappedMemberMatchingRule:
    """Maps a member of ``expectation_type`` to a differently named member of ``subject_type``.

    Member names are validated against the declared members (annotations,
    slots and properties) of both types at construction time.
    """

    def __init__(
        self,
        expectation_type: type,
        expectation_member: str,
        subject_type: type,
        subject_member: str,
    ) -> None:
        for label, cls in (("expectation", expectation_type), ("subject", subject_type)):
            if cls is None:
                msg = f"The {label} type cannot be None"
                raise InvalidArgumentError(msg)
        for label, name in (("expectation", expectation_member), ("subject", subject_member)):
            if not name or not str(name).strip():
                msg = f"The {label} member name cannot be null or empty"
                raise InvalidArgumentError(msg)
            if "." in name or "[" in name:
                msg = f"The {label} member name {name!r} cannot be a nested path"
                raise InvalidArgumentError(msg)

        for cls, name in ((expectation_type, expectation_member), (subject_type, subject_member)):
            if not any(m.name == name for m in class_members(cls)):
                msg = f"{describe_type(cls)} does not have member {name}"
                raise MissingMemberError(msg)

        self._expectation_type = expectation_type
        self._expectation_member = expectation_member
        self._subject_type = subject_type
        self._subject_member = subject_member

    def match(
        self,
        expectation_member: Member,
        subject: Any,
        parent: Node,
        options: EquivalencyOptions,
    ) -> Member | None:
        if expectation_member.name != self._expectation_member:
            return None
        declaring = expectation_member.declaring_type
        if declaring is None or not issubclass(declaring, self._expectation_type):
            return None
        if not isinstance(subject, self._subject_type):
            return None
        return find_member(subject, self._subject_member, options.member_cache)

    def __str__(self) -> str:
        return (
            f"Match {describe_type(self._subject_type)}.{self._subject_member} to "
            f"{describe_type(self._expectation_type)}.{self._expectation_member}"
        )
