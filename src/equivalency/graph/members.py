"""Member model and introspection.

A ``Member`` is a read-only description of one field or property: its name,
the class declaring it, its declared type (annotation), its kind, the
visibility of its getter and setter, and whether it is browsable.

Visibility follows Python naming conventions:

- ``name``       -> PUBLIC
- ``_name``      -> INTERNAL
- ``__name``     -> PRIVATE (name-mangled; never selected by the built-in rules)

Class-level members (annotations, ``__slots__``, dataclass fields and
properties) are computed once per class by ``class_members`` and cached by
``MemberCache``.  Instance-level fields (attributes only present in an
instance ``__dict__``) are discovered per object by ``members_of``.  Objects
implementing the ``Describable`` protocol bypass introspection entirely and
describe their own members.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import typing
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Flag, StrEnum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from equivalency.cache import MemberCache

__all__ = [
    "Member",
    "MemberKind",
    "MemberVisibility",
    "Visibility",
    "class_members",
    "find_member",
    "members_of",
    "non_browsable",
    "visibility_of",
]

_BROWSABLE_ATTR = "__browsable__"


class MemberKind(StrEnum):
    FIELD = auto()
    PROPERTY = auto()


class Visibility(StrEnum):
    PUBLIC = auto()
    INTERNAL = auto()
    PRIVATE = auto()


class MemberVisibility(Flag):
    """Which member visibilities an inclusion policy admits. Private members never are."""

    NONE = 0
    PUBLIC = auto()
    INTERNAL = auto()

    def admits(self, visibility: Visibility) -> bool:
        if visibility == Visibility.PUBLIC:
            return bool(self & MemberVisibility.PUBLIC)
        if visibility == Visibility.INTERNAL:
            return bool(self & MemberVisibility.INTERNAL)
        return False


@dataclass(frozen=True, slots=True)
class Member:
    """A field or property of a type.

    Attributes:
        name:              Attribute name used to read the value.
        declaring_type:    Class that declares the member (None for synthetic members).
        value_type:        Declared annotation, or None when undeclared.
        kind:              FIELD or PROPERTY.
        getter_visibility: Visibility of reading the member.
        setter_visibility: Visibility of writing the member; None when read-only.
        browsable:         False when the member is marked non-browsable.
        getter:            Optional accessor used instead of ``getattr``.
    """

    name: str
    declaring_type: type | None = None
    value_type: Any = None
    kind: MemberKind = MemberKind.FIELD
    getter_visibility: Visibility = Visibility.PUBLIC
    setter_visibility: Visibility | None = Visibility.PUBLIC
    browsable: bool = True
    getter: Callable[[Any], Any] | None = field(default=None, compare=False, repr=False)

    def get_value(self, owner: Any) -> Any:
        if self.getter is not None:
            return self.getter(owner)
        return getattr(owner, self.name)


def non_browsable(target: Any) -> Any:
    """Mark a property (or its getter function) as non-browsable.

    Example::

        class Order:
            @non_browsable
            @property
            def cache_key(self) -> str: ...
    """
    func: Any
    if isinstance(target, property):
        func = target.fget
    elif isinstance(target, functools.cached_property):
        func = target.func
    else:
        func = target
    setattr(func, _BROWSABLE_ATTR, False)
    return target


def visibility_of(name: str, owner: type | None = None) -> Visibility:
    """Derive a member's visibility from its name."""
    if owner is not None:
        for klass in owner.__mro__:
            if name.startswith(f"_{klass.__name__.lstrip('_')}__"):
                return Visibility.PRIVATE
    if name.startswith("__") and not name.endswith("__"):
        return Visibility.PRIVATE
    if name.startswith("_"):
        return Visibility.INTERNAL
    return Visibility.PUBLIC


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError, AttributeError):  # unresolvable forward references
        try:
            return dict(inspect.get_annotations(obj))
        except TypeError:
            return {}


def _is_class_var(annotation: Any) -> bool:
    if typing.get_origin(annotation) is typing.ClassVar or annotation is typing.ClassVar:
        return True
    return isinstance(annotation, str) and annotation.startswith(("ClassVar", "typing.ClassVar"))


def _slot_names(klass: type) -> list[str]:
    slots = klass.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return [s for s in slots if s not in ("__dict__", "__weakref__")]


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def class_members(cls: type) -> tuple[Member, ...]:
    """Describe every declared field and property of ``cls``.

    Fields come first, in declaration order along the MRO (base classes
    first), followed by properties.  ``ClassVar`` annotations and plain class
    attributes are static and therefore excluded.
    """
    hints = _type_hints(cls)
    fields: dict[str, Member] = {}
    properties: dict[str, Member] = {}

    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        try:
            annotations = inspect.get_annotations(klass)
        except TypeError:
            annotations = {}
        for name, annotation in annotations.items():
            declared = hints.get(name, annotation)
            if _is_dunder(name) or _is_class_var(declared):
                continue
            fields[name] = Member(
                name=name,
                declaring_type=klass,
                value_type=declared,
                kind=MemberKind.FIELD,
                getter_visibility=visibility_of(name, cls),
                setter_visibility=visibility_of(name, cls),
            )
        for name in _slot_names(klass):
            if name not in fields:
                fields[name] = Member(
                    name=name,
                    declaring_type=klass,
                    kind=MemberKind.FIELD,
                    getter_visibility=visibility_of(name, cls),
                    setter_visibility=visibility_of(name, cls),
                )
        for name, attr in klass.__dict__.items():
            if isinstance(attr, property):
                getter, writable = attr.fget, attr.fset is not None
            elif isinstance(attr, functools.cached_property):
                getter, writable = attr.func, True
            else:
                continue
            if _is_dunder(name):
                continue
            fields.pop(name, None)
            visibility = visibility_of(name, cls)
            properties[name] = Member(
                name=name,
                declaring_type=klass,
                value_type=_type_hints(getter).get("return") if getter else None,
                kind=MemberKind.PROPERTY,
                getter_visibility=visibility,
                setter_visibility=visibility if writable else None,
                browsable=getattr(getter, _BROWSABLE_ATTR, True),
            )

    if dataclasses.is_dataclass(cls):
        for dc_field in dataclasses.fields(cls):
            member = fields.get(dc_field.name)
            if member is not None and not dc_field.metadata.get("browsable", True):
                fields[dc_field.name] = dataclasses.replace(member, browsable=False)

    return tuple(fields.values()) + tuple(properties.values())


def members_of(
    obj: Any,
    cache: MemberCache,
    declared_class: type | None = None,
) -> tuple[Member, ...]:
    """Describe the members of ``obj``.

    Args:
        obj:            The instance to describe.
        cache:          Cache of class-level member descriptions.
        declared_class: When given, only members declared on this class are
                        returned (declared typing).  Otherwise the runtime
                        class is used and undeclared instance attributes are
                        appended after the declared fields.

    Returns:
        Fields (declared, then undeclared) followed by properties.
    """
    describe = getattr(obj, "describe_members", None)
    if describe is not None and callable(describe) and not isinstance(obj, type):
        return tuple(describe())

    cls = declared_class if declared_class is not None else type(obj)
    declared = cache.members_of(cls)

    fields = [m for m in declared if m.kind == MemberKind.FIELD and hasattr(obj, m.name)]
    properties = [m for m in declared if m.kind == MemberKind.PROPERTY]

    if declared_class is None:
        known = {m.name for m in declared}
        runtime_type = type(obj)
        try:
            instance_vars = vars(obj)
        except TypeError:
            instance_vars = {}
        for name in instance_vars:
            if name in known or _is_dunder(name):
                continue
            fields.append(
                Member(
                    name=name,
                    declaring_type=runtime_type,
                    kind=MemberKind.FIELD,
                    getter_visibility=visibility_of(name, runtime_type),
                    setter_visibility=visibility_of(name, runtime_type),
                )
            )

    return tuple(fields) + tuple(properties)


def find_member(
    obj: Any,
    name: str,
    cache: MemberCache,
    ignore_case: bool = False,
) -> Member | None:
    """Return the member of ``obj`` called ``name``, or None."""
    wanted = name.casefold() if ignore_case else name
    for member in members_of(obj, cache):
        candidate = member.name.casefold() if ignore_case else member.name
        if candidate == wanted:
            return member
    return None
