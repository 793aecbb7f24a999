"""Dictionary comparison.

Keys are compared first: missing and additional keys are reported as one
aggregated KEY_MISMATCH on the dictionary node.  Values are then compared,
recursively, for every key present on both sides.  Key lookups use the
subject's own hashing, so numerically equal keys of different widths match;
string keys match case-insensitively when member name casing is ignored.
"""

from __future__ import annotations

import numbers
import typing
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from equivalency.exceptions import AmbiguousInterfaceError
from equivalency.graph.nodes import Comparands
from equivalency.graph.types import describe_type, is_collection, resolve_class, type_arguments
from equivalency.protocols import StepResult
from equivalency.report import format_value
from equivalency.result import DifferenceKind

if TYPE_CHECKING:
    from equivalency.algorithm.context import TraversalContext
    from equivalency.graph.nodes import Node
    from equivalency.protocols import NestedValidator

__all__ = ["DictionaryStep", "mapping_interfaces"]


def mapping_interfaces(cls: type) -> list[tuple[Any, ...]]:
    """Distinct ``Mapping[K, V]`` parameterizations declared by ``cls`` and its bases."""
    found: list[tuple[Any, ...]] = []
    for klass in getattr(cls, "__mro__", ()):
        for base in klass.__dict__.get("__orig_bases__", ()):
            origin = typing.get_origin(base)
            if not isinstance(origin, type) or not issubclass(origin, Mapping):
                continue
            arguments = typing.get_args(base)
            if arguments and arguments not in found:
                found.append(arguments)
    return found


def _check_unambiguous(value: Any) -> None:
    interfaces = mapping_interfaces(type(value))
    if len(interfaces) > 1:
        declared = ", ".join(f"Mapping[{', '.join(describe_type(a) for a in args)}]" for args in interfaces)
        msg = (
            f"The type {describe_type(type(value))} implements multiple dictionary types "
            f"({declared}). It is not known which one should be used for the comparison."
        )
        raise AmbiguousInterfaceError(msg)


def _as_mapping(value: Any) -> dict[Any, Any] | None:
    """Convert an iterable of key/value pairs into a dict, or return None."""
    if not is_collection(value):
        return None
    items = list(value)
    if not all(isinstance(item, tuple) and len(item) == 2 for item in items):
        return None
    return dict(items)


def _key_type(mapping: Mapping[Any, Any], declared_type: Any) -> type | None:
    arguments = type_arguments(declared_type) if declared_type is not None else ()
    if not arguments:
        interfaces = mapping_interfaces(type(mapping))
        arguments = interfaces[0] if interfaces else ()
    if arguments:
        return resolve_class(arguments[0])
    key_types = {type(key) for key in mapping}
    if len(key_types) == 1:
        return key_types.pop()
    return None


def _keys_compatible(subject_key: type | None, expectation_key: type | None) -> bool:
    if subject_key is None or expectation_key is None:
        return True
    if issubclass(subject_key, expectation_key):
        return True
    numeric = all(
        issubclass(t, numbers.Number) and not issubclass(t, bool) for t in (subject_key, expectation_key)
    )
    return numeric


def _format_keys(keys: Iterable[Any]) -> str:
    return "{" + ", ".join(format_value(k) for k in keys) + "}"


class DictionaryStep:
    """Compares dictionary-like expectations."""

    def handle(
        self,
        comparands: Comparands,
        node: Node,
        context: TraversalContext,
        validator: NestedValidator,
    ) -> StepResult:
        expectation = comparands.expectation
        if not isinstance(expectation, Mapping):
            return StepResult.CONTINUE

        _check_unambiguous(expectation)
        subject = comparands.subject
        if isinstance(subject, Mapping):
            _check_unambiguous(subject)
        else:
            converted = _as_mapping(subject)
            if converted is None:
                context.record(
                    node,
                    DifferenceKind.TYPE_MISMATCH,
                    f"expected a dictionary, found {describe_type(type(subject))}",
                )
                return StepResult.HANDLED
            subject = converted

        expectation_key = _key_type(expectation, node.declared_type)
        subject_key = _key_type(subject, None)
        if not _keys_compatible(subject_key, expectation_key):
            context.record(
                node,
                DifferenceKind.INCOMPATIBLE_DICTIONARY,
                f"expected a dictionary with keys of type {describe_type(expectation_key)}, "
                f"found a dictionary with keys of type {describe_type(subject_key)}, "
                "which are not compatible",
            )
            return StepResult.HANDLED

        pairs = self._match_keys(subject, expectation, context)
        self._report_keys(subject, expectation, pairs, node, context)

        value_arguments = type_arguments(node.declared_type) if node.declared_type is not None else ()
        value_type = value_arguments[1] if len(value_arguments) == 2 else None
        for expectation_key_value, subject_key_value in pairs.items():
            validator.assert_equivalency_of(
                Comparands(subject[subject_key_value], expectation[expectation_key_value]),
                node.child_key(expectation_key_value, subject_key_value, value_type),
                context,
            )
        return StepResult.HANDLED

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _match_keys(
        subject: Mapping[Any, Any],
        expectation: Mapping[Any, Any],
        context: TraversalContext,
    ) -> dict[Any, Any]:
        """Map each expectation key to the subject key it corresponds to."""
        ignore_case = context.options.ignore_member_name_casing
        folded: dict[str, Any] = {}
        if ignore_case:
            for key in subject:
                if isinstance(key, str):
                    folded.setdefault(key.casefold(), key)

        pairs: dict[Any, Any] = {}
        for key in expectation:
            if key in subject:
                pairs[key] = key
            elif ignore_case and isinstance(key, str) and key.casefold() in folded:
                pairs[key] = folded[key.casefold()]
        return pairs

    @staticmethod
    def _report_keys(
        subject: Mapping[Any, Any],
        expectation: Mapping[Any, Any],
        pairs: dict[Any, Any],
        node: Node,
        context: TraversalContext,
    ) -> None:
        matched_subject_keys = set(pairs.values())
        missing = [key for key in expectation if key not in pairs]
        additional = [key for key in subject if key not in matched_subject_keys]
        if not missing and not additional:
            return

        if missing and additional:
            clause = (
                f"misses key(s) {_format_keys(missing)} "
                f"and has additional key(s) {_format_keys(additional)}"
            )
        elif missing:
            clause = f"misses key(s) {_format_keys(missing)}"
        else:
            clause = f"has additional key(s) {_format_keys(additional)}"

        context.record(
            node,
            DifferenceKind.KEY_MISMATCH,
            f"expected a dictionary with {len(expectation)} item(s), but it {clause}",
        )

    def __str__(self) -> str:
        return "Compare dictionaries"
