"""Public API functions for equivalency.

This module provides the three user-facing functions: compare, is_equivalent
and assert_equivalent.  Each call builds a fresh EquivalencyValidator, so no
comparison state is shared between calls.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from equivalency.algorithm.config import EquivalencyOptions
from equivalency.algorithm.validator import EquivalencyValidator
from equivalency.builder import EquivalencyOptionsBuilder
from equivalency.exceptions import EquivalencyError, InvalidArgumentError
from equivalency.report import render_failure
from equivalency.result import EquivalencyResult

__all__ = ["OptionsLike", "assert_equivalent", "compare", "is_equivalent", "resolve_options"]

OptionsLike = (
    EquivalencyOptions
    | EquivalencyOptionsBuilder
    | Callable[[EquivalencyOptionsBuilder], EquivalencyOptionsBuilder]
    | None
)


def resolve_options(options: OptionsLike = None) -> EquivalencyOptions:
    """Turn any accepted form of configuration into an ``EquivalencyOptions``.

    Args:
        options: None (library defaults), a finished ``EquivalencyOptions``, an
                 ``EquivalencyOptionsBuilder``, or a callable receiving a fresh
                 builder and returning it.

    Returns:
        The immutable options snapshot.

    Raises:
        InvalidArgumentError: When a configuration callable returns None.
    """
    if options is None:
        return EquivalencyOptions()
    if isinstance(options, EquivalencyOptions):
        return options
    if isinstance(options, EquivalencyOptionsBuilder):
        return options.build()
    configured = options(EquivalencyOptionsBuilder())
    if configured is None:
        msg = "The options configuration callable must return the builder it received, not None"
        raise InvalidArgumentError(msg)
    return configured.build()


def compare(
    subject: Any,
    expectation: Any,
    options: OptionsLike = None,
    declared_type: Any = None,
) -> EquivalencyResult:
    """Compare two object graphs and return every difference found.

    Structural differences never raise; configuration errors
    (``ConfigurationError`` and subclasses) propagate.

    Args:
        subject:       The object graph under test.
        expectation:   The object graph it should be equivalent to.
        options:       See ``resolve_options``.  Defaults to the library defaults.
        declared_type: Annotation describing the root, used when declared
                       typing is requested.

    Returns:
        An ``EquivalencyResult`` with differences, trace and computation_time_ms.
    """
    validator = EquivalencyValidator(resolve_options(options))
    return validator.validate(subject, expectation, declared_type)


def is_equivalent(
    subject: Any,
    expectation: Any,
    options: OptionsLike = None,
    declared_type: Any = None,
) -> bool:
    """Return True if ``subject`` is structurally equivalent to ``expectation``."""
    return compare(subject, expectation, options, declared_type).is_equivalent


def assert_equivalent(
    subject: Any,
    expectation: Any,
    options: OptionsLike = None,
    because: str = "",
    declared_type: Any = None,
) -> None:
    """Raise ``EquivalencyError`` unless ``subject`` is equivalent to ``expectation``.

    Args:
        subject:       The object graph under test.
        expectation:   The object graph it should be equivalent to.
        options:       See ``resolve_options``.
        because:       Optional reason included in the failure message.
        declared_type: Annotation describing the root.

    Raises:
        EquivalencyError: With a message listing the differences (at most 10)
            and the full result on its ``result`` attribute.
    """
    result = compare(subject, expectation, options, declared_type)
    if not result.is_equivalent:
        raise EquivalencyError(render_failure(result, because), result)
