"""Exception hierarchy for equivalency.

Two tiers of failure exist:

- Configuration errors (``ConfigurationError`` and subclasses) are raised
  immediately, before or during traversal, and abort the comparison.  They
  signal a mistake in how the comparison was set up, not a difference between
  the two graphs.
- Structural differences are never raised by the engine itself.  They are
  collected into an ``EquivalencyResult``; ``assert_equivalent`` turns a
  non-empty result into an ``EquivalencyError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from equivalency.result import EquivalencyResult

__all__ = [
    "AmbiguousInterfaceError",
    "ConfigurationError",
    "EquivalencyError",
    "InvalidArgumentError",
    "MissingMemberError",
    "NoMembersFoundError",
]


class ConfigurationError(Exception):
    """Base class for fatal errors in the way a comparison was configured."""


class InvalidArgumentError(ConfigurationError, ValueError):
    """A null, empty or malformed argument was passed to the configuration surface."""


class MissingMemberError(ConfigurationError, AttributeError):
    """A member mapping refers to a member that does not exist."""


class AmbiguousInterfaceError(ConfigurationError):
    """A type exposes more than one dictionary-like interface."""


class NoMembersFoundError(ConfigurationError):
    """A type compared by its members has no members selected for comparison."""


class EquivalencyError(AssertionError):
    """Raised by ``assert_equivalent`` when the graphs are not equivalent.

    Attributes:
        result: The complete ``EquivalencyResult`` holding every difference.
    """

    def __init__(self, message: str, result: EquivalencyResult) -> None:
        super().__init__(message)
        self.result = result
