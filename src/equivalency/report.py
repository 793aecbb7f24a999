"""Rendering of values and of a complete failure message.

The engine only produces ``Difference`` records; this module turns them into
text.  ``format_value`` limits the length of long or deeply nested values,
``render_failure`` renders one message for a whole ``EquivalencyResult``.
"""

from __future__ import annotations

import reprlib
from typing import Any

import numpy as np

from equivalency.result import EquivalencyResult

__all__ = ["MAX_REPORTED_DIFFERENCES", "format_value", "pluralize", "render_failure"]

MAX_REPORTED_DIFFERENCES = 10

_repr = reprlib.Repr()
_repr.maxstring = 80
_repr.maxother = 80
_repr.maxlist = 10
_repr.maxtuple = 10
_repr.maxdict = 10
_repr.maxset = 10
_repr.maxlevel = 3


def format_value(value: Any) -> str:
    """Readable, length-limited rendering of a compared value."""
    if value is None:
        return "None"
    if isinstance(value, np.generic):
        value = value.item()
    return _repr.repr(value)


def pluralize(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def render_failure(result: EquivalencyResult, because: str = "") -> str:
    """Render every difference of ``result`` as a single failure message.

    At most ``MAX_REPORTED_DIFFERENCES`` differences are listed; the rest are
    summarised as ``... and N more``.

    Args:
        result:  A comparison result (may be equivalent, then "" is returned).
        because: Optional reason appended to the header.

    Returns:
        The rendered message.
    """
    differences = result.differences
    if not differences:
        return ""

    header = f"Expected subject to be equivalent to expectation, but found {pluralize(len(differences), 'difference')}"
    reason = because.strip()
    if reason:
        if not reason.startswith("because"):
            reason = f"because {reason}"
        header = f"{header} {reason}"

    lines = [f"{header}:"]
    lines.extend(f"  - {difference}" for difference in differences[:MAX_REPORTED_DIFFERENCES])
    remaining = len(differences) - MAX_REPORTED_DIFFERENCES
    if remaining > 0:
        lines.append(f"  ... and {remaining} more")
    return "\n".join(lines)
