"""Closest-match pairing for unordered collection comparison.

Wraps scipy's ``linear_sum_assignment``: given a matrix whose cell
``(i, j)`` counts the differences found when comparing subject element ``j``
with expectation element ``i``, it returns the pairing of expectation and
subject elements that minimises the total number of differences.  Ties are
broken by the solver deterministically (lowest indices first).

Cells may be ``np.inf`` to forbid a pairing; such cells are replaced by a
guard value that dominates every finite cost and any pair landing on one is
dropped from the result.

Guard value formula: ``finite_max * 2.0 + 1.0``
"""

from __future__ import annotations

import numpy as np
from scipy.optimize import linear_sum_assignment  # type: ignore[import-untyped]

__all__ = ["closest_match"]


def closest_match(cost_matrix: np.ndarray) -> list[tuple[int, int]]:
    """Compute the minimum-total-difference pairing.

    Args:
        cost_matrix: 2-D matrix of shape ``(expectations, subjects)``.  May
            contain ``np.inf`` to mark forbidden pairings.

    Returns:
        List of ``(expectation_index, subject_index)`` pairs ordered by
        expectation index.  Empty when no valid pairing exists.
    """
    cost = np.asarray(cost_matrix, dtype=float)
    if cost.size == 0:
        return []

    inf_mask = np.isinf(cost)
    if inf_mask.all():
        return []

    if inf_mask.any():
        finite_max = float(cost[~inf_mask].max())
        cost = np.where(inf_mask, finite_max * 2.0 + 1.0, cost)

    row_ind, col_ind = linear_sum_assignment(cost)

    return [
        (int(row), int(col))
        for row, col in zip(row_ind, col_ind, strict=True)
        if not inf_mask[row, col]
    ]
