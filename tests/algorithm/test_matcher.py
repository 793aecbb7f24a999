"""Test suite for closest_match.

Tests the np.inf guard, empty matrices, all-inf matrices, and that the
returned pairing minimises the total number of differences.
"""

from __future__ import annotations

import numpy as np
import pytest

from equivalency.algorithm.matcher import closest_match


class TestEmptyMatrix:
    """Empty cost matrix cases."""

    def test_zero_by_zero_matrix_returns_empty(self) -> None:
        assert closest_match(np.empty((0, 0), dtype=float)) == []

    def test_all_inf_returns_empty(self) -> None:
        assert closest_match(np.full((3, 3), np.inf)) == []


class TestSquareMatrix:
    """Standard square cost matrix cases."""

    def test_swapped_pairing(self) -> None:
        # Expectation [ {2,30}, {1,28} ] vs subject [ {1,27}, {2,30} ]
        cost = np.array([[2.0, 0.0], [1.0, 2.0]])
        assert closest_match(cost) == [(0, 1), (1, 0)]

    def test_identity_when_diagonal_cheapest(self) -> None:
        cost = np.array(
            [[1.0, 10.0, 10.0], [10.0, 2.0, 10.0], [10.0, 10.0, 3.0]],
            dtype=float,
        )
        assert closest_match(cost) == [(0, 0), (1, 1), (2, 2)]

    def test_minimises_total(self) -> None:
        cost = np.array([[4.0, 1.0], [2.0, 3.0]], dtype=float)
        pairs = closest_match(cost)
        assert sum(cost[i, j] for i, j in pairs) == pytest.approx(3.0)

    def test_ties_are_deterministic(self) -> None:
        cost = np.zeros((3, 3), dtype=float)
        assert closest_match(cost) == closest_match(cost)
        assert len(closest_match(cost)) == 3

    def test_ordered_by_expectation_index(self) -> None:
        cost = np.array([[3.0, 1.0, 2.0], [2.0, 3.0, 1.0], [1.0, 2.0, 3.0]], dtype=float)
        pairs = closest_match(cost)
        assert [i for i, _ in pairs] == [0, 1, 2]


class TestInfGuard:
    """np.inf cells mark forbidden pairings."""

    def test_forbidden_cell_avoided(self) -> None:
        cost = np.array([[np.inf, 1.0], [1.0, 5.0]])
        assert closest_match(cost) == [(0, 1), (1, 0)]

    def test_pair_on_inf_dropped(self) -> None:
        cost = np.array([[np.inf, np.inf], [1.0, 2.0]])
        pairs = closest_match(cost)
        assert all(i != 0 for i, _ in pairs)
        assert len(pairs) == 1
