"""
Tests for the payoff model.
"""

import numpy as np
import pytest

from evograph.games import COOPERATE, DEFECT, PayoffMatrix, compute_payoffs, donation_to_matrix
from evograph.rng import Rng
from evograph.topology import make_erdos_renyi, make_ring


def naive_payoffs(graph, strategies, matrix):
    return np.array([
        sum(matrix.payoff(strategies[i], strategies[j]) for j in graph.neighbors(i))
        for i in range(graph.N)
    ], dtype=float)


class TestPayoffMatrix:
    """Matrix construction and lookup."""

    def test_donation_3_1(self):
        m = donation_to_matrix(3, 1)
        assert (m.R, m.S, m.T, m.P) == (2, -1, 3, 0)

    def test_donation_classmethod(self):
        assert PayoffMatrix.donation(5, 2) == PayoffMatrix(R=3, S=-2, T=5, P=0)

    def test_lookup(self):
        m = PayoffMatrix(R=3, S=0, T=5, P=1)
        assert m.payoff(COOPERATE, COOPERATE) == 3
        assert m.payoff(COOPERATE, DEFECT) == 0
        assert m.payoff(DEFECT, COOPERATE) == 5
        assert m.payoff(DEFECT, DEFECT) == 1

    def test_immutable(self):
        m = PayoffMatrix(R=3, S=0, T=5, P=1)
        with pytest.raises(AttributeError):
            m.R = 4


class TestComputePayoffs:
    """Accumulated payoff over neighbors."""

    def test_cycle_by_hand(self):
        g = make_ring(4, 2)
        s = np.array([1, 1, 0, 0], dtype=np.uint8)
        pay = compute_payoffs(g, s, donation_to_matrix(3, 1))
        assert pay.tolist() == [1.0, 1.0, 3.0, 3.0]

    def test_matches_pairwise_definition(self):
        g = make_erdos_renyi(40, 0.15, Rng(2))
        rng = Rng(8)
        s = np.array([rng.int(2) for _ in range(g.N)], dtype=np.uint8)
        m = PayoffMatrix(R=1.5, S=-0.7, T=2.25, P=0.1)
        assert np.allclose(compute_payoffs(g, s, m), naive_payoffs(g, s, m))

    def test_isolated_nodes_earn_nothing(self):
        g = make_erdos_renyi(5, 0.0, Rng(1))
        s = np.array([1, 0, 1, 0, 1], dtype=np.uint8)
        assert compute_payoffs(g, s, PayoffMatrix(1, 2, 3, 4)).tolist() == [0.0] * 5

    def test_pure_function(self):
        g = make_ring(10, 4)
        s = np.array([1, 0] * 5, dtype=np.uint8)
        before = s.copy()
        a = compute_payoffs(g, s, donation_to_matrix(3, 1))
        b = compute_payoffs(g, s, donation_to_matrix(3, 1))
        assert np.array_equal(s, before)
        assert np.array_equal(a, b)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
