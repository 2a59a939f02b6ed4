"""
Tests for the update rules.
"""

import numpy as np
import pytest

from evograph.evolution import (count_cooperators, fermi_probability, fitness, get_update_rule,
                                is_fixated, pick_weighted_index, step_bd, step_db, step_imitation)
from evograph.games import donation_to_matrix
from evograph.rng import Rng
from evograph.topology import InvalidParameterError, make_erdos_renyi, make_lattice, make_ring

RULES = [(step_db, 0.1), (step_bd, 0.1), (step_imitation, 1.0)]
MATRIX = donation_to_matrix(3, 1)


class TestHelpers:
    """Fitness, weighted pick, Fermi function, fixation checks."""

    def test_fitness_clamped(self):
        f = fitness(np.array([-100.0, 0.0, 1.0]), 0.5)
        assert f.tolist() == [0.0, 0.5, 1.0]

    def test_fitness_neutral(self):
        assert fitness(np.array([7.0, -3.0]), 0.0).tolist() == [1.0, 1.0]

    def test_pick_zero_total_is_uniform(self):
        rng = Rng(1)
        picks = {pick_weighted_index(np.zeros(4), rng) for _ in range(200)}
        assert picks == {0, 1, 2, 3}

    def test_pick_single_positive_weight(self):
        rng = Rng(1)
        assert all(pick_weighted_index(np.array([0.0, 0.0, 2.0]), rng) == 2 for _ in range(100))

    def test_pick_proportional(self):
        rng = Rng(4)
        picks = [pick_weighted_index(np.array([1.0, 3.0]), rng) for _ in range(4000)]
        assert 0.7 < sum(picks) / len(picks) < 0.8

    def test_fermi_probability(self):
        assert fermi_probability(1.0, 1.0, 5.0) == 0.5
        assert fermi_probability(0.0, 1000.0, 1.0) == 1.0
        assert fermi_probability(1000.0, 0.0, 1.0) == 0.0
        assert fermi_probability(0.0, 1.0, 1.0) > 0.5

    @pytest.mark.parametrize("s", [[0], [1], [0, 0, 0], [1, 1, 1, 1]])
    def test_is_fixated_true(self, s):
        assert is_fixated(np.array(s, dtype=np.uint8))

    @pytest.mark.parametrize("s", [[0, 1], [1, 1, 0], [0, 0, 1, 0]])
    def test_is_fixated_false(self, s):
        assert not is_fixated(np.array(s, dtype=np.uint8))

    def test_count_cooperators(self):
        assert count_cooperators(np.array([1, 0, 1, 1], dtype=np.uint8)) == 3

    def test_rule_lookup(self):
        assert get_update_rule('DB') is step_db
        assert get_update_rule('birth-death') is step_bd
        assert get_update_rule('imitation') is step_imitation
        with pytest.raises(InvalidParameterError):
            get_update_rule('moran')


class TestUpdateRules:
    """One elementary event per call."""

    @pytest.mark.parametrize("rule,intensity", RULES)
    @pytest.mark.parametrize("resident", [0, 1])
    def test_fixation_preserved_without_mutation(self, rule, intensity, resident):
        g = make_lattice(25)
        s = np.full(g.N, resident, dtype=np.uint8)
        rng = Rng(3)
        for _ in range(300):
            assert rule(g, s, MATRIX, intensity, 0.0, rng)
        assert is_fixated(s)
        assert s[0] == resident

    @pytest.mark.parametrize("rule,intensity", RULES)
    def test_at_most_one_node_changes(self, rule, intensity):
        g = make_ring(30, 4)
        rng = Rng(6)
        s = np.array([rng.int(2) for _ in range(g.N)], dtype=np.uint8)
        for _ in range(200):
            before = s.copy()
            rule(g, s, MATRIX, intensity, 0.2, rng)
            assert np.count_nonzero(before != s) <= 1

    @pytest.mark.parametrize("rule,intensity", RULES)
    def test_isolated_nodes_are_noop(self, rule, intensity):
        g = make_erdos_renyi(6, 0.0, Rng(1))
        s = np.array([1, 0, 1, 0, 1, 0], dtype=np.uint8)
        rng = Rng(2)
        for _ in range(50):
            assert rule(g, s, MATRIX, intensity, 0.5, rng)
        assert s.tolist() == [1, 0, 1, 0, 1, 0]

    def test_db_full_mutation_flips_offspring(self):
        g = make_ring(10, 2)
        s = np.zeros(g.N, dtype=np.uint8)
        step_db(g, s, MATRIX, 0.1, 1.0, Rng(5))
        assert count_cooperators(s) == 1

    def test_bd_full_mutation_flips_offspring(self):
        g = make_ring(10, 2)
        s = np.ones(g.N, dtype=np.uint8)
        step_bd(g, s, MATRIX, 0.1, 1.0, Rng(5))
        assert count_cooperators(s) == 9

    def test_imitation_copies_richer_neighbor(self):
        # triangle with one cooperator: the defectors exploiting it are richer
        g = make_ring(3, 2)
        s = np.array([1, 0, 0], dtype=np.uint8)
        rng = Rng(1)
        for _ in range(200):
            step_imitation(g, s, donation_to_matrix(10, 1), 50.0, 0.0, rng)
        assert s.tolist() == [0, 0, 0]

    @pytest.mark.parametrize("rule,intensity", RULES)
    def test_reproducible(self, rule, intensity):
        g = make_ring(20, 4)
        runs = []
        for _ in range(2):
            rng = Rng(77)
            s = np.array([i % 2 for i in range(g.N)], dtype=np.uint8)
            for _ in range(500):
                rule(g, s, MATRIX, intensity, 0.05, rng)
            runs.append(s.tolist())
        assert runs[0] == runs[1]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
