"""
Tests for the simulation session and the recorder.
"""

import numpy as np
import pytest

from evograph.config import DynamicsConfig, GraphConfig
from evograph.recorder import DefaultDataRecorder
from evograph.simulation import SimulationSession, theory_hint
from evograph.topology import InvalidParameterError


def small_session(**dyn):
    return SimulationSession(GraphConfig(topology='ring', N=30, k=4, seed=5), DynamicsConfig(**dyn))


class TestSessionSetup:
    """Construction and population resets."""

    def test_defaults(self):
        session = SimulationSession()
        assert session.graph.N == 100
        assert len(session.strategies) == 100
        assert session.t == 0

    def test_invalid_topology_fails_before_state(self):
        with pytest.raises(InvalidParameterError):
            SimulationSession(GraphConfig(topology='lattice', N=10))

    def test_invalid_dynamics(self):
        with pytest.raises(InvalidParameterError):
            small_session(mu=1.5)

    @pytest.mark.parametrize("init_c,expected", [(0.0, 0), (1.0, 30)])
    def test_reset_extremes(self, init_c, expected):
        session = small_session()
        session.reset_population(init_c)
        assert session.cooperator_count() == expected

    def test_reset_clears_ticks_and_series(self):
        session = small_session()
        session.step(5)
        session.reset_population()
        assert session.t == 0
        assert len(session.recorder) == 0

    def test_reset_rejects_bad_fraction(self):
        with pytest.raises(InvalidParameterError):
            small_session().reset_population(-0.1)


class TestSessionStepping:
    """Ticks, statistics and reproducibility."""

    def test_step_advances_ticks(self):
        session = small_session()
        assert session.step(10) == 10
        assert session.step() == 11
        assert len(session.recorder) == 2

    def test_summary(self):
        session = small_session()
        s = session.summary()
        assert s['N'] == 30
        assert s['E'] == 60
        assert s['coop_rate'] == session.cooperator_count() / 30

    def test_reproducible(self):
        a, b = small_session(rule='BD', mu=0.01), small_session(rule='BD', mu=0.01)
        a.step(300)
        b.step(300)
        assert np.array_equal(a.strategies, b.strategies)

    def test_run_stops_at_fixation(self):
        session = small_session(init_c=0.0)
        assert session.run(50, stop_when_fixated=True) == 0
        assert session.is_fixated()

    def test_configure_between_ticks(self):
        session = small_session()
        session.configure(DynamicsConfig(rule='IM', intensity=2.0))
        session.step(20)
        assert session.t == 20
        with pytest.raises(InvalidParameterError):
            session.configure(DynamicsConfig(rule='nope'))

    def test_fixation_leaves_population_alone(self):
        session = small_session(mu=0.3)
        before = session.strategies.copy()
        result = session.run_fixation(trials=20, max_steps=2000)
        assert result.trials == 20
        assert np.array_equal(session.strategies, before)


class TestTheoryHint:
    """Rule-of-thumb text for the presentation layer."""

    def test_ring_db_names_threshold(self):
        hint = theory_hint('ring', 'DB', True, 4)
        assert "b/c > k" in hint
        assert "b/c > 4" in hint

    def test_ring_bd_suggests_comparison(self):
        assert "DB vs BD" in theory_hint('ring', 'BD', True, 4)

    def test_generic_hint(self):
        assert "ER vs BA" in theory_hint('lattice', 'DB', True)
        assert "ER vs BA" in theory_hint('ring', 'DB', False, 4)

    def test_session_hint_uses_ring_degree(self):
        session = small_session(rule='death-birth')
        assert "b/c > 4" in session.theory_hint()


class TestDefaultDataRecorder:
    """Down-sampling of the cooperator series."""

    def test_dense_then_strided(self):
        rec = DefaultDataRecorder(max_dense=3, stride=10)
        for t in range(1, 25):
            rec.record(t, 0.5)
        assert rec.records['t'] == [1, 2, 3, 10, 20]

    def test_ignores_non_advancing_ticks(self):
        rec = DefaultDataRecorder()
        rec.record(5, 0.1)
        rec.record(5, 0.2)
        rec.record(4, 0.3)
        assert rec.records['coop_rate'] == [0.1]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
