"""
simulation.py
--------------
Ties topology, game and update rule together into a steppable session.
The session object owns all mutable run state (graph, strategy array, tick
counter, random stream) and is handed to whoever drives the loop.
"""

import logging

import numpy as np

from evograph.config import DynamicsConfig, GraphConfig
from evograph.evolution import canonical_rule, count_cooperators, get_update_rule, is_fixated
from evograph.fixation import estimate_fixation
from evograph.recorder import DefaultDataRecorder
from evograph.rng import Rng
from evograph.topology import InvalidParameterError, NetworkTopology

logger = logging.getLogger(__name__)


def theory_hint(topology, rule, use_donation, k=None):
    """
    Rule-of-thumb hint for the current setup, shown next to the results.

    Args:
        topology (str): canonical topology name
        rule (str): canonical update rule
        use_donation (bool): whether the game is a donation game
        k (int): ring degree
    Returns:
        str
    """
    if topology == 'ring' and use_donation and rule == 'DB':
        return (f"Weak-selection rule of thumb on k-regular graphs (DB): cooperation tends to be "
                f"favored when b/c > k. Here k={k}, so try b/c > {k}.")
    if topology == 'ring' and use_donation and rule == 'BD':
        return ("On many regular graphs, BD updating is much less favorable to cooperation than DB "
                "under weak selection. Try switching DB vs BD and compare.")
    return "Try DB vs BD vs Imitation; vary selection intensity and graph heterogeneity (ER vs BA)."


class SimulationSession:
    """
    Simulation session
    ------------------
    Builds the graph from ``GraphConfig`` with a stream seeded by its seed;
    the same stream then drives population resets and ticks.
    """

    def __init__(self, graph_config=None, dynamics=None, recorder=None):
        """
        Args:
            graph_config (GraphConfig): topology and seed
            dynamics (DynamicsConfig): game, rule and selection parameters
            recorder (DataRecorder): cooperator-fraction series; a
                DefaultDataRecorder if omitted
        Raises:
            InvalidParameterError: invalid topology or dynamics parameters
        """
        self.graph_config = graph_config or GraphConfig()
        self.dynamics = dynamics or DynamicsConfig()
        ok, err = self.dynamics.validate()
        if not ok:
            raise InvalidParameterError(err)

        self.rng = Rng(self.graph_config.seed)
        self.network = NetworkTopology(self.graph_config.topology, self.graph_config.N,
                                       self.graph_config.params(), self.rng)
        self.graph = self.network.graph
        self.recorder = recorder if recorder is not None else DefaultDataRecorder()
        self.t = 0
        self.strategies = None
        self.reset_population()

    def configure(self, dynamics):
        """
        Swap game / rule / selection parameters between ticks.

        Args:
            dynamics (DynamicsConfig): new parameters
        """
        ok, err = dynamics.validate()
        if not ok:
            raise InvalidParameterError(err)
        self.dynamics = dynamics

    def reset_population(self, init_c=None):
        """
        Fresh random population: each node cooperates with probability
        ``init_c``. Resets the tick counter and the recorded series.

        Args:
            init_c (float): initial cooperator fraction, defaults to the
                configured one
        """
        if init_c is None:
            init_c = self.dynamics.init_c
        if not 0.0 <= init_c <= 1.0:
            raise InvalidParameterError(f"initial cooperator fraction must lie in [0, 1], got {init_c}")
        s = np.zeros(self.graph.N, dtype=np.uint8)
        for i in range(self.graph.N):
            s[i] = 1 if self.rng.random() < init_c else 0
        self.strategies = s
        self.t = 0
        self.recorder.reset()

    def step(self, steps=1):
        """
        Run ``steps`` ticks of the configured update rule, then record one
        cooperator-fraction sample.

        Args:
            steps (int): number of ticks
        Returns:
            int: tick count after stepping
        """
        d = self.dynamics
        update = get_update_rule(d.rule)
        matrix = d.matrix()
        for _ in range(steps):
            update(self.graph, self.strategies, matrix, d.intensity, d.mu, self.rng)
            self.t += 1
        self.recorder.record(self.t, self.cooperator_fraction())
        return self.t

    def run(self, steps, stop_when_fixated=False):
        """
        Step one tick at a time, optionally stopping at fixation.

        Returns:
            int: tick count
        """
        for _ in range(steps):
            if stop_when_fixated and is_fixated(self.strategies):
                break
            self.step(1)
        return self.t

    def cooperator_count(self):
        return count_cooperators(self.strategies)

    def cooperator_fraction(self):
        return self.cooperator_count() / self.graph.N

    def is_fixated(self):
        return is_fixated(self.strategies)

    def run_fixation(self, trials=100, max_steps=100000, base_seed=None, workers=1,
                     stop_event=None, progress=None):
        """
        Fixation batch on this session's graph and dynamics. Mutation is off
        for every trial; the session's own population is left untouched.

        Args:
            trials (int): number of trials
            max_steps (int): per-trial step budget
            base_seed (int): defaults to the graph seed
            workers (int): worker processes
        Returns:
            FixationResult
        """
        if base_seed is None:
            base_seed = self.graph_config.seed
        d = self.dynamics
        return estimate_fixation(self.graph, d.matrix(), d.rule, d.intensity, trials, max_steps,
                                 base_seed, workers=workers, stop_event=stop_event, progress=progress)

    def theory_hint(self):
        d = self.dynamics
        return theory_hint(self.network.topology, canonical_rule(d.rule), d.use_donation,
                           self.graph_config.k)

    def summary(self):
        """
        Returns:
            dict: state read back by the presentation layer
        """
        c = self.cooperator_count()
        return {
            'topology': self.network.topology,
            'N': self.graph.N,
            'E': self.graph.edge_count(),
            'avg_degree': self.graph.avg_degree(),
            't': self.t,
            'cooperators': c,
            'coop_rate': c / self.graph.N,
        }
