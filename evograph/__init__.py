"""
evograph
--------
Evolutionary game dynamics (cooperate / defect) on graph-structured
populations, with Monte Carlo fixation-probability estimates.
"""

from evograph.evolution import count_cooperators, is_fixated, step_bd, step_db, step_imitation
from evograph.fixation import FixationResult, estimate_fixation
from evograph.games import COOPERATE, DEFECT, PayoffMatrix, compute_payoffs, donation_to_matrix
from evograph.rng import Rng
from evograph.simulation import SimulationSession
from evograph.topology import (Graph, InvalidParameterError, NetworkTopology, make_barabasi_albert,
                               make_erdos_renyi, make_lattice, make_ring)

__version__ = "0.1.0"
