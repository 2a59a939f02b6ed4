"""
games.py
---------
Two-strategy games played along the edges of the population graph.

Payoff matrix (row player's payoff):

        vs C   vs D
    C    R      S
    D    T      P

The donation game (benefit b, cost c) is the Prisoner's Dilemma
R = b - c, S = -c, T = b, P = 0.
"""

from dataclasses import dataclass

import numpy as np

COOPERATE = 1
DEFECT = 0


@dataclass(frozen=True)
class PayoffMatrix:
    """
    2x2 game matrix
    ---------------
    Payoff to a cooperator / defector meeting a cooperator / defector.
    """
    R: float
    S: float
    T: float
    P: float

    @classmethod
    def donation(cls, b, c):
        """
        Args:
            b (float): benefit conferred by a cooperator
            c (float): cost paid by a cooperator
        Returns:
            PayoffMatrix
        """
        return cls(R=b - c, S=-c, T=b, P=0.0)

    def payoff(self, si, sj):
        """
        Payoff to a player using ``si`` against a player using ``sj``.
        """
        if si == COOPERATE:
            return self.R if sj == COOPERATE else self.S
        return self.T if sj == COOPERATE else self.P


def donation_to_matrix(b, c):
    return PayoffMatrix.donation(b, c)


def compute_payoffs(graph, strategies, matrix):
    """
    Accumulated payoff of every node against all of its neighbors.

    Args:
        graph (Graph): frozen population graph
        strategies (numpy.ndarray): 0/1 strategy per node
        matrix (PayoffMatrix): game matrix
    Returns:
        numpy.ndarray: float64 payoff per node
    """
    N = graph.N
    src, dst = graph.edge_arrays()
    s = np.asarray(strategies, dtype=np.float64)
    degree = np.bincount(src, minlength=N).astype(np.float64)
    coop_neighbors = np.bincount(src, weights=s[dst], minlength=N)
    defect_neighbors = degree - coop_neighbors

    as_c = matrix.R * coop_neighbors + matrix.S * defect_neighbors
    as_d = matrix.T * coop_neighbors + matrix.P * defect_neighbors
    return np.where(s == COOPERATE, as_c, as_d)
