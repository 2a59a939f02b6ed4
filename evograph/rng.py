"""
rng.py
------
Seeded pseudo-random stream.

Every stochastic component (topology generators, update rules, fixation
trials) draws from an explicit ``Rng`` instance instead of the global
``random`` module, so a run is fully determined by its seed.
"""

import math

import numpy as np

SEED_MODULUS = 2 ** 32


class Rng:
    """
    Seeded random stream
    --------------------
    Thin wrapper over ``numpy.random.Generator`` exposing the draws the
    simulation needs.
    """

    def __init__(self, seed=1):
        """
        Args:
            seed (int): integer seed. Reduced modulo 2**32, so negative seeds are valid.
        """
        self.seed = int(seed) % SEED_MODULUS
        self._gen = np.random.Generator(np.random.PCG64(self.seed))

    def random(self):
        """
        Returns:
            float: uniform draw in [0, 1)
        """
        return float(self._gen.random())

    def int(self, bound):
        """
        Uniform integer in [0, bound), obtained by floor-scaling ``random()``.

        Args:
            bound (int): exclusive upper bound, must be positive
        Returns:
            int
        """
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        # floor(u * bound) can round up to bound when u is within 1 ulp of 1
        return min(int(math.floor(self.random() * bound)), bound - 1)

    def spawn(self, seed):
        """
        Build an independent stream from a derived seed.

        Args:
            seed (int): derived seed (e.g. base seed plus a trial offset)
        Returns:
            Rng
        """
        return Rng(seed)

    def __repr__(self):
        return f"Rng(seed={self.seed})"
