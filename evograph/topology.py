"""
topology.py
------------
Graph structure and topology generators for structured populations:
- ring (k-regular cycle)
- lattice (periodic 2D von Neumann torus)
- erdos-renyi (G(N, p) random graph)
- barabasi-albert (preferential attachment)

All generators draw from an explicit ``Rng`` so a graph is reproducible
from its seed.
"""

import logging
import math

import networkx as nx
import numpy as np

from evograph.rng import Rng

logger = logging.getLogger(__name__)


class InvalidParameterError(ValueError):
    """Raised when a topology (or dynamics) parameter is out of range."""


class Graph:
    """
    Population graph
    ----------------
    Undirected adjacency over nodes ``0..N-1``. Edges are added during
    generation only; ``freeze()`` fixes the structure and caches the
    neighbor tuples and edge arrays used by the dynamics.
    """

    def __init__(self, N):
        """
        Args:
            N (int): number of nodes
        """
        self.N = N
        self.graph = nx.Graph()
        self.graph.add_nodes_from(range(N))
        self.adj = None
        self._src = None
        self._dst = None

    @classmethod
    def from_networkx(cls, source, N):
        """
        Frozen graph over nodes 0..N-1 holding the edges of a networkx graph
        whose nodes are already labelled 0..N-1.

        Args:
            source (networkx.Graph): generated graph
            N (int): number of nodes
        Returns:
            Graph
        """
        g = cls(N)
        for i, j in source.edges():
            g.add_edge(i, j)
        return g.freeze()

    def add_edge(self, i, j):
        """
        Add the undirected edge (i, j). Self-loops and existing edges are
        ignored so generators need not check first.
        """
        if i == j:
            return
        self.graph.add_edge(i, j)

    def freeze(self):
        """
        Make the graph immutable and cache its adjacency.

        Returns:
            Graph: self
        """
        nx.freeze(self.graph)
        # insertion order of neighbors is what index-based draws see
        self.adj = tuple(tuple(self.graph.adj[i]) for i in range(self.N))
        src = [i for i in range(self.N) for _ in self.adj[i]]
        dst = [j for i in range(self.N) for j in self.adj[i]]
        self._src = np.asarray(src, dtype=np.intp)
        self._dst = np.asarray(dst, dtype=np.intp)
        return self

    @property
    def frozen(self):
        return self.adj is not None

    def neighbors(self, i):
        return self.adj[i]

    def degree(self, i):
        return len(self.adj[i])

    def degrees(self):
        """
        Returns:
            numpy.ndarray: degree of every node
        """
        return np.fromiter((len(a) for a in self.adj), dtype=np.int64, count=self.N)

    def edge_count(self):
        return self.graph.number_of_edges()

    def avg_degree(self):
        return 2.0 * self.edge_count() / self.N if self.N else 0.0

    def edge_arrays(self):
        """
        Directed edge endpoints (each undirected edge appears once per
        direction), grouped by source node.

        Returns:
            tuple(numpy.ndarray, numpy.ndarray): (src, dst)
        """
        return self._src, self._dst

    def to_networkx(self):
        """Read-only networkx view of the graph."""
        return self.graph

    def __repr__(self):
        return f"Graph(N={self.N}, E={self.edge_count()})"


def _require_nodes(N):
    if not isinstance(N, (int, np.integer)) or N < 1:
        raise InvalidParameterError(f"N must be a positive integer, got {N!r}")


def make_ring(N, k, rng=None):
    """
    Ring / k-regular graph: node i is linked to its k/2 nearest neighbors on
    each side of the cycle.

    Args:
        N (int): number of nodes
        k (int): degree, must be even with 2 <= k < N
        rng (Rng): unused, accepted for a uniform generator signature
    Returns:
        Graph
    """
    _require_nodes(N)
    if k % 2 != 0:
        raise InvalidParameterError(f"ring degree k must be even, got {k}")
    if k < 2 or k >= N:
        raise InvalidParameterError(f"ring degree k must satisfy 2 <= k < N, got k={k}, N={N}")

    return Graph.from_networkx(nx.circulant_graph(N, range(1, k // 2 + 1)), N)


def make_lattice(N, rng=None):
    """
    Periodic square lattice with von Neumann (4-neighbor) connectivity.
    Node index = row * L + col.

    Args:
        N (int): number of nodes, must be a perfect square
        rng (Rng): unused, accepted for a uniform generator signature
    Returns:
        Graph
    """
    _require_nodes(N)
    L = math.isqrt(N)
    if L * L != N:
        raise InvalidParameterError(f"lattice requires N to be a perfect square, got {N}")

    # (row, col) labels sorted row-major, so node index = row * L + col
    grid = nx.convert_node_labels_to_integers(nx.grid_2d_graph(L, L, periodic=True), ordering='sorted')
    return Graph.from_networkx(grid, N)


def make_erdos_renyi(N, p, rng):
    """
    G(N, p): each unordered pair is linked independently with probability p.
    Consumes exactly one draw per candidate pair.

    Args:
        N (int): number of nodes
        p (float): edge probability in [0, 1]
        rng (Rng): random stream
    Returns:
        Graph
    """
    _require_nodes(N)
    if not 0.0 <= p <= 1.0:
        raise InvalidParameterError(f"edge probability p must lie in [0, 1], got {p}")

    g = Graph(N)
    for i in range(N):
        for j in range(i + 1, N):
            if rng.random() < p:
                g.add_edge(i, j)
    return g.freeze()


def make_barabasi_albert(N, m0, m, rng):
    """
    Barabási–Albert preferential attachment.

    Starts from a clique on ``m0`` nodes. Every later node attaches ``m``
    distinct edges to targets drawn from a pool in which each node appears
    once per unit of degree. After attaching, the new node is pushed ``m``
    times and each chosen target once more.

    Args:
        N (int): number of nodes, N >= m0
        m0 (int): seed clique size, m0 >= 2
        m (int): edges per new node, 1 <= m < m0
        rng (Rng): random stream
    Returns:
        Graph
    """
    _require_nodes(N)
    if m0 < 2:
        raise InvalidParameterError(f"initial clique m0 must be >= 2, got {m0}")
    if m < 1 or m >= m0:
        raise InvalidParameterError(f"edges per node m must satisfy 1 <= m < m0, got m={m}, m0={m0}")
    if N < m0:
        raise InvalidParameterError(f"N must be >= m0, got N={N}, m0={m0}")

    g = Graph(N)
    pool = []
    for i in range(m0):
        for j in range(i + 1, m0):
            g.add_edge(i, j)
        pool.extend([i] * (m0 - 1))

    for v in range(m0, N):
        targets = []
        while len(targets) < m:
            t = pool[rng.int(len(pool))]
            if t not in targets:
                targets.append(t)
        for t in targets:
            g.add_edge(v, t)
        pool.extend([v] * m)
        pool.extend(targets)
    return g.freeze()


TOPOLOGY_ALIASES = {
    'ring': 'ring',
    'regular': 'ring',
    'lattice': 'lattice',
    'erdos-renyi': 'erdos-renyi',
    'erdos': 'erdos-renyi',
    'random': 'erdos-renyi',
    'barabasi-albert': 'barabasi-albert',
    'ba': 'barabasi-albert',
    'scalefree': 'barabasi-albert',
}


def canonical_topology(name):
    try:
        return TOPOLOGY_ALIASES[name.lower()]
    except (KeyError, AttributeError):
        raise InvalidParameterError(f"unsupported topology: {name!r}") from None


class NetworkTopology:
    """
    Network topology
    ----------------
    Builds the population graph from a topology name and its parameters.
    """

    def __init__(self, topology='ring', N=100, params=None, rng=None):
        """
        Args:
            topology (str): 'ring' / 'lattice' / 'erdos-renyi' / 'barabasi-albert'
                (aliases such as 'ba' or 'random' are accepted)
            N (int): number of nodes
            params (dict): topology parameters: k for ring, p for
                erdos-renyi, m0 and m for barabasi-albert
            rng (Rng): random stream; a fresh ``Rng(1)`` if omitted
        """
        self.topology = canonical_topology(topology)
        self.N = N
        self.params = params or {}
        self.rng = rng if rng is not None else Rng(1)
        self.graph = self._build_network()

    def _build_network(self):
        """
        Returns:
            Graph: frozen population graph
        """
        if self.topology == 'ring':
            g = make_ring(self.N, self.params.get('k', 4), self.rng)
        elif self.topology == 'lattice':
            g = make_lattice(self.N, self.rng)
        elif self.topology == 'erdos-renyi':
            g = make_erdos_renyi(self.N, self.params.get('p', 0.05), self.rng)
        else:
            g = make_barabasi_albert(self.N, self.params.get('m0', 6), self.params.get('m', 2), self.rng)
        logger.debug("built %s graph: N=%d E=%d", self.topology, g.N, g.edge_count())
        return g

    def get_neighbors(self, node):
        """
        Args:
            node (int): node index
        Returns:
            list[int]: neighbor indices
        """
        return list(self.graph.neighbors(node))

    def describe(self):
        return f"{self.topology} | N={self.graph.N} | E={self.graph.edge_count()} | <k>={self.graph.avg_degree():.2f}"
