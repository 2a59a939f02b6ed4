"""
evolution.py
-------------
Strategy update rules. Each call performs exactly one elementary event on
the strategy array (in place):
- Death-Birth (DB)
- Birth-Death (BD)
- Fermi imitation (IM)
"""

import math

import numpy as np

from evograph.games import compute_payoffs
from evograph.topology import InvalidParameterError


def fitness(payoffs, w):
    """
    Fitness under selection intensity w, clamped at zero since it is used as
    a sampling weight.

    Args:
        payoffs (numpy.ndarray): payoff per node
        w (float): selection intensity
    Returns:
        numpy.ndarray
    """
    return np.maximum(0.0, (1.0 - w) + w * np.asarray(payoffs, dtype=np.float64))


def pick_weighted_index(weights, rng):
    """
    Index drawn proportionally to ``weights``; uniform if the total weight
    is not positive.

    Args:
        weights (numpy.ndarray): non-negative weights
        rng (Rng): random stream
    Returns:
        int
    """
    cumulative = np.cumsum(weights)
    total = cumulative[-1]
    if total <= 0:
        return rng.int(len(weights))
    r = rng.random() * total
    idx = int(np.searchsorted(cumulative, r, side='left'))
    return min(idx, len(weights) - 1)


def fermi_probability(payoff_focal, payoff_model, beta):
    """
    Probability that the focal player adopts the model's strategy,
    1 / (1 + exp(-beta * (payoff_model - payoff_focal))).
    """
    x = beta * (payoff_model - payoff_focal)
    # keep exp() in range
    if x > 100:
        return 1.0
    if x < -100:
        return 0.0
    return 1.0 / (1.0 + math.exp(-x))


def _offspring(strategy, mu, rng):
    if mu > 0 and rng.random() < mu:
        return 1 - strategy
    return strategy


def step_db(graph, strategies, matrix, w, mu, rng):
    """
    Death-Birth: a uniformly chosen node dies and its neighbors compete,
    proportionally to fitness, to place an offspring there.

    Args:
        graph (Graph): population graph
        strategies (numpy.ndarray): strategy array, updated in place
        matrix (PayoffMatrix): game matrix
        w (float): selection intensity
        mu (float): mutation probability
        rng (Rng): random stream
    Returns:
        bool: True (the tick happened, possibly as a no-op)
    """
    payoffs = compute_payoffs(graph, strategies, matrix)

    dead = rng.int(graph.N)
    neigh = graph.neighbors(dead)
    if not neigh:
        return True

    fit = fitness(payoffs[list(neigh)], w)
    parent = neigh[pick_weighted_index(fit, rng)]
    strategies[dead] = _offspring(int(strategies[parent]), mu, rng)
    return True


def step_bd(graph, strategies, matrix, w, mu, rng):
    """
    Birth-Death: a parent is chosen from the whole population proportionally
    to fitness and its offspring replaces a uniformly chosen neighbor.

    Args:
        graph (Graph): population graph
        strategies (numpy.ndarray): strategy array, updated in place
        matrix (PayoffMatrix): game matrix
        w (float): selection intensity
        mu (float): mutation probability
        rng (Rng): random stream
    Returns:
        bool: True
    """
    payoffs = compute_payoffs(graph, strategies, matrix)

    parent = pick_weighted_index(fitness(payoffs, w), rng)
    neigh = graph.neighbors(parent)
    if not neigh:
        return True

    dead = neigh[rng.int(len(neigh))]
    strategies[dead] = _offspring(int(strategies[parent]), mu, rng)
    return True


def step_imitation(graph, strategies, matrix, beta, mu, rng):
    """
    Fermi imitation: a random focal node looks at a random neighbor and
    copies its strategy with the Fermi probability of their payoff gap.

    Args:
        graph (Graph): population graph
        strategies (numpy.ndarray): strategy array, updated in place
        matrix (PayoffMatrix): game matrix
        beta (float): imitation intensity (inverse temperature)
        mu (float): mutation probability
        rng (Rng): random stream
    Returns:
        bool: True
    """
    payoffs = compute_payoffs(graph, strategies, matrix)

    i = rng.int(graph.N)
    neigh = graph.neighbors(i)
    if not neigh:
        return True
    j = neigh[rng.int(len(neigh))]

    if rng.random() < fermi_probability(payoffs[i], payoffs[j], beta):
        strategies[i] = _offspring(int(strategies[j]), mu, rng)
    return True


UPDATE_RULES = {
    'DB': step_db,
    'BD': step_bd,
    'IM': step_imitation,
}

RULE_ALIASES = {
    'db': 'DB',
    'death-birth': 'DB',
    'bd': 'BD',
    'birth-death': 'BD',
    'im': 'IM',
    'imitation': 'IM',
    'fermi': 'IM',
}


def canonical_rule(name):
    try:
        return RULE_ALIASES[name.lower()]
    except (KeyError, AttributeError):
        raise InvalidParameterError(f"unsupported update rule: {name!r}") from None


def get_update_rule(name):
    """
    Args:
        name (str): 'DB' / 'BD' / 'IM' or an alias such as 'imitation'
    Returns:
        callable: step function ``(graph, strategies, matrix, intensity, mu, rng)``
    """
    return UPDATE_RULES[canonical_rule(name)]


def count_cooperators(strategies):
    return int(np.count_nonzero(strategies))


def is_fixated(strategies):
    """
    True if every node uses the same strategy.
    """
    s = np.asarray(strategies)
    return bool(np.all(s == s[0]))
