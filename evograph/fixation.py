"""
fixation.py
------------
Monte Carlo estimate of fixation probabilities.

Trials alternate between a single cooperator invading an all-defector
population (even trial index) and a single defector invading an
all-cooperator population (odd trial index). Every trial owns its strategy
array and a random stream seeded with ``base_seed + 1000 + trial_index``,
so trials are independent and can run in any order or in parallel.
"""

import logging
from collections import Counter
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field

import numpy as np

from evograph.evolution import canonical_rule, get_update_rule, is_fixated
from evograph.games import COOPERATE, DEFECT
from evograph.rng import Rng
from evograph.topology import InvalidParameterError

logger = logging.getLogger(__name__)

ALL_COOPERATE = 'all-cooperate'
ALL_DEFECT = 'all-defect'
TIMEOUT = 'timeout'
OUTCOMES = (ALL_COOPERATE, ALL_DEFECT, TIMEOUT)

C_INVADES_D = 'C_in_D'
D_INVADES_C = 'D_in_C'

TRIAL_SEED_OFFSET = 1000
PROGRESS_EVERY = 50


def scenario_for(trial_index):
    return C_INVADES_D if trial_index % 2 == 0 else D_INVADES_C


def trial_seed(base_seed, trial_index):
    return base_seed + TRIAL_SEED_OFFSET + trial_index


def single_mutant(N, scenario, rng):
    """
    Args:
        N (int): population size
        scenario (str): C_INVADES_D or D_INVADES_C
        rng (Rng): random stream choosing the mutant's position
    Returns:
        numpy.ndarray: strategy array with one mutant
    """
    resident, mutant = (DEFECT, COOPERATE) if scenario == C_INVADES_D else (COOPERATE, DEFECT)
    s = np.full(N, resident, dtype=np.uint8)
    s[rng.int(N)] = mutant
    return s


def classify(strategies):
    if not is_fixated(strategies):
        return TIMEOUT
    return ALL_COOPERATE if strategies[0] == COOPERATE else ALL_DEFECT


def run_trial(graph, matrix, rule, intensity, max_steps, rng, scenario):
    """
    Run one absorbing trial (mutation off) from a single mutant.

    Args:
        graph (Graph): population graph
        matrix (PayoffMatrix): game matrix
        rule (str): update rule name
        intensity (float): selection intensity w (or beta for imitation)
        max_steps (int): step budget
        rng (Rng): the trial's own random stream
        scenario (str): C_INVADES_D or D_INVADES_C
    Returns:
        tuple(str, int): (outcome, steps taken)
    """
    step = get_update_rule(rule)
    s = single_mutant(graph.N, scenario, rng)

    steps = 0
    while steps < max_steps and not is_fixated(s):
        step(graph, s, matrix, intensity, 0.0, rng)
        steps += 1
    return classify(s), steps


@dataclass
class FixationResult:
    """
    Outcome tallies of a fixation batch
    -----------------------------------
    ``trials`` counts completed trials only; it equals ``requested`` unless
    the batch was cancelled.
    """
    requested: int = 0
    counts: Counter = field(default_factory=Counter)
    by_scenario: dict = field(default_factory=lambda: {C_INVADES_D: Counter(), D_INVADES_C: Counter()})
    cancelled: bool = False

    @property
    def fix_c(self):
        return self.counts[ALL_COOPERATE]

    @property
    def fix_d(self):
        return self.counts[ALL_DEFECT]

    @property
    def timeout(self):
        return self.counts[TIMEOUT]

    @property
    def trials(self):
        return self.fix_c + self.fix_d + self.timeout

    def add(self, scenario, outcome):
        self.counts[outcome] += 1
        self.by_scenario[scenario][outcome] += 1

    def merge(self, other):
        self.counts.update(other.counts)
        for scenario, tally in other.by_scenario.items():
            self.by_scenario[scenario].update(tally)
        return self

    def probabilities(self):
        """
        Returns:
            dict: empirical probability of each outcome over completed trials
        """
        n = self.trials
        return {o: (self.counts[o] / n if n else 0.0) for o in OUTCOMES}

    def invasion_probability(self, scenario=C_INVADES_D):
        """
        Fraction of the scenario's trials in which the mutant took over.
        """
        tally = self.by_scenario[scenario]
        n = sum(tally[o] for o in OUTCOMES)
        if n == 0:
            return 0.0
        won = ALL_COOPERATE if scenario == C_INVADES_D else ALL_DEFECT
        return tally[won] / n

    def summary(self):
        n = self.trials
        lines = []
        for label, o in (('fixC', ALL_COOPERATE), ('fixD', ALL_DEFECT), ('timeout', TIMEOUT)):
            p = self.counts[o] / n if n else 0.0
            lines.append(f"{label}: {self.counts[o]}/{n} ({p:.3f})")
        return "\n".join(lines)


def _run_trials(graph, matrix, rule, intensity, max_steps, base_seed, indices):
    base = Rng(base_seed)
    result = FixationResult(requested=len(indices))
    for tr in indices:
        scenario = scenario_for(tr)
        trial_rng = base.spawn(trial_seed(base_seed, tr))
        outcome, _ = run_trial(graph, matrix, rule, intensity, max_steps, trial_rng, scenario)
        result.add(scenario, outcome)
    return result


def _chunks(n, size):
    return [range(start, min(start + size, n)) for start in range(0, n, size)]


def estimate_fixation(graph, matrix, rule='DB', intensity=0.01, trials=100, max_steps=100000,
                      base_seed=1, workers=1, stop_event=None, chunk_size=PROGRESS_EVERY,
                      progress=None):
    """
    Estimate fixation probabilities over ``trials`` independent trials.

    Args:
        graph (Graph): population graph
        matrix (PayoffMatrix): game matrix
        rule (str): 'DB' / 'BD' / 'IM'
        intensity (float): selection intensity w (or beta for imitation)
        trials (int): number of trials
        max_steps (int): per-trial step budget
        base_seed (int): base seed, trial i uses base_seed + 1000 + i
        workers (int): worker processes; 1 runs in the calling process
        stop_event: object with ``is_set()``; checked between trials
            (between chunks when workers > 1)
        chunk_size (int): trials per work unit when workers > 1
        progress (callable): ``progress(done, trials)`` hook
    Returns:
        FixationResult
    """
    if trials < 0:
        raise InvalidParameterError(f"trials must be non-negative, got {trials}")
    if max_steps < 0:
        raise InvalidParameterError(f"max_steps must be non-negative, got {max_steps}")
    rule = canonical_rule(rule)

    result = FixationResult(requested=trials)
    if workers <= 1:
        for tr in range(trials):
            if stop_event is not None and stop_event.is_set():
                result.cancelled = True
                break
            result.merge(_run_trials(graph, matrix, rule, intensity, max_steps, base_seed, [tr]))
            if (tr + 1) % PROGRESS_EVERY == 0:
                logger.debug("fixation: %d/%d trials done", tr + 1, trials)
                if progress is not None:
                    progress(tr + 1, trials)
    else:
        stopping = False
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(_run_trials, graph, matrix, rule, intensity, max_steps,
                                       base_seed, list(chunk))
                       for chunk in _chunks(trials, max(1, chunk_size))]
            for future in as_completed(futures):
                if future.cancelled():
                    continue
                result.merge(future.result())
                if progress is not None:
                    progress(result.trials, trials)
                if not stopping and stop_event is not None and stop_event.is_set():
                    stopping = True
                    for f in futures:
                        f.cancel()
        result.cancelled = stopping and result.trials < trials

    logger.info("fixation batch (%s, %d/%d trials): C=%d D=%d timeout=%d",
                rule, result.trials, trials, result.fix_c, result.fix_d, result.timeout)
    return result
