# experiments/exp1/exp1_rule_of_thumb.py
"""
Experiment 1: the b/c > k rule of thumb
---------------------------------------
Goal:
1. Estimate the probability that a single cooperator takes over a ring of
   defectors, for a range of benefit-to-cost ratios b/c
2. Compare Death-Birth and Birth-Death updating under weak selection
3. Check that DB favours cooperation (fixation above the neutral 1/N) once
   b/c clearly exceeds k, while BD does not

Setup:
- Topology: ring, N=50, k=4
- Game: donation game, c=1, b in {1, 2, 4, 6, 8, 12}
- Selection: w=0.1, mutation off
- 400 trials per point (200 per invasion direction)
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import matplotlib.pyplot as plt

from evograph.fixation import C_INVADES_D, estimate_fixation
from evograph.games import PayoffMatrix
from evograph.rng import Rng
from evograph.simulation import theory_hint
from evograph.topology import make_ring

N = 50
K = 4
W = 0.1
TRIALS = 400
MAX_STEPS = 200000
SEED = 7
B_VALUES = [1, 2, 4, 6, 8, 12]


def sweep(rule, graph, workers):
    """
    Args:
        rule (str): 'DB' or 'BD'
        graph (Graph): ring graph
        workers (int): worker processes
    Returns:
        list[float]: C-invades-D fixation probability per b value
    """
    probs = []
    for b in B_VALUES:
        matrix = PayoffMatrix.donation(b, 1.0)
        result = estimate_fixation(graph, matrix, rule, W, TRIALS, MAX_STEPS, SEED, workers=workers)
        p = result.invasion_probability(C_INVADES_D)
        probs.append(p)
        print(f"  {rule} b/c={b:>4}: rho_C={p:.4f}  (timeouts {result.timeout})")
    return probs


def plot_rule_of_thumb(results, save_path="exp1_rule_of_thumb.png"):
    fig, ax = plt.subplots(figsize=(7, 4.5), dpi=150)
    ax.plot(B_VALUES, results['DB'], 'o-', color='tab:blue', lw=2, label='Death-Birth')
    ax.plot(B_VALUES, results['BD'], 's--', color='tab:red', lw=2, label='Birth-Death')
    ax.axhline(y=1 / N, color='gray', linestyle=':', label='neutral 1/N')
    ax.axvline(x=K, color='gray', linestyle='--', alpha=0.5, label=f'b/c = k = {K}')
    ax.set_xlabel("Benefit-to-cost ratio b/c", fontsize=12)
    ax.set_ylabel("Fixation probability of one cooperator", fontsize=12)
    ax.set_title(f"Ring N={N}, k={K}, w={W}")
    ax.grid(alpha=0.3)
    ax.legend(fontsize=10)
    plt.tight_layout()
    plt.savefig(save_path, dpi=300, bbox_inches='tight', facecolor='white')
    print(f"📊 figure saved to {os.path.abspath(save_path)}")


def main(workers=os.cpu_count() or 1):
    graph = make_ring(N, K, Rng(SEED))
    print(f"📌 ring N={N} k={K}: E={graph.edge_count()}, neutral baseline 1/N={1 / N:.3f}")
    results = {}
    for rule in ('DB', 'BD'):
        print(f"💡 {theory_hint('ring', rule, True, K)}")
        results[rule] = sweep(rule, graph, workers)
    plot_rule_of_thumb(results)
    print("✅ experiment 1 done")
    return results


if __name__ == "__main__":
    main()
