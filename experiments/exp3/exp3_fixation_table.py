# experiments/exp3/exp3_fixation_table.py
"""
Experiment 3: fixation table across topologies and update rules
---------------------------------------------------------------
Runs a fixation batch for every (topology, rule) pair and writes the
outcome counts to a CSV table.
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import csv

from evograph.config import DynamicsConfig
from evograph.fixation import C_INVADES_D, D_INVADES_C
from evograph.simulation import SimulationSession
from experiments.exp2.exp2_topology_evolution import TOPOLOGIES

TRIALS = 200
MAX_STEPS = 100000


def main(out_path="exp3_fixation_table.csv", workers=os.cpu_count() or 1):
    rows = []
    for rule in ('DB', 'BD', 'IM'):
        intensity = 0.1 if rule != 'IM' else 1.0
        dynamics = DynamicsConfig(b=6.0, c=1.0, rule=rule, intensity=intensity)
        for name, cfg in TOPOLOGIES.items():
            session = SimulationSession(cfg, dynamics)
            result = session.run_fixation(TRIALS, MAX_STEPS, workers=workers)
            probs = result.probabilities()
            rows.append({
                'topology': name,
                'rule': rule,
                'avg_degree': round(session.graph.avg_degree(), 3),
                'fix_c': result.fix_c,
                'fix_d': result.fix_d,
                'timeout': result.timeout,
                'p_fix_c': round(probs['all-cooperate'], 4),
                'rho_c': round(result.invasion_probability(C_INVADES_D), 4),
                'rho_d': round(result.invasion_probability(D_INVADES_C), 4),
            })
            print(f"{rule:>2} {name:<16} {result.fix_c}/{result.fix_d}/{result.timeout}")

    with open(out_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)
    print(f"📊 table saved to {os.path.abspath(out_path)}")
    return rows


if __name__ == "__main__":
    main()
