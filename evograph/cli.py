"""
Command-line interface for graph evolutionary simulations.

Usage:
    evograph --config configs/ring_db.yaml --steps 5000
    evograph --topology lattice --n 400 --b 6 --c 1 --fixation --trials 200
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import SimulationConfig, load_config
from .simulation import SimulationSession

# flag name -> (config section, field)
OVERRIDES = {
    'topology': ('graph', 'topology'),
    'n': ('graph', 'N'),
    'k': ('graph', 'k'),
    'p': ('graph', 'p'),
    'm0': ('graph', 'm0'),
    'm': ('graph', 'm'),
    'seed': ('graph', 'seed'),
    'rule': ('dynamics', 'rule'),
    'intensity': ('dynamics', 'intensity'),
    'mu': ('dynamics', 'mu'),
    'init_c': ('dynamics', 'init_c'),
    'trials': ('fixation', 'trials'),
    'max_steps': ('fixation', 'max_steps'),
    'workers': ('fixation', 'workers'),
}


def build_parser():
    parser = argparse.ArgumentParser(
        description="Evolutionary game dynamics on graphs (DB / BD / Fermi imitation)"
    )
    parser.add_argument("--config", "-c", type=Path, default=None,
                        help="Path to YAML configuration file")
    parser.add_argument("--steps", type=int, default=None,
                        help="Ticks to run on a random initial population")
    parser.add_argument("--fixation", action="store_true",
                        help="Run a fixation batch instead of stepping")

    graph = parser.add_argument_group("graph")
    graph.add_argument("--topology", choices=["ring", "lattice", "erdos-renyi", "barabasi-albert"])
    graph.add_argument("--n", type=int, help="Number of nodes")
    graph.add_argument("--k", type=int, help="Ring degree (even)")
    graph.add_argument("--p", type=float, help="Erdos-Renyi edge probability")
    graph.add_argument("--m0", type=int, help="Barabasi-Albert seed clique size")
    graph.add_argument("--m", type=int, help="Barabasi-Albert edges per new node")
    graph.add_argument("--seed", type=int, help="Random seed")

    dyn = parser.add_argument_group("dynamics")
    dyn.add_argument("--b", type=float, help="Donation game benefit")
    dyn.add_argument("--c", dest="cost", type=float, help="Donation game cost")
    dyn.add_argument("--matrix", type=float, nargs=4, metavar=("R", "S", "T", "P"),
                     help="Explicit payoff matrix")
    dyn.add_argument("--rule", choices=["DB", "BD", "IM"])
    dyn.add_argument("--intensity", type=float, help="Selection intensity w (beta for IM)")
    dyn.add_argument("--mu", type=float, help="Mutation rate")
    dyn.add_argument("--init-c", dest="init_c", type=float, help="Initial cooperator fraction")

    fix = parser.add_argument_group("fixation")
    fix.add_argument("--trials", type=int)
    fix.add_argument("--max-steps", dest="max_steps", type=int)
    fix.add_argument("--workers", type=int)

    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Suppress output except errors")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Debug logging")
    return parser


def apply_overrides(config, args):
    """
    Copy command-line flags that were given onto the config sections.

    Args:
        config (SimulationConfig): base configuration
        args (argparse.Namespace): parsed flags
    Returns:
        SimulationConfig
    """
    for flag, (section, name) in OVERRIDES.items():
        value = getattr(args, flag)
        if value is not None:
            setattr(getattr(config, section), name, value)
    if args.matrix is not None:
        d = config.dynamics
        d.use_donation = False
        d.R, d.S, d.T, d.P = args.matrix
    elif args.b is not None or args.cost is not None:
        d = config.dynamics
        d.use_donation = True
        if args.b is not None:
            d.b = args.b
        if args.cost is not None:
            d.c = args.cost
    if args.steps is not None:
        config.steps = args.steps
    return config


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Load and validate config
    try:
        config = load_config(args.config) if args.config else SimulationConfig()
    except FileNotFoundError:
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    config = apply_overrides(config, args)
    is_valid, error = config.validate()
    if not is_valid:
        print(f"Error: Invalid configuration: {error}", file=sys.stderr)
        return 1

    try:
        session = SimulationSession(config.graph, config.dynamics)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(session.network.describe())

    if args.fixation:
        fix = config.fixation
        result = session.run_fixation(fix.trials, fix.max_steps, fix.base_seed, workers=fix.workers)
        print(result.summary())
    else:
        session.step(config.steps)
        if not args.quiet:
            s = session.summary()
            print(f"t={s['t']} cooperators={s['cooperators']}/{s['N']} ({s['coop_rate']:.3f})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
