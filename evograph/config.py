"""
Configuration loading and validation for graph evolutionary simulations.

Loads a YAML config and validates every parameter before any graph or
population state is created.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from evograph.evolution import RULE_ALIASES
from evograph.games import PayoffMatrix
from evograph.topology import TOPOLOGY_ALIASES


@dataclass
class GraphConfig:
    """Topology and its parameters."""
    topology: str = "ring"
    N: int = 100
    k: int = 4
    p: float = 0.05
    m0: int = 6
    m: int = 2
    seed: int = 1

    def validate(self) -> tuple[bool, Optional[str]]:
        topology = str(self.topology).lower()
        if topology not in TOPOLOGY_ALIASES:
            return False, f"Unknown topology: {self.topology}"
        topology = TOPOLOGY_ALIASES[topology]
        if self.N < 1:
            return False, "N must be >= 1"
        if topology == "ring":
            if self.k % 2 != 0:
                return False, "k must be even"
            if self.k < 2 or self.k >= self.N:
                return False, "k must satisfy 2 <= k < N"
        elif topology == "lattice":
            L = round(self.N ** 0.5)
            if L * L != self.N:
                return False, "N must be a perfect square for a lattice"
        elif topology == "erdos-renyi":
            if not 0.0 <= self.p <= 1.0:
                return False, "p must lie in [0, 1]"
        else:
            if self.m0 < 2:
                return False, "m0 must be >= 2"
            if self.m < 1 or self.m >= self.m0:
                return False, "m must satisfy 1 <= m < m0"
            if self.N < self.m0:
                return False, "N must be >= m0"
        return True, None

    def params(self) -> dict:
        return {"k": self.k, "p": self.p, "m0": self.m0, "m": self.m}


@dataclass
class DynamicsConfig:
    """Game, update rule and selection parameters."""
    use_donation: bool = True
    b: float = 3.0
    c: float = 1.0
    R: float = 3.0
    S: float = 0.0
    T: float = 5.0
    P: float = 1.0
    rule: str = "DB"
    intensity: float = 0.01
    mu: float = 0.0
    init_c: float = 0.5

    def validate(self) -> tuple[bool, Optional[str]]:
        if str(self.rule).lower() not in RULE_ALIASES:
            return False, f"Unknown update rule: {self.rule}"
        if self.intensity < 0:
            return False, "intensity must be non-negative"
        if not 0.0 <= self.mu <= 1.0:
            return False, "mu must lie in [0, 1]"
        if not 0.0 <= self.init_c <= 1.0:
            return False, "init_c must lie in [0, 1]"
        return True, None

    def matrix(self) -> PayoffMatrix:
        if self.use_donation:
            return PayoffMatrix.donation(self.b, self.c)
        return PayoffMatrix(R=self.R, S=self.S, T=self.T, P=self.P)


@dataclass
class FixationConfig:
    """Monte Carlo fixation batch."""
    trials: int = 200
    max_steps: int = 200000
    base_seed: Optional[int] = None
    workers: int = 1

    def validate(self) -> tuple[bool, Optional[str]]:
        if self.trials < 0:
            return False, "trials must be non-negative"
        if self.max_steps < 0:
            return False, "max_steps must be non-negative"
        if self.workers < 1:
            return False, "workers must be >= 1"
        return True, None


@dataclass
class SimulationConfig:
    """Complete simulation configuration."""
    graph: GraphConfig = field(default_factory=GraphConfig)
    dynamics: DynamicsConfig = field(default_factory=DynamicsConfig)
    fixation: FixationConfig = field(default_factory=FixationConfig)
    steps: int = 0

    def validate(self) -> tuple[bool, Optional[str]]:
        for section_name in ["graph", "dynamics", "fixation"]:
            section = getattr(self, section_name)
            is_valid, error = section.validate()
            if not is_valid:
                return False, f"{section_name}: {error}"
        if self.steps < 0:
            return False, "steps must be non-negative"
        return True, None


def parse_config(raw: dict) -> SimulationConfig:
    """
    Build a SimulationConfig from a parsed YAML mapping.

    Raises:
        ValueError: If config is invalid.
    """
    raw = raw or {}
    try:
        return _build_config(raw)
    except TypeError as e:
        # unknown keys in a section
        raise ValueError(f"Invalid configuration: {e}") from e


def _build_config(raw: dict) -> SimulationConfig:
    graph = GraphConfig(**raw.get("graph", {}))

    # Game is either {donation: {b, c}} or {matrix: {R, S, T, P}}
    dyn_raw = dict(raw.get("dynamics", {}))
    game_raw = dyn_raw.pop("game", {}) or {}
    if "donation" in game_raw and "matrix" in game_raw:
        raise ValueError("Invalid configuration: game must give either donation or matrix, not both")
    if "donation" in game_raw:
        dyn_raw.update(use_donation=True, **game_raw["donation"])
    elif "matrix" in game_raw:
        dyn_raw.update(use_donation=False, **game_raw["matrix"])
    dynamics = DynamicsConfig(**dyn_raw)

    fixation = FixationConfig(**raw.get("fixation", {}))

    config = SimulationConfig(
        graph=graph,
        dynamics=dynamics,
        fixation=fixation,
        steps=raw.get("steps", 0),
    )

    is_valid, error = config.validate()
    if not is_valid:
        raise ValueError(f"Invalid configuration: {error}")
    return config


def load_config(path: Path) -> SimulationConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        path: Path to YAML config file.

    Returns:
        Validated SimulationConfig.

    Raises:
        ValueError: If config is invalid.
        FileNotFoundError: If file doesn't exist.
    """
    with open(path, 'r') as f:
        raw = yaml.safe_load(f)
    return parse_config(raw)
