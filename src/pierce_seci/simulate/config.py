# src/pierce_seci/simulate/config.py
"""
Run configuration and the default parameter distributions for both host
genotypes.

Distributions are plain dicts with a ``dist`` name and its parameters:
    {"dist": "normal", "mean": m, "sd": s}
    {"dist": "uniform", "low": lo, "high": hi}
    {"dist": "constant", "value": v}
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

from .seci_model import INITIAL_STATE, StateVector

SCENARIOS = ("wild_type", "defended")

# Rates are per day
WILD_TYPE_PARAMS = {
    "acquisition_rate": {"dist": "normal", "mean": 0.222, "sd": 0.05},
    "inoculation_rate": {"dist": "normal", "mean": 0.0778, "sd": 0.02},
    "latency_rate": {"dist": "constant", "value": 0.25},
    "incubation_rate": {"dist": "uniform", "low": 0.0087, "high": 0.0175},
    "vector_recovery_rate": {"dist": "normal", "mean": 0.0833, "sd": 0.01},
    "vector_preference": {"dist": "normal", "mean": 0.458, "sd": 0.1},
    "host_recovery_rate": {"dist": "constant", "value": 0.01},
}

# Transgenic hosts: vectors acquire less from them, inoculation succeeds
# less often and symptoms develop more slowly
DEFENDED_PARAMS = {
    "acquisition_rate": {"dist": "normal", "mean": 0.089, "sd": 0.03},
    "inoculation_rate": {"dist": "normal", "mean": 0.0556, "sd": 0.02},
    "latency_rate": {"dist": "constant", "value": 0.25},
    "incubation_rate": {"dist": "uniform", "low": 0.0044, "high": 0.0088},
    "vector_recovery_rate": {"dist": "normal", "mean": 0.0833, "sd": 0.01},
    "vector_preference": {"dist": "normal", "mean": 0.229, "sd": 0.08},
    "host_recovery_rate": {"dist": "constant", "value": 0.01},
}


def default_distribution_params():
    return {
        "wild_type": {k: dict(v) for k, v in WILD_TYPE_PARAMS.items()},
        "defended": {k: dict(v) for k, v in DEFENDED_PARAMS.items()},
    }


@dataclass
class SimConfig:
    nsim: int = 10000
    nmin: int = 1000
    time_horizon: float = 1500.0
    time_step: float = 2.0
    initial_state: StateVector = INITIAL_STATE
    distribution_params: Dict[str, Dict[str, dict]] = field(default_factory=default_distribution_params)
    seed: Optional[int] = 42
    ci_level: float = 0.95
    variables: Tuple[str, ...] = ("I", "V")
    m_max: int = 200
    m_step: int = 1
    method: str = "RK45"
    rtol: float = 1e-6
    atol: float = 1e-8

    @property
    def scenarios(self):
        return tuple(self.distribution_params)

    def times(self):
        return time_grid(self.time_horizon, self.time_step)

    def m_values(self):
        return np.arange(0, self.m_max + self.m_step, self.m_step, dtype=float)


def time_grid(horizon, step):
    """Inclusive grid 0, step, ..., horizon.

    Built from integer multiples of ``step`` so the last point is exactly
    ``horizon`` (0..1500 by 2 gives 751 points).
    """
    if step <= 0:
        raise ValueError("time step must be > 0")
    if horizon <= 0:
        raise ValueError("time horizon must be > 0")
    n_steps = int(round(horizon / step))
    if not np.isclose(n_steps * step, horizon):
        raise ValueError("time horizon must be a multiple of the time step")
    return np.arange(n_steps + 1, dtype=float) * step
