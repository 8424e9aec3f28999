# src/pierce_seci/simulate/parameters.py
# Pair the sampled marginals index-wise into one parameter record per draw.

from dataclasses import dataclass
from typing import Dict, NamedTuple, Tuple

import numpy as np
import pandas as pd

from ..errors import DimensionMismatch


class ParameterDraw(NamedTuple):
    """Biological parameters of one Monte Carlo draw (rates per day)."""
    acquisition_rate: float      # alpha, vector acquires from C or I hosts
    inoculation_rate: float      # beta, infectious vector inoculates S host
    latency_rate: float          # delta, E -> C
    incubation_rate: float       # gamma, C -> I
    vector_recovery_rate: float  # mu, V -> U
    vector_preference: float     # p, weight of I hosts in vector feeding
    host_recovery_rate: float    # a, E/C/I -> S


PARAMETER_NAMES = ParameterDraw._fields


@dataclass(frozen=True)
class ParameterSet:
    """Ordered, immutable sequence of draws for one scenario."""
    scenario: str
    draws: Tuple[ParameterDraw, ...]

    def __len__(self):
        return len(self.draws)

    def __iter__(self):
        return iter(self.draws)

    def __getitem__(self, i):
        return self.draws[i]

    def column(self, name: str) -> np.ndarray:
        if name not in PARAMETER_NAMES:
            raise KeyError(name)
        return np.array([getattr(d, name) for d in self.draws], dtype=float)

    def columns(self) -> Dict[str, np.ndarray]:
        return {name: self.column(name) for name in PARAMETER_NAMES}

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame(list(self.draws), columns=list(PARAMETER_NAMES))
        df.insert(0, "draw_id", np.arange(len(self.draws)))
        return df


def build_parameter_set(marginals, scenario="scenario", nmin=None):
    """Zip named marginal vectors into a ParameterSet.

    Args:
        marginals (dict): parameter name -> 1D array, one entry per name in
            PARAMETER_NAMES
        scenario (str): label carried by the set
        nmin (int, optional): required length of every marginal
    Returns:
        ParameterSet
    Raises:
        ValueError: a parameter is missing or unknown
        DimensionMismatch: marginals differ in length (or differ from nmin)
    """
    missing = [n for n in PARAMETER_NAMES if n not in marginals]
    if missing:
        raise ValueError(f"Missing marginals for {missing}")
    unknown = [n for n in marginals if n not in PARAMETER_NAMES]
    if unknown:
        raise ValueError(f"Unknown parameters {unknown}")

    vectors = {n: np.asarray(marginals[n], dtype=float) for n in PARAMETER_NAMES}
    for n, v in vectors.items():
        if v.ndim != 1:
            raise DimensionMismatch(f"{n}: marginal must be 1D, got shape {v.shape}")

    lengths = {n: v.size for n, v in vectors.items()}
    if len(set(lengths.values())) != 1:
        raise DimensionMismatch(f"Marginal lengths differ: {lengths}")
    if nmin is not None and vectors[PARAMETER_NAMES[0]].size != nmin:
        raise DimensionMismatch(f"Marginals have length {vectors[PARAMETER_NAMES[0]].size}, expected {nmin}")

    draws = tuple(
        ParameterDraw(*(float(x) for x in row))
        for row in zip(*(vectors[n] for n in PARAMETER_NAMES))
    )
    return ParameterSet(scenario=scenario, draws=draws)
