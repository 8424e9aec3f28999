# src/pierce_seci/analytic/r0.py
"""
Closed-form basic reproduction number of the host-vector SECI model

    R0 = sqrt( alpha beta delta (a + gamma p) M / (a mu (a + delta) (a + gamma) N) )

evaluated per parameter draw, summarised as a median with a credible
interval, and swept over vector density M.
"""

# Store type annotations as strings instead of evaluating them immediately.
from __future__ import annotations

import logging
from typing import Dict, Optional

import numpy as np
import pandas as pd

from ..errors import InvalidParameterDomain
from ..simulate.aggregate import credible_interval
from ..simulate.parameters import PARAMETER_NAMES, ParameterSet

logger = logging.getLogger(__name__)

N_HOSTS = 100.0
N_VECTORS = 200.0


def _as_columns(params) -> Dict[str, np.ndarray]:
    """Accept a ParameterSet, a single ParameterDraw or a dict of arrays."""
    if isinstance(params, ParameterSet):
        return params.columns()
    if hasattr(params, "_fields"):
        return {n: np.asarray(getattr(params, n), dtype=float) for n in PARAMETER_NAMES}
    return {n: np.asarray(params[n], dtype=float) for n in PARAMETER_NAMES}


def r0_radicand(params, n_hosts=N_HOSTS, n_vectors=N_VECTORS) -> np.ndarray:
    """Expression under the square root; broadcasts over draws and M.

    Raises:
        InvalidParameterDomain: negative inputs, non-positive host count or an
            undefined (non-finite) ratio
    """
    c = _as_columns(params)
    n_hosts = np.asarray(n_hosts, dtype=float)
    n_vectors = np.asarray(n_vectors, dtype=float)

    for name, v in c.items():
        if np.any(v < 0) or not np.all(np.isfinite(v)):
            raise InvalidParameterDomain(f"{name} must be finite and >= 0")
    if np.any(n_hosts <= 0):
        raise InvalidParameterDomain("host population N must be > 0")
    if np.any(n_vectors < 0):
        raise InvalidParameterDomain("vector population M must be >= 0")

    alpha = c["acquisition_rate"]
    beta = c["inoculation_rate"]
    delta = c["latency_rate"]
    gamma = c["incubation_rate"]
    mu = c["vector_recovery_rate"]
    p = c["vector_preference"]
    a = c["host_recovery_rate"]

    num = alpha * beta * delta * (a + gamma * p) * n_vectors
    den = a * mu * (a + delta) * (a + gamma) * n_hosts
    with np.errstate(divide="ignore", invalid="ignore"):
        radicand = num / den

    if not np.all(np.isfinite(radicand)):
        raise InvalidParameterDomain("R0 undefined: host recovery or vector recovery rate is zero")
    if np.any(radicand < 0):
        raise InvalidParameterDomain("R0 radicand is negative")
    return radicand


def compute_r0(params, n_hosts=N_HOSTS, n_vectors=N_VECTORS):
    """R0 for every draw (or a float for a single ParameterDraw)."""
    r0 = np.sqrt(r0_radicand(params, n_hosts=n_hosts, n_vectors=n_vectors))
    if r0.ndim == 0:
        return float(r0)
    return r0


def summarise_r0(r0_values, level: float = 0.95) -> Dict[str, float]:
    """Median and credible bounds of an R0 distribution."""
    r0_values = np.atleast_1d(np.asarray(r0_values, dtype=float))
    lower, upper = credible_interval(r0_values, level=level)
    return {
        "median": float(np.median(r0_values)),
        "ci_lower": float(lower),
        "ci_upper": float(upper),
    }


def r0_summary_table(parameter_sets, n_hosts=N_HOSTS, n_vectors=N_VECTORS, level=0.95) -> pd.DataFrame:
    """One row per scenario: scenario, median, ci_lower, ci_upper."""
    rows = []
    for ps in parameter_sets:
        summary = summarise_r0(compute_r0(ps, n_hosts=n_hosts, n_vectors=n_vectors), level=level)
        logger.info(
            "%s: R0 median %.3f (%.3f, %.3f)",
            ps.scenario, summary["median"], summary["ci_lower"], summary["ci_upper"],
        )
        rows.append({"scenario": ps.scenario, **summary})
    return pd.DataFrame(rows, columns=["scenario", "median", "ci_lower", "ci_upper"])


def r0_vs_vector_density(
    parameter_set,
    m_values: Optional[np.ndarray] = None,
    n_hosts: float = N_HOSTS,
    level: float = 0.95,
) -> pd.DataFrame:
    """Sweep R0 over vector density with each draw's parameters held fixed.

    Returns:
        pd.DataFrame with columns M, median, ci_lower, ci_upper (one row per M)
    """
    if m_values is None:
        m_values = np.arange(0, 201, dtype=float)
    m_values = np.asarray(m_values, dtype=float)
    if m_values.ndim != 1 or m_values.size == 0:
        raise ValueError("m_values must be a non-empty 1D sequence")

    # draws down the rows, M across the columns
    columns = {n: np.atleast_1d(v)[:, None] for n, v in _as_columns(parameter_set).items()}
    radicand = r0_radicand(columns, n_hosts=n_hosts, n_vectors=m_values[None, :])
    r0 = np.sqrt(radicand)
    lower, upper = credible_interval(r0, level=level, axis=0)

    return pd.DataFrame({
        "M": m_values,
        "median": np.median(r0, axis=0),
        "ci_lower": lower,
        "ci_upper": upper,
    })
