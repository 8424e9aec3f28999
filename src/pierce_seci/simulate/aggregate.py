# src/pierce_seci/simulate/aggregate.py
"""
Summaries across Monte Carlo draws.

Quantiles use linear interpolation between order statistics (Hyndman & Fan
type 7, numpy's ``method="linear"``): for n sorted values x_1..x_n the q-th
quantile sits at h = (n - 1) q, i.e. x_{floor(h)+1} + (h - floor(h)) (x_{floor(h)+2} - x_{floor(h)+1}).
"""

import numpy as np
import pandas as pd


def interval_bounds(level=0.95):
    """Lower and upper quantile of a two-sided interval, e.g. 0.95 -> (0.025, 0.975)."""
    if not 0.0 < level < 1.0:
        raise ValueError("level must be in (0, 1)")
    tail = (1.0 - level) / 2.0
    return tail, 1.0 - tail


def credible_interval(samples, level=0.95, axis=0):
    """Type-7 quantile bounds of a two-sided credible interval along ``axis``."""
    samples = np.asarray(samples, dtype=float)
    if samples.shape[axis] == 0:
        raise ValueError("No samples to summarise")
    lo, hi = interval_bounds(level)
    bounds = np.quantile(samples, [lo, hi], axis=axis, method="linear")
    return bounds[0], bounds[1]


def aggregate_trajectories(batch, level=0.95):
    """Mean and credible band of every reported variable at every time point.

    Args:
        batch (BatchResult): trajectories of one scenario
        level (float): credible level of the two-sided band
    Returns:
        pd.DataFrame with columns time, then mean_X, ci_lower_X, ci_upper_X
        for each reported variable X
    """
    if batch.n_success == 0:
        raise ValueError("No successful trajectories to aggregate")

    data = {"time": np.asarray(batch.times, dtype=float)}
    for name in batch.variables:
        values = batch.variable(name)
        lower, upper = credible_interval(values, level=level, axis=0)
        data[f"mean_{name}"] = values.mean(axis=0)
        data[f"ci_lower_{name}"] = lower
        data[f"ci_upper_{name}"] = upper
    return pd.DataFrame(data)
