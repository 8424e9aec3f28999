# src/pierce_seci/simulate/sampling.py
# Draw parameter values from their estimated distributions and cut them back
# to a fixed number of feasible (non-negative) samples.
#
# Functions:
# - sample_marginal()
#   - Input: a distribution dict, nsim raw draws, nmin kept draws, a numpy Generator.
#   - Output: np.ndarray of exactly nmin non-negative values.
# - truncate_symmetric()
#   - Input: raw normal draws.
#   - Output: draws with negatives removed and the same number of largest values trimmed.

import logging

import numpy as np
from numpy.random import default_rng

from ..errors import InsufficientSamples

logger = logging.getLogger(__name__)

DISTRIBUTIONS = ("normal", "uniform", "constant")


def truncate_symmetric(draws):
    """Drop negative draws, then drop as many of the largest draws.

    Removing the same count from both tails keeps the retained sample
    roughly centred on the original mean. Retained values keep their
    original draw order.

    Args:
        draws (array-like): raw 1D draws
    Returns:
        np.ndarray: the retained draws, in draw order
    """
    draws = np.asarray(draws, dtype=float)
    if draws.ndim != 1:
        raise ValueError("draws must be a 1D sequence")

    feasible = draws[draws >= 0.0]
    n_negative = draws.size - feasible.size
    if n_negative == 0:
        return feasible

    # Rank only to find which largest values to drop; order is restored below
    order = np.argsort(feasible, kind="stable")
    keep = np.ones(feasible.size, dtype=bool)
    keep[order[feasible.size - n_negative:]] = False
    return feasible[keep]


def sample_marginal(spec, nsim, nmin, rng=None, name="parameter"):
    """Sample one marginal distribution down to exactly nmin feasible values.

    Args:
        spec (dict): {"dist": "normal"|"uniform"|"constant", ...params}
        nsim (int): number of raw draws
        nmin (int): number of values returned
        rng (np.random.Generator): random source; a fresh one if None
        name (str): parameter name, used in errors and logs
    Returns:
        np.ndarray (nmin,)
    Raises:
        ValueError, InsufficientSamples
    """
    if nmin < 1:
        raise ValueError("nmin must be >= 1")
    if nsim < nmin:
        raise ValueError("nsim must be >= nmin")
    if rng is None:
        rng = default_rng()

    dist = spec.get("dist")

    if dist == "constant":
        value = float(spec["value"])
        if value < 0:
            raise ValueError(f"{name}: constant value must be >= 0")
        return np.full(nmin, value, dtype=float)

    if dist == "uniform":
        low, high = float(spec["low"]), float(spec["high"])
        if low > high:
            raise ValueError(f"{name}: uniform low must be <= high")
        if low < 0:
            raise ValueError(f"{name}: uniform bounds must be >= 0")
        draws = rng.uniform(low, high, size=nsim)
        # every draw is feasible
        return draws[:nmin]

    if dist == "normal":
        mean, sd = float(spec["mean"]), float(spec["sd"])
        if sd < 0:
            raise ValueError(f"{name}: normal sd must be >= 0")
        draws = rng.normal(mean, sd, size=nsim)
        kept = truncate_symmetric(draws)
        logger.debug(
            "%s: %d of %d draws negative, %d kept after trimming",
            name, (draws < 0).sum(), nsim, kept.size,
        )
        if kept.size < nmin:
            raise InsufficientSamples(name, kept.size, nmin)
        return kept[:nmin]

    raise ValueError(f"{name}: unknown distribution {dist!r}; expected one of {DISTRIBUTIONS}")


def sample_marginals(params, nsim, nmin, rng=None, order=None):
    """Sample every marginal of one scenario.

    Marginals are drawn from the same generator, names listed in ``order``
    first and any others after them, so a seeded generator gives the same
    vectors whatever the key order of ``params``.

    Returns:
        dict: parameter name -> np.ndarray (nmin,)
    """
    if rng is None:
        rng = default_rng()
    if order is None:
        order = ()
    names = [n for n in order if n in params] + [n for n in params if n not in order]
    return {
        name: sample_marginal(params[name], nsim, nmin, rng=rng, name=name)
        for name in names
    }
