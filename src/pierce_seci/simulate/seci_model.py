# src/pierce_seci/simulate/seci_model.py
# Host-vector SECI model for Pierce's disease.
#
# Hosts move S -> E -> C -> I and recover back to S at rate a from every
# infected class. Vectors move U -> V when feeding on colonized or infective
# hosts and lose infectivity at rate mu. There are no births or deaths, so
# N = S+E+C+I and M = U+V are conserved.

from typing import NamedTuple

import numpy as np

STATE_NAMES = ("S", "E", "C", "I", "U", "V")


class StateVector(NamedTuple):
    """Host susceptible/exposed/colonized/infective and vector uninfectious/infectious counts."""
    S: float
    E: float
    C: float
    I: float  # noqa: E741
    U: float
    V: float


# N = 100 hosts, M = 200 vectors, one infectious vector
INITIAL_STATE = StateVector(S=100.0, E=0.0, C=0.0, I=0.0, U=199.0, V=1.0)


def host_total(state):
    """N = S + E + C + I; works on a StateVector or an (..., 6) array."""
    y = np.asarray(state, dtype=float)
    return y[..., 0] + y[..., 1] + y[..., 2] + y[..., 3]


def vector_total(state):
    """M = U + V; works on a StateVector or an (..., 6) array."""
    y = np.asarray(state, dtype=float)
    return y[..., 4] + y[..., 5]


def state_index(name):
    """Column of a state variable in the six-compartment state."""
    try:
        return STATE_NAMES.index(name)
    except ValueError:
        raise ValueError(f"Unknown state variable {name!r}; expected one of {STATE_NAMES}") from None


def seci_rhs(t, y, params):
    """Derivative of the six-compartment state.

    Signature follows ``scipy.integrate.solve_ivp`` with the parameter draw
    passed through ``args``.

    Args:
        t (float): time (the system is autonomous, unused)
        y (array-like): current state (S, E, C, I, U, V)
        params (ParameterDraw): biological parameters for this draw
    Returns:
        np.ndarray of shape (6,): (dS, dE, dC, dI, dU, dV)
    """
    S, E, C, I, U, V = y
    alpha = params.acquisition_rate
    beta = params.inoculation_rate
    delta = params.latency_rate
    gamma = params.incubation_rate
    mu = params.vector_recovery_rate
    p = params.vector_preference
    a = params.host_recovery_rate

    # Effective host population seen by a feeding vector; infective hosts
    # are weighted by the vector preference p
    denom = p * I + S + E + C

    # No hosts means no feeding and therefore no transmission
    if denom > 0.0:
        inoculation = beta * S * V / denom
        acquisition = alpha * (p * I + C) * U / denom
    else:
        inoculation = 0.0
        acquisition = 0.0

    dS = a * (E + C + I) - inoculation
    dE = inoculation - (delta + a) * E
    dC = delta * E - a * C - gamma * C
    dI = gamma * C - a * I
    dU = mu * V - acquisition
    dV = acquisition - mu * V

    return np.array([dS, dE, dC, dI, dU, dV], dtype=float)
