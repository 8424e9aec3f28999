# src/pierce_seci/simulate/batch_processing.py
#
# Purpose: integrate the SECI model once per parameter draw over a fixed time
# grid and collect the reported variables (I and V by default) of every draw.
#
# Functions:
# - integrate_draw()
#   - Input: one ParameterDraw, the initial state and the time grid.
#   - Output: array (n_times, 6) of the full state at every grid point.
# - generate_batch()
#   - Input: a ParameterSet, the initial state, the time grid.
#   - Output: BatchResult with one trajectory per successful draw and the
#     failed draws with their messages.

import logging
from dataclasses import dataclass, field
from typing import Dict, Tuple

import numpy as np
from scipy.integrate import solve_ivp

from ..errors import IntegrationFailure
from .seci_model import INITIAL_STATE, seci_rhs, state_index

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    times: np.ndarray
    variables: Tuple[str, ...]
    # shape (n_success, n_times, n_variables)
    trajectories: np.ndarray
    # position of each successful draw in the parameter set
    draw_ids: np.ndarray
    failures: Dict[int, str] = field(default_factory=dict)

    @property
    def n_success(self):
        return int(self.trajectories.shape[0])

    @property
    def n_failed(self):
        return len(self.failures)

    @property
    def failure_rate(self):
        total = self.n_success + self.n_failed
        return self.n_failed / total if total else 0.0

    def variable(self, name):
        """(n_success, n_times) array for one reported variable."""
        return self.trajectories[:, :, self.variables.index(name)]


def integrate_draw(
    params,
    y0=INITIAL_STATE,
    t_eval=None,
    method="RK45",
    rtol=1e-6,
    atol=1e-8,
    negative_tol=1e-6,
):
    """Integrate a single draw and report the state on the requested grid.

    The solver steps adaptively; values at ``t_eval`` come from its dense
    output.

    Returns:
        np.ndarray (n_times, 6)
    Raises:
        IntegrationFailure: solver failed, produced non-finite values, or a
            compartment went below -negative_tol
    """
    if t_eval is None:
        raise ValueError("t_eval must be provided")
    t_eval = np.asarray(t_eval, dtype=float)
    if t_eval.ndim != 1 or t_eval.size < 2:
        raise ValueError("t_eval must be a 1D grid with at least two points")

    sol = solve_ivp(
        seci_rhs,
        (t_eval[0], t_eval[-1]),
        np.asarray(y0, dtype=float),
        method=method,
        t_eval=t_eval,
        args=(params,),
        rtol=rtol,
        atol=atol,
    )
    if not sol.success:
        raise IntegrationFailure(f"solver failed: {sol.message}")

    states = sol.y.T
    if states.shape[0] != t_eval.size:
        raise IntegrationFailure(f"solver returned {states.shape[0]} of {t_eval.size} grid points")
    if not np.all(np.isfinite(states)):
        raise IntegrationFailure("non-finite state values")
    if np.any(states < -negative_tol):
        raise IntegrationFailure(f"negative population (min {states.min():.3g})")

    # Round-off below zero
    return np.clip(states, 0.0, None)


def generate_batch(
    parameter_set,
    t_eval,
    y0=INITIAL_STATE,
    variables=("I", "V"),
    method="RK45",
    rtol=1e-6,
    atol=1e-8,
):
    """Integrate every draw of a parameter set independently.

    A draw that fails is logged and recorded in ``failures``; the rest of
    the batch still runs.
    """
    t_eval = np.asarray(t_eval, dtype=float)
    variables = tuple(variables)
    cols = [state_index(v) for v in variables]

    trajectories = []
    draw_ids = []
    failures = {}

    for i, params in enumerate(parameter_set):
        try:
            states = integrate_draw(params, y0=y0, t_eval=t_eval, method=method, rtol=rtol, atol=atol)
        except IntegrationFailure as e:
            logger.warning("Draw %d failed: %s", i, e)
            failures[i] = str(e)
            continue
        trajectories.append(states[:, cols])
        draw_ids.append(i)

    if trajectories:
        traj_arr = np.stack(trajectories)
    else:
        traj_arr = np.zeros((0, t_eval.size, len(variables)))

    result = BatchResult(
        times=t_eval,
        variables=variables,
        trajectories=traj_arr,
        draw_ids=np.asarray(draw_ids, dtype=int),
        failures=failures,
    )
    if result.n_failed:
        logger.warning(
            "%d of %d draws excluded (%.1f%%)",
            result.n_failed, len(parameter_set), 100 * result.failure_rate,
        )
    logger.debug("Integrated trajectories shape: %s", traj_arr.shape)
    return result
