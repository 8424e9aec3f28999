import numpy as np
import pytest

from pierce_seci.simulate.parameters import ParameterDraw
from pierce_seci.simulate.seci_model import (
    INITIAL_STATE,
    host_total,
    seci_rhs,
    state_index,
    vector_total,
)

PARAMS = ParameterDraw(
    acquisition_rate=0.222,
    inoculation_rate=0.0778,
    latency_rate=0.25,
    incubation_rate=0.0131,
    vector_recovery_rate=0.0833,
    vector_preference=0.458,
    host_recovery_rate=0.01,
)


def test_initial_state_totals():
    assert host_total(INITIAL_STATE) == pytest.approx(100.0)
    assert vector_total(INITIAL_STATE) == pytest.approx(200.0)


def test_derivatives_conserve_hosts_and_vectors():
    rng = np.random.default_rng(0)
    for _ in range(20):
        y = rng.uniform(0, 100, size=6)
        d = seci_rhs(0.0, y, PARAMS)
        assert d[:4].sum() == pytest.approx(0.0, abs=1e-9)
        assert d[4:].sum() == pytest.approx(0.0, abs=1e-9)


def test_initial_derivative():
    d = seci_rhs(0.0, np.asarray(INITIAL_STATE), PARAMS)
    # only the inoculation term is active: beta * S * V / S
    assert d[0] == pytest.approx(-PARAMS.inoculation_rate)
    assert d[1] == pytest.approx(PARAMS.inoculation_rate)
    assert d[2] == pytest.approx(0.0)
    assert d[3] == pytest.approx(0.0)
    assert d[5] == pytest.approx(-PARAMS.vector_recovery_rate)


def test_zero_hosts_has_no_transmission():
    y = np.array([0.0, 0.0, 0.0, 0.0, 199.0, 1.0])
    d = seci_rhs(0.0, y, PARAMS)
    assert np.all(np.isfinite(d))
    assert np.allclose(d[:4], 0.0)
    # vectors only lose infectivity
    assert d[4] == pytest.approx(PARAMS.vector_recovery_rate)
    assert d[5] == pytest.approx(-PARAMS.vector_recovery_rate)


def test_state_index():
    assert state_index("I") == 3
    assert state_index("V") == 5
    with pytest.raises(ValueError):
        state_index("R")
