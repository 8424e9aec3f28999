import numpy as np
import pytest

from pierce_seci.errors import IntegrationFailure
from pierce_seci.simulate import batch_processing
from pierce_seci.simulate.batch_processing import generate_batch, integrate_draw
from pierce_seci.simulate.config import SimConfig, time_grid
from pierce_seci.simulate.parameters import ParameterDraw, ParameterSet
from pierce_seci.simulate.seci_model import INITIAL_STATE, host_total, vector_total
from pierce_seci.simulate.simulate_scenarios import sample_parameter_set

REFERENCE = ParameterDraw(
    acquisition_rate=0.222,
    inoculation_rate=0.0778,
    latency_rate=0.25,
    incubation_rate=0.0131,
    vector_recovery_rate=0.0833,
    vector_preference=0.458,
    host_recovery_rate=0.01,
)


def test_default_time_grid():
    t = time_grid(1500, 2)
    assert t.shape == (751,)
    assert t[0] == 0.0
    assert t[-1] == 1500.0
    assert np.allclose(np.diff(t), 2.0)


def test_time_grid_rejects_bad_step():
    with pytest.raises(ValueError):
        time_grid(1500, 0)
    with pytest.raises(ValueError):
        time_grid(10, 3)


def test_single_draw_conserves_populations_and_stays_non_negative():
    t = time_grid(1500, 2)
    states = integrate_draw(REFERENCE, y0=INITIAL_STATE, t_eval=t)

    assert states.shape == (751, 6)
    assert np.all(states >= 0)
    assert np.allclose(host_total(states), 100.0, atol=1e-6)
    assert np.allclose(vector_total(states), 200.0, atol=1e-6)


def test_single_draw_reaches_stable_endpoint():
    t = time_grid(1500, 2)
    I = integrate_draw(REFERENCE, t_eval=t)[:, 3]
    assert np.isfinite(I[-1])
    # last ten days barely move
    assert abs(I[-1] - I[-6]) < 0.1


def test_no_vectors_means_no_spread():
    t = time_grid(100, 10)
    y0 = [100.0, 0.0, 0.0, 0.0, 0.0, 0.0]
    states = integrate_draw(REFERENCE, y0=y0, t_eval=t)
    assert np.allclose(states[:, 0], 100.0)
    assert np.allclose(states[:, 1:], 0.0)


def test_integrate_draw_requires_grid():
    with pytest.raises(ValueError):
        integrate_draw(REFERENCE)


def test_generate_batch_shapes():
    """
    Each draw gives one trajectory restricted to the reported variables.
    """
    ps = ParameterSet("wild_type", (REFERENCE, REFERENCE._replace(inoculation_rate=0.05)))
    t = time_grid(200, 2)
    batch = generate_batch(ps, t_eval=t)

    assert batch.variables == ("I", "V")
    assert batch.trajectories.shape == (2, t.size, 2)
    assert np.array_equal(batch.draw_ids, np.array([0, 1]))
    assert batch.n_failed == 0
    assert batch.failure_rate == 0.0
    assert np.allclose(batch.variable("V")[:, 0], 1.0)
    assert np.allclose(batch.variable("I")[:, 0], 0.0)


def test_failed_draw_is_isolated(monkeypatch):
    """
    A failing draw is recorded and excluded; the other draws still run.
    """
    real_integrate = batch_processing.integrate_draw
    bad = REFERENCE._replace(acquisition_rate=0.5)

    def flaky_integrate(params, **kwargs):
        if params == bad:
            raise IntegrationFailure("solver failed: test")
        return real_integrate(params, **kwargs)

    monkeypatch.setattr(batch_processing, "integrate_draw", flaky_integrate)

    ps = ParameterSet("wild_type", (REFERENCE, bad, REFERENCE))
    batch = generate_batch(ps, t_eval=time_grid(50, 5))

    assert batch.n_success == 2
    assert batch.n_failed == 1
    assert batch.failures == {1: "solver failed: test"}
    assert np.array_equal(batch.draw_ids, np.array([0, 2]))
    assert batch.failure_rate == pytest.approx(1 / 3)


def test_all_draws_failed_gives_empty_batch(monkeypatch):
    def always_fail(params, **kwargs):
        raise IntegrationFailure("negative population")

    monkeypatch.setattr(batch_processing, "integrate_draw", always_fail)
    batch = generate_batch(ParameterSet("defended", (REFERENCE,)), t_eval=time_grid(10, 5))

    assert batch.trajectories.shape == (0, 3, 2)
    assert batch.n_failed == 1
    assert batch.failure_rate == 1.0


@pytest.mark.parametrize("scenario", ["wild_type", "defended"])
def test_sampled_draws_conserve_populations(scenario):
    """
    Host and vector totals hold at every grid point for every sampled draw.
    """
    cfg = SimConfig(nsim=100, nmin=5)
    ps = sample_parameter_set(cfg, scenario, rng=np.random.default_rng(21))
    t = time_grid(1500, 2)
    for params in ps:
        states = integrate_draw(params, t_eval=t)
        assert np.all(states >= 0)
        assert np.allclose(host_total(states), 100.0, rtol=0, atol=1e-6)
        assert np.allclose(vector_total(states), 200.0, rtol=0, atol=1e-6)
