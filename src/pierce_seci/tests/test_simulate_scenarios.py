import numpy as np
import pytest

from pierce_seci.simulate.config import SimConfig, default_distribution_params
from pierce_seci.simulate.simulate_scenarios import (
    final_state_summary,
    run_analysis,
    sample_parameter_set,
    scenario_generators,
)


def small_config(**kwargs):
    """A run that finishes in a few seconds."""
    options = dict(nsim=200, nmin=10, time_horizon=100.0, time_step=10.0, seed=123)
    options.update(kwargs)
    return SimConfig(**options)


@pytest.fixture(scope="module")
def result():
    return run_analysis(small_config())


def test_default_config_matches_reference_run():
    cfg = SimConfig()
    assert cfg.nmin == 1000
    assert cfg.times().size == 751
    assert cfg.m_values()[0] == 0.0
    assert cfg.m_values()[-1] == 200.0
    assert cfg.m_values().size == 201
    assert cfg.scenarios == ("wild_type", "defended")


def test_default_params_are_copies():
    first = default_distribution_params()
    first["wild_type"]["acquisition_rate"]["mean"] = 99.0
    assert default_distribution_params()["wild_type"]["acquisition_rate"]["mean"] == 0.222


def test_sampled_set_has_nmin_non_negative_draws():
    cfg = small_config()
    ps = sample_parameter_set(cfg, "defended", rng=np.random.default_rng(0))
    assert len(ps) == cfg.nmin
    assert ps.scenario == "defended"
    df = ps.to_frame()
    assert (df.drop(columns="draw_id") >= 0).all().all()
    assert np.allclose(df["latency_rate"], 0.25)
    assert np.allclose(df["host_recovery_rate"], 0.01)


def test_generators_are_independent_streams():
    gens = scenario_generators(1, ("wild_type", "defended"))
    assert len(gens) == 4
    a = gens[("wild_type", "trajectories")].random(5)
    b = gens[("wild_type", "r0")].random(5)
    assert not np.allclose(a, b)


def test_series_table(result):
    series = result.series
    assert list(series.columns) == [
        "scenario", "time",
        "mean_I", "ci_lower_I", "ci_upper_I",
        "mean_V", "ci_lower_V", "ci_upper_V",
    ]
    # 11 time points per scenario
    assert len(series) == 22
    assert set(series["scenario"]) == {"wild_type", "defended"}
    assert (series["ci_lower_I"] <= series["ci_upper_I"] + 1e-12).all()
    assert (series[["mean_I", "mean_V"]] >= 0).all().all()


def test_r0_tables(result):
    assert list(result.r0_summary["scenario"]) == ["wild_type", "defended"]
    assert len(result.r0_sensitivity) == 2 * 201
    for _, df in result.r0_sensitivity.groupby("scenario"):
        assert np.all(np.diff(df["median"].to_numpy()) >= 0)


def test_defended_hosts_have_lower_r0(result):
    r0 = result.r0_summary.set_index("scenario")["median"]
    assert r0["defended"] < r0["wild_type"]


def test_no_failures_and_separate_draws(result):
    assert result.failures == {"wild_type": 0, "defended": 0}
    traj = result.trajectory_params["wild_type"].column("acquisition_rate")
    r0 = result.r0_params["wild_type"].column("acquisition_rate")
    assert not np.allclose(traj, r0)


def test_same_seed_same_result(result):
    again = run_analysis(small_config())
    assert np.allclose(again.series["mean_I"], result.series["mean_I"])
    assert np.allclose(again.r0_summary["median"], result.r0_summary["median"])


def test_final_state_summary(result):
    last = final_state_summary(result, "I")
    assert list(last["scenario"]) == ["wild_type", "defended"]
    assert np.allclose(last["time"], 100.0)


def test_reordered_distribution_dict_gives_same_draws():
    cfg = small_config()
    reordered = {
        scenario: dict(reversed(list(params.items())))
        for scenario, params in cfg.distribution_params.items()
    }
    cfg_reordered = small_config(distribution_params=reordered)

    ps = sample_parameter_set(cfg, "wild_type", rng=np.random.default_rng(8))
    ps_reordered = sample_parameter_set(cfg_reordered, "wild_type", rng=np.random.default_rng(8))
    assert ps.draws == ps_reordered.draws
