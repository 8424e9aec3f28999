from pierce_seci.plotting.plot_scenarios import run_plotting, plot_trajectory_bands
from pierce_seci.simulate.config import SimConfig
from pierce_seci.simulate.simulate_scenarios import run_analysis

import pytest


@pytest.fixture(scope="module")
def result():
    return run_analysis(SimConfig(nsim=100, nmin=5, time_horizon=40.0, time_step=10.0, seed=9))


def test_run_plotting_writes_all_figures(tmp_path, result):
    paths = run_plotting(result, out_dir=tmp_path / "figs")
    assert set(paths) == {"I", "V", "r0_summary", "r0_sensitivity"}
    for path in paths.values():
        assert path.exists()
        assert path.stat().st_size > 0


def test_unknown_variable_raises(tmp_path, result):
    with pytest.raises(ValueError):
        plot_trajectory_bands(result.series, variable="S", save_path=tmp_path / "s.png")


def test_run_plotting_with_custom_level(tmp_path, result):
    paths = run_plotting(result, out_dir=tmp_path, ci_level=0.9)
    assert paths["I"].exists()
    assert paths["V"].exists()
