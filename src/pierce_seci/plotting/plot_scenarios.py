# src/pierce_seci/plotting/plot_scenarios.py
from pathlib import Path
from typing import Dict, Tuple

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

SCENARIO_COLOURS = {"wild_type": "#d62728", "defended": "#1f77b4"}
SCENARIO_LABELS = {"wild_type": "wild-type", "defended": "defended (transgenic)"}
VARIABLE_LABELS = {
    "S": "Susceptible hosts",
    "E": "Exposed hosts",
    "C": "Colonized hosts",
    "I": "Infective hosts",
    "U": "Uninfectious vectors",
    "V": "Infectious vectors",
}


def _colour(scenario, i):
    return SCENARIO_COLOURS.get(scenario, f"C{i}")


def _save(fig, save_path):
    Path(save_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return Path(save_path)


# ---------- trajectory bands ----------

def plot_trajectory_bands(
    series: pd.DataFrame,
    variable: str = "I",
    save_path: str = "figs/infective_hosts.png",
    ci_level: float = 0.95,
    figsize: Tuple[int, int] = (9, 5),
):
    """Mean over draws with its credible band, one line per scenario."""
    mean_col = f"mean_{variable}"
    if mean_col not in series.columns:
        raise ValueError(f"Series has no column {mean_col!r}")

    fig, ax = plt.subplots(figsize=figsize)
    for i, (scenario, df) in enumerate(series.groupby("scenario", sort=False)):
        colour = _colour(scenario, i)
        label = SCENARIO_LABELS.get(scenario, scenario)
        ax.fill_between(df["time"], df[f"ci_lower_{variable}"], df[f"ci_upper_{variable}"],
                        color=colour, alpha=0.2, linewidth=0)
        ax.plot(df["time"], df[mean_col], color=colour, linewidth=2.0, label=f"{label} mean")

    ax.set_xlabel("Time (days)")
    ax.set_ylabel(VARIABLE_LABELS.get(variable, variable))
    ax.set_title(f"{VARIABLE_LABELS.get(variable, variable)}: mean and {int(ci_level * 100)}% credible interval")
    ax.set_ylim(bottom=0)
    ax.grid(alpha=0.25)
    ax.legend(loc="upper left", fontsize="small")
    return _save(fig, save_path)


# ---------- R0 ----------

def plot_r0_summary(r0_summary: pd.DataFrame, save_path: str = "figs/r0_summary.png"):
    """Median R0 per scenario with credible-interval error bars."""
    fig, ax = plt.subplots(figsize=(6, 5))
    x = np.arange(len(r0_summary))
    med = r0_summary["median"].to_numpy()
    yerr = np.vstack([med - r0_summary["ci_lower"].to_numpy(), r0_summary["ci_upper"].to_numpy() - med])
    colours = [_colour(s, i) for i, s in enumerate(r0_summary["scenario"])]

    ax.bar(x, med, color=colours, alpha=0.6)
    ax.errorbar(x, med, yerr=yerr, fmt="none", ecolor="black", capsize=6)
    ax.axhline(1.0, color="grey", linestyle="--", linewidth=1, label="R0 = 1")
    ax.set_xticks(x)
    ax.set_xticklabels([SCENARIO_LABELS.get(s, s) for s in r0_summary["scenario"]])
    ax.set_ylabel("R0")
    ax.set_title("Basic reproduction number")
    ax.grid(axis="y", alpha=0.3)
    ax.legend()
    return _save(fig, save_path)


def plot_r0_sensitivity(r0_sensitivity: pd.DataFrame, save_path: str = "figs/r0_vs_vectors.png"):
    """Median R0 against vector density M, with credible ribbons."""
    fig, ax = plt.subplots(figsize=(8, 5))
    for i, (scenario, df) in enumerate(r0_sensitivity.groupby("scenario", sort=False)):
        colour = _colour(scenario, i)
        ax.fill_between(df["M"], df["ci_lower"], df["ci_upper"], color=colour, alpha=0.2, linewidth=0)
        ax.plot(df["M"], df["median"], color=colour, linewidth=2, label=SCENARIO_LABELS.get(scenario, scenario))
    ax.axhline(1.0, color="grey", linestyle="--", linewidth=1)
    ax.set_xlabel("Vector density M")
    ax.set_ylabel("R0")
    ax.set_title("R0 sensitivity to vector density")
    ax.grid(alpha=0.3)
    ax.legend(loc="upper left")
    return _save(fig, save_path)


# ---------- public API ----------

def run_plotting(result, out_dir: str = "figs", ci_level: float = 0.95) -> Dict[str, Path]:
    """Write every figure for an AnalysisResult and return their paths."""
    out = Path(out_dir)
    paths = {}
    for variable in ("I", "V"):
        if f"mean_{variable}" in result.series.columns:
            paths[variable] = plot_trajectory_bands(
                result.series, variable=variable,
                save_path=out / f"trajectories_{variable}.png", ci_level=ci_level,
            )
    paths["r0_summary"] = plot_r0_summary(result.r0_summary, save_path=out / "r0_summary.png")
    paths["r0_sensitivity"] = plot_r0_sensitivity(result.r0_sensitivity, save_path=out / "r0_vs_vectors.png")
    return paths
