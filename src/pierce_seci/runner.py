#!/usr/bin/env python3
# src/pierce_seci/runner.py: command line runner

import argparse
import logging
import time

from .simulate import simulate_scenarios as sim
from .simulate.config import SimConfig
from .analytic.r0 import r0_summary_table
from .plotting import plot_scenarios as plot


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Pierce's disease SECI Monte Carlo runner")
    sub = p.add_subparsers(dest="cmd", required=True)

    # ---------- simulate ----------
    sim_p = sub.add_parser("simulate", help="Integrate both scenarios and summarise trajectories and R0")
    sim_p.add_argument("--nsim", type=int, default=10000, metavar="NSIM",
                       help="Raw draws per parameter before truncation (default: 10000)")
    sim_p.add_argument("--nmin", type=int, default=1000, metavar="NMIN",
                       help="Draws kept per parameter (default: 1000)")
    sim_p.add_argument("--seed", type=int, default=42, metavar="SEED",
                       help="Master RNG seed (default: 42)")
    sim_p.add_argument("--horizon", type=float, default=1500.0, metavar="DAYS",
                       help="Time horizon in days (default: 1500)")
    sim_p.add_argument("--step", type=float, default=2.0, metavar="DAYS",
                       help="Reporting time step in days (default: 2)")
    sim_p.add_argument("--figs-dir", default="figs", metavar="DIR",
                       help="Directory for figures (default: figs)")
    sim_p.add_argument("--no-plots", action="store_true", help="Skip writing figures")

    # ---------- r0 ----------
    r0_p = sub.add_parser("r0", help="R0 summary only (no integration)")
    r0_p.add_argument("--nsim", type=int, default=10000, metavar="NSIM")
    r0_p.add_argument("--nmin", type=int, default=1000, metavar="NMIN")
    r0_p.add_argument("--seed", type=int, default=42, metavar="SEED")
    r0_p.add_argument("--n-hosts", type=float, default=100.0, metavar="N")
    r0_p.add_argument("--n-vectors", type=float, default=200.0, metavar="M")

    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    t0 = time.perf_counter()

    if args.cmd == "simulate":
        cfg = SimConfig(
            nsim=args.nsim,
            nmin=args.nmin,
            seed=args.seed,
            time_horizon=args.horizon,
            time_step=args.step,
        )
        result = sim.run_analysis(cfg)
        print("R0 summary:")
        print(result.r0_summary.to_string(index=False))
        print("Infective hosts at end of horizon:")
        print(sim.final_state_summary(result, "I").to_string(index=False))
        for scenario, n_failed in result.failures.items():
            print(f"{scenario}: {n_failed} of {cfg.nmin} draws excluded")
        if not args.no_plots:
            paths = plot.run_plotting(result, out_dir=args.figs_dir, ci_level=cfg.ci_level)
            for path in paths.values():
                print("Figure ->", path)

    elif args.cmd == "r0":
        cfg = SimConfig(nsim=args.nsim, nmin=args.nmin, seed=args.seed)
        gens = sim.scenario_generators(cfg.seed, cfg.scenarios)
        sets = [sim.sample_parameter_set(cfg, s, rng=gens[(s, "r0")]) for s in cfg.scenarios]
        table = r0_summary_table(sets, n_hosts=args.n_hosts, n_vectors=args.n_vectors, level=cfg.ci_level)
        print(table.to_string(index=False))

    print(f"Done in {time.perf_counter() - t0:.2f}s")


def cli():
    logging.basicConfig(level=logging.INFO)
    main()


if __name__ == "__main__":
    cli()
