"""
experiments/run_experiments.py

Experiment harness that loads the baseline config, applies scenario overrides,
runs a few replications per scenario, and reports per-stage occupancy
distributions next to the product-form law (1 - rho) rho^n that a tandem line
of exponential stages with Poisson input should follow in steady state.
"""

from __future__ import annotations
import argparse, copy, os
from typing import Dict, List, Optional

import yaml

from experiments.scenarios import SCENARIOS
from tandem.simulation import run_one

ROOT = os.path.dirname(os.path.dirname(__file__))


def load_cfg(path: Optional[str] = None) -> Dict:
    if path is None:
        path = os.path.join(ROOT, "config", "baseline.yaml")
    with open(path, "r") as f:
        return yaml.safe_load(f)


def apply_overrides(cfg: Dict, overrides: Dict) -> Dict:
    """Apply scenario overrides (recursive merge) on top of the base config."""
    new = copy.deepcopy(cfg)

    def _merge(dst: Dict, src: Dict):
        for key, val in src.items():
            if isinstance(val, dict) and isinstance(dst.get(key), dict):
                _merge(dst[key], val)
            else:
                dst[key] = copy.deepcopy(val)

    _merge(new, overrides)
    return new


def product_form_pmf(arrival_rate: float, service_rate: float, levels: int) -> Optional[List[float]]:
    """
    Steady-state P(n) = (1 - rho) rho^n for n < levels, rho = arrival/service.
    Returns None for an unstable stage (rho >= 1), which has no steady state.
    """
    rho = arrival_rate / service_rate
    if rho >= 1.0:
        return None
    return [(1.0 - rho) * rho ** n for n in range(levels)]


def avg_pmf(results: List[Dict], stage: int) -> List[float]:
    """Average one stage's pmf across replications, padding shorter ones with 0."""
    if not results:
        return []
    pmfs = [res["stage_pmf"][stage] for res in results]
    width = max(len(p) for p in pmfs)
    return [
        sum(p[n] if n < len(p) else 0.0 for p in pmfs) / len(pmfs)
        for n in range(width)
    ]


def series(results: List[Dict], key: str) -> List:
    """Collect one summary field from each replication result."""
    return [res[key] for res in results]


def plot_occupancy(name: str, stage_pmfs: List[List[float]], theory: List[Optional[List[float]]], levels: int):
    """
    Persist a PNG with one panel per stage: simulated P(n) as bars and the
    product-form law as a line, so departures from theory stand out.
    """
    if not stage_pmfs:
        return None
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt  # type: ignore

    n_stages = len(stage_pmfs)
    fig, axes = plt.subplots(1, n_stages, figsize=(4.5 * n_stages, 4), squeeze=False)
    for s, ax in enumerate(axes[0]):
        x = list(range(levels))
        sim_vals = [stage_pmfs[s][n] if n < len(stage_pmfs[s]) else 0.0 for n in x]
        ax.bar(x, sim_vals, color="#2563eb", alpha=0.7, label="Simulated")
        if theory[s] is not None:
            ax.plot(x, theory[s], color="#d97706", marker="o", label="(1-rho) rho^n")
        ax.set_xlabel("Jobs at stage (n)")
        ax.set_ylabel("P(n)")
        ax.set_title(f"Stage {s}")
        ax.grid(True, linestyle="--", alpha=0.4)
        ax.legend()
    fig.suptitle(f"{name}: occupancy distribution")
    out_dir = os.path.join(ROOT, "experiments", "output")
    os.makedirs(out_dir, exist_ok=True)
    safe_name = name.lower().replace(" ", "_")
    out_path = os.path.join(out_dir, f"{safe_name}_occupancy.png")
    fig.tight_layout()
    fig.savefig(out_path, dpi=160)
    plt.close(fig)
    return out_path


def run_scenario(cfg: Dict, sc: Dict, replications: int) -> List[Dict]:
    """Run `replications` seeds of one scenario; seeds advance from the scenario seed."""
    sc_base_cfg = apply_overrides(cfg, sc["overrides"])
    scenario_seed = sc_base_cfg.get("sim", {}).get("seed", 0)
    results = []
    for rep in range(replications):
        sc_cfg = copy.deepcopy(sc_base_cfg)
        sc_cfg.setdefault("sim", {})["seed"] = scenario_seed + rep
        results.append(run_one(sc_cfg))
    return results


def report(sc_cfg: Dict, name: str, results: List[Dict], levels: int, plot: bool):
    net = sc_cfg["network"]
    lam = float(net["arrival_rate"])
    rates = [float(mu) for mu in net["service_rates"]]
    print(f"Scenario: {name} (replications={len(results)}, lambda={lam}, mu={rates})")
    print(f"  seeds: {series(results, 'seed')}")
    stage_pmfs = []
    theory = []
    for s, mu in enumerate(rates):
        pmf = avg_pmf(results, s)
        law = product_form_pmf(lam, mu, levels)
        stage_pmfs.append(pmf)
        theory.append(law)
        mean_occ = sum(res["mean_occupancy"][s] for res in results) / len(results)
        util = sum(res["utilization"][s] for res in results) / len(results)
        print(f"  Stage {s}: rho={lam / mu:.3f} mean occupancy={mean_occ:.3f} utilization={util * 100.0:.1f}%")
        if law is None:
            print(f"  [warn] stage {s} is unstable (rho >= 1); no steady-state law to compare")
        print("      n | simulated | theory")
        for n in range(levels):
            sim_p = pmf[n] if n < len(pmf) else 0.0
            th = f"{law[n]:.4f}" if law is not None else "   -  "
            print(f"    {n:3d} |   {sim_p:.4f}  | {th}")
    throughput = sum(series(results, "throughput")) / len(results)
    agg_mean = sum(series(results, "mean_aggregate_occupancy")) / len(results)
    print(f"  Throughput: {throughput:.4f} jobs/time (arrival rate {lam})")
    print(f"  Mean jobs in network: {agg_mean:.3f}")
    if plot:
        path = plot_occupancy(name, stage_pmfs, theory, levels)
        if path:
            print(f"  Occupancy plot saved to: {path}")
    print("-")


def main(argv: Optional[List[str]] = None):
    """Entry point: drive selected scenarios and report occupancy laws."""
    ap = argparse.ArgumentParser(description="Tandem queueing network experiments")
    ap.add_argument("--config", default=None, help="YAML config (default: config/baseline.yaml)")
    ap.add_argument("--scenario", action="append", default=None, help="scenario name; repeatable")
    ap.add_argument("--no-plot", action="store_true", help="skip writing PNG plots")
    args = ap.parse_args(argv)

    cfg = load_cfg(args.config)
    exp_cfg = cfg.get("experiments", {})
    replications = max(1, int(exp_cfg.get("replications", 1)))
    levels = max(1, int(exp_cfg.get("pmf_levels", 8)))
    plot = bool(exp_cfg.get("plot", True)) and not args.no_plot

    sc_index = {sc["name"]: sc for sc in SCENARIOS}
    targets = args.scenario or [sc["name"] for sc in SCENARIOS]
    for sc_name in targets:
        sc = sc_index.get(sc_name)
        if sc is None:
            print(f"[warn] scenario '{sc_name}' not found; skipping.")
            continue
        results = run_scenario(cfg, sc, replications)
        report(apply_overrides(cfg, sc["overrides"]), sc["name"], results, levels, plot)


if __name__ == "__main__":
    main()
