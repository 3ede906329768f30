"""Benchmark mode.

For every instance file it reports

* the cost and construction time of both start heuristics (bidirectional and
  left-only),
* ``runs`` independent tabu search runs: best cost, relative gap to the known
  optimum, average cost, average and maximum run time.

Everything is persisted as a single JSON document.
"""
from __future__ import annotations

import json
import logging
import os
import random
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from jssp_tabu.construction import CONSTRUCTIONS
from jssp_tabu.models import ProblemInstance
from jssp_tabu.parser import load_instance
from jssp_tabu.search import TabuSearchParams, tabu_search
from jssp_tabu.solution import Solution

from .common import list_instance_files

logger = logging.getLogger("jssp.benchmark")


def _avg(vals: List[float]) -> Optional[float]:
    return sum(vals) / len(vals) if vals else None


def compare_constructions(instance: ProblemInstance, repeats: int = 1) -> Dict[str, Dict[str, float]]:
    """Cost and mean build time (seconds) of every construction heuristic."""
    block: Dict[str, Dict[str, float]] = {}
    for name, builder in CONSTRUCTIONS.items():
        t0 = time.perf_counter()
        cost = 0.0
        for _ in range(max(1, repeats)):
            cost = Solution(instance, builder(instance)).cost
        block[name] = {"cost": cost, "time": (time.perf_counter() - t0) / max(1, repeats)}
    return block


def benchmark_instance(
    instance_path: str,
    runs: int,
    params: TabuSearchParams,
    rng: random.Random,
) -> Dict[str, Any]:
    """Benchmark a single instance file and return its report entry."""
    instance = load_instance(instance_path)
    constructions = compare_constructions(instance, repeats=runs)

    costs: List[float] = []
    times: List[float] = []
    for _ in range(runs):
        result = tabu_search(instance, params, rng=rng)
        costs.append(result.best_cost)
        times.append(result.elapsed)

    best = min(costs) if costs else None
    gap = None
    if best is not None and instance.optimal_cost:
        gap = (best - instance.optimal_cost) / instance.optimal_cost * 100
    entry = {
        "instance": os.path.basename(instance_path),
        "jobs": instance.jobs_number,
        "machines": instance.machines_number,
        "optimum": instance.optimal_cost,
        "constructions": constructions,
        "tabu": {
            "runs": runs,
            "costs": costs,
            "best": best,
            "gap_pct": gap,
            "avg_cost": _avg(costs),
            "avg_time": _avg(times),
            "max_time": max(times) if times else None,
        },
    }
    logger.info(
        "Benchmark %s: bidir=%s left=%s tabu best=%s gap=%s avg=%s",
        entry["instance"],
        constructions["bidirectional"]["cost"],
        constructions["left"]["cost"],
        best,
        "n/a" if gap is None else f"{gap:.2f}%",
        entry["tabu"]["avg_cost"],
    )
    return entry


def run_benchmark(
    instance_path: str,
    runs: int,
    params: TabuSearchParams,
    rng: random.Random,
    out_dir: str,
) -> Dict[str, Any]:
    """Benchmark a file or every file of a directory; write the JSON report.

    Returns:
        The JSON payload (also saved as ``benchmark_results_<timestamp>.json``
        inside ``out_dir``).
    """
    if runs < 1:
        raise ValueError("runs must be >= 1")
    files = list_instance_files(instance_path)
    if not files:
        raise ValueError(f"No instance files found in {instance_path}")
    entries = [benchmark_instance(f, runs, params, rng) for f in files]

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    payload = {
        "source": instance_path,
        "timestamp": stamp,
        "params": {
            "max_iter": params.max_iter,
            "delta": params.delta,
            "safety_factor": params.safety_factor,
            "neighborhood": params.neighborhood.value,
            "construction": params.construction,
        },
        "instances": entries,
    }
    os.makedirs(out_dir, exist_ok=True)
    results_path = os.path.join(out_dir, f"benchmark_results_{stamp}.json")
    with open(results_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    logger.info("Saved benchmark results JSON to %s", results_path)
    return payload
