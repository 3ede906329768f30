"""Single-instance mode.

Runs tabu search ``runs`` times on one instance, keeps the best run, writes the
canonical result file and (optionally) a Gantt chart plus a progress plot of
all runs.
"""
from __future__ import annotations

import logging
import os
import random
from datetime import datetime
from typing import Optional

from jssp_tabu.parser import load_instance
from jssp_tabu.search import SearchResult, TabuSearchParams, tabu_search
from jssp_tabu.visualization import plot_gantt, plot_iteration_progress

logger = logging.getLogger("jssp.single")


def run_single(
    instance_path: str,
    params: TabuSearchParams,
    rng: random.Random,
    runs: int = 1,
    result_file: Optional[str] = None,
    charts_dir: Optional[str] = None,
    trace_file: Optional[str] = None,
) -> SearchResult:
    """Search ``instance_path`` and return the best of ``runs`` results.

    Args:
        instance_path: Instance file in the textual format.
        params: Search hyper-parameters.
        rng: Random generator shared by consecutive runs.
        runs: Number of independent runs (>= 1).
        result_file: Where to write the canonical result (stdout log if None).
        charts_dir: Directory for the Gantt chart / progress plot (skipped if None).
        trace_file: Per-iteration trace of the first run.
    """
    if runs < 1:
        raise ValueError("runs must be >= 1")
    instance = load_instance(instance_path)
    logger.info(
        "Instance: %s jobs=%d machines=%d ops=%d optimum=%s",
        instance_path,
        instance.jobs_number,
        instance.machines_number,
        instance.operations_number - 2,
        instance.optimal_cost,
    )
    results: list[SearchResult] = []
    histories: dict[str, list[float]] = {}
    for r_idx in range(runs):
        result = tabu_search(
            instance,
            params,
            rng=rng,
            trace_file=trace_file if r_idx == 0 else None,
        )
        histories[f"run_{r_idx}"] = result.history
        logger.info(
            "Run %d/%d: start=%s best=%s iters=%d (%.3fs)",
            r_idx + 1,
            runs,
            result.initial_cost,
            result.best_cost,
            result.iterations,
            result.elapsed,
        )
        results.append(result)
    # first run wins ties
    best = min(results, key=lambda r: r.best_cost)

    text = best.best.format_result()
    if result_file:
        os.makedirs(os.path.dirname(result_file) or ".", exist_ok=True)
        best.best.save_result(result_file)
        logger.info("Saved result to %s", result_file)
    else:
        logger.info("Result:\n%s", text)

    if charts_dir:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        name = os.path.basename(instance_path)
        plot_gantt(
            best.best,
            save_path=os.path.join(charts_dir, f"gantt_tabu_c{best.best_cost:g}_{name}_{stamp}.png"),
        )
        plot_iteration_progress(
            histories,
            save_path=os.path.join(charts_dir, f"tabu_progress_{name}_{stamp}.png"),
        )
    return best
