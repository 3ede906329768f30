#!/usr/bin/env python3
"""Command line entry point, driven by a YAML/JSON configuration file.

Example config::

    instance: tests/fixtures/ft06
    mode: single            # single | benchmark
    seed: 42
    runs: 1
    log_level: INFO
    tabu:
      max_iter: 1200
      delta: 800
      safety_factor: 5
      neighborhood: n1      # n1 | na (experimental)
      construction: bidirectional   # bidirectional | left
    output:
      result_file: results/ft06.txt
      charts_dir: charts
      trace_file: null
"""

import argparse
import logging
import random
from typing import Any, Dict

from jssp_tabu.modes.benchmark import run_benchmark
from jssp_tabu.modes.common import load_config, params_from_config
from jssp_tabu.modes.single import run_single


def main(cfg: Dict[str, Any]) -> None:
    logger = logging.getLogger("jssp")

    instance_path = cfg.get("instance")
    if not instance_path:
        raise ValueError("Missing 'instance' key in config")
    mode = cfg.get("mode", "single")
    runs = int(cfg.get("runs", 1))
    seed = cfg.get("seed")
    rng = random.Random(seed) if seed is not None else random.Random()
    params = params_from_config(cfg)
    out_cfg = cfg.get("output", {}) if isinstance(cfg.get("output"), dict) else {}

    logger.info(
        "Mode=%s seed=%s runs=%d neighborhood=%s construction=%s",
        mode,
        seed,
        runs,
        params.neighborhood.value,
        params.construction,
    )
    if mode == "single":
        result = run_single(
            instance_path,
            params,
            rng,
            runs=runs,
            result_file=out_cfg.get("result_file"),
            charts_dir=out_cfg.get("charts_dir"),
            trace_file=out_cfg.get("trace_file"),
        )
        print(result.best.format_result())
    elif mode == "benchmark":
        run_benchmark(
            instance_path,
            runs,
            params,
            rng,
            out_dir=out_cfg.get("benchmark_dir", "results"),
        )
    else:
        raise ValueError(f"Unknown mode: {mode}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="JSSP tabu search (config only)")
    parser.add_argument(
        "--config",
        required=True,
        help="Path to the YAML/JSON configuration file",
    )
    args = parser.parse_args()
    config = load_config(args.config)

    log_level = config.get("log_level", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    main(config)
