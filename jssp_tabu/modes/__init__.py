"""Execution modes: single instance runs and benchmarks."""

from jssp_tabu.modes.benchmark import run_benchmark
from jssp_tabu.modes.single import run_single

__all__ = ["run_benchmark", "run_single"]
