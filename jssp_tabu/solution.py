"""Solution = instance + schedule, with a lazily computed critical path.

A solution never mutates its schedule after creation; neighbors are new
solutions built on a copied schedule. The critical path is therefore
computed at most once per solution.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from jssp_tabu.critical_path import CriticalPath, compute_critical_path, round_half_up
from jssp_tabu.models import Operation, ProblemInstance
from jssp_tabu.schedule import Schedule


class Solution:
    __slots__ = ("data", "schedule", "_critical_path")

    def __init__(self, data: ProblemInstance, schedule: Schedule) -> None:
        self.data = data
        self.schedule = schedule
        self._critical_path: Optional[CriticalPath] = None

    @property
    def critical_path(self) -> CriticalPath:
        if self._critical_path is None:
            self._critical_path = compute_critical_path(self.data, self.schedule)
        return self._critical_path

    @property
    def longest_path(self) -> tuple[Operation, ...]:
        return self.critical_path.path

    @property
    def cost(self) -> float:
        """Makespan of the schedule (critical path length)."""
        return self.critical_path.length

    def earliest_start_times(self) -> list[list[float]]:
        """Earliest start time of every operation, grouped by job."""
        cp = self.critical_path
        return [[cp.earliest_start(op) for op in job] for job in self.data.jobs]

    def format_result(self) -> str:
        """Canonical text result.

        Line 1: ``<jobs> <machines>``; one line per job with the rounded
        earliest start times in job order, each value followed by a space;
        last line: rounded makespan, without a line break. Rounding is
        half-up. This is the layout the external schedule checker reads.
        """
        text = f"{self.data.jobs_number} {self.data.machines_number}\n"
        for starts in self.earliest_start_times():
            text += "".join(f"{round_half_up(s)} " for s in starts) + "\n"
        return text + str(round_half_up(self.cost))

    def save_result(self, path: Union[str, Path]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.format_result())

    def __str__(self) -> str:
        path = " -> ".join(str(op) for op in self.longest_path)
        return f"{self.schedule}\ncost: {self.cost}\npath: {path}"
