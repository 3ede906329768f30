"""Construction heuristics producing the first feasible schedule.

Both heuristics are list-scheduling rules driven by an estimated ready time:

* ``construct_bidirectional`` grows the schedule from both ends, alternating
  one operation placed from the start (earliest ready time first) with one
  operation placed from the end (smallest tail first).
* ``construct_left_only`` performs only the forward steps; cheaper, but the
  resulting schedule is usually worse.

Operations placed from the start precede every operation placed from the end
on the same machine, which keeps the combined machine orders acyclic.
"""

from __future__ import annotations

from typing import Callable, Optional

from jssp_tabu.models import Operation, ProblemInstance
from jssp_tabu.schedule import Schedule


def _pick(candidates: dict[Operation, int]) -> tuple[Operation, int]:
    """Candidate with the smallest ready time; ties broken by ascending id."""
    op = min(candidates, key=lambda o: (candidates[o], o.id))
    return op, candidates[op]


def _schedule_step(
    candidates: dict[Operation, int],
    opposite: dict[Operation, int],
    placed: set[Operation],
    placed_opposite: set[Operation],
    place: Callable[[Operation], int],
    next_in_job: Callable[[Operation], Optional[Operation]],
) -> None:
    op, ready = _pick(candidates)
    place(op)
    del candidates[op]
    placed.add(op)
    opposite.pop(op, None)

    following = next_in_job(op)
    if following is not None and following not in placed_opposite:
        candidates[following] = ready + op.duration

    # Everything still waiting for the same machine now queues behind op.
    for other in candidates:
        if other.machine == op.machine:
            candidates[other] += op.duration


def _construct(data: ProblemInstance, bidirectional: bool) -> Schedule:
    schedule = Schedule(data)
    to_place = data.operations_number - 2
    if to_place == 0:
        return schedule

    left: dict[Operation, int] = {}
    right: dict[Operation, int] = {}
    for job in data.jobs:
        if job:
            left[job[0]] = 0
            right[job[-1]] = 0
    placed_left: set[Operation] = set()
    placed_right: set[Operation] = set()

    while len(placed_left) + len(placed_right) < to_place:
        _schedule_step(
            left,
            right,
            placed_left,
            placed_right,
            schedule.place_left,
            data.job_successor,
        )
        if bidirectional and len(placed_left) + len(placed_right) < to_place:
            _schedule_step(
                right,
                left,
                placed_right,
                placed_left,
                schedule.place_right,
                data.job_predecessor,
            )
    return schedule


def construct_bidirectional(data: ProblemInstance) -> Schedule:
    """Build a complete schedule growing it from both ends."""
    return _construct(data, bidirectional=True)


def construct_left_only(data: ProblemInstance) -> Schedule:
    """Build a complete schedule using forward steps only."""
    return _construct(data, bidirectional=False)


CONSTRUCTIONS: dict[str, Callable[[ProblemInstance], Schedule]] = {
    "bidirectional": construct_bidirectional,
    "left": construct_left_only,
}


def construct(data: ProblemInstance, method: str = "bidirectional") -> Schedule:
    """Dispatch by name: ``"bidirectional"`` or ``"left"``."""
    try:
        builder = CONSTRUCTIONS[method]
    except KeyError:
        raise ValueError(f"Unknown construction method: {method}") from None
    return builder(data)
