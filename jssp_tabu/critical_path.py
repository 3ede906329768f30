"""Longest-path evaluation of a schedule on the disjunctive graph.

Graph (weights use the half-duration convention, every arc ``u -> v`` weighs
``d(u)/2 + d(v)/2``; sentinels have duration 0):

* source -> first operation of every job,
* last operation of every job -> sink,
* operation -> its successor inside the job,
* operation -> its successor on the machine, as fixed by the schedule.

The longest source-sink distance equals the makespan, and the distance of an
operation minus half its duration is its earliest start time.

Complexity: O(V + E).
"""

from __future__ import annotations

from dataclasses import dataclass
from math import floor

from jssp_tabu.exceptions import CyclicScheduleError, IncompleteScheduleError
from jssp_tabu.models import Operation, ProblemInstance
from jssp_tabu.schedule import Schedule

NEG_INF = float("-inf")


@dataclass(frozen=True)
class CriticalPath:
    """Result of a longest-path computation.

    Fields:
        path: Operations on the critical path, source first, sink last.
        length: Path length (the makespan / cost).
        distances: Longest distance from the source per operation id.
    """

    path: tuple[Operation, ...]
    length: float
    distances: tuple[float, ...]

    def earliest_start(self, op: Operation) -> float:
        return self.distances[op.id] - op.duration / 2


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded towards +inf."""
    return int(floor(value + 0.5))


def build_adjacency(data: ProblemInstance, schedule: Schedule) -> list[dict[int, float]]:
    """Weighted successor lists indexed by operation id.

    Edge order is fixed: source edges in job order; otherwise job arc first,
    then machine arc. A node reached by both arcs keeps a single entry.
    """
    if not schedule.is_complete():
        raise IncompleteScheduleError("Schedule has empty machine slots")

    adjacency: list[dict[int, float]] = [{} for _ in range(data.operations_number)]
    sink = data.sink
    for job in data.jobs:
        if job:
            adjacency[data.source.id][job[0].id] = job[0].duration / 2

    machine_next = {earlier.id: later for earlier, later in schedule.machine_arcs()}
    for op in data.operations[1:-1]:
        edges = adjacency[op.id]
        following = data.job_successor(op)
        if following is None:
            edges[sink.id] = op.duration / 2
        else:
            edges[following.id] = op.duration / 2 + following.duration / 2
        later = machine_next.get(op.id)
        if later is not None:
            edges.setdefault(later.id, op.duration / 2 + later.duration / 2)
    return adjacency


def topological_order(adjacency: list[dict[int, float]]) -> list[int]:
    """Reverse DFS postorder over all nodes, using an explicit stack.

    Raises:
        CyclicScheduleError: When a back edge (cycle) is found.
    """
    n = len(adjacency)
    # 0 = unvisited, 1 = on the stack, 2 = finished
    state = [0] * n
    postorder: list[int] = []
    for root in range(n):
        if state[root]:
            continue
        state[root] = 1
        stack = [(root, iter(adjacency[root]))]
        while stack:
            node, children = stack[-1]
            for child in children:
                if state[child] == 1:
                    raise CyclicScheduleError(f"Cycle through operations {node} -> {child}")
                if state[child] == 0:
                    state[child] = 1
                    stack.append((child, iter(adjacency[child])))
                    break
            else:
                stack.pop()
                state[node] = 2
                postorder.append(node)
    postorder.reverse()
    return postorder


def compute_critical_path(data: ProblemInstance, schedule: Schedule) -> CriticalPath:
    """Longest source-sink path of ``schedule``.

    Raises:
        IncompleteScheduleError: Schedule has empty slots.
        CyclicScheduleError: Machine orders create a cycle, or an operation
            ends without a finite label.
    """
    adjacency = build_adjacency(data, schedule)
    order = topological_order(adjacency)

    n = data.operations_number
    distance = [NEG_INF] * n
    predecessor: list[int | None] = [None] * n
    distance[data.source.id] = 0.0

    for node in order:
        if distance[node] == NEG_INF:
            continue
        for succ, weight in adjacency[node].items():
            candidate = distance[node] + weight
            if distance[succ] < candidate:
                distance[succ] = candidate
                predecessor[succ] = node

    unreached = [i for i, d in enumerate(distance) if d == NEG_INF]
    if unreached:
        raise CyclicScheduleError(f"Operations without a finite label: {unreached}")

    path_ids = [data.sink.id]
    while path_ids[-1] != data.source.id:
        prev = predecessor[path_ids[-1]]
        if prev is None:
            raise CyclicScheduleError("Critical path does not reach the source")
        path_ids.append(prev)
    path_ids.reverse()

    return CriticalPath(
        path=tuple(data.operations[i] for i in path_ids),
        length=distance[data.sink.id],
        distances=tuple(distance),
    )
