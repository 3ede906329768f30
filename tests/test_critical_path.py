import os

import pytest

from jssp_tabu.construction import construct_bidirectional, construct_left_only
from jssp_tabu.critical_path import (
    build_adjacency,
    compute_critical_path,
    round_half_up,
    topological_order,
)
from jssp_tabu.exceptions import CyclicScheduleError, IncompleteScheduleError
from jssp_tabu.models import ProblemInstance
from jssp_tabu.parser import load_instance
from jssp_tabu.schedule import Schedule
from jssp_tabu.solution import Solution

FT06 = os.path.join(os.path.dirname(__file__), "fixtures", "ft06")


def small_instance() -> ProblemInstance:
    jobs = [
        [(0, 3), (1, 2)],
        [(1, 2), (0, 4)],
    ]
    return ProblemInstance.from_jobs(jobs, machines_number=2)


def test_half_duration_edge_weights():
    data = small_instance()
    schedule = Schedule.from_sequences(data, [[1, 4], [3, 2]])
    adjacency = build_adjacency(data, schedule)
    assert adjacency[0] == {1: 1.5, 3: 1.0}
    assert adjacency[1] == {2: 2.5, 4: 3.5}  # job arc first, then machine arc
    assert adjacency[3] == {4: 3.0, 2: 2.0}
    assert adjacency[2] == {5: 1.0}
    assert adjacency[4] == {5: 2.0}
    assert adjacency[5] == {}


def test_toy_critical_path():
    data = small_instance()
    schedule = Schedule.from_sequences(data, [[1, 4], [3, 2]])
    cp = compute_critical_path(data, schedule)
    assert [op.id for op in cp.path] == [0, 1, 4, 5]
    assert cp.length == 7.0
    assert cp.distances[4] == 5.0
    assert cp.distances[2] == 4.0
    assert [cp.earliest_start(op) for op in data.operations[1:-1]] == [0.0, 3.0, 0.0, 3.0]


def test_swapped_toy_critical_path():
    data = small_instance()
    schedule = Schedule.from_sequences(data, [[4, 1], [3, 2]])
    cp = compute_critical_path(data, schedule)
    assert [op.id for op in cp.path] == [0, 3, 4, 1, 2, 5]
    assert cp.length == 11.0


def test_topological_order_respects_edges():
    data = load_instance(FT06)
    adjacency = build_adjacency(data, construct_bidirectional(data))
    order = topological_order(adjacency)
    position = {node: i for i, node in enumerate(order)}
    assert sorted(order) == list(range(data.operations_number))
    for node, succs in enumerate(adjacency):
        for succ in succs:
            assert position[node] < position[succ]


def test_cycle_is_reported():
    data = small_instance()
    # op3 -> op4 (job), op4 -> op1 (machine), op1 -> op2 (job), op2 -> op3 (machine)
    schedule = Schedule.from_sequences(data, [[4, 1], [2, 3]])
    with pytest.raises(CyclicScheduleError):
        compute_critical_path(data, schedule)


def test_incomplete_schedule_is_reported():
    data = small_instance()
    with pytest.raises(IncompleteScheduleError):
        compute_critical_path(data, Schedule(data))


def test_cost_is_idempotent():
    data = load_instance(FT06)
    solution = Solution(data, construct_bidirectional(data))
    first = solution.cost
    assert solution.cost == first
    assert solution.critical_path is solution.critical_path
    assert compute_critical_path(data, solution.schedule).length == first


def test_path_runs_from_source_to_sink():
    data = load_instance(FT06)
    for builder in (construct_bidirectional, construct_left_only):
        solution = Solution(data, builder(data))
        path = solution.longest_path
        assert path[0] == data.source
        assert path[-1] == data.sink
        assert solution.cost >= data.optimal_cost
        # path length equals the sum of its full durations
        assert sum(op.duration for op in path) == solution.cost


def test_earliest_starts_are_feasible():
    data = load_instance(FT06)
    solution = Solution(data, construct_bidirectional(data))
    cp = solution.critical_path
    for job in data.jobs:
        for first, second in zip(job, job[1:]):
            assert cp.earliest_start(first) + first.duration <= cp.earliest_start(second)
    for earlier, later in solution.schedule.machine_arcs():
        assert cp.earliest_start(earlier) + earlier.duration <= cp.earliest_start(later)
    ends = [cp.earliest_start(op) + op.duration for op in data.operations[1:-1]]
    assert max(ends) == solution.cost


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4) == 2
    assert round_half_up(0.0) == 0


def test_format_result_toy():
    data = small_instance()
    solution = Solution(data, construct_bidirectional(data))
    # values end with a space, the makespan line has no line break
    assert solution.format_result() == "2 2\n0 3 \n0 3 \n7"


def test_format_result_short_job():
    jobs = [
        [(0, 3), (1, 1)],
        [(1, 1)],
    ]
    data = ProblemInstance.from_jobs(jobs, machines_number=2)
    solution = Solution(data, Schedule.from_sequences(data, [[1], [3, 2]]))
    assert solution.format_result() == "2 2\n0 3 \n0 \n4"


def test_save_result(tmp_path):
    data = small_instance()
    solution = Solution(data, construct_bidirectional(data))
    out = tmp_path / "result.txt"
    solution.save_result(out)
    assert out.read_text(encoding="utf-8") == solution.format_result()
