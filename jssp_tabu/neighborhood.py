"""Critical-path neighborhoods and move application.

N1
    Reverse one machine arc ``(u, v)`` lying on the critical path.
NA (experimental)
    N1 plus 3-operation reversals ``(PM(u), u, v)`` / ``(u, v, SM(v))`` where
    ``PM``/``SM`` are machine predecessor/successor in the current schedule.
    Such moves may create cycles, the evaluator reports those.

Moves are de-duplicated and returned sorted by operation ids so that the
search loop visits candidates in a reproducible order.
"""

from __future__ import annotations

from typing import Optional, Sequence

from jssp_tabu.exceptions import MoveApplicationError
from jssp_tabu.models import Move, NeighborhoodStructure, Operation
from jssp_tabu.schedule import Schedule
from jssp_tabu.solution import Solution


def n1_moves(solution: Solution) -> list[Move]:
    """Adjacent critical-path pairs processed on the same machine."""
    moves: set[Move] = set()
    path = solution.longest_path
    for prev, cur in zip(path, path[1:]):
        if prev.is_sentinel or cur.is_sentinel:
            continue
        if prev.machine == cur.machine:
            moves.add(Move((prev, cur)))
    return sorted(moves, key=lambda m: m.key)


def _immediately_precedes(
    first: Optional[Operation],
    second: Optional[Operation],
    positions: dict[Operation, int],
    path: Sequence[Operation],
) -> bool:
    """True when ``second`` directly follows ``first`` on the path."""
    if first is None or second is None or first not in positions:
        return False
    index = positions[first] + 1
    return index < len(path) and path[index] == second


def na_moves(solution: Solution) -> list[Move]:
    """N1 moves extended with 3-operation reversals around each N1 arc."""
    schedule = solution.schedule
    path = solution.longest_path
    positions = {op: i for i, op in enumerate(path)}

    def precedes(a: Optional[Operation], b: Optional[Operation]) -> bool:
        return _immediately_precedes(a, b, positions, path)

    moves: set[Move] = set()
    for move in n1_moves(solution):
        moves.add(move)
        u, v = move.operations
        pm_u = schedule.machine_predecessor(u)
        sm_v = schedule.machine_successor(v)
        pm_pm_u = schedule.machine_predecessor(pm_u)
        sm_sm_v = schedule.machine_successor(sm_v)

        if (
            pm_u is not None
            and precedes(pm_u, u)
            and (sm_v is None or precedes(v, sm_v))
            and (pm_pm_u is None or precedes(pm_pm_u, pm_u))
            and (pm_pm_u is None or precedes(v, pm_pm_u))
            and (sm_v is None or precedes(sm_v, pm_u))
        ):
            moves.add(Move((pm_u, u, v)))

        if (
            sm_v is not None
            and precedes(v, sm_v)
            and (pm_u is None or precedes(pm_u, u))
            and (sm_sm_v is None or precedes(sm_v, sm_sm_v))
            and (pm_u is None or precedes(v, pm_u))
            and (sm_sm_v is None or precedes(sm_sm_v, u))
        ):
            moves.add(Move((u, v, sm_v)))
    return sorted(moves, key=lambda m: m.key)


def generate_moves(
    solution: Solution,
    structure: NeighborhoodStructure = NeighborhoodStructure.N1,
) -> list[Move]:
    if structure is NeighborhoodStructure.N1:
        return n1_moves(solution)
    if structure is NeighborhoodStructure.NA:
        return na_moves(solution)
    raise ValueError(f"Unknown neighborhood structure: {structure}")


def _find(row: list[Optional[Operation]], op: Operation) -> int:
    try:
        return row.index(op)
    except ValueError:
        raise MoveApplicationError(f"Operation {op.id} not found on machine {op.machine}") from None


def apply_move(
    schedule: Schedule,
    move: Move,
    structure: NeighborhoodStructure = NeighborhoodStructure.N1,
) -> Schedule:
    """Return a copy of ``schedule`` with ``move`` applied.

    2-operation moves swap both operations inside their machine row.
    3-operation moves (NA only) write the operations in reverse order into
    the three consecutive slots starting at the earliest of them.

    Raises:
        MoveApplicationError: Operation missing from its row, 3-operation move
            under N1, or the three operations not occupying consecutive slots.
    """
    new_schedule = schedule.copy()
    row = new_schedule.rows[move.machine]

    if len(move) == 2:
        first, second = move.operations
        i, j = _find(row, first), _find(row, second)
        row[i], row[j] = second, first
        return new_schedule

    if structure is not NeighborhoodStructure.NA:
        raise MoveApplicationError(f"3-operation move {move} requires the NA neighborhood")
    start = min(_find(row, op) for op in move.operations)
    window = row[start : start + 3]
    if len(window) < 3 or set(window) != set(move.operations):
        raise MoveApplicationError(f"Operations of {move} are not consecutive on the machine")
    row[start : start + 3] = list(reversed(move.operations))
    return new_schedule


def make_neighbor(
    solution: Solution,
    move: Move,
    structure: NeighborhoodStructure = NeighborhoodStructure.N1,
) -> Solution:
    return Solution(solution.data, apply_move(solution.schedule, move, structure))
