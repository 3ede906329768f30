"""Core data structures for Job Shop instances and tabu search moves.

This module defines:
    Operation             -- one operation (or a synthetic source/sink node).
    ProblemInstance       -- immutable instance: operations, jobs, machines.
    Move                  -- arc reversal on the critical path (2 or 3 ops).
    Phase                 -- per-iteration search phase driving tabu length.
    NeighborhoodStructure -- N1 (default) or NA (experimental).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

JobSpec = tuple[int, int]  # (machine, duration)


@dataclass(frozen=True, eq=False)
class Operation:
    """Single operation of a job, or one of the two sentinel nodes.

    Attributes:
        id: Dense identifier; ``0`` is the source and ``N-1`` the sink.
        duration: Processing time (0 for sentinels).
        job: Owning job index, ``None`` for sentinels.
        machine: Machine index, ``None`` for sentinels.
    """

    id: int
    duration: int
    job: Optional[int] = None
    machine: Optional[int] = None

    @property
    def is_sentinel(self) -> bool:
        return self.job is None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Operation):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        if self.is_sentinel:
            return "Source" if self.id == 0 else "Sink"
        return f"J{self.job}M{self.machine}T{self.duration}"


@dataclass(frozen=True)
class ProblemInstance:
    """Immutable representation of a JSSP instance (disjunctive graph G=(V,A,E)).

    Attributes:
        operations: All operations indexed by id, source first, sink last.
        jobs: jobs[j] -> operations of job j in processing order.
        machines: machines[m] -> operations processed on machine m.
        optimal_cost: Known optimal makespan or ``None`` when unknown.
    """

    operations: tuple[Operation, ...]
    jobs: tuple[tuple[Operation, ...], ...]
    machines: tuple[tuple[Operation, ...], ...]
    optimal_cost: Optional[int] = None
    _job_next: dict = field(init=False, repr=False, compare=False)
    _job_prev: dict = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        n = len(self.operations)
        if n < 2:
            raise ValueError("Instance needs at least the source and sink nodes")
        for index, op in enumerate(self.operations):
            if op.id != index:
                raise ValueError(f"Operation ids must be dense, found {op.id} at {index}")
        if not (self.operations[0].is_sentinel and self.operations[-1].is_sentinel):
            raise ValueError("Operation 0 and N-1 must be the source and sink")

        real = self.operations[1:-1]
        in_jobs = [op for job in self.jobs for op in job]
        in_machines = [op for machine in self.machines for op in machine]
        if sorted(o.id for o in in_jobs) != [o.id for o in real]:
            raise ValueError("Every operation must belong to exactly one job")
        if sorted(o.id for o in in_machines) != [o.id for o in real]:
            raise ValueError("Every operation must belong to exactly one machine")
        for m, machine in enumerate(self.machines):
            for op in machine:
                if op.machine != m:
                    raise ValueError(f"Operation {op.id} listed on machine {m}")

        job_next: dict[int, Operation] = {}
        job_prev: dict[int, Operation] = {}
        for job in self.jobs:
            for first, second in zip(job, job[1:]):
                job_next[first.id] = second
                job_prev[second.id] = first
        object.__setattr__(self, "_job_next", job_next)
        object.__setattr__(self, "_job_prev", job_prev)

    @classmethod
    def from_jobs(
        cls,
        jobs: Sequence[Sequence[JobSpec]],
        machines_number: int,
        optimal_cost: Optional[int] = None,
    ) -> "ProblemInstance":
        """Build an instance from ``jobs[j] = [(machine, duration), ...]``.

        Operations are numbered ``1..`` in job order; the source gets id 0 and
        the sink the last id.
        """
        operations: list[Operation] = [Operation(0, 0)]
        job_lists: list[list[Operation]] = []
        machine_lists: list[list[Operation]] = [[] for _ in range(machines_number)]
        for j, job in enumerate(jobs):
            job_ops: list[Operation] = []
            for machine, duration in job:
                if not (0 <= machine < machines_number):
                    raise ValueError(f"Machine index out of range: {machine}")
                op = Operation(len(operations), duration, j, machine)
                operations.append(op)
                job_ops.append(op)
                machine_lists[machine].append(op)
            job_lists.append(job_ops)
        operations.append(Operation(len(operations), 0))
        return cls(
            operations=tuple(operations),
            jobs=tuple(tuple(job) for job in job_lists),
            machines=tuple(tuple(machine) for machine in machine_lists),
            optimal_cost=optimal_cost,
        )

    @property
    def operations_number(self) -> int:
        """Number of nodes including source and sink."""
        return len(self.operations)

    @property
    def jobs_number(self) -> int:
        return len(self.jobs)

    @property
    def machines_number(self) -> int:
        return len(self.machines)

    @property
    def source(self) -> Operation:
        return self.operations[0]

    @property
    def sink(self) -> Operation:
        return self.operations[-1]

    def job_successor(self, op: Operation) -> Optional[Operation]:
        """Immediate successor of ``op`` inside its job, ``None`` at the end."""
        return self._job_next.get(op.id)

    def job_predecessor(self, op: Operation) -> Optional[Operation]:
        """Immediate predecessor of ``op`` inside its job, ``None`` at the start."""
        return self._job_prev.get(op.id)


class Phase(Enum):
    """Search phase of one iteration.

    EUREKA: the best known cost was improved (or a restart was forced).
    IMPROVING: the accepted neighbor is better than the current solution.
    WORSEN: anything else.
    """

    EUREKA = "eureka"
    IMPROVING = "improving"
    WORSEN = "worsen"


class NeighborhoodStructure(Enum):
    """Move sets derived from the critical path."""

    N1 = "n1"
    NA = "na"  # experimental, may produce cyclic schedules


@dataclass(frozen=True)
class Move:
    """Reversal of the arc(s) between 2 or 3 operations of one machine.

    Moves compare by content, so the same reversal found twice on the
    critical path collapses into a single candidate.
    """

    operations: tuple[Operation, ...]

    def __post_init__(self) -> None:
        if len(self.operations) not in (2, 3):
            raise ValueError(f"Move needs 2 or 3 operations, got {len(self.operations)}")
        machines = {op.machine for op in self.operations}
        if None in machines or len(machines) != 1:
            raise ValueError("Move operations must share one (non-sentinel) machine")

    @property
    def machine(self) -> int:
        return self.operations[0].machine  # type: ignore[return-value]

    @property
    def key(self) -> tuple[int, ...]:
        """Canonical ordering key (operation ids)."""
        return tuple(op.id for op in self.operations)

    def __len__(self) -> int:
        return len(self.operations)

    def __str__(self) -> str:
        return "(" + ",".join(str(op.id) for op in self.operations) + ")"
