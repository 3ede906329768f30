"""Machine sequencing matrix.

A :class:`Schedule` holds one row per machine. Row ``m`` has exactly one slot
per operation of machine ``m``; the order of the filled slots is the order in
which the machine processes them. Construction fills rows from both ends,
moves reorder operations within a single row.
"""

from __future__ import annotations

from typing import Iterator, Optional

from jssp_tabu.models import Operation, ProblemInstance


class Schedule:
    """Per-machine operation order.

    Args:
        data: Problem instance the schedule belongs to.
        rows: Optional pre-filled rows (copied); empty rows when omitted.
    """

    __slots__ = ("data", "rows")

    def __init__(
        self,
        data: ProblemInstance,
        rows: Optional[list[list[Optional[Operation]]]] = None,
    ) -> None:
        self.data = data
        if rows is None:
            self.rows: list[list[Optional[Operation]]] = [
                [None] * len(machine_ops) for machine_ops in data.machines
            ]
        else:
            if len(rows) != data.machines_number:
                raise ValueError(f"Expected {data.machines_number} rows, got {len(rows)}")
            self.rows = [list(row) for row in rows]

    @classmethod
    def from_sequences(cls, data: ProblemInstance, sequences: list[list[int]]) -> "Schedule":
        """Build a complete schedule from per-machine lists of operation ids."""
        rows = [[data.operations[op_id] for op_id in seq] for seq in sequences]
        for m, row in enumerate(rows):
            if sorted(op.id for op in row) != sorted(op.id for op in data.machines[m]):
                raise ValueError(f"Sequence for machine {m} does not match its operations")
        return cls(data, rows)  # type: ignore[arg-type]

    def place_left(self, op: Operation) -> int:
        """Put ``op`` into the first open slot of its row, counting from the start."""
        row = self.rows[op.machine]  # type: ignore[index]
        for index, slot in enumerate(row):
            if slot is None:
                row[index] = op
                return index
        raise ValueError(f"No free slot left on machine {op.machine}")

    def place_right(self, op: Operation) -> int:
        """Put ``op`` into the first open slot of its row, counting from the end."""
        row = self.rows[op.machine]  # type: ignore[index]
        for index in range(len(row) - 1, -1, -1):
            if row[index] is None:
                row[index] = op
                return index
        raise ValueError(f"No free slot left on machine {op.machine}")

    def copy(self) -> "Schedule":
        # Operations are immutable, a shallow copy per row is enough.
        return Schedule(self.data, self.rows)

    def is_complete(self) -> bool:
        return all(slot is not None for row in self.rows for slot in row)

    def machine_predecessor(self, op: Optional[Operation]) -> Optional[Operation]:
        """Operation processed right before ``op`` on its machine, if any."""
        if op is None or op.is_sentinel:
            return None
        row = self.rows[op.machine]  # type: ignore[index]
        try:
            index = row.index(op)
        except ValueError:
            return None
        return row[index - 1] if index > 0 else None

    def machine_successor(self, op: Optional[Operation]) -> Optional[Operation]:
        """Operation processed right after ``op`` on its machine, if any."""
        if op is None or op.is_sentinel:
            return None
        row = self.rows[op.machine]  # type: ignore[index]
        try:
            index = row.index(op)
        except ValueError:
            return None
        return row[index + 1] if index + 1 < len(row) else None

    def machine_arcs(self) -> Iterator[tuple[Operation, Operation]]:
        """Yield consecutive (earlier, later) pairs of every machine row."""
        for row in self.rows:
            filled = [op for op in row if op is not None]
            yield from zip(filled, filled[1:])

    def as_ids(self) -> list[list[Optional[int]]]:
        return [[op.id if op is not None else None for op in row] for row in self.rows]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schedule):
            return NotImplemented
        return self.as_ids() == other.as_ids()

    def __str__(self) -> str:
        lines = []
        for m, row in enumerate(self.rows):
            cells = " ".join("-" if op is None else str(op.id) for op in row)
            lines.append(f"M{m}: {cells}")
        return "\n".join(lines)
