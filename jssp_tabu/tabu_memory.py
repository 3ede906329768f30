"""Adaptive tabu memory for arc reversals.

``matrix[i][j]`` stores ``k + 1`` where ``k`` is the last iteration in which
the arc ``i -> j`` was reversed. Reversing ``j -> i`` back is forbidden while
``matrix[i][j] + length > k' + 1``.

The forbid length adapts to the search phase (reset to 1 on EUREKA, shrunk
while IMPROVING, grown while WORSEN) and is kept inside ``[minimum, maximum]``;
both bounds are re-drawn at random every ``period`` iterations.
"""

from __future__ import annotations

import random
from typing import Optional

from jssp_tabu.models import Move, Phase, ProblemInstance


class TabuMemory:
    """Tabu state of a single search run.

    Args:
        data: Problem instance (sizes the matrix and the bound spread).
        rng: Random generator owned by the search run.
        lower: Lowest possible ``minimum`` (``a``).
        gap: Offset between ``minimum`` and the lowest ``maximum``.
        period: Bounds are re-drawn when ``iteration % period == 0``.
    """

    def __init__(
        self,
        data: ProblemInstance,
        rng: Optional[random.Random] = None,
        lower: int = 2,
        gap: int = 6,
        period: int = 60,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        n = data.operations_number
        self.matrix: list[list[int]] = [[0] * n for _ in range(n)]
        self.spread = (data.jobs_number + data.machines_number) // 3
        self.lower = lower
        self.gap = gap
        self.period = period
        self.length = 1
        self.minimum = 0
        self.maximum = 0
        self.randomize_bounds()

    @property
    def min_range(self) -> tuple[int, int]:
        return self.lower, self.lower + self.spread

    @property
    def max_range(self) -> tuple[int, int]:
        low = self.minimum + self.gap
        return low, low + self.spread

    def randomize_bounds(self) -> None:
        self.minimum = self.rng.randint(*self.min_range)
        self.maximum = self.rng.randint(*self.max_range)

    @staticmethod
    def _arcs(move: Move) -> list[tuple[int, int]]:
        ids = move.key
        if len(ids) == 2:
            return [(ids[0], ids[1])]
        return [(ids[0], ids[1]), (ids[1], ids[2]), (ids[0], ids[2])]

    def update(self, move: Move, iteration: int, phase: Phase) -> None:
        """Stamp the reversed arcs and adapt the forbid length to ``phase``."""
        for i, j in self._arcs(move):
            self.matrix[i][j] = iteration + 1
        if iteration % self.period == 0:
            self.randomize_bounds()

        if phase is Phase.EUREKA:
            self.length = 1
        elif phase is Phase.IMPROVING:
            if self.length > self.minimum:
                self.length -= 1
        elif phase is Phase.WORSEN:
            if self.length < self.maximum:
                self.length += 1

    def is_allowed(self, move: Move, iteration: int) -> bool:
        """True when no arc of ``move`` reverses a still-forbidden reversal."""
        return all(
            self.matrix[j][i] + self.length <= iteration + 1 for i, j in self._arcs(move)
        )
