import logging
import random
import time
from dataclasses import dataclass, field
from typing import Optional

from jssp_tabu.construction import construct
from jssp_tabu.exceptions import CyclicScheduleError, MoveApplicationError
from jssp_tabu.models import Move, NeighborhoodStructure, Phase, ProblemInstance
from jssp_tabu.neighborhood import generate_moves, make_neighbor
from jssp_tabu.solution import Solution
from jssp_tabu.tabu_memory import TabuMemory

logger = logging.getLogger("jssp.search")


@dataclass(slots=True)
class TabuSearchParams:
    """Hyper-parameters of one tabu search run.

    ``delta`` iterations without a new best trigger a restart; the run stops
    once that happens after more than ``max_iter`` iterations, or after
    ``safety_factor * max_iter`` iterations in any case.
    """

    max_iter: int = 1200
    delta: int = 800
    safety_factor: int = 5
    neighborhood: NeighborhoodStructure = NeighborhoodStructure.N1
    construction: str = "bidirectional"

    @property
    def safety_stop(self) -> int:
        return self.safety_factor * self.max_iter


@dataclass
class SearchResult:
    """Outcome of :func:`tabu_search`.

    Fields:
        best: Lowest-cost solution observed during the run.
        best_cost: Its cost.
        initial_cost: Cost of the constructed start solution.
        iterations: Number of executed iterations.
        moves: Accepted moves in order.
        history: Current cost after every iteration (initial cost first).
        elapsed: Wall time in seconds.
    """

    best: Solution
    best_cost: float
    initial_cost: float
    iterations: int
    moves: list[Move] = field(default_factory=list)
    history: list[float] = field(default_factory=list)
    elapsed: float = 0.0


def _should_continue(
    params: TabuSearchParams,
    iteration: int,
    no_improvement: int,
    best_cost: float,
    optimal_cost: Optional[int],
) -> bool:
    if no_improvement >= params.delta and iteration > params.max_iter:
        return False
    if iteration >= params.safety_stop:
        return False
    if optimal_cost is not None and best_cost == optimal_cost:
        return False
    return True


def tabu_search(
    data: ProblemInstance,
    params: Optional[TabuSearchParams] = None,
    rng: Optional[random.Random] = None,
    initial: Optional[Solution] = None,
    trace_file: Optional[str] = None,
) -> SearchResult:
    """Tabu search over the critical-path neighborhood.

    Each iteration evaluates every candidate move, keeps the cheapest one
    that is either allowed by the tabu memory or beats the best cost
    (aspiration), falls back to a random candidate when none qualifies, and
    always moves to the selected neighbor.

    Args:
        data: Problem instance.
        params: Hyper-parameters, defaults when omitted.
        rng: Random generator (bound randomization, fallback moves). A fixed
            seed reproduces the run exactly.
        initial: Start solution; built with ``params.construction`` if None.
        trace_file: Optional path; one ``;``-separated line per iteration.
    """
    if params is None:
        params = TabuSearchParams()
    if rng is None:
        rng = random.Random()
    t0 = time.perf_counter()

    current = initial if initial is not None else Solution(data, construct(data, params.construction))
    current_cost = current.cost
    # reference best: restarts may overwrite it with a worse solution
    best_cost = current_cost
    overall_best = current
    overall_best_cost = current_cost
    memory = TabuMemory(data, rng)

    moves: list[Move] = []
    history: list[float] = [current_cost]
    no_improvement = 0
    k = 0

    trace = open(trace_file, "w", encoding="utf-8") if trace_file else None
    try:
        if trace:
            trace.write("iter;current;best;phase;move;candidates\n")
        while _should_continue(params, k, no_improvement, overall_best_cost, data.optimal_cost):
            candidates = generate_moves(current, params.neighborhood)
            if not candidates:
                logger.info("[tabu] empty neighborhood at iter %d cost=%s", k, current_cost)
                break

            evaluated: list[tuple[Move, Solution, float]] = []
            selected: Optional[tuple[Move, Solution, float]] = None
            for move in candidates:
                try:
                    neighbor = make_neighbor(current, move, params.neighborhood)
                    cost = neighbor.cost
                except (MoveApplicationError, CyclicScheduleError) as e:
                    logger.debug("[tabu] iter %d discard move %s: %s", k, move, e)
                    continue
                evaluated.append((move, neighbor, cost))
                if (selected is None or cost < selected[2]) and (
                    cost < best_cost or memory.is_allowed(move, k)
                ):
                    selected = (move, neighbor, cost)

            if selected is None:
                if not evaluated:
                    logger.warning("[tabu] no valid candidate at iter %d, stopping", k)
                    break
                selected = rng.choice(evaluated)
            move, neighbor, cost = selected

            phase = Phase.IMPROVING if cost < current_cost else Phase.WORSEN
            if cost < best_cost or no_improvement == params.delta:
                if cost >= best_cost:
                    logger.debug("[tabu] restart at iter %d cost=%s", k, cost)
                best_cost = cost
                no_improvement = 0
                phase = Phase.EUREKA
            else:
                no_improvement += 1
            if cost < overall_best_cost:
                overall_best = neighbor
                overall_best_cost = cost
                logger.debug("[tabu] iter %d new best=%s", k, cost)

            memory.update(move, k, phase)
            current, current_cost = neighbor, cost
            moves.append(move)
            history.append(cost)
            if trace:
                trace.write(
                    f"{k};{current_cost};{overall_best_cost};{phase.value};{move};{len(candidates)}\n"
                )
            k += 1
    finally:
        if trace:
            trace.close()

    elapsed = time.perf_counter() - t0
    logger.info(
        "[tabu] done iters=%d best=%s start=%s time=%.3fs",
        k,
        overall_best_cost,
        history[0],
        elapsed,
    )
    return SearchResult(
        best=overall_best,
        best_cost=overall_best_cost,
        initial_cost=history[0],
        iterations=k,
        moves=moves,
        history=history,
        elapsed=elapsed,
    )
