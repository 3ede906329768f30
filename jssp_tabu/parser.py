"""Loader for the textual JSSP instance format.

Format::

    # optional description lines
    <jobs> <machines> [<optimal cost>]
    <machine> <duration> <machine> <duration> ...   (one line per job)

Machine ids are 0-based. Any deviation raises ``ValueError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from jssp_tabu.models import ProblemInstance


def _to_ints(tokens: list[str], line_no: int) -> list[int]:
    try:
        return [int(t) for t in tokens]
    except ValueError as e:
        raise ValueError(f"Line {line_no}: non-integer token ({e})") from e


def parse_instance(text: str) -> ProblemInstance:
    """Parse instance text into a validated :class:`ProblemInstance`."""
    lines = [
        (no, line.split())
        for no, line in enumerate(text.splitlines(), start=1)
        if line.strip() and not line.lstrip().startswith("#")
    ]
    if not lines:
        raise ValueError("Empty instance")

    header_no, header_tokens = lines[0]
    header = _to_ints(header_tokens, header_no)
    if len(header) not in (2, 3):
        raise ValueError(f"Line {header_no}: expected '<jobs> <machines> [<optimum>]'")
    jobs_number, machines_number = header[0], header[1]
    optimal_cost = header[2] if len(header) == 3 else None
    if jobs_number <= 0 or machines_number <= 0:
        raise ValueError("Number of jobs and machines must be positive")

    job_lines = lines[1:]
    if len(job_lines) < jobs_number:
        raise ValueError(f"Expected {jobs_number} job lines, found {len(job_lines)}")

    jobs: list[list[tuple[int, int]]] = []
    for no, tokens in job_lines[:jobs_number]:
        values = _to_ints(tokens, no)
        if not values or len(values) % 2:
            raise ValueError(f"Line {no}: expected '<machine> <duration>' pairs")
        job: list[tuple[int, int]] = []
        for machine, duration in zip(values[0::2], values[1::2]):
            if not (0 <= machine < machines_number):
                raise ValueError(f"Line {no}: machine index out of range: {machine}")
            if duration < 0:
                raise ValueError(f"Line {no}: negative duration {duration}")
            job.append((machine, duration))
        jobs.append(job)

    return ProblemInstance.from_jobs(jobs, machines_number, optimal_cost)


def load_instance(path: Union[str, Path]) -> ProblemInstance:
    """Read and parse an instance file."""
    with open(path, "r", encoding="utf-8") as f:
        return parse_instance(f.read())
