"""Tabu search for the Job Shop Scheduling Problem.

Exports base data structures, the instance loader and the search entry point.
"""

from jssp_tabu.models import Move, NeighborhoodStructure, Operation, Phase, ProblemInstance  # noqa: F401
from jssp_tabu.parser import load_instance, parse_instance  # noqa: F401
from jssp_tabu.search import SearchResult, TabuSearchParams, tabu_search  # noqa: F401
from jssp_tabu.solution import Solution  # noqa: F401

__all__ = [
    "Move",
    "NeighborhoodStructure",
    "Operation",
    "Phase",
    "ProblemInstance",
    "SearchResult",
    "Solution",
    "TabuSearchParams",
    "load_instance",
    "parse_instance",
    "tabu_search",
]
