"""Core module: Dancing Links matrix, Algorithm X search and validation."""

from .matrix import Matrix, create_matrix
from .search import AlgorithmX, SearchStats, extract_solution
from .stream import SolutionStream
from .validator import (
    is_exact_cover,
    validate_solution,
    brute_force_solutions,
    count_solutions,
    has_unique_solution,
)

__all__ = [
    "Matrix",
    "create_matrix",
    "AlgorithmX",
    "SearchStats",
    "extract_solution",
    "SolutionStream",
    "is_exact_cover",
    "validate_solution",
    "brute_force_solutions",
    "count_solutions",
    "has_unique_solution",
]
