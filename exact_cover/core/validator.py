"""Validation utilities for exact cover solutions."""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, FrozenSet, List, Sequence

import numpy as np

if TYPE_CHECKING:
    from .matrix import Matrix

# Brute force enumerates 2**rows subsets
MAX_BRUTE_FORCE_ROWS = 20


def is_exact_cover(solution: Dict[int, List[int]], column_count: int) -> bool:
    """
    Check that the selected rows cover every column exactly once.

    Args:
        solution: Mapping of row index -> column indices.
        column_count: Total number of columns in the problem.

    Returns:
        True if each column 0..column_count-1 appears in exactly one row.
    """
    counts = np.zeros(column_count, dtype=np.int64)
    for columns in solution.values():
        cols = np.asarray(columns, dtype=np.int64)
        if cols.size == 0:
            return False
        if cols.min() < 0 or cols.max() >= column_count:
            return False
        np.add.at(counts, cols, 1)
    return bool(np.all(counts == 1))


def validate_solution(matrix: Matrix, solution: Dict[int, List[int]]) -> bool:
    """
    Validate a solution against the matrix it claims to solve.

    Every row must exist in the matrix with exactly the recorded columns,
    and together the rows must form an exact cover.
    """
    for row_index, columns in solution.items():
        if row_index < 0 or row_index >= matrix.row_count:
            return False
        expected = matrix.row_columns(row_index)
        if len(columns) != len(expected) or set(columns) != set(expected):
            return False
    return is_exact_cover(solution, matrix.column_count)


def brute_force_solutions(column_count: int, rows: Sequence[Sequence[int]]) -> List[FrozenSet[int]]:
    """
    Enumerate every exact cover by trying all row subsets.

    Only meant as a reference for small instances.

    Returns:
        Row index sets, in increasing bitmask order of the subsets.
    """
    if len(rows) > MAX_BRUTE_FORCE_ROWS:
        raise ValueError(
            f"Brute force supports at most {MAX_BRUTE_FORCE_ROWS} rows, got {len(rows)}"
        )

    dense = np.zeros((len(rows), column_count), dtype=np.int64)
    for r, columns in enumerate(rows):
        dense[r, list(columns)] = 1

    target = np.ones(column_count, dtype=np.int64)
    found = []
    for mask in range(1 << len(rows)):
        selected = [r for r in range(len(rows)) if mask >> r & 1]
        if np.array_equal(dense[selected].sum(axis=0), target):
            found.append(frozenset(selected))
    return found


def count_solutions(matrix: Matrix, limit: int = 2) -> int:
    """
    Count the exact covers of a matrix (up to limit).

    Args:
        matrix: The matrix to search.
        limit: Maximum solutions to count before stopping.

    Returns:
        Number of solutions found (up to limit).
    """
    return matrix.count_solutions(limit=limit)


def has_unique_solution(matrix: Matrix) -> bool:
    """Check if the matrix has exactly one exact cover."""
    return count_solutions(matrix, limit=2) == 1
