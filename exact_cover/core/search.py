"""Knuth's Algorithm X over a Dancing Links matrix."""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Tuple

if TYPE_CHECKING:
    from .matrix import Matrix

logger = logging.getLogger(__name__)

ROOT = 0

Solution = Dict[int, List[int]]


@dataclass
class SearchStats:
    """Statistics from a search run."""
    solutions: int = 0
    iterations: int = 0
    nodes_explored: int = 0
    backtracks: int = 0
    max_depth: int = 0
    time_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "solutions": self.solutions,
            "iterations": self.iterations,
            "nodes_explored": self.nodes_explored,
            "backtracks": self.backtracks,
            "max_depth": self.max_depth,
            "time_seconds": self.time_seconds,
        }


def extract_solution(matrix: Matrix, partial: List[int]) -> Solution:
    """
    Convert a stack of selected rows into a solution mapping.

    Args:
        matrix: The matrix being searched.
        partial: One element per selected row.

    Returns:
        Dict of row index -> column indices, each row starting from the
        column of its representative element.
    """
    solution = {}
    for node in partial:
        solution[matrix.row[node]] = [matrix.column[j] - 1 for j in matrix.row_nodes(node)]
    return solution


class AlgorithmX:
    """
    Exhaustive exact cover search.

    The recursion of Algorithm X is driven by an explicit stack of
    (column header, candidate row) frames so deep instances do not hit the
    interpreter's recursion limit. ``run()`` is a generator: it yields each
    solution as it is found and can be abandoned at any yield, in which case
    every outstanding cover is undone before the generator finishes.
    """

    def __init__(self, matrix: Matrix):
        self.matrix = matrix
        self.stats = SearchStats()
        self._partial: List[int] = []

    def choose_column(self) -> int:
        """Leftmost header with the fewest remaining elements."""
        m = self.matrix
        right, length = m.right, m.length

        best = right[ROOT]
        c = right[best]
        while c != ROOT:
            if length[c] < length[best]:
                best = c
            c = right[c]
        return best

    def _select(self, node: int) -> None:
        """Add a row to the partial solution and cover its other columns."""
        m = self.matrix
        self._partial.append(node)
        j = m.right[node]
        while j != node:
            m._cover(m.column[j])
            j = m.right[j]

    def _deselect(self, node: int) -> None:
        """Undo ``_select``, uncovering right-to-left."""
        m = self.matrix
        j = m.left[node]
        while j != node:
            m._uncover(m.column[j])
            j = m.left[j]
        self._partial.pop()

    def run(self) -> Iterator[Solution]:
        """Yield every exact cover in deterministic order."""
        m = self.matrix
        if m.searching:
            raise RuntimeError("Matrix is already being searched")
        m._searching = True

        logger.debug("Starting search on %r", m)
        start_time = time.perf_counter()
        stack: List[Tuple[int, int]] = []

        try:
            while True:
                self.stats.iterations += 1

                if m.right[ROOT] == ROOT:
                    self.stats.solutions += 1
                    yield extract_solution(m, self._partial)
                else:
                    header = self.choose_column()
                    m._cover(header)
                    self.stats.nodes_explored += 1

                    row = m.down[header]
                    if row != header:
                        self._select(row)
                        stack.append((header, row))
                        self.stats.max_depth = max(self.stats.max_depth, len(stack))
                        continue

                    # Empty column: this branch cannot be completed
                    m._uncover(header)
                    self.stats.backtracks += 1

                # Advance the deepest frame to its next candidate row
                while stack:
                    header, row = stack.pop()
                    self._deselect(row)
                    row = m.down[row]
                    if row != header:
                        self._select(row)
                        stack.append((header, row))
                        break
                    m._uncover(header)
                else:
                    return
        finally:
            while stack:
                header, row = stack.pop()
                self._deselect(row)
                m._uncover(header)
            m._searching = False
            self.stats.time_seconds = time.perf_counter() - start_time
            logger.debug("Search finished: %s", self.stats.to_dict())
