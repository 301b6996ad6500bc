"""Toroidal linked matrix for exact cover problems (Dancing Links)."""

from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Sequence, Tuple, Optional

import numpy as np

from .search import AlgorithmX
from .stream import SolutionStream

logger = logging.getLogger(__name__)

ROOT = 0


class Matrix:
    """
    Sparse 0/1 constraint matrix stored as a four-way circular linked list.

    Nodes live in an arena of parallel lists and are addressed by integer
    ids, so every link is an index:

    - node 0 is the root sentinel (row -1, never covered);
    - nodes 1..column_count are column headers, the header of column
      index ``c`` being node ``c + 1``;
    - every node after that is an element of exactly one row.

    The headers and the root form the horizontal header ring. Each header
    anchors the vertical ring of the elements in its column, and the
    elements of one row form their own horizontal ring.
    """

    def __init__(self, column_count: int):
        """
        Create an empty matrix.

        Args:
            column_count: Number of constraint columns (>= 0).
        """
        if isinstance(column_count, bool) or not isinstance(column_count, (int, np.integer)):
            raise ValueError(f"Column count must be an integer, got {column_count!r}")
        if column_count < 0:
            raise ValueError(f"Column count must be >= 0, got {column_count}")

        self._column_count = int(column_count)
        self._row_count = 0
        self._searching = False

        header_count = self._column_count + 1
        nodes = range(header_count)

        # Header ring: root -> col0 -> col1 -> ... -> colN-1 -> root
        self.left: List[int] = [(i - 1) % header_count for i in nodes]
        self.right: List[int] = [(i + 1) % header_count for i in nodes]
        self.up: List[int] = list(nodes)
        self.down: List[int] = list(nodes)
        self.column: List[int] = list(nodes)
        self.row: List[int] = [-1] * header_count
        self.length: List[int] = [0] * header_count

        # First element of every row, indexed by row index
        self._row_heads: List[int] = []
        # Columns covered through the public API, innermost last
        self._covered: List[int] = []

        logger.debug("Created matrix with %d columns", self._column_count)

    @property
    def column_count(self) -> int:
        return self._column_count

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def node_count(self) -> int:
        """Total arena size: root, headers and elements."""
        return len(self.row)

    @property
    def searching(self) -> bool:
        """True while a search traversal owns the links."""
        return self._searching

    def is_header(self, node: int) -> bool:
        """True for the root and the column headers."""
        return node <= self._column_count

    def header_of(self, column_index: int) -> int:
        """Arena id of the header for a zero-based column index."""
        self._check_column(column_index)
        return column_index + 1

    def column_index(self, node: int) -> int:
        """Zero-based column index owning ``node`` (-1 for the root)."""
        return self.column[node] - 1

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_row(self, column_indices: Sequence[int]) -> int:
        """
        Append a row with a 1 in each of the given columns.

        Elements are linked into a horizontal ring in the given order and
        each is inserted at the bottom of its column.

        Args:
            column_indices: Non-empty sequence of distinct column indices,
                each in [0, column_count).

        Returns:
            The zero-based index assigned to the new row.
        """
        if self._searching:
            raise RuntimeError("Cannot add rows while a search is in progress")
        if self._covered:
            raise RuntimeError(f"Cannot add rows while columns {self._covered} are covered")

        indices = list(column_indices)
        if not indices:
            raise ValueError("A row must contain at least one column index")
        for c in indices:
            self._check_column(c)
        if len(set(indices)) != len(indices):
            raise ValueError(f"Duplicate column index in row {indices}")

        row_index = self._row_count
        first = len(self.row)
        count = len(indices)

        for i, c in enumerate(indices):
            node = first + i
            header = int(c) + 1
            bottom = self.up[header]

            self.left.append(first + (i - 1) % count)
            self.right.append(first + (i + 1) % count)
            self.up.append(bottom)
            self.down.append(header)
            self.column.append(header)
            self.row.append(row_index)

            self.down[bottom] = node
            self.up[header] = node
            self.length[header] += 1

        self._row_heads.append(first)
        self._row_count += 1
        return row_index

    def add_rows(self, rows: Iterable[Sequence[int]]) -> List[int]:
        """Add several rows, returning their assigned row indices."""
        return [self.add_row(r) for r in rows]

    def _check_column(self, column_index) -> None:
        if isinstance(column_index, bool) or not isinstance(column_index, (int, np.integer)):
            raise ValueError(f"Column index must be an integer, got {column_index!r}")
        if column_index < 0 or column_index >= self._column_count:
            raise ValueError(
                f"Column index must be 0-{self._column_count - 1}, got {column_index}"
            )

    # ------------------------------------------------------------------
    # Cover / uncover
    # ------------------------------------------------------------------

    def cover(self, column_index: int) -> None:
        """
        Cover a column by zero-based index.

        Covers made through this method nest like a stack and must be
        undone with ``uncover`` in reverse order.
        """
        if self._searching:
            raise RuntimeError("Cannot cover columns while a search is in progress")
        header = self.header_of(column_index)
        if column_index in self._covered:
            raise ValueError(f"Column {column_index} is already covered")
        self._cover(header)
        self._covered.append(int(column_index))

    def uncover(self, column_index: int) -> None:
        """Uncover a column by zero-based index. Must be the last covered column."""
        if self._searching:
            raise RuntimeError("Cannot uncover columns while a search is in progress")
        header = self.header_of(column_index)
        if not self._covered or self._covered[-1] != column_index:
            last = self._covered[-1] if self._covered else None
            raise ValueError(
                f"Column {column_index} is not the last covered column (last: {last})"
            )
        self._uncover(header)
        self._covered.pop()

    @property
    def covered_columns(self) -> List[int]:
        """Columns covered through ``cover``, innermost last."""
        return list(self._covered)

    def _cover(self, header: int) -> None:
        """Remove a header from the ring and every row using it from other columns."""
        left, right, up, down = self.left, self.right, self.up, self.down
        column, length = self.column, self.length

        right[left[header]] = right[header]
        left[right[header]] = left[header]

        i = down[header]
        while i != header:
            j = right[i]
            while j != i:
                up[down[j]] = up[j]
                down[up[j]] = down[j]
                length[column[j]] -= 1
                j = right[j]
            i = down[i]

    def _uncover(self, header: int) -> None:
        """Restore what ``_cover`` removed, walking up and left."""
        left, right, up, down = self.left, self.right, self.up, self.down
        column, length = self.column, self.length

        i = up[header]
        while i != header:
            j = left[i]
            while j != i:
                length[column[j]] += 1
                up[down[j]] = j
                down[up[j]] = j
                j = left[j]
            i = up[i]

        right[left[header]] = header
        left[right[header]] = header

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def column_length(self, column_index: int) -> int:
        """Number of elements currently linked below a column header."""
        return self.length[self.header_of(column_index)]

    def active_columns(self) -> List[int]:
        """Column indices still present in the header ring, in ring order."""
        columns = []
        c = self.right[ROOT]
        while c != ROOT:
            columns.append(c - 1)
            c = self.right[c]
        return columns

    def row_nodes(self, node: int) -> List[int]:
        """All elements of the row containing ``node``, starting with it."""
        nodes = [node]
        j = self.right[node]
        while j != node:
            nodes.append(j)
            j = self.right[j]
        return nodes

    def row_columns(self, row_index: int) -> List[int]:
        """Column indices of a row, in the order they were added."""
        if row_index < 0 or row_index >= self._row_count:
            raise ValueError(f"Row index must be 0-{self._row_count - 1}, got {row_index}")
        return [self.column[j] - 1 for j in self.row_nodes(self._row_heads[row_index])]

    def snapshot(self) -> Tuple[Tuple[int, ...], ...]:
        """Hashable image of every link and column length."""
        return (
            tuple(self.left),
            tuple(self.right),
            tuple(self.up),
            tuple(self.down),
            tuple(self.length),
        )

    def to_dense(self) -> np.ndarray:
        """Dense (rows x columns) 0/1 incidence array of all added rows."""
        dense = np.zeros((self._row_count, self._column_count), dtype=np.int8)
        for r in range(self._row_count):
            dense[r, self.row_columns(r)] = 1
        return dense

    # ------------------------------------------------------------------
    # Solving
    # ------------------------------------------------------------------

    def solve_all(self) -> SolutionStream:
        """
        Search for every exact cover.

        Returns:
            A lazy, non-restartable stream of ``{row_index: [columns]}``
            solutions. Its ``found_any`` flag is set once it is exhausted.
        """
        return SolutionStream(AlgorithmX(self))

    def solve(self) -> Tuple[Dict[int, List[int]], bool]:
        """
        Search for the first exact cover.

        Returns:
            Tuple of (solution, found). The solution is empty when no
            exact cover exists.
        """
        with self.solve_all() as stream:
            solution = next(stream, None)
        if solution is None:
            return {}, False
        return solution, True

    def count_solutions(self, limit: Optional[int] = None) -> int:
        """Count exact covers, stopping early once ``limit`` is reached."""
        if limit is not None and limit <= 0:
            return 0
        count = 0
        with self.solve_all() as stream:
            for _ in stream:
                count += 1
                if limit is not None and count >= limit:
                    break
        return count

    def __repr__(self) -> str:
        return f"Matrix(columns={self._column_count}, rows={self._row_count})"


def create_matrix(column_count: int) -> Matrix:
    """Create an empty matrix with ``column_count`` constraint columns."""
    return Matrix(column_count)
