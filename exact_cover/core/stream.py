"""Lazy delivery of exact cover solutions."""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from .search import AlgorithmX, SearchStats


class SolutionStream:
    """
    Finite, non-restartable iterator over the solutions of one search.

    ``found_any`` stays ``None`` while the search may still produce
    solutions. Once the stream is exhausted or closed it becomes a bool
    telling whether at least one solution was emitted.

    Leaving a ``with`` block or calling ``close()`` stops the search early
    and restores the matrix to the state it had before the search.
    """

    def __init__(self, search: AlgorithmX):
        self._search = search
        self._solutions = search.run()
        self._emitted = 0
        self.found_any: Optional[bool] = None

    @property
    def stats(self) -> SearchStats:
        return self._search.stats

    @property
    def emitted(self) -> int:
        """Number of solutions handed out so far."""
        return self._emitted

    @property
    def finished(self) -> bool:
        return self.found_any is not None

    def __iter__(self) -> SolutionStream:
        return self

    def __next__(self) -> Dict[int, List[int]]:
        if self.found_any is not None:
            raise StopIteration
        try:
            solution = next(self._solutions)
        except StopIteration:
            self.found_any = self._emitted > 0
            raise
        self._emitted += 1
        return solution

    def close(self) -> None:
        """Abandon the remaining search."""
        self._solutions.close()
        if self.found_any is None:
            self.found_any = self._emitted > 0

    def __enter__(self) -> SolutionStream:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SolutionStream(emitted={self._emitted}, found_any={self.found_any})"
