"""Exact cover solver using Knuth's Algorithm X with Dancing Links."""

from .core import Matrix, SolutionStream, SearchStats, create_matrix

__version__ = "1.0.0"

__all__ = ["Matrix", "SolutionStream", "SearchStats", "create_matrix"]
