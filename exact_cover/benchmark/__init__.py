"""Benchmark module for timing the exact cover search."""

from .benchmark import Benchmark, BenchmarkResult, run_search
from .visualizer import Visualizer

__all__ = ["Benchmark", "BenchmarkResult", "Visualizer", "run_search"]
