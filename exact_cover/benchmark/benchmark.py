"""Benchmarking framework for the exact cover search modes."""

from __future__ import annotations
import time
import tracemalloc
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple
from concurrent.futures import ThreadPoolExecutor, TimeoutError
import json
import os

from tqdm import tqdm

from ..core.search import SearchStats
from ..core.validator import validate_solution
from ..generator import InstanceGenerator, ExactCoverInstance, Difficulty

MODES = ("first", "all")


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""
    instance_id: int
    difficulty: str
    mode: str
    solved: bool
    solutions: int
    time_seconds: float
    memory_bytes: int
    iterations: int
    backtracks: int
    nodes_explored: int
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "instance_id": self.instance_id,
            "difficulty": self.difficulty,
            "mode": self.mode,
            "solved": self.solved,
            "solutions": self.solutions,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "memory_mb": self.memory_bytes / (1024 * 1024),
            "iterations": self.iterations,
            "backtracks": self.backtracks,
            "nodes_explored": self.nodes_explored,
            **self.extra
        }


def run_search(instance: ExactCoverInstance, mode: str) -> Tuple[bool, int, SearchStats, int, float]:
    """
    Build the instance's matrix and search it once.

    Args:
        instance: Problem to solve.
        mode: "first" stops after one solution, "all" exhausts the search.

    Returns:
        Tuple of (solved, solutions, stats, peak memory bytes, seconds).
        ``solved`` is True when every emitted solution validates.
    """
    if mode not in MODES:
        raise ValueError(f"Mode must be one of {MODES}, got {mode!r}")

    tracemalloc.start()
    start_time = time.perf_counter()

    try:
        matrix = instance.build_matrix()
        solved = True
        with matrix.solve_all() as stream:
            for solution in stream:
                solved = solved and validate_solution(matrix, solution)
                if mode == "first":
                    break
        solved = solved and stream.found_any

        elapsed = time.perf_counter() - start_time
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()

    return solved, stream.emitted, stream.stats, peak, elapsed


class Benchmark:
    """
    Benchmark framework for the first-solution and all-solutions modes.

    Runs each mode on generated instances and collects performance metrics.
    """

    def __init__(
        self,
        instances_per_difficulty: int = 10,
        difficulties: Optional[List[Difficulty]] = None,
        modes: Optional[List[str]] = None,
        timeout_seconds: float = 60.0,
        seed: Optional[int] = None
    ):
        """
        Initialize the benchmark.

        Args:
            instances_per_difficulty: Number of instances to generate per difficulty.
            difficulties: List of difficulties to test (default: all).
            modes: Search modes to time (default: "first" and "all").
            timeout_seconds: Maximum time per instance per mode.
            seed: Random seed for reproducibility.
        """
        self.instances_per_difficulty = instances_per_difficulty
        self.difficulties = difficulties or list(Difficulty)
        self.modes = list(modes) if modes else list(MODES)
        self.timeout_seconds = timeout_seconds
        self.seed = seed

        for mode in self.modes:
            if mode not in MODES:
                raise ValueError(f"Mode must be one of {MODES}, got {mode!r}")

        self.instances: Dict[str, List[ExactCoverInstance]] = {}
        self.results: List[BenchmarkResult] = []

    def generate_instances(self) -> None:
        """Generate all instances for benchmarking."""
        generator = InstanceGenerator(seed=self.seed)

        for difficulty in self.difficulties:
            self.instances[difficulty.value] = generator.generate_batch(
                self.instances_per_difficulty,
                difficulty
            )

    def run(self, show_progress: bool = True) -> List[BenchmarkResult]:
        """
        Run the full benchmark suite.

        Returns:
            List of BenchmarkResult objects.
        """
        if not self.instances:
            self.generate_instances()

        self.results = []

        total_tests = sum(len(v) for v in self.instances.values()) * len(self.modes)
        pbar = tqdm(total=total_tests, desc="Benchmarking", disable=not show_progress)

        for difficulty_name, instances in self.instances.items():
            for instance_id, instance in enumerate(instances):
                for mode in self.modes:
                    result = self._run_single(instance, instance_id, difficulty_name, mode)
                    self.results.append(result)
                    pbar.update(1)

        pbar.close()
        return self.results

    def _run_single(
        self,
        instance: ExactCoverInstance,
        instance_id: int,
        difficulty: str,
        mode: str
    ) -> BenchmarkResult:
        """
        Run a single mode on a single instance.

        A search that exceeds ``timeout_seconds`` is recorded as a timeout
        and left to finish on its worker thread; the suite moves on without
        waiting for it. Python threads cannot be interrupted, so the
        abandoned search keeps using CPU until it completes.
        """
        # Use ThreadPoolExecutor to enforce timeout
        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(run_search, instance, mode)
        try:
            solved, solutions, stats, memory, elapsed = future.result(timeout=self.timeout_seconds)

            return BenchmarkResult(
                instance_id=instance_id,
                difficulty=difficulty,
                mode=mode,
                solved=solved,
                solutions=solutions,
                time_seconds=elapsed,
                memory_bytes=memory,
                iterations=stats.iterations,
                backtracks=stats.backtracks,
                nodes_explored=stats.nodes_explored,
                extra={"max_depth": stats.max_depth}
            )
        except TimeoutError:
            return self._failed(instance_id, difficulty, mode, "Timeout")
        except Exception as e:
            return self._failed(instance_id, difficulty, mode, str(e))
        finally:
            executor.shutdown(wait=False)

    def _failed(self, instance_id: int, difficulty: str, mode: str, error: str) -> BenchmarkResult:
        return BenchmarkResult(
            instance_id=instance_id,
            difficulty=difficulty,
            mode=mode,
            solved=False,
            solutions=0,
            time_seconds=self.timeout_seconds,
            memory_bytes=0,
            iterations=0,
            backtracks=0,
            nodes_explored=0,
            extra={"error": error}
        )

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics from benchmark results."""
        summary = {
            "total_instances": len(self.results) // len(self.modes) if self.modes else 0,
            "modes_tested": list(self.modes),
            "difficulties": [d.value for d in self.difficulties],
            "results_by_mode": {},
            "results_by_difficulty": {}
        }

        for mode in self.modes:
            mode_results = [r for r in self.results if r.mode == mode]
            if mode_results:
                solved = [r for r in mode_results if r.solved]
                times = [r.time_seconds for r in mode_results]
                memory = [r.memory_bytes for r in mode_results]

                summary["results_by_mode"][mode] = {
                    "accuracy": len(solved) / len(mode_results) * 100,
                    "avg_time_seconds": sum(times) / len(times),
                    "max_time_seconds": max(times),
                    "min_time_seconds": min(times),
                    "avg_memory_mb": sum(memory) / len(memory) / (1024 * 1024),
                    "total_solutions": sum(r.solutions for r in mode_results),
                    "total_solved": len(solved),
                    "total_tested": len(mode_results)
                }

        for difficulty in self.difficulties:
            diff_results = [r for r in self.results if r.difficulty == difficulty.value]
            if diff_results:
                summary["results_by_difficulty"][difficulty.value] = {}

                for mode in self.modes:
                    mode_diff_results = [r for r in diff_results if r.mode == mode]
                    if mode_diff_results:
                        solved = [r for r in mode_diff_results if r.solved]
                        times = [r.time_seconds for r in mode_diff_results]

                        summary["results_by_difficulty"][difficulty.value][mode] = {
                            "accuracy": len(solved) / len(mode_diff_results) * 100,
                            "avg_time_seconds": sum(times) / len(times),
                            "solved": len(solved),
                            "tested": len(mode_diff_results)
                        }

        return summary

    def save_results(self, output_dir: str) -> None:
        """Save benchmark results and generated instances to files."""
        os.makedirs(output_dir, exist_ok=True)

        results_file = os.path.join(output_dir, "benchmark_results.json")
        with open(results_file, "w") as f:
            json.dump([r.to_dict() for r in self.results], f, indent=2)

        summary_file = os.path.join(output_dir, "benchmark_summary.json")
        with open(summary_file, "w") as f:
            json.dump(self.get_summary(), f, indent=2)

        instances_dir = os.path.join(output_dir, "instances")
        for difficulty, instances in self.instances.items():
            diff_dir = os.path.join(instances_dir, difficulty)
            InstanceGenerator.save_to_folder(instances, diff_dir, prefix=f"instance_{difficulty}")

        print(f"Results and instances saved to {output_dir}")
