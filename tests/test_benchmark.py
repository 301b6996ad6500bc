"""Smoke tests for the benchmark harness and charts."""

import os
import threading
import time
import tracemalloc

import matplotlib
matplotlib.use("Agg")

import pytest
from exact_cover.benchmark import Benchmark, Visualizer, run_search
from exact_cover.benchmark import benchmark as benchmark_module
from exact_cover.generator import InstanceGenerator, ExactCoverInstance, Difficulty


class TestRunSearch:
    """Tests for a single timed search."""

    def test_first_mode(self):
        instance = InstanceGenerator(seed=2).generate(Difficulty.EASY)
        solved, solutions, stats, memory, elapsed = run_search(instance, "first")

        assert solved
        assert solutions == 1
        assert stats.solutions == 1
        assert memory > 0
        assert elapsed > 0

    def test_all_mode_unsolvable(self):
        instance = ExactCoverInstance(column_count=3, rows=[[0, 1]])
        solved, solutions, stats, _, _ = run_search(instance, "all")

        assert not solved
        assert solutions == 0

    def test_unknown_mode(self):
        instance = ExactCoverInstance(column_count=1, rows=[[0]])
        with pytest.raises(ValueError):
            run_search(instance, "fastest")

    def test_tracing_stopped_on_error(self, monkeypatch):
        """Memory tracing is switched off even when the search fails."""
        def broken(matrix, solution):
            raise RuntimeError("validation failed")

        monkeypatch.setattr(benchmark_module, "validate_solution", broken)
        instance = ExactCoverInstance(column_count=1, rows=[[0]])

        with pytest.raises(RuntimeError):
            run_search(instance, "first")

        assert not tracemalloc.is_tracing()


class TestBenchmark:
    """Tests for the Benchmark class."""

    def test_run_and_summary(self, tmp_path):
        benchmark = Benchmark(
            instances_per_difficulty=2,
            difficulties=[Difficulty.EASY],
            seed=42
        )
        results = benchmark.run(show_progress=False)

        assert len(results) == 4
        assert all(r.solved for r in results)

        first = [r for r in results if r.mode == "first"]
        every = [r for r in results if r.mode == "all"]
        for a, b in zip(first, every):
            assert b.solutions >= a.solutions == 1

        summary = benchmark.get_summary()
        assert summary["total_instances"] == 2
        assert summary["results_by_mode"]["first"]["accuracy"] == 100

        benchmark.save_results(str(tmp_path))
        assert (tmp_path / "benchmark_results.json").exists()
        assert (tmp_path / "instances" / "easy" / "instance_easy_1.json").exists()

    def test_timeout_does_not_wait(self, monkeypatch):
        """A stuck search is reported as a timeout without blocking the suite."""
        release = threading.Event()

        def stuck(instance, mode):
            release.wait(30)
            raise RuntimeError("released")

        monkeypatch.setattr(benchmark_module, "run_search", stuck)
        benchmark = Benchmark(timeout_seconds=0.05)
        instance = ExactCoverInstance(column_count=1, rows=[[0]])

        start = time.perf_counter()
        try:
            result = benchmark._run_single(instance, 0, "easy", "all")
        finally:
            release.set()

        assert time.perf_counter() - start < 5
        assert not result.solved
        assert result.extra == {"error": "Timeout"}

    def test_bad_mode(self):
        with pytest.raises(ValueError):
            Benchmark(modes=["first", "random"])

    def test_charts(self, tmp_path):
        benchmark = Benchmark(
            instances_per_difficulty=1,
            difficulties=[Difficulty.EASY, Difficulty.MEDIUM],
            seed=1
        )
        results = benchmark.run(show_progress=False)

        visualizer = Visualizer(results, str(tmp_path))
        charts = visualizer.generate_all()
        table = visualizer.generate_summary_table()

        assert len(charts) == 4
        assert all(os.path.exists(path) for path in charts)
        assert os.path.exists(table)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
