"""Visualization utilities for benchmark results."""

from __future__ import annotations
import os
from typing import List

import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np

from .benchmark import BenchmarkResult


class Visualizer:
    """
    Chart generator for exact cover benchmark results.

    Compares the first-solution and all-solutions modes across difficulties.
    """

    COLORS = {
        "first": "#3498db",     # Blue
        "all": "#9b59b6",       # Purple
    }

    def __init__(self, results: List[BenchmarkResult], output_dir: str = "results"):
        """
        Initialize the visualizer.

        Args:
            results: List of benchmark results.
            output_dir: Directory to save generated charts.
        """
        self.results = results
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

        sns.set_theme(style="whitegrid")

    def _modes(self) -> List[str]:
        return sorted(set(r.mode for r in self.results))

    def _difficulties(self) -> List[str]:
        return sorted(set(r.difficulty for r in self.results))

    def _save(self, name: str) -> str:
        plt.tight_layout()
        path = os.path.join(self.output_dir, name)
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close()
        return path

    def generate_all(self) -> List[str]:
        """
        Generate all charts.

        Returns:
            List of paths to generated chart files.
        """
        return [
            self.plot_time_comparison(),
            self.plot_time_by_difficulty(),
            self.plot_solutions_by_difficulty(),
            self.plot_nodes_comparison(),
        ]

    def plot_time_comparison(self) -> str:
        """Bar chart of average search time per mode."""
        fig, ax = plt.subplots(figsize=(8, 6))

        modes = self._modes()
        avg_times = [np.mean([r.time_seconds for r in self.results if r.mode == m]) for m in modes]
        colors = [self.COLORS.get(m, "#95a5a6") for m in modes]

        bars = ax.bar(modes, avg_times, color=colors, edgecolor='black', linewidth=0.5)

        for bar, value in zip(bars, avg_times):
            ax.annotate(f'{value:.4f}s',
                        xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                        xytext=(0, 3),
                        textcoords="offset points",
                        ha='center', va='bottom', fontsize=10)

        ax.set_xlabel('Mode', fontsize=12)
        ax.set_ylabel('Average Time (seconds)', fontsize=12)
        ax.set_title('Average Search Time by Mode', fontsize=14, fontweight='bold')
        ax.set_ylim(bottom=0)

        return self._save("time_comparison.png")

    def _grouped_bars(self, ax, metric) -> None:
        modes = self._modes()
        difficulties = self._difficulties()

        x = np.arange(len(difficulties))
        width = 0.8 / max(len(modes), 1)

        for i, mode in enumerate(modes):
            values = []
            for diff in difficulties:
                subset = [r for r in self.results if r.mode == mode and r.difficulty == diff]
                values.append(np.mean([metric(r) for r in subset]) if subset else 0)

            offset = (i - len(modes) / 2 + 0.5) * width
            ax.bar(x + offset, values, width,
                   label=mode,
                   color=self.COLORS.get(mode, "#95a5a6"),
                   edgecolor='black', linewidth=0.5)

        ax.set_xlabel('Difficulty', fontsize=12)
        ax.set_xticks(x)
        ax.set_xticklabels([d.capitalize() for d in difficulties])
        ax.legend(title='Mode')

    def plot_time_by_difficulty(self) -> str:
        """Grouped bars of average time by difficulty and mode."""
        fig, ax = plt.subplots(figsize=(12, 6))
        self._grouped_bars(ax, lambda r: r.time_seconds)
        ax.set_ylabel('Average Time (seconds)', fontsize=12)
        ax.set_title('Search Time by Difficulty and Mode', fontsize=14, fontweight='bold')
        ax.set_ylim(bottom=0)
        return self._save("time_by_difficulty.png")

    def plot_solutions_by_difficulty(self) -> str:
        """Grouped bars of the average number of solutions emitted."""
        fig, ax = plt.subplots(figsize=(12, 6))
        self._grouped_bars(ax, lambda r: r.solutions)
        ax.set_ylabel('Average Solutions Emitted', fontsize=12)
        ax.set_title('Solutions by Difficulty and Mode', fontsize=14, fontweight='bold')
        ax.set_ylim(bottom=0)
        return self._save("solutions_by_difficulty.png")

    def plot_nodes_comparison(self) -> str:
        """Grouped bars of columns covered while branching, log scale."""
        fig, ax = plt.subplots(figsize=(12, 6))
        self._grouped_bars(ax, lambda r: max(r.nodes_explored, 1))
        ax.set_ylabel('Average Nodes Explored (Log Scale)', fontsize=12)
        ax.set_title('Search Effort by Difficulty and Mode', fontsize=14, fontweight='bold')
        ax.set_yscale('log')
        return self._save("nodes_comparison.png")

    def generate_summary_table(self) -> str:
        """Generate a markdown summary table."""
        lines = [
            "# Benchmark Summary\n",
            "| Mode | Accuracy | Avg Time | Avg Memory | Avg Nodes | Solutions |",
            "|------|----------|----------|------------|-----------|-----------|"
        ]

        for mode in self._modes():
            mode_results = [r for r in self.results if r.mode == mode]

            solved = sum(1 for r in mode_results if r.solved)
            accuracy = (solved / len(mode_results)) * 100 if mode_results else 0

            avg_time = np.mean([r.time_seconds for r in mode_results])
            avg_memory = np.mean([r.memory_bytes / (1024 * 1024) for r in mode_results])
            avg_nodes = np.mean([r.nodes_explored for r in mode_results])
            solutions = sum(r.solutions for r in mode_results)

            lines.append(
                f"| {mode} | {accuracy:.1f}% | {avg_time:.4f}s | {avg_memory:.2f} MB | {int(avg_nodes):,} | {solutions:,} |"
            )

        path = os.path.join(self.output_dir, "benchmark_summary.md")
        with open(path, "w") as f:
            f.write("\n".join(lines))

        return path
