"""Random exact cover instances with a planted solution."""

from __future__ import annotations
import json
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..core.matrix import Matrix


class Difficulty(Enum):
    """Difficulty levels for generated instances."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @property
    def profile(self) -> Tuple[int, int, int]:
        """(column_count, decoy_rows, max_row_size) for this difficulty."""
        profiles = {
            Difficulty.EASY: (12, 20, 4),
            Difficulty.MEDIUM: (24, 60, 5),
            Difficulty.HARD: (36, 150, 5),
            Difficulty.EXPERT: (48, 300, 6),
        }
        return profiles[self]


@dataclass
class ExactCoverInstance:
    """A generated problem: its rows and the row indices of the planted cover."""
    column_count: int
    rows: List[List[int]]
    planted: List[int] = field(default_factory=list)
    difficulty: str = ""

    def build_matrix(self) -> Matrix:
        """Create a fresh matrix holding this instance's rows."""
        matrix = Matrix(self.column_count)
        matrix.add_rows(self.rows)
        return matrix

    def planted_solution(self) -> Dict[int, List[int]]:
        return {r: list(self.rows[r]) for r in self.planted}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "difficulty": self.difficulty,
            "column_count": self.column_count,
            "rows": self.rows,
            "planted": self.planted,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ExactCoverInstance:
        return cls(
            column_count=data["column_count"],
            rows=[list(r) for r in data["rows"]],
            planted=list(data.get("planted", [])),
            difficulty=data.get("difficulty", ""),
        )


class InstanceGenerator:
    """
    Generator for exact cover instances with at least one solution.

    Algorithm:
    1. Shuffle the columns and cut them into random pieces (the planted cover)
    2. Add random decoy rows drawn from the same columns
    3. Shuffle all rows together so the planted rows are not first
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize the generator.

        Args:
            seed: Random seed for reproducibility.
        """
        self.rng = np.random.default_rng(seed)

    def generate(self, difficulty: Difficulty = Difficulty.MEDIUM) -> ExactCoverInstance:
        """Generate an instance using the difficulty's profile."""
        column_count, decoys, max_row_size = difficulty.profile
        instance = self.generate_custom(column_count, decoys, max_row_size)
        instance.difficulty = difficulty.value
        return instance

    def generate_batch(self, count: int, difficulty: Difficulty = Difficulty.MEDIUM) -> List[ExactCoverInstance]:
        """Generate multiple instances of the same difficulty."""
        return [self.generate(difficulty) for _ in range(count)]

    def generate_with_solution(
        self, difficulty: Difficulty = Difficulty.MEDIUM
    ) -> Tuple[ExactCoverInstance, Dict[int, List[int]]]:
        """Generate an instance along with its planted solution."""
        instance = self.generate(difficulty)
        return instance, instance.planted_solution()

    def generate_custom(self, column_count: int, decoys: int, max_row_size: int) -> ExactCoverInstance:
        """
        Generate an instance with explicit parameters.

        Args:
            column_count: Number of columns (>= 1).
            decoys: Number of random rows added besides the planted cover.
            max_row_size: Largest number of columns in any row.
        """
        if column_count < 1:
            raise ValueError(f"Column count must be >= 1, got {column_count}")
        if max_row_size < 1:
            raise ValueError(f"Max row size must be >= 1, got {max_row_size}")
        if decoys < 0:
            raise ValueError(f"Decoy count must be >= 0, got {decoys}")

        rows = self._planted_rows(column_count, max_row_size)
        planted_count = len(rows)

        for _ in range(decoys):
            size = int(self.rng.integers(1, min(max_row_size, column_count) + 1))
            cols = self.rng.choice(column_count, size=size, replace=False)
            rows.append(sorted(int(c) for c in cols))

        order = self.rng.permutation(len(rows))
        shuffled = [rows[i] for i in order]
        planted = sorted(int(pos) for pos in np.flatnonzero(order < planted_count))

        return ExactCoverInstance(column_count=column_count, rows=shuffled, planted=planted)

    def _planted_rows(self, column_count: int, max_row_size: int) -> List[List[int]]:
        """Cut a shuffled column list into pieces of random size."""
        columns = [int(c) for c in self.rng.permutation(column_count)]
        pieces = []
        start = 0
        while start < column_count:
            size = int(self.rng.integers(1, max_row_size + 1))
            pieces.append(sorted(columns[start:start + size]))
            start += size
        return pieces

    @staticmethod
    def save_to_folder(instances: List[ExactCoverInstance], folder_path: str, prefix: str = "instance") -> None:
        """
        Save a list of instances to a folder as individual JSON files.

        Args:
            instances: Instances to save.
            folder_path: Directory to save the instances.
            prefix: Prefix for the filename (default: "instance").
        """
        os.makedirs(folder_path, exist_ok=True)

        for i, instance in enumerate(instances, 1):
            file_path = os.path.join(folder_path, f"{prefix}_{i}.json")
            with open(file_path, "w") as f:
                json.dump(instance.to_dict(), f, indent=2)

    @staticmethod
    def load_from_file(file_path: str) -> ExactCoverInstance:
        """Load an instance written by ``save_to_folder``."""
        with open(file_path) as f:
            return ExactCoverInstance.from_dict(json.load(f))
