"""Unit tests for the instance generator."""

import pytest
from exact_cover.core.validator import is_exact_cover, validate_solution
from exact_cover.generator import InstanceGenerator, ExactCoverInstance, Difficulty


class TestInstanceGenerator:
    """Tests for InstanceGenerator class."""

    def test_generated_instance_is_solvable(self):
        """The planted rows form an exact cover."""
        generator = InstanceGenerator(seed=42)
        instance = generator.generate(Difficulty.EASY)

        assert instance.difficulty == "easy"
        assert instance.planted
        assert is_exact_cover(instance.planted_solution(), instance.column_count)

    def test_solver_finds_a_cover(self):
        """The search succeeds on generated instances."""
        generator = InstanceGenerator(seed=42)
        instance, planted = generator.generate_with_solution(Difficulty.MEDIUM)
        matrix = instance.build_matrix()

        assert validate_solution(matrix, planted)
        solution, found = matrix.solve()
        assert found
        assert validate_solution(matrix, solution)

    def test_difficulty_affects_size(self):
        """Harder difficulties have more columns and rows."""
        generator = InstanceGenerator(seed=42)

        easy = generator.generate(Difficulty.EASY)
        hard = generator.generate(Difficulty.HARD)

        assert easy.column_count < hard.column_count
        assert len(easy.rows) < len(hard.rows)

    def test_generate_batch(self):
        """Test batch generation."""
        generator = InstanceGenerator(seed=42)
        instances = generator.generate_batch(3, Difficulty.EASY)

        assert len(instances) == 3
        for instance in instances:
            assert is_exact_cover(instance.planted_solution(), instance.column_count)

    def test_seed_is_reproducible(self):
        """Same seed, same instance."""
        first = InstanceGenerator(seed=7).generate(Difficulty.MEDIUM)
        second = InstanceGenerator(seed=7).generate(Difficulty.MEDIUM)

        assert first == second

    def test_rows_are_well_formed(self):
        """Rows are non-empty, in range and free of duplicates."""
        instance = InstanceGenerator(seed=1).generate_custom(10, 30, 4)

        for row in instance.rows:
            assert row
            assert len(set(row)) == len(row)
            assert all(0 <= c < 10 for c in row)
            assert len(row) <= 4

    @pytest.mark.parametrize("args", [(0, 5, 2), (5, 5, 0), (5, -1, 2)])
    def test_bad_parameters(self, args):
        with pytest.raises(ValueError):
            InstanceGenerator(seed=1).generate_custom(*args)

    def test_save_and_load(self, tmp_path):
        """Saved instances load back unchanged."""
        generator = InstanceGenerator(seed=5)
        instances = generator.generate_batch(2, Difficulty.EASY)

        InstanceGenerator.save_to_folder(instances, str(tmp_path), prefix="easy")
        loaded = InstanceGenerator.load_from_file(str(tmp_path / "easy_2.json"))

        assert loaded == instances[1]


class TestDifficultyLevels:
    """Test difficulty profiles."""

    def test_profiles_grow(self):
        sizes = [d.profile[0] for d in Difficulty]
        assert sizes == sorted(sizes)

    def test_profile_fields(self):
        """Each profile gives column count, decoy rows and max row size."""
        for difficulty in Difficulty:
            column_count, decoys, max_row_size = difficulty.profile
            assert column_count > 0
            assert decoys >= 0
            assert 0 < max_row_size <= column_count

    def test_instance_round_trip_dict(self):
        instance = ExactCoverInstance(column_count=2, rows=[[0], [1]], planted=[0, 1])
        assert ExactCoverInstance.from_dict(instance.to_dict()) == instance


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
