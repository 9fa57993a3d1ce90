"""Tests for sample data generation."""

from __future__ import annotations

import pytest

from timetabler.data.generator import (
    GeneratorConfig,
    default_subjects,
    default_timetable_input,
    generate_random_input,
)
from timetabler.data.loader import check_capacity
from timetabler.data.models import GridConfig


class TestDefaults:

    def test_default_subjects(self):
        subjects = default_subjects()
        assert [s.name for s in subjects] == ["Math", "Physics", "CS"]
        assert [s.teacher for s in subjects] == ["Prof. A", "Prof. B", "Prof. C"]
        assert [s.classroom for s in subjects] == ["R101", "R102", "Lab1"]
        assert all(s.required_occurrences == 5 for s in subjects)

    def test_default_input(self):
        input_data = default_timetable_input()
        assert input_data.config == GridConfig()
        assert input_data.total_required_occurrences == 15

    def test_custom_config(self):
        config = GridConfig(days=6)
        assert default_timetable_input(config).config.days == 6


class TestRandomInput:

    def test_reproducible(self):
        first = generate_random_input(seed=11)
        second = generate_random_input(seed=11)
        assert first == second

    @pytest.mark.parametrize("seed", range(5))
    def test_within_capacity(self, seed):
        input_data = generate_random_input(GeneratorConfig(num_subjects=6), seed=seed)
        check_capacity(input_data)
        assert len(input_data.subjects) == 6

    def test_hours_never_exceed_days(self):
        config = GeneratorConfig(days=3, max_hours=10)
        input_data = generate_random_input(config, seed=3)
        assert all(s.required_occurrences <= 3 for s in input_data.subjects)

    def test_names_unique_beyond_pool(self):
        input_data = generate_random_input(
            GeneratorConfig(num_subjects=20, days=7, slots_per_day=12, lunch_slot_index=4, min_hours=1, max_hours=1),
            seed=1,
        )
        names = [s.name for s in input_data.subjects]
        assert len(set(names)) == 20
