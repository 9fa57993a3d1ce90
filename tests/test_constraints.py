"""Tests for placement rules."""

from __future__ import annotations

import pytest

from timetabler.constraints import (
    PlacementRules,
    Rule,
    check_not_back_to_back,
    check_once_per_day,
    check_quota_open,
    check_teacher_daily_cap,
    teacher_periods_on_day,
)
from timetabler.data.models import GridConfig
from timetabler.scheduler.grid import Grid
from timetabler.scheduler.state import SubjectState


@pytest.fixture
def grid() -> Grid:
    return Grid(days=2, slots_per_day=5, lunch_slot_index=2)


@pytest.fixture
def subjects() -> list[SubjectState]:
    return [
        SubjectState(name="Math", teacher="Prof. A", required=2),
        SubjectState(name="Physics", teacher="Prof. A", required=2),
        SubjectState(name="CS", teacher="Prof. C", required=1),
    ]


class TestPredicates:

    def test_quota_open(self, subjects):
        assert check_quota_open(subjects[2])
        subjects[2].placed = 1
        assert not check_quota_open(subjects[2])

    def test_once_per_day(self, grid, subjects):
        grid.place(0, 0, 0)
        assert not check_once_per_day(grid, subjects, subjects[0], 0, 4)
        assert check_once_per_day(grid, subjects, subjects[0], 1, 4)
        assert check_once_per_day(grid, subjects, subjects[1], 0, 4)

    def test_once_per_day_ignores_target_cell(self, grid, subjects):
        grid.place(0, 3, 0)
        assert check_once_per_day(grid, subjects, subjects[0], 0, 3)

    def test_back_to_back(self, grid, subjects):
        grid.place(0, 3, 0)
        assert not check_not_back_to_back(grid, subjects, subjects[0], 0, 4)
        assert check_not_back_to_back(grid, subjects, subjects[1], 0, 4)
        assert check_not_back_to_back(grid, subjects, subjects[0], 0, 0)

    def test_teacher_periods_counted_across_subjects(self, grid, subjects):
        grid.place(0, 0, 0)
        grid.place(0, 1, 1)
        grid.place(0, 3, 2)
        assert teacher_periods_on_day(grid, subjects, "Prof. A", 0) == 2
        assert teacher_periods_on_day(grid, subjects, "Prof. C", 0) == 1
        assert teacher_periods_on_day(grid, subjects, "Prof. A", 1) == 0

    def test_teacher_daily_cap(self, grid, subjects):
        grid.place(0, 0, 0)
        assert not check_teacher_daily_cap(grid, subjects, subjects[1], 0, 1)
        assert check_teacher_daily_cap(grid, subjects, subjects[1], 0, 2)
        assert check_teacher_daily_cap(grid, subjects, subjects[2], 0, 1)


class TestPlacementRules:

    def test_from_config(self):
        rules = PlacementRules.from_config(GridConfig(max_teacher_periods_per_day=2, forbid_back_to_back=False))
        assert rules.max_teacher_periods_per_day == 2
        assert rules.forbid_back_to_back is False

    def test_valid_placement(self, grid, subjects):
        rules = PlacementRules()
        assert rules.explain(grid, subjects, 0, 0, 0) is None
        assert rules.is_valid_placement(grid, subjects, 0, 0, 0)

    def test_lunch_checked_first(self, grid, subjects):
        subjects[2].placed = 1
        assert PlacementRules().explain(grid, subjects, 2, 0, 2) == Rule.LUNCH

    def test_quota(self, grid, subjects):
        subjects[2].placed = 1
        assert PlacementRules().explain(grid, subjects, 2, 1, 0) == Rule.QUOTA

    def test_once_per_day(self, grid, subjects):
        grid.place(0, 0, 0)
        subjects[0].placed = 1
        assert PlacementRules().explain(grid, subjects, 0, 0, 3) == Rule.ONCE_PER_DAY

    def test_teacher_daily_cap(self, grid, subjects):
        grid.place(0, 0, 0)
        subjects[0].placed = 1
        rules = PlacementRules(max_teacher_periods_per_day=1)
        assert rules.explain(grid, subjects, 1, 0, 3) == Rule.TEACHER_DAILY_CAP
        assert rules.is_valid_placement(grid, subjects, 1, 1, 0)

    def test_default_cap_is_five(self):
        assert PlacementRules().max_teacher_periods_per_day == 5

    def test_placement_never_valid_twice_in_a_day(self, grid, subjects):
        rules = PlacementRules(forbid_back_to_back=False)
        grid.place(0, 3, 0)
        subjects[0].placed = 1
        assert not rules.is_valid_placement(grid, subjects, 0, 0, 4)
