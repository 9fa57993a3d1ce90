"""Tests for the backtracking scheduler."""

from __future__ import annotations

import itertools
import logging
from collections import Counter

import pytest

from timetabler.constraints import PlacementRules
from timetabler.data.generator import default_timetable_input
from timetabler.data.models import GridConfig, SubjectSpec, TimetableInput
from timetabler.exceptions import CapacityExceededError
from timetabler.main import schedule
from timetabler.scheduler import (
    BacktrackingScheduler,
    RandomShuffler,
    ScheduleStatus,
    SearchBudget,
    SubjectState,
    identity_shuffler,
    solve,
)


def reversed_shuffler(indices: list[int]) -> list[int]:
    return list(reversed(indices))

    """Identity order on the first, third, ... call and reversed order in between."""
class AlternatingShuffler:
    """Identity order on even calls, reversed order on odd calls."""

    def __init__(self):
        self.calls: list[list[int]] = []

    def __call__(self, indices: list[int]) -> list[int]:
        self.calls.append(list(indices))
        if len(self.calls) % 2 == 1:
            return list(indices)
        return list(reversed(indices))


def make_input(subjects: list[tuple[str, str, int]], **config) -> TimetableInput:
    return TimetableInput(
        config=GridConfig(**config),
        subjects=[
            SubjectSpec(name=name, teacher=teacher, required_occurrences=hours)
            for name, teacher, hours in subjects
        ],
    )


def assert_valid_timetable(result, input_data: TimetableInput) -> None:
    """Check every hard rule against a finished grid."""
    config = input_data.config
    grid = result.grid
    assert result.is_feasible
    assert grid.frozen

    counts = Counter(index for _, _, index in grid.occupied_cells())
    for index, subject in enumerate(input_data.subjects):
        assert counts[index] == subject.required_occurrences
        assert result.subjects[index].placed == subject.required_occurrences

    for day in range(config.days):
        assert grid.is_empty(day, config.lunch_slot_index)

        names = [result.subjects[i].name for i in (grid.subject_at(day, s) for s in range(config.slots_per_day)) if i is not None]
        assert len(names) == len(set(names))

        for slot in range(1, config.slots_per_day):
            before, current = grid.subject_at(day, slot - 1), grid.subject_at(day, slot)
            if before is not None and current is not None:
                assert result.subjects[before].name != result.subjects[current].name

        teachers = Counter(result.subjects[i].teacher for i in (grid.subject_at(day, s) for s in range(config.slots_per_day)) if i is not None)
        assert all(n <= config.max_teacher_periods_per_day for n in teachers.values())


class TestShufflers:

    def test_identity(self):
        assert identity_shuffler([0, 1, 2]) == [0, 1, 2]

    def test_random_is_permutation(self):
        shuffler = RandomShuffler(seed=3)
        assert sorted(shuffler([0, 1, 2, 3, 4])) == [0, 1, 2, 3, 4]

    def test_random_is_seeded(self):
        first, second = RandomShuffler(seed=9), RandomShuffler(seed=9)
        assert [first(list(range(6))) for _ in range(4)] == [second(list(range(6))) for _ in range(4)]

    def test_does_not_mutate_input(self):
        indices = [0, 1, 2]
        RandomShuffler(seed=1)(indices)
        assert indices == [0, 1, 2]


class TestSearchBudget:

    def test_unlimited_by_default(self):
        assert SearchBudget().unlimited

    @pytest.mark.parametrize("kwargs", [{"max_steps": 0}, {"time_limit_seconds": 0}, {"time_limit_seconds": -1.0}])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            SearchBudget(**kwargs)


class TestFeasibleSchedules:

    def test_default_week(self):
        input_data = default_timetable_input()
        result = schedule(input_data, seed=42)

        assert result.status == ScheduleStatus.FEASIBLE
        assert_valid_timetable(result, input_data)

    @pytest.mark.parametrize("seed", range(5))
    def test_random_orders_stay_valid(self, seed):
        input_data = make_input([
            ("Math", "Prof. A", 4),
            ("Physics", "Prof. B", 3),
            ("CS", "Prof. C", 5),
            ("Chemistry", "Prof. B", 2),
        ])
        result = schedule(input_data, seed=seed)
        assert_valid_timetable(result, input_data)

    def test_shared_teacher(self):
        input_data = make_input([("Math", "Prof. A", 5), ("Stats", "Prof. A", 5)])
        result = schedule(input_data, seed=1)

        assert_valid_timetable(result, input_data)
        for day in range(5):
            lessons = [i for i in (result.grid.subject_at(day, s) for s in range(7)) if i is not None]
            assert sorted(lessons) == [0, 1]

    def test_identity_order_fills_earliest_cells(self):
        subjects = [
            SubjectState(name="A", teacher="T1", required=1),
            SubjectState(name="B", teacher="T2", required=1),
        ]
        result = solve(subjects, days=1, slots_per_day=3, lunch_slot_index=1, shuffler=identity_shuffler)

        assert result.to_pairs() == [[("A", "T1"), None, ("B", "T2")]]

    def test_candidate_order_follows_shuffler(self):
        subjects = [
            SubjectState(name="A", teacher="T1", required=1),
            SubjectState(name="B", teacher="T2", required=1),
        ]
        result = solve(subjects, days=1, slots_per_day=3, lunch_slot_index=1, shuffler=reversed_shuffler)

        assert result.to_pairs() == [[("B", "T2"), None, ("A", "T1")]]

    def test_fresh_order_for_every_cell(self):
        shuffler = AlternatingShuffler()
        subjects = [SubjectState(name="A", teacher="T1", required=1)]
        result = solve(subjects, days=2, slots_per_day=3, lunch_slot_index=1, shuffler=shuffler)

        assert result.is_feasible
        assert len(shuffler.calls) == 6
        assert all(call == [0] for call in shuffler.calls)

    def test_placement_follows_order_of_each_call(self):
        shuffler = AlternatingShuffler()
        subjects = [
            SubjectState(name="A", teacher="T1", required=2),
            SubjectState(name="B", teacher="T2", required=2),
        ]
        result = solve(subjects, days=2, slots_per_day=3, lunch_slot_index=1, shuffler=shuffler)

        # Day 1 opens on the fourth call, so B comes first there
        assert result.to_pairs() == [
            [("A", "T1"), None, ("B", "T2")],
            [("B", "T2"), None, ("A", "T1")],
        ]
        assert len(shuffler.calls) == 6

    def test_same_seed_same_grid(self):
        input_data = default_timetable_input()
        first = schedule(input_data, seed=123)
        second = schedule(input_data, seed=123)
        assert first.to_pairs() == second.to_pairs()

    def test_counters_reset_between_solves(self):
        subjects = [SubjectState(name="A", teacher="T1", required=2, placed=2)]
        scheduler = BacktrackingScheduler(shuffler=identity_shuffler)

        first = scheduler.solve(subjects, days=2, slots_per_day=2, lunch_slot_index=1)
        second = scheduler.solve(subjects, days=2, slots_per_day=2, lunch_slot_index=1)

        assert first.is_feasible and second.is_feasible
        assert second.to_pairs() == [[("A", "T1"), None], [("A", "T1"), None]]
        assert subjects[0].placed == 2

    def test_stats_balance(self):
        input_data = default_timetable_input()
        result = schedule(input_data, seed=5)
        stats = result.stats

        assert stats.nodes > 0
        assert stats.net_placements == sum(s.placed for s in result.subjects) == 15
        assert stats.max_depth == input_data.config.days * input_data.config.slots_per_day

    def test_back_to_back_can_be_disabled(self):
        input_data = make_input([("Math", "Prof. A", 2)], days=2, slots_per_day=3, lunch_slot_index=1,
                                forbid_back_to_back=False)
        result = schedule(input_data, shuffler=identity_shuffler)
        assert_valid_timetable(result, input_data)


class TestInfeasible:

    def test_more_hours_than_days(self):
        input_data = make_input([("Math", "Prof. A", 3)], days=2, slots_per_day=3, lunch_slot_index=1)
        result = schedule(input_data, seed=0)

        assert result.status == ScheduleStatus.INFEASIBLE
        assert result.grid is None
        assert result.to_pairs() is None
        assert all(s.placed == 0 for s in result.subjects)
        assert result.stats.placements == result.stats.removals

    def test_teacher_daily_cap(self):
        input_data = make_input(
            [("A", "Prof. X", 2), ("B", "Prof. X", 2)],
            days=2, slots_per_day=3, lunch_slot_index=1, max_teacher_periods_per_day=1,
        )
        result = schedule(input_data, seed=0)

        assert result.status == ScheduleStatus.INFEASIBLE
        assert all(s.placed == 0 for s in result.subjects)

    def test_cap_met_when_raised(self):
        input_data = make_input(
            [("A", "Prof. X", 2), ("B", "Prof. X", 2)],
            days=2, slots_per_day=3, lunch_slot_index=1, max_teacher_periods_per_day=2,
        )
        assert_valid_timetable(schedule(input_data, seed=0), input_data)

    def test_capacity_checked_before_search(self):
        input_data = make_input([("Math", "Prof. A", 14), ("Physics", "Prof. B", 13), ("CS", "Prof. C", 13)])
        with pytest.raises(CapacityExceededError):
            schedule(input_data, seed=0)

    def test_single_subject_over_capacity(self):
        input_data = make_input([("Math", "Prof. A", 40)])
        with pytest.raises(CapacityExceededError) as exc_info:
            schedule(input_data, seed=0)
        assert exc_info.value.required == 40
        assert exc_info.value.available == 30

    def test_invalid_grid_shape(self):
        subjects = [SubjectState(name="A", teacher="T1", required=1)]
        with pytest.raises(ValueError):
            solve(subjects, days=1, slots_per_day=3, lunch_slot_index=3)


class TestBudget:

    def test_step_budget_aborts(self):
        result = schedule(default_timetable_input(), seed=0, budget=SearchBudget(max_steps=3))

        assert result.status == ScheduleStatus.ABORTED
        assert result.grid is None
        assert result.abort_reason == "step budget of 3 exhausted"
        assert all(s.placed == 0 for s in result.subjects)
        assert result.stats.placements == result.stats.removals

    def test_time_budget_aborts(self):
        ticks = itertools.count()
        scheduler = BacktrackingScheduler(
            shuffler=identity_shuffler,
            budget=SearchBudget(time_limit_seconds=0.5),
            clock=lambda: float(next(ticks)),
        )
        subjects = [SubjectState(name="A", teacher="T1", required=1)]
        result = scheduler.solve(subjects, days=1, slots_per_day=3, lunch_slot_index=1)

        assert result.status == ScheduleStatus.ABORTED
        assert "time limit" in result.abort_reason

    def test_generous_budget_does_not_interfere(self):
        result = schedule(default_timetable_input(), seed=0, budget=SearchBudget(max_steps=100_000))
        assert result.is_feasible

    def test_abort_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="timetabler"):
            schedule(default_timetable_input(), seed=0, budget=SearchBudget(max_steps=1))
        assert "Search aborted" in caplog.text


class TestRules:

    def test_custom_rules(self):
        subjects = [
            SubjectState(name="A", teacher="T", required=1),
            SubjectState(name="B", teacher="T", required=1),
        ]
        rules = PlacementRules(max_teacher_periods_per_day=1)
        result = solve(subjects, days=2, slots_per_day=2, lunch_slot_index=1, rules=rules,
                       shuffler=identity_shuffler)

        assert result.to_pairs() == [[("A", "T"), None], [("B", "T"), None]]
