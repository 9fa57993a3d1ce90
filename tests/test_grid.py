"""Tests for the weekly grid and scoped placements."""

from __future__ import annotations

import copy
import pickle

import pytest

from timetabler.scheduler.grid import EMPTY, Grid, Occupied
from timetabler.scheduler.state import Placement, SearchStats, SubjectState


@pytest.fixture
def grid() -> Grid:
    return Grid(days=2, slots_per_day=4, lunch_slot_index=2)


@pytest.fixture
def subjects() -> list[SubjectState]:
    return [
        SubjectState(name="Math", teacher="Prof. A", required=2),
        SubjectState(name="Physics", teacher="Prof. B", required=1, classroom="R102"),
    ]


class TestGrid:

    def test_starts_empty(self, grid):
        assert all(grid.is_empty(d, s) for d in range(2) for s in range(4))
        assert list(grid.occupied_cells()) == []

    @pytest.mark.parametrize("shape", [(0, 4, 0), (2, 0, 0), (2, 4, 4), (2, 4, -1)])
    def test_invalid_shape(self, shape):
        with pytest.raises(ValueError):
            Grid(*shape)

    def test_place_and_clear(self, grid):
        grid.place(1, 3, 0)
        assert grid.get(1, 3) == Occupied(0)
        assert grid.subject_at(1, 3) == 0
        assert list(grid.occupied_cells()) == [(1, 3, 0)]

        grid.clear(1, 3)
        assert grid.get(1, 3) is EMPTY
        assert grid.subject_at(1, 3) is None

    def test_lunch_slot_rejected(self, grid):
        with pytest.raises(ValueError, match="lunch"):
            grid.place(0, 2, 0)

    def test_occupied_cell_rejected(self, grid):
        grid.place(0, 0, 0)
        with pytest.raises(ValueError, match="occupied"):
            grid.place(0, 0, 1)

    def test_frozen_grid_is_read_only(self, grid):
        grid.place(0, 0, 1)
        grid.freeze()
        assert grid.frozen
        with pytest.raises(RuntimeError):
            grid.place(0, 1, 0)
        with pytest.raises(RuntimeError):
            grid.clear(0, 0)

    def test_day_cells(self, grid):
        grid.place(0, 1, 1)
        assert grid.day_cells(0) == [EMPTY, Occupied(1), EMPTY, EMPTY]

    def test_to_pairs(self, grid, subjects):
        grid.place(0, 0, 0)
        grid.place(1, 3, 1)
        pairs = grid.to_pairs(subjects)
        assert pairs[0] == [("Math", "Prof. A"), None, None, None]
        assert pairs[1] == [None, None, None, ("Physics", "Prof. B")]

    def test_copied_grid_keeps_empty_cells(self, grid):
        grid.place(0, 0, 1)
        for clone in (copy.deepcopy(grid), pickle.loads(pickle.dumps(grid))):
            assert clone.is_empty(0, 1)
            assert not clone.is_empty(0, 0)
            assert list(clone.occupied_cells()) == [(0, 0, 1)]

    def test_empty_repr(self):
        assert repr(EMPTY) == "EMPTY"


class TestSubjectState:

    def test_required_must_be_positive(self):
        with pytest.raises(ValueError):
            SubjectState(name="Math", teacher="Prof. A", required=0)

    def test_remaining_and_complete(self):
        subject = SubjectState(name="Math", teacher="Prof. A", required=2, placed=1)
        assert subject.remaining == 1
        assert not subject.is_complete
        subject.placed = 2
        assert subject.is_complete

    def test_label(self, subjects):
        assert subjects[0].label() == "Math (Prof. A)"
        assert subjects[1].label() == "Physics (Prof. B, R102)"


class TestPlacement:

    def test_undone_without_commit(self, grid, subjects):
        stats = SearchStats()
        with Placement(grid, subjects, 0, 0, 1, stats):
            assert grid.subject_at(0, 1) == 0
            assert subjects[0].placed == 1

        assert grid.is_empty(0, 1)
        assert subjects[0].placed == 0
        assert stats.placements == 1
        assert stats.removals == 1
        assert stats.net_placements == 0

    def test_kept_after_commit(self, grid, subjects):
        stats = SearchStats()
        with Placement(grid, subjects, 1, 1, 0, stats) as placement:
            placement.commit()

        assert grid.subject_at(1, 0) == 1
        assert subjects[1].placed == 1
        assert stats.net_placements == 1

    def test_undone_on_exception(self, grid, subjects):
        with pytest.raises(KeyError):
            with Placement(grid, subjects, 0, 0, 0):
                raise KeyError("boom")

        assert grid.is_empty(0, 0)
        assert subjects[0].placed == 0

    def test_full_quota_rejected(self, grid, subjects):
        subjects[1].placed = 1
        with pytest.raises(RuntimeError, match="already has all occurrences"):
            with Placement(grid, subjects, 1, 0, 0):
                pass
        assert grid.is_empty(0, 0)

    def test_nested_placements_unwind(self, grid, subjects):
        stats = SearchStats()
        with Placement(grid, subjects, 0, 0, 0, stats):
            with Placement(grid, subjects, 1, 0, 1, stats):
                assert sum(s.placed for s in subjects) == stats.net_placements == 2
            assert sum(s.placed for s in subjects) == stats.net_placements == 1
        assert sum(s.placed for s in subjects) == stats.net_placements == 0

    def test_stats_to_dict(self):
        stats = SearchStats(nodes=4, placements=3, removals=1, max_depth=2)
        assert stats.to_dict() == {"nodes": 4, "placements": 3, "removals": 1, "maxDepth": 2}
