"""
Backtracking search over the weekly grid.

The search walks the cells in row-major order (every slot of day 0, then
day 1, ...). At each cell it draws a fresh permutation of the subjects,
tries every subject the placement rules allow, and finally tries leaving
the cell empty. The first complete assignment in which every subject has
exactly its required occurrences wins.

Usage:
    scheduler = BacktrackingScheduler(rules, shuffler=RandomShuffler(seed=7))
    result = scheduler.solve(subjects, days=5, slots_per_day=7, lunch_slot_index=3)
    if result.is_feasible:
        pairs = result.grid.to_pairs(result.subjects)
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

from timetabler.constraints import PlacementRules

from .grid import Grid
from .state import Placement, SearchStats, SubjectState

logger = logging.getLogger(__name__)

# Returns a new ordering of the given subject indices
Shuffler = Callable[[list[int]], list[int]]


# =============================================================================
# Candidate Ordering
# =============================================================================

class RandomShuffler:
    """Uniform random permutation, drawn fresh on every call."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random(seed)

    def __call__(self, indices: list[int]) -> list[int]:
        shuffled = list(indices)
        self.rng.shuffle(shuffled)
        return shuffled


def identity_shuffler(indices: list[int]) -> list[int]:
    """Keep the input order. Makes the search deterministic."""
    return list(indices)


# =============================================================================
# Results
# =============================================================================

class ScheduleStatus(str, Enum):
    """Outcome of a solve."""
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    ABORTED = "aborted"


@dataclass
class SearchBudget:
    """Optional limits on a single solve."""
    max_steps: Optional[int] = None
    time_limit_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        if self.max_steps is not None and self.max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        if self.time_limit_seconds is not None and self.time_limit_seconds <= 0:
            raise ValueError("time_limit_seconds must be positive")

    @property
    def unlimited(self) -> bool:
        return self.max_steps is None and self.time_limit_seconds is None


@dataclass
class ScheduleResult:
    """Result of one solve. grid is only set when status is FEASIBLE."""
    status: ScheduleStatus
    subjects: list[SubjectState]
    days: int
    slots_per_day: int
    lunch_slot_index: int
    grid: Optional[Grid] = None
    stats: SearchStats = field(default_factory=SearchStats)
    solve_time_seconds: float = 0.0
    abort_reason: Optional[str] = None

    @property
    def is_feasible(self) -> bool:
        return self.status == ScheduleStatus.FEASIBLE

    def to_pairs(self) -> Optional[list[list[Optional[tuple[str, str]]]]]:
        """The grid as (subject, teacher) pairs, or None when there is no solution."""
        if self.grid is None:
            return None
        return self.grid.to_pairs(self.subjects)


# =============================================================================
# Scheduler
# =============================================================================

class BacktrackingScheduler:
    """
    Depth-first backtracking scheduler.

    One instance may run many solves, one at a time. Each solve owns its
    grid and resets the counters of the subjects it is given.
    """

    def __init__(
        self,
        rules: Optional[PlacementRules] = None,
        shuffler: Optional[Shuffler] = None,
        budget: Optional[SearchBudget] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.rules = rules or PlacementRules()
        self.shuffler = shuffler or RandomShuffler()
        self.budget = budget or SearchBudget()
        self.clock = clock

        # Per-solve state
        self._grid: Optional[Grid] = None
        self._subjects: list[SubjectState] = []
        self._stats = SearchStats()
        self._deadline: Optional[float] = None
        self._abort_reason: Optional[str] = None

    def solve(
        self,
        subjects: Sequence[SubjectState],
        days: int,
        slots_per_day: int,
        lunch_slot_index: int,
    ) -> ScheduleResult:
        """
        Search for a grid that places every subject exactly its required times.

        The caller is expected to have rejected inputs whose total required
        occurrences exceed days * (slots_per_day - 1) already.

        Args:
            subjects: Subjects to place. Their placed counters are reset to 0.
            days: Number of days in the week
            slots_per_day: Number of slots per day
            lunch_slot_index: Slot reserved for lunch on every day

        Returns:
            ScheduleResult. INFEASIBLE and ABORTED results carry no grid and
            leave every placed counter at 0.

        Raises:
            ValueError: If the grid shape or a subject is invalid
        """
        grid = Grid(days, slots_per_day, lunch_slot_index)
        for subject in subjects:
            if subject.required <= 0:
                raise ValueError(f"Subject '{subject.name}' must require at least one occurrence")

        for subject in subjects:
            subject.placed = 0

        self._grid = grid
        self._subjects = list(subjects)
        self._stats = SearchStats()
        self._abort_reason = None

        started = self.clock()
        self._deadline = None
        if self.budget.time_limit_seconds is not None:
            self._deadline = started + self.budget.time_limit_seconds

        logger.info(
            "Searching %d subjects (%d occurrences) on %d days x %d slots, lunch at slot %d",
            len(self._subjects),
            sum(s.required for s in self._subjects),
            days,
            slots_per_day,
            lunch_slot_index,
        )

        found = self._search(0, 0, depth=0)
        elapsed = self.clock() - started

        if found:
            status = ScheduleStatus.FEASIBLE
            self._grid.freeze()
        elif self._abort_reason is not None:
            status = ScheduleStatus.ABORTED
        else:
            status = ScheduleStatus.INFEASIBLE

        logger.info(
            "Search %s after %d nodes (%d placements, %d removals) in %.3fs",
            status.value,
            self._stats.nodes,
            self._stats.placements,
            self._stats.removals,
            elapsed,
        )

        return ScheduleResult(
            status=status,
            subjects=self._subjects,
            days=days,
            slots_per_day=slots_per_day,
            lunch_slot_index=lunch_slot_index,
            grid=self._grid if found else None,
            stats=self._stats,
            solve_time_seconds=elapsed,
            abort_reason=self._abort_reason,
        )

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def _search(self, day: int, slot: int, depth: int) -> bool:
        """Decide cell (day, slot) and everything after it."""
        grid = self._grid
        stats = self._stats

        stats.nodes += 1
        stats.max_depth = max(stats.max_depth, depth)

        if self._budget_exhausted():
            return False

        if day == grid.days:
            return all(s.is_complete for s in self._subjects)

        next_day, next_slot = (day, slot + 1) if slot + 1 < grid.slots_per_day else (day + 1, 0)

        for index in self.shuffler(list(range(len(self._subjects)))):
            violated = self.rules.explain(grid, self._subjects, index, day, slot)
            if violated is not None:
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(
                        "Reject %s at day %d slot %d: %s",
                        self._subjects[index].name, day, slot, violated.value,
                    )
                continue

            with Placement(grid, self._subjects, index, day, slot, stats) as placement:
                if self._search(next_day, next_slot, depth + 1):
                    placement.commit()
                    return True

            if self._abort_reason is not None:
                return False

        # Leave the cell free
        return self._search(next_day, next_slot, depth + 1)

    def _budget_exhausted(self) -> bool:
        if self._abort_reason is not None:
            return True
        if self.budget.max_steps is not None and self._stats.nodes > self.budget.max_steps:
            self._abort_reason = f"step budget of {self.budget.max_steps} exhausted"
        elif self._deadline is not None and self.clock() > self._deadline:
            self._abort_reason = f"time limit of {self.budget.time_limit_seconds}s exhausted"
        else:
            return False
        logger.warning("Search aborted: %s", self._abort_reason)
        return True


def solve(
    subjects: Sequence[SubjectState],
    days: int,
    slots_per_day: int,
    lunch_slot_index: int,
    rules: Optional[PlacementRules] = None,
    shuffler: Optional[Shuffler] = None,
    budget: Optional[SearchBudget] = None,
) -> ScheduleResult:
    """Convenience function: run one solve with a fresh scheduler."""
    scheduler = BacktrackingScheduler(rules=rules, shuffler=shuffler, budget=budget)
    return scheduler.solve(subjects, days, slots_per_day, lunch_slot_index)
