"""
Constraint modules for the timetable scheduler.

Each module provides the rule twice: as a predicate evaluated by the
backtracking search against the current grid, and as a CP-SAT
constraint added to a FeasibilityModelBuilder.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Sequence

from timetabler.data.models import DEFAULT_MAX_TEACHER_PERIODS_PER_DAY

from .core import (
    check_quota_open,
    add_one_subject_per_cell,
    add_exact_quota,
)
from .availability import (
    check_not_lunch,
    add_lunch_exclusion,
)
from .distribution import (
    check_once_per_day,
    check_not_back_to_back,
    add_once_per_day,
    add_no_back_to_back,
)
from .daily_limits import (
    teacher_periods_on_day,
    check_teacher_daily_cap,
    add_teacher_daily_cap,
)

if TYPE_CHECKING:
    from timetabler.data.models import GridConfig
    from timetabler.model_builder import FeasibilityModelBuilder
    from timetabler.scheduler.grid import Grid
    from timetabler.scheduler.state import SubjectState


class Rule(str, Enum):
    """Placement rules, in the order they are evaluated."""
    LUNCH = "lunch"
    QUOTA = "quota"
    ONCE_PER_DAY = "once_per_day"
    BACK_TO_BACK = "back_to_back"
    TEACHER_DAILY_CAP = "teacher_daily_cap"


# =============================================================================
# Placement Rules
# =============================================================================

@dataclass
class PlacementRules:
    """
    The validity predicate used by the backtracking search.

    Usage:
        rules = PlacementRules.from_config(input_data.config)
        if rules.is_valid_placement(grid, subjects, index, day, slot):
            ...
    """
    max_teacher_periods_per_day: int = DEFAULT_MAX_TEACHER_PERIODS_PER_DAY
    forbid_back_to_back: bool = True

    @classmethod
    def from_config(cls, config: GridConfig) -> PlacementRules:
        return cls(
            max_teacher_periods_per_day=config.max_teacher_periods_per_day,
            forbid_back_to_back=config.forbid_back_to_back,
        )

    def explain(
        self,
        grid: Grid,
        subjects: Sequence[SubjectState],
        subject_index: int,
        day: int,
        slot: int,
    ) -> Optional[Rule]:
        """
        Find the first rule that rejects placing a subject in a cell.

        Returns:
            The violated Rule, or None if the placement is valid
        """
        subject = subjects[subject_index]

        if not check_not_lunch(grid, slot):
            return Rule.LUNCH
        if not check_quota_open(subject):
            return Rule.QUOTA
        if not check_once_per_day(grid, subjects, subject, day, slot):
            return Rule.ONCE_PER_DAY
        if self.forbid_back_to_back and not check_not_back_to_back(grid, subjects, subject, day, slot):
            return Rule.BACK_TO_BACK
        if not check_teacher_daily_cap(grid, subjects, subject, day, self.max_teacher_periods_per_day):
            return Rule.TEACHER_DAILY_CAP
        return None

    def is_valid_placement(
        self,
        grid: Grid,
        subjects: Sequence[SubjectState],
        subject_index: int,
        day: int,
        slot: int,
    ) -> bool:
        return self.explain(grid, subjects, subject_index, day, slot) is None


# =============================================================================
# CP-SAT Application
# =============================================================================

@dataclass
class ConstraintStats:
    """Statistics about the CP-SAT constraints added."""
    cell_constraints: int = 0
    quota_constraints: int = 0
    lunch_constraints: int = 0
    once_per_day_constraints: int = 0
    back_to_back_constraints: int = 0
    teacher_cap_constraints: int = 0

    @property
    def total(self) -> int:
        return (
            self.cell_constraints +
            self.quota_constraints +
            self.lunch_constraints +
            self.once_per_day_constraints +
            self.back_to_back_constraints +
            self.teacher_cap_constraints
        )


def apply_all_constraints(builder: FeasibilityModelBuilder) -> ConstraintStats:
    """
    Add every hard rule to a CP-SAT model.

    Args:
        builder: Model builder with created cell variables

    Returns:
        ConstraintStats with counts of added constraints
    """
    config = builder.config
    stats = ConstraintStats()

    stats.cell_constraints = add_one_subject_per_cell(builder)
    stats.quota_constraints = add_exact_quota(builder)
    stats.lunch_constraints = add_lunch_exclusion(builder)
    stats.once_per_day_constraints = add_once_per_day(builder)
    if config.forbid_back_to_back:
        stats.back_to_back_constraints = add_no_back_to_back(builder)
    stats.teacher_cap_constraints = add_teacher_daily_cap(builder, config.max_teacher_periods_per_day)

    return stats


__all__ = [
    # Core
    "check_quota_open",
    "add_one_subject_per_cell",
    "add_exact_quota",
    # Availability
    "check_not_lunch",
    "add_lunch_exclusion",
    # Distribution
    "check_once_per_day",
    "check_not_back_to_back",
    "add_once_per_day",
    "add_no_back_to_back",
    # Daily limits
    "teacher_periods_on_day",
    "check_teacher_daily_cap",
    "add_teacher_daily_cap",
    # Rules
    "Rule",
    "PlacementRules",
    "ConstraintStats",
    "apply_all_constraints",
]
