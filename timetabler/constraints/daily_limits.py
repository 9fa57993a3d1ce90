"""
Daily limit constraints for timetabling.

A teacher may hold at most max_teacher_periods_per_day cells on any one
day, counted by teacher name across every subject they teach.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from timetabler.model_builder import FeasibilityModelBuilder
    from timetabler.scheduler.grid import Grid
    from timetabler.scheduler.state import SubjectState


def teacher_periods_on_day(
    grid: Grid,
    subjects: Sequence[SubjectState],
    teacher: str,
    day: int,
) -> int:
    """Count cells of a day taught by a teacher."""
    count = 0
    for cell_slot in range(grid.slots_per_day):
        index = grid.subject_at(day, cell_slot)
        if index is not None and subjects[index].teacher == teacher:
            count += 1
    return count


def check_teacher_daily_cap(
    grid: Grid,
    subjects: Sequence[SubjectState],
    subject: SubjectState,
    day: int,
    max_periods: int,
) -> bool:
    """The subject's teacher must be below the daily cap before taking another cell."""
    return teacher_periods_on_day(grid, subjects, subject.teacher, day) < max_periods


def add_teacher_daily_cap(builder: FeasibilityModelBuilder, max_periods: int) -> int:
    """
    Cap the cells each teacher holds per day.

    Implementation:
    - Collect cell variables of every subject taught by the teacher
    - Per day, constrain their sum to max_periods

    Returns:
        Number of constraints added
    """
    config = builder.config
    added = 0

    teacher_subjects: dict[str, list[int]] = {}
    for s, subject in enumerate(builder.subjects):
        teacher_subjects.setdefault(subject.teacher, []).append(s)

    for teacher, subject_indices in teacher_subjects.items():
        for day in range(config.days):
            day_vars = [
                builder.cell_vars[(s, day, slot)]
                for s in subject_indices
                for slot in range(config.slots_per_day)
            ]
            # Fewer cells than the cap can never violate it
            if len(day_vars) <= max_periods:
                continue
            builder.model.Add(sum(day_vars) <= max_periods)
            added += 1

    return added
