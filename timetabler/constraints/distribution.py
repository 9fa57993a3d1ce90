"""
Subject distribution constraints for timetabling.

This module provides:
- At most one occurrence of a subject per day
- No subject directly after itself on the same day

The second rule is implied by the first. It is kept as its own rule so
the per-day rule can be relaxed without losing it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from timetabler.model_builder import FeasibilityModelBuilder
    from timetabler.scheduler.grid import Grid
    from timetabler.scheduler.state import SubjectState


# =============================================================================
# Search Predicates
# =============================================================================

def check_once_per_day(
    grid: Grid,
    subjects: Sequence[SubjectState],
    subject: SubjectState,
    day: int,
    slot: int,
) -> bool:
    """No other cell of the day may already hold a subject with the same name."""
    for other_slot in range(grid.slots_per_day):
        if other_slot == slot:
            continue
        index = grid.subject_at(day, other_slot)
        if index is not None and subjects[index].name == subject.name:
            return False
    return True


def check_not_back_to_back(
    grid: Grid,
    subjects: Sequence[SubjectState],
    subject: SubjectState,
    day: int,
    slot: int,
) -> bool:
    """The previous slot of the same day may not hold the same subject."""
    if slot == 0:
        return True
    index = grid.subject_at(day, slot - 1)
    return index is None or subjects[index].name != subject.name


# =============================================================================
# CP-SAT Constraints
# =============================================================================

def add_once_per_day(builder: FeasibilityModelBuilder) -> int:
    """
    Each subject appears at most once per day.

    Returns:
        Number of constraints added
    """
    config = builder.config
    added = 0

    for s in range(len(builder.subjects)):
        for day in range(config.days):
            day_vars = [builder.cell_vars[(s, day, slot)] for slot in range(config.slots_per_day)]
            builder.model.AddAtMostOne(day_vars)
            added += 1

    return added


def add_no_back_to_back(builder: FeasibilityModelBuilder) -> int:
    """
    A subject never occupies two adjacent slots of one day.

    Returns:
        Number of constraints added
    """
    config = builder.config
    added = 0

    for s in range(len(builder.subjects)):
        for day in range(config.days):
            for slot in range(1, config.slots_per_day):
                builder.model.AddBoolOr([
                    builder.cell_vars[(s, day, slot - 1)].Not(),
                    builder.cell_vars[(s, day, slot)].Not(),
                ])
                added += 1

    return added
