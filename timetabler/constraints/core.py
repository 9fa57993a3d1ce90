"""Core constraints that every timetable must satisfy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timetabler.model_builder import FeasibilityModelBuilder
    from timetabler.scheduler.state import SubjectState


def check_quota_open(subject: SubjectState) -> bool:
    """A subject can take another cell only while it is below its weekly quota."""
    return subject.placed < subject.required


def add_one_subject_per_cell(builder: FeasibilityModelBuilder) -> int:
    """
    Each cell holds at most one subject.

    Returns:
        Number of constraints added
    """
    added = 0
    config = builder.config

    for day in range(config.days):
        for slot in range(config.slots_per_day):
            cell_vars = [
                builder.cell_vars[(s, day, slot)]
                for s in range(len(builder.subjects))
            ]
            if len(cell_vars) > 1:
                builder.model.AddAtMostOne(cell_vars)
                added += 1

    return added


def add_exact_quota(builder: FeasibilityModelBuilder) -> int:
    """
    Each subject fills exactly its required number of cells per week.

    Returns:
        Number of constraints added
    """
    config = builder.config

    for s, subject in enumerate(builder.subjects):
        subject_vars = [
            builder.cell_vars[(s, day, slot)]
            for day in range(config.days)
            for slot in range(config.slots_per_day)
        ]
        builder.model.Add(sum(subject_vars) == subject.required_occurrences)

    return len(builder.subjects)
