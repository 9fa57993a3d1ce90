"""
Availability constraints for timetabling.

The lunch slot of every day is closed to all subjects, whatever state
the search is in.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timetabler.model_builder import FeasibilityModelBuilder
    from timetabler.scheduler.grid import Grid


def check_not_lunch(grid: Grid, slot: int) -> bool:
    """A slot is a placement target only if it is not the lunch slot."""
    return slot != grid.lunch_slot_index


def add_lunch_exclusion(builder: FeasibilityModelBuilder) -> int:
    """
    Force every lunch cell to stay empty.

    Returns:
        Number of constraints added
    """
    config = builder.config
    lunch = config.lunch_slot_index
    added = 0

    for s in range(len(builder.subjects)):
        for day in range(config.days):
            builder.model.Add(builder.cell_vars[(s, day, lunch)] == 0)
            added += 1

    return added
