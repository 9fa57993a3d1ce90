"""Programmatic entry points for the timetable scheduler."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from .constraints import PlacementRules
from .data.loader import check_capacity, load_timetable_from_json
from .data.models import TimetableInput
from .output.formatters import save_output
from .output.schema import TimetableOutput, create_timetable_output
from .scheduler import (
    BacktrackingScheduler,
    RandomShuffler,
    ScheduleResult,
    SearchBudget,
    Shuffler,
    SubjectState,
)

logger = logging.getLogger(__name__)


def schedule(
    input_data: TimetableInput,
    seed: Optional[int] = None,
    shuffler: Optional[Shuffler] = None,
    budget: Optional[SearchBudget] = None,
) -> ScheduleResult:
    """
    Run the capacity check, then the backtracking search.

    Args:
        input_data: Validated input
        seed: Seed for the random candidate order (ignored if shuffler is given)
        shuffler: Custom candidate ordering
        budget: Optional step or time limit

    Returns:
        ScheduleResult from the search

    Raises:
        CapacityExceededError: If the required hours cannot fit the grid
    """
    check_capacity(input_data)

    config = input_data.config
    scheduler = BacktrackingScheduler(
        rules=PlacementRules.from_config(config),
        shuffler=shuffler or RandomShuffler(seed=seed),
        budget=budget,
    )
    subjects = [SubjectState.from_spec(spec) for spec in input_data.subjects]
    return scheduler.solve(subjects, config.days, config.slots_per_day, config.lunch_slot_index)


def solve_timetable(
    input_data: TimetableInput,
    seed: Optional[int] = None,
    shuffler: Optional[Shuffler] = None,
    budget: Optional[SearchBudget] = None,
) -> TimetableOutput:
    """Solve and convert the result to the output schema."""
    result = schedule(input_data, seed=seed, shuffler=shuffler, budget=budget)
    return create_timetable_output(result, input_data.config)


def solve_file(
    data_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    seed: Optional[int] = None,
    budget: Optional[SearchBudget] = None,
) -> TimetableOutput:
    """
    Solve a timetable stored in a JSON file.

    Args:
        data_path: Path to the input JSON file
        output_path: Optional path to write the output JSON
        seed: Seed for the random candidate order
        budget: Optional step or time limit

    Returns:
        TimetableOutput for the solve
    """
    input_data = load_timetable_from_json(data_path)
    output = solve_timetable(input_data, seed=seed, budget=budget)

    if output_path:
        save_output(output, output_path, fmt="json")
        logger.info("Solution written to %s", output_path)

    return output
