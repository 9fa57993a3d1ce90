"""
Sample data generator for the timetable scheduler.

Usage:
    from timetabler.data.generator import default_timetable_input, generate_random_input

    # The built-in three-subject week
    sample = default_timetable_input()

    # Random but solvable-looking input
    random_input = generate_random_input(GeneratorConfig(num_subjects=6), seed=7)
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from .models import GridConfig, ScheduleType, SubjectSpec, TimetableInput


# =============================================================================
# Name Data
# =============================================================================

DEFAULT_SUBJECTS = [
    {"name": "Math", "teacher": "Prof. A", "classroom": "R101"},
    {"name": "Physics", "teacher": "Prof. B", "classroom": "R102"},
    {"name": "CS", "teacher": "Prof. C", "classroom": "Lab1"},
]

SUBJECT_NAMES = [
    "Mathematics", "Physics", "Chemistry", "Biology", "English", "History",
    "Geography", "Computer Science", "Economics", "Art", "Music", "French",
    "Spanish", "Physical Education", "Statistics", "Philosophy",
]

TEACHER_NAMES = [
    "Prof. Smith", "Prof. Johnson", "Prof. Williams", "Prof. Brown", "Prof. Jones",
    "Prof. Garcia", "Prof. Miller", "Prof. Davis", "Prof. Wilson", "Prof. Taylor",
]


# =============================================================================
# Defaults
# =============================================================================

def default_subjects(hours: int = 5) -> list[SubjectSpec]:
    """The fallback subject set used when no input is given."""
    return [SubjectSpec(required_occurrences=hours, **data) for data in DEFAULT_SUBJECTS]


def default_timetable_input(config: Optional[GridConfig] = None) -> TimetableInput:
    """Input with the default subjects on a default grid."""
    return TimetableInput(config=config or GridConfig(), subjects=default_subjects())


# =============================================================================
# Random Generation
# =============================================================================

@dataclass
class GeneratorConfig:
    """Configuration for random input generation.

    Hours per subject never exceed the number of days, since a subject
    appears at most once per day, and the total stays within
    utilization * days * (slots_per_day - 1).
    """
    num_subjects: int = 5
    num_teachers: int = 3
    days: int = 5
    slots_per_day: int = 7
    lunch_slot_index: int = 3
    min_hours: int = 1
    max_hours: int = 5
    utilization: float = 0.7
    schedule_type: ScheduleType = ScheduleType.COLLEGE


def generate_random_input(config: GeneratorConfig | None = None, seed: int | None = None) -> TimetableInput:
    """
    Generate a random timetable input.

    Args:
        config: Generation settings (defaults to GeneratorConfig())
        seed: Random seed for reproducible output

    Returns:
        TimetableInput within capacity whenever num_subjects * min_hours fits the grid
    """
    config = config or GeneratorConfig()
    rng = random.Random(seed)

    grid = GridConfig(
        days=config.days,
        slots_per_day=config.slots_per_day,
        lunch_slot_index=config.lunch_slot_index,
        schedule_type=config.schedule_type,
    )
    budget = int(grid.available_slots * config.utilization)
    max_hours = min(config.max_hours, config.days)

    names = _pick_names(rng, SUBJECT_NAMES, config.num_subjects)
    teachers = _pick_names(rng, TEACHER_NAMES, config.num_teachers)

    subjects = []
    for i, name in enumerate(names):
        remaining_subjects = config.num_subjects - i - 1
        # Leave at least min_hours for every subject still to come
        ceiling = min(max_hours, budget - remaining_subjects * config.min_hours)
        hours = rng.randint(config.min_hours, max(config.min_hours, ceiling))
        budget -= hours
        subjects.append(SubjectSpec(
            name=name,
            teacher=teachers[i % len(teachers)],
            required_occurrences=hours,
        ))

    return TimetableInput(config=grid, subjects=subjects)


def _pick_names(rng: random.Random, pool: list[str], count: int) -> list[str]:
    """Pick unique names, numbering them once the pool runs out."""
    if count <= len(pool):
        return rng.sample(pool, count)
    return [f"{pool[i % len(pool)]} {i // len(pool) + 1}" for i in range(count)]
