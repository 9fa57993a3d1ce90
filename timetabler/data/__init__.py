"""Data loading utilities."""

from .models import (
    DAY_NAMES,
    GridConfig,
    ScheduleType,
    SubjectSpec,
    TimetableInput,
    day_name,
    minutes_to_time,
    time_to_minutes,
)
from .loader import (
    capacity_warnings,
    check_capacity,
    load_timetable_from_dict,
    load_timetable_from_json,
    save_timetable_input,
    timetable_input_to_dict,
)
from .generator import (
    GeneratorConfig,
    default_subjects,
    default_timetable_input,
    generate_random_input,
)

__all__ = [
    # Models
    "DAY_NAMES",
    "GridConfig",
    "ScheduleType",
    "SubjectSpec",
    "TimetableInput",
    "day_name",
    "minutes_to_time",
    "time_to_minutes",
    # Loader
    "capacity_warnings",
    "check_capacity",
    "load_timetable_from_dict",
    "load_timetable_from_json",
    "save_timetable_input",
    "timetable_input_to_dict",
    # Generator
    "GeneratorConfig",
    "default_subjects",
    "default_timetable_input",
    "generate_random_input",
]
