"""Solution output formatting."""

from .schema import (
    OutputStatus,
    CellKind,
    CellOutput,
    DaySchedule,
    TeacherSchedule,
    SearchStatistics,
    TimetableOutput,
    LUNCH_LABEL,
    FREE_LABEL,
    create_timetable_output,
    group_by_teacher,
    solution_to_json,
    solution_to_dict,
)
from .formatters import (
    # Formatter classes
    PlainFormatter,
    ConsoleFormatter,
    CSVFormatter,
    TeacherViewFormatter,
    # Convenience functions
    format_plain,
    format_console,
    print_console,
    format_csv,
    format_json,
    format_json_compact,
    format_teacher_view,
    render,
    # File utilities
    save_output,
    # Constants
    FORMATTERS,
)

__all__ = [
    # Schema
    "OutputStatus",
    "CellKind",
    "CellOutput",
    "DaySchedule",
    "TeacherSchedule",
    "SearchStatistics",
    "TimetableOutput",
    "LUNCH_LABEL",
    "FREE_LABEL",
    "create_timetable_output",
    "group_by_teacher",
    "solution_to_json",
    "solution_to_dict",
    # Formatters
    "PlainFormatter",
    "ConsoleFormatter",
    "CSVFormatter",
    "TeacherViewFormatter",
    "format_plain",
    "format_console",
    "print_console",
    "format_csv",
    "format_json",
    "format_json_compact",
    "format_teacher_view",
    "render",
    "save_output",
    "FORMATTERS",
]
