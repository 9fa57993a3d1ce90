"""Timetabler - weekly timetable generation by backtracking search."""

from .main import schedule, solve_timetable
from .model_builder import FeasibilityModelBuilder, SolverStatus
from .scheduler import BacktrackingScheduler, ScheduleStatus
from .cli import app as cli_app

__all__ = [
    # Search
    "schedule",
    "solve_timetable",
    "BacktrackingScheduler",
    "ScheduleStatus",
    # CP-SAT cross-check
    "FeasibilityModelBuilder",
    "SolverStatus",
    # CLI
    "cli_app",
]
