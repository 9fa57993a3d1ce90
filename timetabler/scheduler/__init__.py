"""Backtracking search engine."""

from .state import Placement, SearchStats, SubjectState
from .grid import EMPTY, Cell, EmptyCell, Grid, Occupied
from .search import (
    BacktrackingScheduler,
    RandomShuffler,
    ScheduleResult,
    ScheduleStatus,
    SearchBudget,
    Shuffler,
    identity_shuffler,
    solve,
)

__all__ = [
    # State
    "Placement",
    "SearchStats",
    "SubjectState",
    # Grid
    "EMPTY",
    "Cell",
    "EmptyCell",
    "Grid",
    "Occupied",
    # Search
    "BacktrackingScheduler",
    "RandomShuffler",
    "ScheduleResult",
    "ScheduleStatus",
    "SearchBudget",
    "Shuffler",
    "identity_shuffler",
    "solve",
]
