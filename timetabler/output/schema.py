"""
Output schema for solved timetables.

This module defines the JSON-serializable output format for a solve,
including one row of cells per day and pre-computed per-teacher views.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from timetabler.data.models import GridConfig, ScheduleType, day_name
from timetabler.scheduler.search import ScheduleResult, ScheduleStatus


# =============================================================================
# Enums
# =============================================================================

class OutputStatus(str, Enum):
    """Solution status for output."""
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    ABORTED = "aborted"


class CellKind(str, Enum):
    """What a grid cell holds."""
    LESSON = "lesson"
    LUNCH = "lunch"
    FREE = "free"


LUNCH_LABEL = "Lunch Break"
FREE_LABEL = "Free"


# =============================================================================
# Cell Output
# =============================================================================

class CellOutput(BaseModel):
    """A single cell of the weekly grid."""
    day: int
    slot: int
    start_time: str = Field(alias="startTime")  # 'HH:MM'
    end_time: str = Field(alias="endTime")  # 'HH:MM'
    kind: CellKind
    subject_name: Optional[str] = Field(default=None, alias="subjectName")
    teacher_name: Optional[str] = Field(default=None, alias="teacherName")
    classroom: Optional[str] = None

    model_config = {"populate_by_name": True}

    @property
    def time_label(self) -> str:
        return f"{self.start_time}-{self.end_time}"

    def label(self) -> str:
        """Display text: the lesson, 'Lunch Break' or 'Free'."""
        if self.kind == CellKind.LUNCH:
            return LUNCH_LABEL
        if self.kind == CellKind.FREE:
            return FREE_LABEL
        if self.classroom:
            return f"{self.subject_name} ({self.teacher_name}, {self.classroom})"
        return f"{self.subject_name} ({self.teacher_name})"


# =============================================================================
# Views
# =============================================================================

class DaySchedule(BaseModel):
    """Schedule for a single day."""
    day: int
    day_name: str = Field(alias="dayName")
    cells: list[CellOutput]

    model_config = {"populate_by_name": True}

    @property
    def lessons(self) -> list[CellOutput]:
        return [c for c in self.cells if c.kind == CellKind.LESSON]


class TeacherSchedule(BaseModel):
    """All lessons of one teacher, in grid order."""
    name: str
    lessons: list[CellOutput]
    by_day: dict[int, list[CellOutput]] = Field(default_factory=dict, alias="byDay")

    model_config = {"populate_by_name": True}

    @property
    def total_periods(self) -> int:
        return len(self.lessons)


class SearchStatistics(BaseModel):
    """Counters from the backtracking search."""
    nodes: int = 0
    placements: int = 0
    removals: int = 0
    max_depth: int = Field(default=0, alias="maxDepth")

    model_config = {"populate_by_name": True}


# =============================================================================
# Complete Output
# =============================================================================

class TimetableOutput(BaseModel):
    """Complete output for a solve."""
    status: OutputStatus
    solve_time_seconds: float = Field(alias="solveTimeSeconds")
    schedule_type: ScheduleType = Field(default=ScheduleType.COLLEGE, alias="scheduleType")
    config: GridConfig
    days: list[DaySchedule] = Field(default_factory=list)
    by_teacher: dict[str, TeacherSchedule] = Field(default_factory=dict, alias="byTeacher")
    statistics: SearchStatistics = Field(default_factory=SearchStatistics)
    message: Optional[str] = None

    model_config = {"populate_by_name": True}

    @property
    def is_feasible(self) -> bool:
        return self.status == OutputStatus.FEASIBLE

    def cell(self, day: int, slot: int) -> CellOutput:
        return self.days[day].cells[slot]

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(by_alias=True, indent=indent)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Conversion Functions
# =============================================================================

def _status_to_output(status: ScheduleStatus) -> OutputStatus:
    """Convert ScheduleStatus to OutputStatus."""
    mapping = {
        ScheduleStatus.FEASIBLE: OutputStatus.FEASIBLE,
        ScheduleStatus.INFEASIBLE: OutputStatus.INFEASIBLE,
        ScheduleStatus.ABORTED: OutputStatus.ABORTED,
    }
    return mapping[status]


def _build_days(result: ScheduleResult, config: GridConfig) -> list[DaySchedule]:
    days = []
    for day in range(result.days):
        cells = []
        for slot in range(result.slots_per_day):
            start, end = config.slot_times(slot)
            index = result.grid.subject_at(day, slot)
            if index is not None:
                subject = result.subjects[index]
                cell = CellOutput(
                    day=day, slot=slot, startTime=start, endTime=end,
                    kind=CellKind.LESSON,
                    subjectName=subject.name,
                    teacherName=subject.teacher,
                    classroom=subject.classroom,
                )
            else:
                kind = CellKind.LUNCH if slot == result.lunch_slot_index else CellKind.FREE
                cell = CellOutput(day=day, slot=slot, startTime=start, endTime=end, kind=kind)
            cells.append(cell)
        days.append(DaySchedule(day=day, dayName=day_name(day), cells=cells))
    return days


def group_by_teacher(days: list[DaySchedule]) -> dict[str, TeacherSchedule]:
    """Collect each teacher's lessons, in grid order."""
    views: dict[str, TeacherSchedule] = {}
    for day_schedule in days:
        for cell in day_schedule.lessons:
            view = views.setdefault(cell.teacher_name, TeacherSchedule(name=cell.teacher_name, lessons=[]))
            view.lessons.append(cell)
            view.by_day.setdefault(cell.day, []).append(cell)
    return views


def create_timetable_output(
    result: ScheduleResult,
    config: Optional[GridConfig] = None,
) -> TimetableOutput:
    """
    Create a TimetableOutput from a ScheduleResult.

    Args:
        result: The search result
        config: Grid configuration used for slot times (defaults derived from the result)

    Returns:
        TimetableOutput with day rows and teacher views when feasible
    """
    if config is None:
        config = GridConfig(
            days=result.days,
            slots_per_day=result.slots_per_day,
            lunch_slot_index=result.lunch_slot_index,
        )

    days: list[DaySchedule] = []
    message = None
    if result.is_feasible:
        days = _build_days(result, config)
    elif result.status == ScheduleStatus.ABORTED:
        message = f"Search aborted: {result.abort_reason}"
    else:
        message = "No assignment satisfies all constraints"

    return TimetableOutput(
        status=_status_to_output(result.status),
        solveTimeSeconds=round(result.solve_time_seconds, 4),
        scheduleType=config.schedule_type,
        config=config,
        days=days,
        byTeacher=group_by_teacher(days),
        statistics=SearchStatistics(
            nodes=result.stats.nodes,
            placements=result.stats.placements,
            removals=result.stats.removals,
            maxDepth=result.stats.max_depth,
        ),
        message=message,
    )


def solution_to_json(result: ScheduleResult, config: Optional[GridConfig] = None, indent: int = 2) -> str:
    """Convert a ScheduleResult directly to a JSON string."""
    return create_timetable_output(result, config).to_json(indent=indent)


def solution_to_dict(result: ScheduleResult, config: Optional[GridConfig] = None) -> dict[str, Any]:
    """Convert a ScheduleResult directly to a dictionary."""
    return create_timetable_output(result, config).to_dict()
