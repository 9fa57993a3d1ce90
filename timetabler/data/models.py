"""
Pydantic models for the timetable input data.

Grid conventions:
- Days are 0-based (0=Monday)
- Slots are 0-based within a day; one slot per day is the lunch break
- Slot times are derived from day_start_minutes and slot_minutes

Example with the defaults (09:00 start, 60 minute slots, lunch at 3):
- slot 0 = 09:00-10:00
- slot 3 = 12:00-13:00 (Lunch Break)
- slot 6 = 15:00-16:00
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# Constants and Enums
# =============================================================================

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

DEFAULT_MAX_TEACHER_PERIODS_PER_DAY = 5

# One occurrence per hour of a 7 x 24 week
MAX_REQUIRED_OCCURRENCES = 168


class ScheduleType(str, Enum):
    """Kind of institution the timetable is printed for."""
    SCHOOL = "school"
    COLLEGE = "college"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# =============================================================================
# Helper Functions
# =============================================================================

def minutes_to_time(minutes: int) -> str:
    """Convert minutes from midnight to HH:MM format."""
    h, m = divmod(minutes, 60)
    return f"{h:02d}:{m:02d}"


def time_to_minutes(time_str: str) -> int:
    """Convert HH:MM format to minutes from midnight."""
    h, m = map(int, time_str.split(":"))
    return h * 60 + m


def day_name(day: int) -> str:
    """Get day name from index."""
    return DAY_NAMES[day] if 0 <= day < len(DAY_NAMES) else f"Day {day + 1}"


# =============================================================================
# Core Entity Models
# =============================================================================

class SubjectSpec(BaseModel):
    """A subject to place on the weekly grid."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1, description="Subject name")
    teacher: str = Field(min_length=1, description="Teacher name")
    required_occurrences: int = Field(
        ge=1,
        le=MAX_REQUIRED_OCCURRENCES,
        validation_alias=AliasChoices("required_occurrences", "requiredOccurrences", "hours"),
        serialization_alias="requiredOccurrences",
        description="Occurrences per week",
    )
    classroom: Optional[str] = Field(default=None, description="Room the subject is taught in")

    @field_validator("name", "teacher")
    @classmethod
    def strip_names(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("classroom")
    @classmethod
    def blank_classroom_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value.strip() if value else value

    def label(self) -> str:
        """Display text for a grid cell holding this subject."""
        if self.classroom:
            return f"{self.name} ({self.teacher}, {self.classroom})"
        return f"{self.name} ({self.teacher})"

    def __str__(self) -> str:
        return f"{self.name} ({self.teacher}, {self.required_occurrences}/week)"


# =============================================================================
# Configuration Models
# =============================================================================

class GridConfig(BaseModel):
    """Shape of the weekly grid and the scheduling limits."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    days: int = Field(default=5, ge=1, le=7, description="Days per week")
    slots_per_day: int = Field(default=7, ge=1, le=24, description="Time slots per day")
    lunch_slot_index: int = Field(default=3, ge=0, description="Slot reserved for lunch each day")
    max_teacher_periods_per_day: int = Field(
        default=DEFAULT_MAX_TEACHER_PERIODS_PER_DAY,
        ge=1,
        description="Max cells a teacher may hold on one day",
    )
    forbid_back_to_back: bool = Field(
        default=True,
        description="Reject a subject directly after itself on the same day",
    )
    day_start_minutes: int = Field(default=540, ge=0, le=1439, description="First slot start (default 9:00)")
    slot_minutes: int = Field(default=60, ge=5, le=240, description="Length of one slot")
    schedule_type: ScheduleType = Field(default=ScheduleType.COLLEGE, description="School or college")

    @model_validator(mode="after")
    def validate_lunch_slot(self) -> "GridConfig":
        """Ensure the lunch slot lies inside the day."""
        if self.lunch_slot_index >= self.slots_per_day:
            raise ValueError(
                f"lunch_slot_index ({self.lunch_slot_index}) must be less than "
                f"slots_per_day ({self.slots_per_day})"
            )
        return self

    @model_validator(mode="after")
    def validate_day_fits(self) -> "GridConfig":
        """Ensure the last slot ends before midnight."""
        end = self.day_start_minutes + self.slots_per_day * self.slot_minutes
        if end > 1440:
            raise ValueError(
                f"{self.slots_per_day} slots of {self.slot_minutes} minutes starting at "
                f"{minutes_to_time(self.day_start_minutes)} run past midnight"
            )
        return self

    @property
    def usable_slots_per_day(self) -> int:
        """Slots per day that can hold a subject."""
        return self.slots_per_day - 1

    @property
    def available_slots(self) -> int:
        """Total schedulable cells per week."""
        return self.days * self.usable_slots_per_day

    def slot_times(self, slot: int) -> tuple[str, str]:
        """Start and end time labels of a slot."""
        start = self.day_start_minutes + slot * self.slot_minutes
        return minutes_to_time(start), minutes_to_time(start + self.slot_minutes)

    def slot_label(self, slot: int) -> str:
        """Time range label such as '09:00-10:00'."""
        start, end = self.slot_times(slot)
        return f"{start}-{end}"


# =============================================================================
# Main Input Model
# =============================================================================

class TimetableInput(BaseModel):
    """
    Complete timetable input data.
    This is the main model for loading and validating input data.
    """
    model_config = ConfigDict(extra="forbid")

    config: GridConfig = Field(default_factory=GridConfig, description="Grid configuration")
    subjects: list[SubjectSpec] = Field(min_length=1, description="Subjects to schedule")

    @model_validator(mode="after")
    def validate_no_duplicate_subjects(self) -> "TimetableInput":
        """Subject names identify subjects on the grid, so they must be unique."""
        seen: set[str] = set()
        errors: list[str] = []
        for subject in self.subjects:
            if subject.name in seen:
                errors.append(f"Duplicate subject name: '{subject.name}'")
            seen.add(subject.name)

        if errors:
            raise ValueError("Duplicate subject validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

        return self

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    @property
    def teachers(self) -> list[str]:
        """Teacher names in first-seen order."""
        return list(dict.fromkeys(s.teacher for s in self.subjects))

    def get_subject(self, name: str) -> Optional[SubjectSpec]:
        """Get subject by name."""
        for subject in self.subjects:
            if subject.name == name:
                return subject
        return None

    def get_teacher_subjects(self, teacher: str) -> list[SubjectSpec]:
        """Get all subjects taught by a teacher."""
        return [s for s in self.subjects if s.teacher == teacher]

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    @property
    def total_required_occurrences(self) -> int:
        """Total number of subject occurrences per week."""
        return sum(s.required_occurrences for s in self.subjects)

    @property
    def available_slots(self) -> int:
        return self.config.available_slots

    def summary(self) -> dict[str, Any]:
        """Get a summary of the input data."""
        return {
            "schedule_type": self.config.schedule_type.value,
            "days": self.config.days,
            "slots_per_day": self.config.slots_per_day,
            "lunch_slot_index": self.config.lunch_slot_index,
            "subjects": len(self.subjects),
            "teachers": len(self.teachers),
            "total_required_occurrences": self.total_required_occurrences,
            "available_slots": self.available_slots,
        }
