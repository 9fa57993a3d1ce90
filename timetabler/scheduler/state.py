"""Search state: subject counters, search statistics and scoped placements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from timetabler.data.models import SubjectSpec
    from .grid import Grid


@dataclass
class SubjectState:
    """
    A subject during search.

    name, teacher and classroom identify the subject; required is fixed
    and placed moves in matched place/undo pairs, so
    0 <= placed <= required holds at every point of the search.
    """
    name: str
    teacher: str
    required: int
    classroom: Optional[str] = None
    placed: int = 0

    def __post_init__(self) -> None:
        if self.required <= 0:
            raise ValueError(f"Subject '{self.name}' must require at least one occurrence")

    @classmethod
    def from_spec(cls, spec: SubjectSpec) -> SubjectState:
        return cls(
            name=spec.name,
            teacher=spec.teacher,
            required=spec.required_occurrences,
            classroom=spec.classroom,
        )

    @property
    def remaining(self) -> int:
        return self.required - self.placed

    @property
    def is_complete(self) -> bool:
        return self.placed == self.required

    def label(self) -> str:
        if self.classroom:
            return f"{self.name} ({self.teacher}, {self.classroom})"
        return f"{self.name} ({self.teacher})"


@dataclass
class SearchStats:
    """Counters collected during one solve."""
    nodes: int = 0
    placements: int = 0
    removals: int = 0
    max_depth: int = 0

    @property
    def net_placements(self) -> int:
        """Placements still standing (equals the sum of placed counters)."""
        return self.placements - self.removals

    def to_dict(self) -> dict[str, int]:
        return {
            "nodes": self.nodes,
            "placements": self.placements,
            "removals": self.removals,
            "maxDepth": self.max_depth,
        }


class Placement:
    """
    Tentatively puts a subject into a cell.

    Entering increments the subject counter and writes the cell. Leaving
    the block clears the cell and decrements the counter again, on every
    exit path, unless commit() was called.

    Usage:
        with Placement(grid, subjects, index, day, slot, stats) as placement:
            if search_next():
                placement.commit()
    """

    def __init__(
        self,
        grid: Grid,
        subjects: Sequence[SubjectState],
        subject_index: int,
        day: int,
        slot: int,
        stats: Optional[SearchStats] = None,
    ):
        self.grid = grid
        self.subject = subjects[subject_index]
        self.subject_index = subject_index
        self.day = day
        self.slot = slot
        self.stats = stats
        self._committed = False

    def __enter__(self) -> Placement:
        if self.subject.placed >= self.subject.required:
            raise RuntimeError(f"Subject '{self.subject.name}' already has all occurrences placed")
        self.grid.place(self.day, self.slot, self.subject_index)
        self.subject.placed += 1
        if self.stats is not None:
            self.stats.placements += 1
        return self

    def commit(self) -> None:
        """Keep the placement when the block exits."""
        self._committed = True

    def __exit__(self, exc_type, exc, tb) -> bool:
        if not self._committed:
            self.grid.clear(self.day, self.slot)
            self.subject.placed -= 1
            if self.stats is not None:
                self.stats.removals += 1
        return False
