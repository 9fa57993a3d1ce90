"""
Weekly grid of day x slot cells.

A cell is either EMPTY or Occupied(subject_index), where subject_index
points into the subject list of the solve that owns the grid. The lunch
slot of every day stays EMPTY.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Union

from .state import SubjectState


@dataclass(frozen=True)
class EmptyCell:
    """A cell with nothing scheduled in it."""

    def __repr__(self) -> str:
        return "EMPTY"


@dataclass(frozen=True)
class Occupied:
    """A cell holding one subject."""
    subject_index: int


EMPTY = EmptyCell()

Cell = Union[EmptyCell, Occupied]


class Grid:
    """
    Mutable days x slots_per_day cell array.

    Only the scheduler writes to the grid. Once a solve succeeds the grid
    is frozen and further writes raise RuntimeError.
    """

    def __init__(self, days: int, slots_per_day: int, lunch_slot_index: int):
        if days <= 0:
            raise ValueError(f"days must be positive, got {days}")
        if slots_per_day <= 0:
            raise ValueError(f"slots_per_day must be positive, got {slots_per_day}")
        if not 0 <= lunch_slot_index < slots_per_day:
            raise ValueError(
                f"lunch_slot_index must be in [0, {slots_per_day}), got {lunch_slot_index}"
            )

        self.days = days
        self.slots_per_day = slots_per_day
        self.lunch_slot_index = lunch_slot_index
        self._cells: list[list[Cell]] = [[EMPTY] * slots_per_day for _ in range(days)]
        self._frozen = False

    # -------------------------------------------------------------------------
    # Cell Access
    # -------------------------------------------------------------------------

    def get(self, day: int, slot: int) -> Cell:
        return self._cells[day][slot]

    def subject_at(self, day: int, slot: int) -> Optional[int]:
        """Subject index in a cell, or None when empty."""
        cell = self._cells[day][slot]
        if isinstance(cell, Occupied):
            return cell.subject_index
        return None

    def is_empty(self, day: int, slot: int) -> bool:
        return isinstance(self._cells[day][slot], EmptyCell)

    def day_cells(self, day: int) -> list[Cell]:
        """All cells of one day, in slot order."""
        return list(self._cells[day])

    def occupied_cells(self) -> Iterator[tuple[int, int, int]]:
        """Yield (day, slot, subject_index) for every occupied cell."""
        for day, row in enumerate(self._cells):
            for slot, cell in enumerate(row):
                if isinstance(cell, Occupied):
                    yield day, slot, cell.subject_index

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def place(self, day: int, slot: int, subject_index: int) -> None:
        self._check_writable()
        if slot == self.lunch_slot_index:
            raise ValueError(f"Slot {slot} is the lunch slot")
        if not self.is_empty(day, slot):
            raise ValueError(f"Cell ({day}, {slot}) is already occupied")
        self._cells[day][slot] = Occupied(subject_index)

    def clear(self, day: int, slot: int) -> None:
        self._check_writable()
        self._cells[day][slot] = EMPTY

    def freeze(self) -> None:
        """Make the grid read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_writable(self) -> None:
        if self._frozen:
            raise RuntimeError("Grid is frozen")

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def to_pairs(self, subjects: Sequence[SubjectState]) -> list[list[Optional[tuple[str, str]]]]:
        """Grid as (subject_name, teacher_name) pairs, None for empty cells."""
        rows = []
        for row in self._cells:
            pairs: list[Optional[tuple[str, str]]] = []
            for cell in row:
                if isinstance(cell, Occupied):
                    subject = subjects[cell.subject_index]
                    pairs.append((subject.name, subject.teacher))
                else:
                    pairs.append(None)
            rows.append(pairs)
        return rows

    def __repr__(self) -> str:
        filled = sum(1 for _ in self.occupied_cells())
        return (
            f"Grid(days={self.days}, slots_per_day={self.slots_per_day}, "
            f"lunch_slot_index={self.lunch_slot_index}, filled={filled})"
        )
