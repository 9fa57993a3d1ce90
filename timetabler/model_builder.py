"""
CP-SAT model of the timetable's hard constraints.

The backtracking scheduler is the production search. This builder states
the same rules as a CP-SAT model so a second, independent solver can
confirm whether an input is feasible at all.

Variables:
- cell_vars[(s, day, slot)] = 1 if subject s sits in (day, slot)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ortools.sat.python import cp_model

from .constraints import ConstraintStats, apply_all_constraints
from .data.models import TimetableInput


class SolverStatus(str, Enum):
    """CP-SAT result status."""
    FEASIBLE = "FEASIBLE"
    INFEASIBLE = "INFEASIBLE"
    MODEL_INVALID = "MODEL_INVALID"
    UNKNOWN = "UNKNOWN"


@dataclass
class FeasibilityResult:
    """Result of a CP-SAT feasibility check."""
    status: SolverStatus
    solve_time_ms: int
    grid: Optional[list[list[Optional[str]]]] = None
    statistics: dict[str, Any] = field(default_factory=dict)

    @property
    def is_feasible(self) -> bool:
        return self.status == SolverStatus.FEASIBLE


class FeasibilityModelBuilder:
    """
    Builds and solves a CP-SAT feasibility model for a timetable input.

    Usage:
        builder = FeasibilityModelBuilder(timetable_input)
        builder.create_variables()
        builder.add_constraints()
        result = builder.solve(time_limit_seconds=10)
    """

    def __init__(self, input_data: TimetableInput):
        self.input = input_data
        self.config = input_data.config
        self.subjects = input_data.subjects
        self.model = cp_model.CpModel()

        self.cell_vars: dict[tuple[int, int, int], cp_model.IntVar] = {}

        # State tracking
        self._variables_created = False
        self._constraints_added = False

    # -------------------------------------------------------------------------
    # Variable Creation
    # -------------------------------------------------------------------------

    def create_variables(self) -> None:
        """Create one boolean per subject and cell."""
        if self._variables_created:
            return

        for s in range(len(self.subjects)):
            for day in range(self.config.days):
                for slot in range(self.config.slots_per_day):
                    self.cell_vars[(s, day, slot)] = self.model.NewBoolVar(f"S{s}_D{day}_T{slot}")

        self._variables_created = True

    # -------------------------------------------------------------------------
    # Constraint Addition
    # -------------------------------------------------------------------------

    def add_constraints(self) -> Optional[ConstraintStats]:
        """Add all hard constraints to the model."""
        if not self._variables_created:
            raise RuntimeError("Must call create_variables() before add_constraints()")

        if self._constraints_added:
            return None

        stats = apply_all_constraints(self)
        self._constraints_added = True
        return stats

    # -------------------------------------------------------------------------
    # Solving
    # -------------------------------------------------------------------------

    def solve(self, time_limit_seconds: float = 10.0, seed: Optional[int] = None) -> FeasibilityResult:
        """
        Decide feasibility.

        Args:
            time_limit_seconds: Maximum time to spend solving
            seed: Random seed for the CP-SAT search

        Returns:
            FeasibilityResult with status and, if feasible, one grid
        """
        if not self._variables_created:
            self.create_variables()
        if not self._constraints_added:
            self.add_constraints()

        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = time_limit_seconds
        solver.parameters.log_search_progress = False
        if seed is not None:
            solver.parameters.random_seed = seed

        status_code = solver.Solve(self.model)

        # OPTIMAL means feasible here: there is no objective
        status_map = {
            cp_model.OPTIMAL: SolverStatus.FEASIBLE,
            cp_model.FEASIBLE: SolverStatus.FEASIBLE,
            cp_model.INFEASIBLE: SolverStatus.INFEASIBLE,
            cp_model.MODEL_INVALID: SolverStatus.MODEL_INVALID,
            cp_model.UNKNOWN: SolverStatus.UNKNOWN,
        }
        status = status_map.get(status_code, SolverStatus.UNKNOWN)

        grid = None
        if status == SolverStatus.FEASIBLE:
            grid = self._extract_grid(solver)

        return FeasibilityResult(
            status=status,
            solve_time_ms=int(solver.WallTime() * 1000),
            grid=grid,
            statistics=self.get_statistics(),
        )

    def _extract_grid(self, solver: cp_model.CpSolver) -> list[list[Optional[str]]]:
        """Subject names per cell, None for empty cells."""
        grid: list[list[Optional[str]]] = [
            [None] * self.config.slots_per_day for _ in range(self.config.days)
        ]
        for (s, day, slot), var in self.cell_vars.items():
            if solver.Value(var):
                grid[day][slot] = self.subjects[s].name
        return grid

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def get_statistics(self) -> dict[str, Any]:
        """Get model statistics."""
        return {
            "num_subjects": len(self.subjects),
            "num_teachers": len(self.input.teachers),
            "num_days": self.config.days,
            "slots_per_day": self.config.slots_per_day,
            "num_cell_vars": len(self.cell_vars),
            "variables_created": self._variables_created,
            "constraints_added": self._constraints_added,
        }


def check_feasibility(
    input_data: TimetableInput,
    time_limit_seconds: float = 10.0,
    seed: Optional[int] = None,
) -> FeasibilityResult:
    """Build and solve the CP-SAT model in one call."""
    builder = FeasibilityModelBuilder(input_data)
    builder.create_variables()
    builder.add_constraints()
    return builder.solve(time_limit_seconds=time_limit_seconds, seed=seed)
