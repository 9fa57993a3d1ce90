"""
Command-line interface for the timetable scheduler.

Usage:
    python -m timetabler solve input.json -o output.json --seed 7
    python -m timetabler solve --interactive
    python -m timetabler validate input.json
    python -m timetabler check input.json
    python -m timetabler view output.json --teacher "Prof. A"
    python -m timetabler example -o sample.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .data.generator import default_timetable_input
from .data.loader import (
    capacity_warnings,
    check_capacity,
    load_timetable_from_json,
    save_timetable_input,
)
from .data.models import GridConfig, ScheduleType, TimetableInput
from .exceptions import CapacityExceededError, InputValidationError
from .main import solve_timetable
from .model_builder import check_feasibility, SolverStatus
from .output.formatters import (
    FORMATTERS,
    format_teacher_view,
    print_console,
    render,
    save_output,
)
from .output.schema import OutputStatus, TimetableOutput
from .prompts import InteractiveCollector
from .scheduler import SearchBudget
from .utils.logger import configure_logging

# Create Typer app
app = typer.Typer(
    name="timetabler",
    help="Weekly timetable generator using backtracking search.",
    add_completion=False,
)

# Rich console for pretty output
console = Console()


# =============================================================================
# Helper Functions
# =============================================================================

def load_input(input_path: Path) -> TimetableInput:
    """Load and validate input data."""
    if not input_path.exists():
        console.print(f"[red]Error:[/red] Input file not found: {input_path}")
        raise typer.Exit(code=1)

    try:
        return load_timetable_from_json(input_path)
    except InputValidationError as e:
        console.print(f"[red]Error loading input:[/red] {e}")
        raise typer.Exit(code=1)


def load_output(output_path: Path) -> TimetableOutput:
    """Load output JSON file."""
    if not output_path.exists():
        console.print(f"[red]Error:[/red] Output file not found: {output_path}")
        raise typer.Exit(code=1)

    try:
        with open(output_path) as f:
            data = json.load(f)
        return TimetableOutput.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Error loading output:[/red] {e}")
        raise typer.Exit(code=1)


def apply_overrides(input_data: TimetableInput, **overrides) -> TimetableInput:
    """Replace grid settings given on the command line, re-validating the config."""
    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return input_data

    try:
        config = GridConfig.model_validate({**input_data.config.model_dump(), **updates})
    except ValidationError as e:
        console.print(f"[red]Invalid grid settings:[/red] {e}")
        raise typer.Exit(code=1)

    return TimetableInput(config=config, subjects=input_data.subjects)


def print_summary(input_data: TimetableInput) -> None:
    """Print input summary to console."""
    config = input_data.config
    table = Table(title="Summary", show_header=False, box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Type", config.schedule_type.label)
    table.add_row("Subjects", str(len(input_data.subjects)))
    table.add_row("Teachers", str(len(input_data.teachers)))
    table.add_row("Days", str(config.days))
    table.add_row("Slots per day", str(config.slots_per_day))
    table.add_row("Lunch slot", f"{config.lunch_slot_index} ({config.slot_label(config.lunch_slot_index)})")
    table.add_row("Required hours", str(input_data.total_required_occurrences))
    table.add_row("Available slots", str(input_data.available_slots))
    table.add_row("Teacher cap per day", str(config.max_teacher_periods_per_day))

    console.print(table)


# =============================================================================
# Commands
# =============================================================================

@app.command()
def solve(
    input_file: Optional[Path] = typer.Argument(
        None,
        help="Path to input JSON file (default subjects are used if omitted)",
    ),
    interactive: bool = typer.Option(
        False,
        "--interactive", "-i",
        help="Enter subjects and teachers at the terminal",
    ),
    ask_classroom: bool = typer.Option(
        False,
        "--classroom",
        help="Also ask for a classroom per subject (interactive mode)",
    ),
    days: Optional[int] = typer.Option(None, "--days", help="Days per week", min=1, max=7),
    slots: Optional[int] = typer.Option(None, "--slots", help="Slots per day", min=1, max=24),
    lunch_slot: Optional[int] = typer.Option(None, "--lunch-slot", help="Slot index reserved for lunch", min=0),
    max_teacher_periods: Optional[int] = typer.Option(
        None,
        "--max-teacher-periods",
        help="Max periods per teacher per day",
        min=1,
    ),
    schedule_type: Optional[ScheduleType] = typer.Option(None, "--type", help="school or college"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed for the candidate order"),
    max_steps: Optional[int] = typer.Option(
        None,
        "--max-steps",
        help="Stop after visiting this many search nodes",
        min=1,
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout", "-t",
        help="Stop searching after this many seconds",
        min=0.001,
    ),
    fmt: str = typer.Option(
        "table",
        "--format", "-f",
        help="Display format: table, plain, csv or json",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Path to write output JSON file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    ),
) -> None:
    """
    Generate a weekly timetable.

    Example:
        python -m timetabler solve input.json --seed 7 -o output.json
    """
    configure_logging(verbose)

    if fmt not in FORMATTERS:
        console.print(f"[red]Error:[/red] Unknown format '{fmt}'. Choose from: {', '.join(FORMATTERS)}")
        raise typer.Exit(code=1)

    # Load input
    if interactive:
        input_data = InteractiveCollector(console=console).collect(with_classroom=ask_classroom)
    elif input_file is not None:
        input_data = load_input(input_file)
    else:
        console.print("[yellow]No input given, using default subjects.[/yellow]")
        input_data = default_timetable_input()

    input_data = apply_overrides(
        input_data,
        days=days,
        slots_per_day=slots,
        lunch_slot_index=lunch_slot,
        max_teacher_periods_per_day=max_teacher_periods,
        schedule_type=schedule_type,
    )

    if verbose:
        print_summary(input_data)

    # Capacity check before any search
    try:
        check_capacity(input_data)
    except CapacityExceededError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    budget = SearchBudget(max_steps=max_steps, time_limit_seconds=timeout)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Searching for a timetable...", total=None)
        timetable_output = solve_timetable(input_data, seed=seed, budget=budget)

    if timetable_output.status == OutputStatus.INFEASIBLE:
        console.print("[red]Could not generate a timetable:[/red] no assignment satisfies all constraints.")
        for warning in capacity_warnings(input_data):
            console.print(f"  - {warning}")
        raise typer.Exit(code=1)

    if timetable_output.status == OutputStatus.ABORTED:
        console.print(f"[yellow]Search stopped before a timetable was found:[/yellow] {timetable_output.message}")
        raise typer.Exit(code=1)

    if fmt == "table":
        print_console(timetable_output, console)
    else:
        typer.echo(render(timetable_output, fmt))

    if verbose:
        stats = timetable_output.statistics
        console.print(
            f"  Nodes: {stats.nodes}  Placements: {stats.placements}  "
            f"Removals: {stats.removals}  Max depth: {stats.max_depth}"
        )

    if output:
        save_output(timetable_output, output, fmt="json")
        console.print(f"\n[green]Solution saved to:[/green] {output}")


@app.command()
def validate(
    input_file: Path = typer.Argument(
        ...,
        help="Path to input JSON file to validate",
    ),
) -> None:
    """
    Validate input data and check that the hours fit the grid.

    Example:
        python -m timetabler validate input.json
    """
    console.print(f"\n[bold]Validating:[/bold] {input_file}\n")

    console.print("[cyan]1. Validating against schema...[/cyan]")
    input_data = load_input(input_file)
    console.print("   [green]Schema validation passed[/green]")

    console.print("[cyan]2. Checking capacity...[/cyan]")
    try:
        check_capacity(input_data)
        console.print("   [green]Required hours fit the available slots[/green]")
        capacity_ok = True
    except CapacityExceededError as e:
        console.print(f"   [red]{e}[/red]")
        capacity_ok = False

    console.print("[cyan]3. Checking per-day limits...[/cyan]")
    warnings = capacity_warnings(input_data)
    if warnings:
        console.print("   [yellow]Warnings found:[/yellow]")
        for w in warnings:
            console.print(f"   - {w}")
    else:
        console.print("   [green]No per-day limit issues[/green]")

    console.print()
    print_summary(input_data)

    if not capacity_ok:
        raise typer.Exit(code=1)

    console.print("\n[green]Validation complete.[/green]\n")


@app.command()
def check(
    input_file: Path = typer.Argument(
        ...,
        help="Path to input JSON file",
    ),
    timeout: float = typer.Option(
        10.0,
        "--timeout", "-t",
        help="Maximum CP-SAT solving time in seconds",
        min=0.1,
    ),
) -> None:
    """
    Decide feasibility with the CP-SAT solver.

    Uses the same hard rules as the backtracking search, without its
    exponential worst case.

    Example:
        python -m timetabler check input.json
    """
    input_data = load_input(input_file)

    try:
        check_capacity(input_data)
    except CapacityExceededError as e:
        console.print(f"[red]Infeasible:[/red] {e}")
        raise typer.Exit(code=1)

    result = check_feasibility(input_data, time_limit_seconds=timeout)

    color = {
        SolverStatus.FEASIBLE: "green",
        SolverStatus.INFEASIBLE: "red",
    }.get(result.status, "yellow")
    console.print(Panel(
        f"[bold {color}]{result.status.value}[/bold {color}]",
        title="CP-SAT Feasibility",
        subtitle=f"{result.solve_time_ms}ms",
    ))

    if not result.is_feasible:
        raise typer.Exit(code=1)


@app.command()
def view(
    output_file: Path = typer.Argument(
        ...,
        help="Path to output JSON file",
    ),
    teacher: Optional[str] = typer.Option(
        None,
        "--teacher", "-T",
        help="Show schedule for one teacher",
    ),
    fmt: str = typer.Option(
        "table",
        "--format", "-f",
        help="Display format: table, plain, csv or json",
    ),
) -> None:
    """
    Display a saved timetable.

    Examples:
        python -m timetabler view output.json
        python -m timetabler view output.json --teacher "Prof. A"
        python -m timetabler view output.json --format plain
    """
    output = load_output(output_file)

    if teacher:
        if teacher not in output.by_teacher:
            console.print(f"[red]Error:[/red] Teacher '{teacher}' not found")
            console.print(f"Available teachers: {', '.join(output.by_teacher.keys())}")
            raise typer.Exit(code=1)
        typer.echo(format_teacher_view(output, teacher))
        return

    if fmt not in FORMATTERS:
        console.print(f"[red]Error:[/red] Unknown format '{fmt}'. Choose from: {', '.join(FORMATTERS)}")
        raise typer.Exit(code=1)

    if fmt == "table":
        print_console(output, console)
    else:
        typer.echo(render(output, fmt))


@app.command()
def example(
    output: Path = typer.Option(
        Path("timetable_input.json"),
        "--output", "-o",
        help="Where to write the sample input",
    ),
) -> None:
    """
    Write a sample input file with the default subjects.

    Example:
        python -m timetabler example -o sample.json
    """
    save_timetable_input(default_timetable_input(), output)
    console.print(f"[green]Sample input written to:[/green] {output}")


# =============================================================================
# Main Entry Point
# =============================================================================

def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
