"""
Output formatters for timetable solutions.

This module provides formatters for different output formats:
- Plain: fixed-width text table
- Console: rich table for the terminal
- CSV: flat format for spreadsheets
- JSON: complete output
- Teacher view: one teacher's week
"""

from __future__ import annotations

import csv
import json
from io import StringIO
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .schema import CellKind, CellOutput, TimetableOutput, FREE_LABEL, LUNCH_LABEL


# =============================================================================
# Constants
# =============================================================================

CELL_STYLES = {
    CellKind.LESSON: "white",
    CellKind.LUNCH: "bold yellow",
    CellKind.FREE: "dim",
}


# =============================================================================
# Plain Formatter
# =============================================================================

class PlainFormatter:
    """Formats the weekly grid as a fixed-width text table."""

    def __init__(self, column_width: int = 30, time_width: int = 12):
        """
        Initialize plain formatter.

        Args:
            column_width: Width of each day column
            time_width: Width of the time label column
        """
        self.column_width = column_width
        self.time_width = time_width

    def format(self, output: TimetableOutput) -> str:
        """
        Format output as a text table.

        Args:
            output: TimetableOutput to format

        Returns:
            Table string, or a one-line message when there is no grid
        """
        title = f" TIME TABLE ({output.schedule_type.label}) "
        if not output.is_feasible:
            return f"{title.strip()}: {output.status.value.upper()} - {output.message or ''}".rstrip(" -")

        lines = []
        banner = title.center(self.time_width + self.column_width * len(output.days), "=")
        lines.append(banner)
        lines.append("")

        header = "Time".ljust(self.time_width)
        header += "".join(d.day_name.ljust(self.column_width) for d in output.days)
        lines.append(header.rstrip())

        for slot in range(output.config.slots_per_day):
            row = output.config.slot_label(slot).ljust(self.time_width)
            for day_schedule in output.days:
                row += self._fit(day_schedule.cells[slot].label()).ljust(self.column_width)
            lines.append(row.rstrip())

        return "\n".join(lines)

    def _fit(self, text: str) -> str:
        """Truncate text to leave one space between columns."""
        limit = self.column_width - 1
        if len(text) <= limit:
            return text
        return text[:limit - 1] + "~"


def format_plain(output: TimetableOutput, column_width: int = 30) -> str:
    """Convenience function for plain table formatting."""
    return PlainFormatter(column_width=column_width).format(output)


# =============================================================================
# Console Formatter
# =============================================================================

class ConsoleFormatter:
    """Formats timetable output as a rich table."""

    def __init__(self, width: int | None = None):
        """
        Initialize console formatter.

        Args:
            width: Console width (None = auto-detect)
        """
        self.width = width

    def format(self, output: TimetableOutput) -> str:
        """Render to a string via a recording console."""
        console = Console(record=True, width=self.width or 120, file=StringIO())
        self.print(output, console)
        return console.export_text()

    def print(self, output: TimetableOutput, console: Console | None = None) -> None:
        """Print output to a rich console."""
        console = console or Console(width=self.width)

        status_color = "green" if output.is_feasible else "red"
        status_text = Text(output.status.value.upper(), style=f"bold {status_color}")
        console.print(Panel(
            status_text,
            title=f"Time Table ({output.schedule_type.label})",
            subtitle=f"Solved in {output.solve_time_seconds:.2f}s",
        ))

        if not output.is_feasible:
            if output.message:
                console.print(f"[red]{output.message}[/red]")
            return

        table = Table(title="Weekly Schedule", show_header=True, header_style="bold cyan")
        table.add_column("Time", style="dim")
        for day_schedule in output.days:
            table.add_column(day_schedule.day_name, justify="center")

        for slot in range(output.config.slots_per_day):
            row = [output.config.slot_label(slot)]
            for day_schedule in output.days:
                cell = day_schedule.cells[slot]
                row.append(Text(_cell_text(cell), style=CELL_STYLES[cell.kind]))
            table.add_row(*row)

        console.print(table)


def _cell_text(cell: CellOutput) -> str:
    """Two-line rich cell: subject, then teacher and room."""
    if cell.kind != CellKind.LESSON:
        return cell.label()
    detail = cell.teacher_name
    if cell.classroom:
        detail = f"{detail}, {cell.classroom}"
    return f"{cell.subject_name}\n{detail}"


def format_console(output: TimetableOutput, width: int | None = None) -> str:
    """Convenience function for console formatting."""
    return ConsoleFormatter(width=width).format(output)


def print_console(output: TimetableOutput, console: Console | None = None) -> None:
    """Print timetable to console."""
    ConsoleFormatter().print(output, console)


# =============================================================================
# CSV Formatter
# =============================================================================

class CSVFormatter:
    """Formats the grid as CSV, one row per cell."""

    DEFAULT_COLUMNS = [
        'day', 'day_name', 'slot', 'start_time', 'end_time',
        'kind', 'subject_name', 'teacher_name', 'classroom',
    ]

    def __init__(
        self,
        columns: list[str] | None = None,
        include_header: bool = True,
        include_empty: bool = True,
        delimiter: str = ',',
    ):
        """
        Initialize CSV formatter.

        Args:
            columns: List of columns to include (None = all)
            include_header: Whether to include header row
            include_empty: Whether to include lunch and free cells
            delimiter: Field delimiter
        """
        self.columns = columns or self.DEFAULT_COLUMNS
        self.include_header = include_header
        self.include_empty = include_empty
        self.delimiter = delimiter

    def format(self, output: TimetableOutput) -> str:
        buffer = StringIO()
        self.write(output, buffer)
        return buffer.getvalue()

    def write(self, output: TimetableOutput, file: TextIO) -> None:
        """Write CSV to file-like object."""
        writer = csv.writer(file, delimiter=self.delimiter)

        if self.include_header:
            writer.writerow(self.columns)

        for day_schedule in output.days:
            for cell in day_schedule.cells:
                if not self.include_empty and cell.kind != CellKind.LESSON:
                    continue
                writer.writerow(self._cell_to_row(cell, day_schedule.day_name))

    def _cell_to_row(self, cell: CellOutput, day_name: str) -> list[str]:
        subject_name = cell.subject_name or ''
        if cell.kind == CellKind.LUNCH:
            subject_name = LUNCH_LABEL
        elif cell.kind == CellKind.FREE:
            subject_name = FREE_LABEL

        field_map = {
            'day': str(cell.day),
            'day_name': day_name,
            'slot': str(cell.slot),
            'start_time': cell.start_time,
            'end_time': cell.end_time,
            'kind': cell.kind.value,
            'subject_name': subject_name,
            'teacher_name': cell.teacher_name or '',
            'classroom': cell.classroom or '',
        }

        return [field_map.get(col, '') for col in self.columns]


def format_csv(output: TimetableOutput, include_empty: bool = True) -> str:
    """Convenience function for CSV formatting."""
    return CSVFormatter(include_empty=include_empty).format(output)


# =============================================================================
# JSON Formatter
# =============================================================================

def format_json(output: TimetableOutput, indent: int = 2) -> str:
    """Format output as JSON."""
    return output.to_json(indent=indent)


def format_json_compact(output: TimetableOutput) -> str:
    """Format as compact single-line JSON."""
    return json.dumps(output.to_dict(), separators=(',', ':'))


# =============================================================================
# Teacher View Formatter
# =============================================================================

class TeacherViewFormatter:
    """Formats one teacher's lessons for the week."""

    def format(self, output: TimetableOutput, teacher: str) -> str:
        schedule = output.by_teacher.get(teacher)
        if not schedule:
            return f"No schedule found for teacher: {teacher}"

        lines = []
        lines.append(f"{'=' * 50}")
        lines.append(f"TEACHER: {schedule.name} ({schedule.total_periods} periods)")
        lines.append(f"{'=' * 50}")

        for day in sorted(schedule.by_day.keys()):
            lines.append(f"\n{output.days[day].day_name}:")
            for cell in schedule.by_day[day]:
                room = f" | Room: {cell.classroom}" if cell.classroom else ""
                lines.append(f"  {cell.time_label}: {cell.subject_name}{room}")

        return "\n".join(lines)

    def format_all(self, output: TimetableOutput) -> str:
        """Format timetables for all teachers."""
        return "\n\n".join(self.format(output, t) for t in sorted(output.by_teacher))


def format_teacher_view(output: TimetableOutput, teacher: str) -> str:
    return TeacherViewFormatter().format(output, teacher)


# =============================================================================
# File Utilities
# =============================================================================

FORMATTERS = {
    "plain": format_plain,
    "table": format_console,
    "csv": format_csv,
    "json": format_json,
}


def render(output: TimetableOutput, fmt: str) -> str:
    """Render output in a named format (plain, table, csv, json)."""
    try:
        formatter = FORMATTERS[fmt]
    except KeyError:
        raise ValueError(f"Unknown format '{fmt}'. Choose from: {', '.join(FORMATTERS)}") from None
    return formatter(output)


def save_output(output: TimetableOutput, filepath: str | Path, fmt: str = "json") -> Path:
    """Write output to a file in the given format."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w", newline="" if fmt == "csv" else None) as f:
        f.write(render(output, fmt))
    return filepath
