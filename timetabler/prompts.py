"""
Interactive collection of timetable input from the terminal.

Asks for the schedule type, the subjects, the teachers, and for each
subject its teacher and weekly hours. Blank names and invalid numbers
are reported and asked again.
"""

from __future__ import annotations

from typing import Optional, TextIO

from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from .data.models import (
    MAX_REQUIRED_OCCURRENCES,
    GridConfig,
    ScheduleType,
    SubjectSpec,
    TimetableInput,
)


class InteractiveCollector:
    """
    Collects a TimetableInput through rich prompts.

    Args:
        console: Console to prompt on (default: a new Console)
        stream: Optional stream to read answers from instead of stdin
    """

    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None):
        self.console = console or Console()
        self.stream = stream

    # -------------------------------------------------------------------------
    # Primitive prompts
    # -------------------------------------------------------------------------

    def ask_positive_int(self, prompt: str, maximum: Optional[int] = None) -> int:
        """Ask until the answer is an integer in [1, maximum]."""
        while True:
            value = IntPrompt.ask(prompt, console=self.console, stream=self.stream)
            if value < 1:
                self.console.print("[red]Please enter a positive number[/red]")
            elif maximum is not None and value > maximum:
                self.console.print(f"[red]Please enter a number between 1 and {maximum}[/red]")
            else:
                return value

    def ask_name(self, prompt: str) -> str:
        """Ask until the answer is not blank."""
        while True:
            value = Prompt.ask(prompt, console=self.console, stream=self.stream).strip()
            if value:
                return value
            self.console.print("[red]Name cannot be empty[/red]")

    def ask_optional(self, prompt: str) -> Optional[str]:
        value = Prompt.ask(prompt, console=self.console, stream=self.stream, default="", show_default=False)
        return value.strip() or None

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def collect_schedule_type(self) -> ScheduleType:
        self.console.print("Select type: [bold]1[/bold]. School  [bold]2[/bold]. College")
        choice = self.ask_positive_int("Type", maximum=2)
        return ScheduleType.SCHOOL if choice == 1 else ScheduleType.COLLEGE

    def collect_subject_names(self) -> list[str]:
        count = self.ask_positive_int("Enter number of subjects")
        names: list[str] = []
        while len(names) < count:
            name = self.ask_name(f"Enter subject {len(names) + 1}")
            if name in names:
                self.console.print(f"[red]Subject '{name}' was already entered[/red]")
                continue
            names.append(name)
        return names

    def collect_teachers(self) -> list[str]:
        count = self.ask_positive_int("Enter number of teachers")
        return [self.ask_name(f"Enter teacher {i + 1}") for i in range(count)]

    def collect_assignment(self, subject: str, teachers: list[str], with_classroom: bool) -> SubjectSpec:
        """Ask which teacher takes a subject and for how many hours a week."""
        self.console.print(f"\n[bold]{subject}[/bold]")
        for i, teacher in enumerate(teachers, start=1):
            self.console.print(f"  {i}. {teacher}")

        choice = self.ask_positive_int(f"Teacher for {subject}", maximum=len(teachers))
        hours = self.ask_positive_int(f"Weekly hours for {subject}", maximum=MAX_REQUIRED_OCCURRENCES)
        classroom = self.ask_optional(f"Classroom for {subject} (optional)") if with_classroom else None

        return SubjectSpec(
            name=subject,
            teacher=teachers[choice - 1],
            required_occurrences=hours,
            classroom=classroom,
        )

    def collect(self, config: Optional[GridConfig] = None, with_classroom: bool = False) -> TimetableInput:
        """
        Run the whole dialogue.

        Args:
            config: Grid configuration; its schedule type is replaced by the answer
            with_classroom: Also ask for a classroom per subject

        Returns:
            Validated TimetableInput
        """
        config = config or GridConfig()
        schedule_type = self.collect_schedule_type()
        names = self.collect_subject_names()
        teachers = self.collect_teachers()
        subjects = [self.collect_assignment(name, teachers, with_classroom) for name in names]

        return TimetableInput(
            config=config.model_copy(update={"schedule_type": schedule_type}),
            subjects=subjects,
        )


def collect_timetable_input(
    config: Optional[GridConfig] = None,
    console: Optional[Console] = None,
    stream: Optional[TextIO] = None,
    with_classroom: bool = False,
) -> TimetableInput:
    """Convenience function: collect input interactively."""
    return InteractiveCollector(console=console, stream=stream).collect(config, with_classroom=with_classroom)
