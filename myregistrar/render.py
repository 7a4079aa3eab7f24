"""
Rich renderables for the CLI: course lists, conflict reports and the weekly grid.

Everything here only formats; no conflict logic lives in this module.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from rich import box
from rich.table import Table

from myregistrar.grid import ROW_STARTS, WeekProjection
from myregistrar.model import WEEKDAYS, ConflictReport, Course
from myregistrar.parse import minutes_to_clock


SEVERITY_STYLE = {"high": "bold red", "medium": "yellow", "low": "blue"}
SEVERITY_LABEL = {"high": "Critical", "medium": "Warning", "low": "Info"}

KIND_TITLE = {
    "time": "Time Conflict",
    "room": "Room Conflict",
    "capacity": "Course Full",
    "prerequisite": "Prerequisites Not Met",
}


def course_table(courses: Iterable[Course], title: str = "Courses") -> Table:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Code", style="bold cyan")
    table.add_column("Title")
    table.add_column("Instructor", style="magenta")
    table.add_column("Schedule")
    table.add_column("Room")
    table.add_column("Seats", justify="right")
    table.add_column("Status", style="green")

    for c in courses:
        seats = f"{c.enrolled}/{c.capacity}"
        if c.waitlisted:
            seats += f" (+{c.waitlisted} wl)"
        table.add_row(c.code, c.title, c.instructor, c.schedule or "TBD", c.location, seats, c.status)
    return table


def conflict_table(reports: Sequence[ConflictReport], title: str = "Conflicts", suggestions: bool = False) -> Table:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("Severity")
    table.add_column("Courses", style="bold cyan")
    table.add_column("Day")
    table.add_column("Details")

    for i, r in enumerate(reports, start=1):
        style = SEVERITY_STYLE.get(r.severity, "")
        details = r.explanation
        if suggestions and r.suggestions:
            details += "\n" + "\n".join(f"- {s}" for s in r.suggestions)
        table.add_row(
            str(i),
            KIND_TITLE.get(r.kind, r.kind),
            f"[{style}]{SEVERITY_LABEL.get(r.severity, r.severity)}[/]" if style else r.severity,
            " / ".join(c.code for c in r.involved_courses),
            r.day or "",
            details,
        )
    return table


def week_table(projection: WeekProjection, title: str = "Weekly schedule") -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAVY, show_lines=False)
    table.add_column("Time", justify="right")
    for day in WEEKDAYS:
        table.add_column(day[:3])

    for row, minute in enumerate(ROW_STARTS):
        values = [minutes_to_clock(minute)]
        for day in WEEKDAYS:
            parts = []
            for cell in projection.cell_at(day, row):
                text = cell.course_code
                if cell.location:
                    text += f" @ {cell.location}"
                parts.append(f"[bold red]{text}[/]" if cell.conflicting else text)
            values.append("\n".join(parts))
        table.add_row(*values)
    return table
