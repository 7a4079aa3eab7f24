"""
Weekly grid projection.

Places the meeting intervals of selected courses onto a fixed grid:
- 5 columns, Monday to Friday (weekend meetings are parsed but never drawn)
- 15 hourly rows, 07:00 to 21:00 (the last row ends at 22:00)

A row starting at minute t is occupied by interval I iff I.start <= t < I.end.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from myregistrar.conflicts import find_interval_conflicts
from myregistrar.model import WEEKDAYS, Course, MeetingInterval
from myregistrar.parse import parse_schedule


FIRST_ROW_MINUTE = 7 * 60
ROW_COUNT = 15
ROW_MINUTES = 60

ROW_STARTS = tuple(FIRST_ROW_MINUTE + i * ROW_MINUTES for i in range(ROW_COUNT))


@dataclass(frozen=True)
class GridCell:
    cell_id: str
    interval_id: str
    course_id: str
    course_code: str
    course_title: str
    instructor: str
    location: str
    day: str
    row: int
    row_minute: int
    interval: MeetingInterval
    conflicting: bool = False


@dataclass
class WeekProjection:
    cells: list[GridCell] = field(default_factory=list)
    conflicting_ids: set[str] = field(default_factory=set)
    total_credits: int = 0
    total_hours: float = 0.0

    def cell_at(self, day: str, row: int) -> list[GridCell]:
        """
        All cells in one grid position (more than one means a conflict).
        """
        return [c for c in self.cells if c.day == day and c.row == row]


def interval_id(course: Course, iv: MeetingInterval) -> str:
    return f"{course.id}-{iv.day}"


def _selected_courses(courses: Sequence[Course], selected_ids: Iterable[str]) -> list[Course]:
    course_by_id = {c.id: c for c in courses}
    out: list[Course] = []
    for cid in dict.fromkeys(selected_ids):
        c = course_by_id.get(cid)
        if c is not None:
            out.append(c)
    return out


def project_week(courses: Sequence[Course], selected_ids: Iterable[str]) -> WeekProjection:
    """
    Project the selected courses onto the weekly grid.

    conflicting_ids holds the interval ids (course_id-Day) that overlap with
    an interval of a different course. Weekend intervals take part in the
    conflict check and in contact hours, but produce no cells.
    """
    selected = _selected_courses(courses, selected_ids)

    tagged: list[tuple[str, MeetingInterval]] = []
    owners: dict[tuple[str, MeetingInterval], Course] = {}
    for c in selected:
        for iv in parse_schedule(c.schedule):
            tagged.append((c.id, iv))
            owners[(c.id, iv)] = c

    conflicting: set[str] = set()
    for (cid1, iv1), (cid2, iv2) in find_interval_conflicts(tagged):
        conflicting.add(interval_id(owners[(cid1, iv1)], iv1))
        conflicting.add(interval_id(owners[(cid2, iv2)], iv2))

    cells: list[GridCell] = []
    for cid, iv in tagged:
        if iv.day not in WEEKDAYS:
            continue
        c = owners[(cid, iv)]
        iid = interval_id(c, iv)
        for row, t in enumerate(ROW_STARTS):
            if iv.start_minute <= t < iv.end_minute:
                cells.append(
                    GridCell(
                        cell_id=f"{iid}-{t // 60:02d}{t % 60:02d}",
                        interval_id=iid,
                        course_id=c.id,
                        course_code=c.code,
                        course_title=c.title,
                        instructor=c.instructor,
                        location=c.location,
                        day=iv.day,
                        row=row,
                        row_minute=t,
                        interval=iv,
                        conflicting=iid in conflicting,
                    )
                )

    cells.sort(key=lambda cell: (cell.row, WEEKDAYS.index(cell.day), cell.course_code))

    return WeekProjection(
        cells=cells,
        conflicting_ids=conflicting,
        total_credits=sum(c.credits for c in selected),
        # once per meeting day, so MWF counts three times
        total_hours=sum(iv.duration_minutes for _, iv in tagged) / 60,
    )
