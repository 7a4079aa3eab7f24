"""
iCalendar (.ics) export.

We convert a student's weekly meetings into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

Each meeting day becomes one VEVENT anchored in the week that starts on
`first_monday`; with weeks > 1 it repeats weekly (no holidays or cancellations).
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Sequence

from myregistrar.model import DAYS, Course
from myregistrar.parse import parse_schedule


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(day: date, minute: int) -> str:
    """
    Convert date + minute of day to ICS local datetime string 'YYYYMMDDTHHMM00'.
    """
    dt = datetime(day.year, day.month, day.day) + timedelta(minutes=minute)
    return dt.strftime("%Y%m%dT%H%M00")


def export_week_to_ics(
    courses: Sequence[Course],
    selected_ids: Iterable[str],
    out_path: str | Path,
    first_monday: date,
    weeks: int = 1,
) -> int:
    """
    Export the meetings of the selected courses to an .ics file.
    Returns number of exported events (one per course meeting day).
    """
    if first_monday.weekday() != 0:
        raise ValueError(f"{first_monday.isoformat()} is not a Monday")
    if weeks < 1:
        raise ValueError("weeks must be at least 1")

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    course_by_id = {c.id: c for c in courses}
    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//MyRegistrar//EN")
    lines.append("CALSCALE:GREGORIAN")

    count = 0
    for cid in dict.fromkeys(selected_ids):
        course = course_by_id.get(cid)
        if course is None:
            continue

        for iv in parse_schedule(course.schedule):
            day = first_monday + timedelta(days=DAYS.index(iv.day))
            dtstart = _dt_local(day, iv.start_minute)
            summary = f"{course.code} {course.title}".strip() or "MyRegistrar Meeting"

            lines.append("BEGIN:VEVENT")
            lines.append(f"UID:{_ics_escape(f'{course.id}-{iv.day}-{dtstart}')}@myregistrar")
            lines.append(f"DTSTAMP:{dtstamp}")
            lines.append(f"DTSTART:{dtstart}")
            lines.append(f"DTEND:{_dt_local(day, iv.end_minute)}")
            if weeks > 1:
                lines.append(f"RRULE:FREQ=WEEKLY;COUNT={weeks}")
            lines.append(f"SUMMARY:{_ics_escape(summary)}")
            if course.location:
                lines.append(f"LOCATION:{_ics_escape(course.location)}")
            if course.instructor:
                lines.append(f"DESCRIPTION:{_ics_escape(course.instructor)}")
            lines.append("END:VEVENT")
            count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
