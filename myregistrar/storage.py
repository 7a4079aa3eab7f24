"""
Persistent storage for the course catalog and registrations.

This module manages two files inside the data directory:

    courses.json        - list of course records
    registrations.json  - list of registration records

Design rationale:
- the conflict engine never touches files; it gets plain lists of Course objects
- enrollment counts are always derived from registrations (recount_enrollment)
- missing or corrupted files load as empty lists so the CLI keeps working
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from myregistrar.config import get_settings
from myregistrar.model import (
    REG_DROPPED,
    REG_REGISTERED,
    REG_WAITLISTED,
    Course,
    Registration,
    course_from_dict,
    course_to_dict,
    registration_from_dict,
    registration_to_dict,
)


logger = logging.getLogger(__name__)


def _data_dir(data_dir: str | Path | None = None) -> Path:
    """
    Return the data directory: the explicit argument (mainly for tests),
    otherwise the configured MYREGISTRAR_DATA_DIR.
    """
    return Path(data_dir) if data_dir is not None else Path(get_settings().DATA_DIR)


def courses_path(data_dir: str | Path | None = None) -> Path:
    return _data_dir(data_dir) / "courses.json"


def registrations_path(data_dir: str | Path | None = None) -> Path:
    return _data_dir(data_dir) / "registrations.json"


def _load_records(path: Path) -> list[dict[str, Any]]:
    """
    Load a JSON list of objects. Returns [] if the file is missing or invalid.
    """
    if not path.exists():
        return []

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s (%s), treating it as empty", path, e)
        return []

    if not isinstance(data, list):
        logger.warning("%s does not contain a JSON list, treating it as empty", path)
        return []
    return [x for x in data if isinstance(x, dict)]


def _write_records(path: Path, records: list[dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


def load_courses(path: str | Path | None = None) -> list[Course]:
    """
    Load all courses. Records without an id and duplicate ids are skipped.
    """
    p = Path(path) if path is not None else courses_path()

    out: list[Course] = []
    seen: set[str] = set()
    for record in _load_records(p):
        course = course_from_dict(record)
        if course is None or course.id in seen:
            continue
        seen.add(course.id)
        out.append(course)
    return out


def save_courses(courses: Iterable[Course], path: str | Path | None = None) -> None:
    p = Path(path) if path is not None else courses_path()
    _write_records(p, [course_to_dict(c) for c in courses])


def find_course(courses: Iterable[Course], key: str) -> Optional[Course]:
    """
    Look up a course by id, falling back to its code (case-insensitive).
    """
    key = key.strip()
    courses = list(courses)
    for c in courses:
        if c.id == key:
            return c
    for c in courses:
        if c.code == key.upper():
            return c
    return None


# ---------------------------------------------------------------------------
# Registrations
# ---------------------------------------------------------------------------


def load_registrations(path: str | Path | None = None) -> list[Registration]:
    p = Path(path) if path is not None else registrations_path()

    out: list[Registration] = []
    for record in _load_records(p):
        reg = registration_from_dict(record)
        if reg is not None:
            out.append(reg)
    return out


def save_registrations(registrations: Iterable[Registration], path: str | Path | None = None) -> None:
    p = Path(path) if path is not None else registrations_path()
    _write_records(p, [registration_to_dict(r) for r in registrations])


def new_registration(student_id: str, course_id: str, status: str = REG_REGISTERED, semester: str = "") -> Registration:
    return Registration(
        id=f"reg-{uuid.uuid4().hex[:12]}",
        student_id=student_id,
        course_id=course_id,
        status=status,
        registered_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        semester=semester,
    )


def registered_course_ids(registrations: Iterable[Registration], student_id: str) -> list[str]:
    """
    Course ids the student currently holds with status 'registered', in stored order.
    """
    return [r.course_id for r in registrations if r.student_id == student_id and r.status == REG_REGISTERED]


def active_registration(
    registrations: Iterable[Registration], student_id: str, course_id: str
) -> Optional[Registration]:
    """
    The student's non-dropped registration for a course, if any.
    """
    for r in registrations:
        if r.student_id == student_id and r.course_id == course_id and r.status != REG_DROPPED:
            return r
    return None


def recount_enrollment(courses: Iterable[Course], registrations: Iterable[Registration]) -> None:
    """
    Set `enrolled` / `waitlisted` on every course by counting registrations.

    If no registration exists at all, catalog counts are left untouched
    (e.g. a freshly imported catalog).
    """
    registrations = list(registrations)
    if not registrations:
        return

    enrolled: dict[str, int] = {}
    waitlisted: dict[str, int] = {}
    for r in registrations:
        if r.status == REG_REGISTERED:
            enrolled[r.course_id] = enrolled.get(r.course_id, 0) + 1
        elif r.status == REG_WAITLISTED:
            waitlisted[r.course_id] = waitlisted.get(r.course_id, 0) + 1

    for c in courses:
        c.enrolled = enrolled.get(c.id, 0)
        c.waitlisted = waitlisted.get(c.id, 0)


# ---------------------------------------------------------------------------
# Demo data
# ---------------------------------------------------------------------------

DEMO_COURSES: list[dict[str, Any]] = [
    {
        "id": "course-1",
        "code": "CS101",
        "title": "Introduction to Programming",
        "description": "Fundamental programming concepts using Python.",
        "credits": 3,
        "instructor": "Prof. Michael Chen",
        "schedule": "MWF 9:00-9:50 AM",
        "location": "Computer Lab A",
        "capacity": 40,
        "prerequisites": [],
        "department": "CS",
        "semester": "Fall 2024",
        "status": "active",
    },
    {
        "id": "course-2",
        "code": "CS201",
        "title": "Data Structures",
        "description": "Arrays, linked lists, trees and graphs. Algorithm analysis.",
        "credits": 4,
        "instructor": "Prof. Michael Chen",
        "schedule": "TTh 2:00-3:50 PM",
        "location": "Engineering 205",
        "capacity": 30,
        "prerequisites": ["CS101"],
        "department": "CS",
        "semester": "Fall 2024",
        "status": "active",
    },
    {
        "id": "course-3",
        "code": "MATH245",
        "title": "Discrete Mathematics",
        "description": "Logic, sets, functions, relations, graphs and combinatorics.",
        "credits": 3,
        "instructor": "Dr. Emily Davis",
        "schedule": "MWF 10:00-10:50 AM",
        "location": "Math Building 101",
        "capacity": 45,
        "prerequisites": ["MATH101"],
        "department": "MATH",
        "semester": "Fall 2024",
        "status": "active",
    },
    {
        "id": "course-4",
        "code": "ENG102",
        "title": "Technical Writing",
        "description": "Writing for technical audiences.",
        "credits": 3,
        "instructor": "Dr. Laura Kim",
        "schedule": "MWF 9:00-9:50 AM",
        "location": "Computer Lab A",
        "capacity": 25,
        "prerequisites": [],
        "department": "ENG",
        "semester": "Fall 2024",
        "status": "active",
    },
    {
        "id": "course-5",
        "code": "CS350",
        "title": "Operating Systems",
        "description": "Processes, memory, file systems.",
        "credits": 4,
        "instructor": "Prof. Michael Chen",
        "schedule": "TBD",
        "location": "",
        "capacity": 30,
        "prerequisites": ["CS201"],
        "department": "CS",
        "semester": "Fall 2024",
        "status": "draft",
    },
]

# course id -> number of other students holding a seat
DEMO_FILLER_SEATS = {"course-1": 34, "course-2": 28, "course-3": 41, "course-4": 10}


def seed_demo_data(data_dir: str | Path | None = None) -> tuple[int, int]:
    """
    Write the demo catalog plus registrations (student 'user-1' and filler
    students) into the data directory. Returns (courses, registrations) written.
    """
    courses = [c for c in (course_from_dict(d) for d in DEMO_COURSES) if c is not None]

    registrations: list[Registration] = [
        new_registration("user-1", "course-1", REG_REGISTERED, "Fall 2024"),
        new_registration("user-1", "course-3", REG_REGISTERED, "Fall 2024"),
        new_registration("user-1", "course-2", REG_WAITLISTED, "Fall 2024"),
    ]
    for course_id, seats in DEMO_FILLER_SEATS.items():
        for n in range(seats):
            registrations.append(new_registration(f"demo-{course_id}-{n:03d}", course_id, REG_REGISTERED, "Fall 2024"))

    recount_enrollment(courses, registrations)

    save_courses(courses, courses_path(data_dir))
    save_registrations(registrations, registrations_path(data_dir))
    logger.info("Seeded %d courses and %d registrations", len(courses), len(registrations))
    return len(courses), len(registrations)
