"""
Central data model definitions used across the project.

This module defines the canonical structure of Course, MeetingInterval,
ConflictReport and Registration objects so that:
- all modules share the same field names
- the parser, the conflict engine, the grid and the storage layer agree on types
- JSON records are converted in exactly one place (tolerant *_from_dict helpers)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
WEEKDAYS = DAYS[:5]

MINUTES_PER_DAY = 24 * 60

KIND_TIME = "time"
KIND_ROOM = "room"
KIND_CAPACITY = "capacity"
KIND_PREREQUISITE = "prerequisite"

SEVERITY_HIGH = "high"
SEVERITY_MEDIUM = "medium"
SEVERITY_LOW = "low"
SEVERITIES = (SEVERITY_HIGH, SEVERITY_MEDIUM, SEVERITY_LOW)

COURSE_DRAFT = "draft"
COURSE_ACTIVE = "active"
COURSE_ARCHIVED = "archived"
COURSE_STATUSES = (COURSE_DRAFT, COURSE_ACTIVE, COURSE_ARCHIVED)

REG_REGISTERED = "registered"
REG_WAITLISTED = "waitlisted"
REG_DROPPED = "dropped"
REG_PENDING = "pending"
REG_COMPLETED = "completed"
REGISTRATION_STATUSES = (REG_REGISTERED, REG_WAITLISTED, REG_DROPPED, REG_PENDING, REG_COMPLETED)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass
class Course:
    """
    Represents one course offering as stored in courses.json.

    `enrolled` and `waitlisted` are derived by counting registrations
    (see storage.recount_enrollment); they are never edited by hand.
    A capacity of 0 (or less) means no seat limit has been set.
    """

    id: str
    code: str
    title: str
    credits: int = 3
    instructor: str = ""
    schedule: str = ""
    location: str = ""
    capacity: int = 0
    enrolled: int = 0
    prerequisites: List[str] = field(default_factory=list)
    status: str = "active"
    semester: str = ""
    department: str = ""
    description: str = ""
    waitlisted: int = 0


@dataclass(frozen=True)
class MeetingInterval:
    """
    One weekly meeting: a weekday plus a [start, end) range in minutes since midnight.
    """

    day: str
    start_minute: int
    end_minute: int

    def __post_init__(self) -> None:
        if self.day not in DAYS:
            raise ValueError(f"Invalid day: {self.day!r}")
        if not (0 <= self.start_minute < MINUTES_PER_DAY and 0 <= self.end_minute < MINUTES_PER_DAY):
            raise ValueError(f"Minute out of range: {self.start_minute}-{self.end_minute}")
        if self.start_minute >= self.end_minute:
            raise ValueError(f"Interval must start before it ends: {self.start_minute}-{self.end_minute}")

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute


@dataclass(frozen=True)
class ConflictReport:
    kind: str
    severity: str
    involved_courses: Tuple[Course, ...]
    explanation: str
    day: Optional[str] = None
    suggestions: Tuple[str, ...] = ()

    @property
    def course_ids(self) -> Tuple[str, ...]:
        return tuple(c.id for c in self.involved_courses)


@dataclass
class Registration:
    """
    Links a student to a course. Owned by the storage layer; the conflict
    engine only reads these.
    """

    id: str
    student_id: str
    course_id: str
    status: str = REG_REGISTERED
    registered_at: str = ""
    semester: str = ""


# ---------------------------------------------------------------------------
# JSON conversion
# ---------------------------------------------------------------------------


def _str(x: Any) -> str:
    return "" if x is None else str(x).strip()


def _int(x: Any, default: int) -> int:
    try:
        return int(x)
    except (TypeError, ValueError):
        return default


def course_from_dict(data: dict[str, Any]) -> Optional[Course]:
    """
    Build a Course from a JSON record. Returns None if the record has no id.
    """
    cid = _str(data.get("id"))
    if not cid:
        return None

    prereqs = data.get("prerequisites", [])
    if not isinstance(prereqs, list):
        prereqs = []

    status = _str(data.get("status")) or "active"

    return Course(
        id=cid,
        code=_str(data.get("code")).upper(),
        title=_str(data.get("title")),
        credits=_int(data.get("credits"), 0),
        instructor=_str(data.get("instructor") or data.get("instructor_name")),
        # schedule is kept verbatim: the grammar is whitespace- and case-sensitive
        schedule="" if data.get("schedule") is None else str(data.get("schedule")),
        location=_str(data.get("location")),
        capacity=_int(data.get("capacity"), 0),
        enrolled=_int(data.get("enrolled"), 0),
        prerequisites=[_str(p).upper() for p in prereqs if _str(p)],
        status=status,
        semester=_str(data.get("semester")),
        department=_str(data.get("department")),
        description=_str(data.get("description")),
        waitlisted=_int(data.get("waitlisted"), 0),
    )


def course_to_dict(course: Course) -> dict[str, Any]:
    return {
        "id": course.id,
        "code": course.code,
        "title": course.title,
        "credits": course.credits,
        "instructor": course.instructor,
        "schedule": course.schedule,
        "location": course.location,
        "capacity": course.capacity,
        "enrolled": course.enrolled,
        "waitlisted": course.waitlisted,
        "prerequisites": list(course.prerequisites),
        "status": course.status,
        "semester": course.semester,
        "department": course.department,
        "description": course.description,
    }


def registration_from_dict(data: dict[str, Any]) -> Optional[Registration]:
    rid = _str(data.get("id"))
    student_id = _str(data.get("student_id"))
    course_id = _str(data.get("course_id"))
    if not rid or not student_id or not course_id:
        return None

    status = _str(data.get("status"))
    if status not in REGISTRATION_STATUSES:
        status = REG_PENDING

    return Registration(
        id=rid,
        student_id=student_id,
        course_id=course_id,
        status=status,
        registered_at=_str(data.get("registered_at")),
        semester=_str(data.get("semester")),
    )


def registration_to_dict(reg: Registration) -> dict[str, Any]:
    return {
        "id": reg.id,
        "student_id": reg.student_id,
        "course_id": reg.course_id,
        "status": reg.status,
        "registered_at": reg.registered_at,
        "semester": reg.semester,
    }
