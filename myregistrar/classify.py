"""
Conflict classification.

Runs the overlap detector plus room, capacity and prerequisite checks over a
course collection and returns typed ConflictReport objects.

Two modes:
- registration mode: one candidate course against a student's registered set
  (classify / detect_conflicts). Any report blocks the registration.
- bulk mode: every active course against every other one, for administrators
  (classify_all / detect_all_conflicts).

Reports are produced fresh on every call; nothing is cached or mutated.
Check order (time, room, capacity, prerequisite) is the presentation order.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Sequence

from myregistrar.conflicts import any_overlap
from myregistrar.model import (
    COURSE_ACTIVE,
    DAYS,
    KIND_CAPACITY,
    KIND_PREREQUISITE,
    KIND_ROOM,
    KIND_TIME,
    SEVERITIES,
    SEVERITY_HIGH,
    SEVERITY_LOW,
    SEVERITY_MEDIUM,
    ConflictReport,
    Course,
    MeetingInterval,
)
from myregistrar.parse import minutes_to_clock, parse_schedule


logger = logging.getLogger(__name__)

NEAR_FULL_RATIO = 0.90

TIME_SUGGESTIONS = (
    "Look for alternative time slots for this course",
    "Consider taking this course in a different semester",
    "Check if there are online or hybrid options available",
)
ROOM_SUGGESTIONS = (
    "Move one of the courses to a different room",
    "Shift one of the sections to a non-overlapping time slot",
)
CAPACITY_SUGGESTIONS = (
    "Join the waitlist if available",
    "Check for additional sections",
    "Consider alternative courses that fulfill the same requirements",
)
NEAR_FULL_SUGGESTIONS = (
    "Consider raising the course capacity",
    "Consider opening an additional section",
)
PREREQUISITE_SUGGESTIONS = (
    "Complete prerequisite courses first",
    "Contact your academic advisor for guidance",
    "Check if you can get a prerequisite waiver",
)


# ---------------------------------------------------------------------------
# Single checks
# ---------------------------------------------------------------------------


def _span(iv: MeetingInterval) -> str:
    return f"{minutes_to_clock(iv.start_minute)}-{minutes_to_clock(iv.end_minute)}"


def _overlap_days(course_a: Course, course_b: Course) -> tuple[list[str], list[tuple[MeetingInterval, MeetingInterval]]]:
    pairs = any_overlap(parse_schedule(course_a.schedule), parse_schedule(course_b.schedule))
    days = sorted({a.day for a, _ in pairs}, key=DAYS.index)
    return days, pairs


def _time_reports(course_a: Course, course_b: Course) -> list[ConflictReport]:
    """
    One high-severity report per conflicting course pair; `day` is the first
    day of overlap, the explanation lists all of them.
    """
    days, pairs = _overlap_days(course_a, course_b)
    if not pairs:
        return []

    a, b = next(p for p in pairs if p[0].day == days[0])
    return [
        ConflictReport(
            kind=KIND_TIME,
            severity=SEVERITY_HIGH,
            involved_courses=(course_a, course_b),
            explanation=(
                f"Time conflict on {', '.join(days)}: {course_a.code} ({_span(a)}) "
                f"overlaps with {course_b.code} ({_span(b)})"
            ),
            day=days[0],
            suggestions=TIME_SUGGESTIONS,
        )
    ]


def _room_reports(course_a: Course, course_b: Course) -> list[ConflictReport]:
    # identical strings only; blank locations are not a shared room
    location = course_a.location
    if not location.strip() or location != course_b.location:
        return []

    days, pairs = _overlap_days(course_a, course_b)
    if not pairs:
        return []

    return [
        ConflictReport(
            kind=KIND_ROOM,
            severity=SEVERITY_HIGH,
            involved_courses=(course_a, course_b),
            explanation=(
                f"Room conflict at {location} on {', '.join(days)}: {course_a.code} and "
                f"{course_b.code} are scheduled at overlapping times"
            ),
            day=days[0],
            suggestions=ROOM_SUGGESTIONS,
        )
    ]


def _capacity_report(course: Course, advisory: bool = False) -> list[ConflictReport]:
    """
    Full (enrolled == capacity) -> medium, over capacity -> high.
    With advisory=True, >= 90% utilisation is also reported as medium "near full".
    Courses without a seat limit (capacity <= 0) are never reported.
    """
    if course.capacity <= 0:
        return []
    if course.enrolled > course.capacity:
        return [
            ConflictReport(
                kind=KIND_CAPACITY,
                severity=SEVERITY_HIGH,
                involved_courses=(course,),
                explanation=f"{course.code} is over capacity ({course.enrolled}/{course.capacity} students)",
                suggestions=CAPACITY_SUGGESTIONS,
            )
        ]
    if course.enrolled == course.capacity:
        return [
            ConflictReport(
                kind=KIND_CAPACITY,
                severity=SEVERITY_MEDIUM,
                involved_courses=(course,),
                explanation=f"{course.code} is at full capacity ({course.enrolled}/{course.capacity} students)",
                suggestions=CAPACITY_SUGGESTIONS,
            )
        ]
    if advisory and course.enrolled / course.capacity >= NEAR_FULL_RATIO:
        pct = round(course.enrolled * 100 / course.capacity)
        return [
            ConflictReport(
                kind=KIND_CAPACITY,
                severity=SEVERITY_MEDIUM,
                involved_courses=(course,),
                explanation=(
                    f"{course.code} is nearly full: {pct}% capacity "
                    f"({course.enrolled}/{course.capacity} students)"
                ),
                suggestions=NEAR_FULL_SUGGESTIONS,
            )
        ]
    return []


def _prerequisite_report(course: Course) -> list[ConflictReport]:
    # Completion is NOT checked: there is no transcript model. Any prerequisite is flagged.
    if not course.prerequisites:
        return []
    return [
        ConflictReport(
            kind=KIND_PREREQUISITE,
            severity=SEVERITY_LOW,
            involved_courses=(course,),
            explanation=(
                f"You may not have completed all prerequisites for {course.code}: "
                f"{', '.join(course.prerequisites)}"
            ),
            suggestions=PREREQUISITE_SUGGESTIONS,
        )
    ]


# ---------------------------------------------------------------------------
# Registration mode
# ---------------------------------------------------------------------------


def classify(course: Course, all_courses: Sequence[Course], registered_ids: Iterable[str]) -> list[ConflictReport]:
    """
    Classify conflicts for registering `course` on top of `registered_ids`.

    Unknown registered ids are skipped. The candidate's own id is excluded so a
    course never conflicts with itself.
    """
    course_by_id = {c.id: c for c in all_courses}

    registered: list[Course] = []
    seen: set[str] = set()
    for cid in registered_ids:
        if cid == course.id or cid in seen:
            continue
        seen.add(cid)
        other = course_by_id.get(cid)
        if other is None:
            logger.debug("Registered course %s not in catalog, skipped", cid)
            continue
        registered.append(other)

    reports: list[ConflictReport] = []
    for other in registered:
        reports.extend(_time_reports(course, other))
    reports.extend(_capacity_report(course))
    reports.extend(_prerequisite_report(course))
    return reports


def detect_conflicts(candidate: Course, registered: Sequence[Course]) -> list[ConflictReport]:
    """
    Registration gate check: an empty list means the registration may proceed.
    """
    return classify(candidate, registered, [c.id for c in registered])


def student_conflicts(courses: Sequence[Course], registered_ids: Iterable[str]) -> list[ConflictReport]:
    """
    Time conflicts among courses a student already holds (each pair once).
    """
    course_by_id = {c.id: c for c in courses}
    held: list[Course] = []
    for cid in dict.fromkeys(registered_ids):
        c = course_by_id.get(cid)
        if c is not None:
            held.append(c)

    reports: list[ConflictReport] = []
    for i in range(len(held)):
        for j in range(i + 1, len(held)):
            reports.extend(_time_reports(held[i], held[j]))
    return reports


# ---------------------------------------------------------------------------
# Bulk mode
# ---------------------------------------------------------------------------


def classify_all(active_courses: Sequence[Course]) -> list[ConflictReport]:
    """
    Administrator-wide scan: time, room and capacity (incl. near-full) over all
    active courses. Courses with another status are ignored.
    """
    active = [c for c in active_courses if c.status == COURSE_ACTIVE]

    reports: list[ConflictReport] = []
    for i in range(len(active)):
        for j in range(i + 1, len(active)):
            reports.extend(_time_reports(active[i], active[j]))

    for i in range(len(active)):
        for j in range(i + 1, len(active)):
            reports.extend(_room_reports(active[i], active[j]))

    for c in active:
        reports.extend(_capacity_report(c, advisory=True))

    logger.debug("Bulk scan of %d active courses produced %d reports", len(active), len(reports))
    return reports


def detect_all_conflicts(active_courses: Sequence[Course]) -> list[ConflictReport]:
    return classify_all(active_courses)


def summarize(reports: Iterable[ConflictReport]) -> dict[str, int]:
    """
    Count reports per severity, e.g. {"high": 2, "medium": 1, "low": 0}.
    """
    counts = Counter(r.severity for r in reports)
    return {s: counts.get(s, 0) for s in SEVERITIES}
