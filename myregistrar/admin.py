"""
Course administration.

Edits course listings in courses.json so administrators can resolve the
problems reported by the bulk scan:
- change the lifecycle status (draft / active / archived)
- give a course a new meeting time
- move a course to another room
- change its capacity

Each call loads the catalog, changes one course and writes it back.
Enrollment counts are not touched here; they stay derived from registrations.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from myregistrar.model import COURSE_STATUSES, Course
from myregistrar.parse import DAY_CODES, format_schedule, parse_schedule
from myregistrar.storage import courses_path, find_course, load_courses, save_courses


logger = logging.getLogger(__name__)


class CourseUpdateError(Exception):
    """Unknown course or an invalid new value; nothing is written."""


def _edit(course_key: str, data_dir: str | Path | None, change) -> Course:
    path = courses_path(data_dir)
    courses = load_courses(path)
    course = find_course(courses, course_key)
    if course is None:
        raise CourseUpdateError(f"Course not found: {course_key}")

    change(course)
    save_courses(courses, path)
    return course


def parse_day_codes(token: str) -> list[str]:
    """
    'MWF' -> ['M', 'W', 'F'], 'TTh' -> ['T', 'R'].
    """
    token = token.strip()
    if token == "TTh":
        return ["T", "R"]
    if not token or any(letter not in DAY_CODES for letter in token):
        raise CourseUpdateError(f"Invalid days: {token!r} (use letters from MTWRFSU or TTh)")
    return list(token)


def parse_clock(text: str) -> int:
    """
    24h 'HH:MM' -> minutes since midnight.
    """
    try:
        t = datetime.strptime(text.strip(), "%H:%M")
    except ValueError:
        raise CourseUpdateError(f"Invalid time: {text!r} (expected HH:MM)") from None
    return t.hour * 60 + t.minute


def set_status(course_key: str, status: str, data_dir: str | Path | None = None) -> Course:
    status = status.strip().lower()
    if status not in COURSE_STATUSES:
        raise CourseUpdateError(f"Invalid status: {status!r} (choose from {', '.join(COURSE_STATUSES)})")

    def change(course: Course) -> None:
        course.status = status

    course = _edit(course_key, data_dir, change)
    logger.info("Status of %s set to %s", course.code, status)
    return course


def reschedule(
    course_key: str,
    days: str,
    start: str,
    end: str,
    data_dir: str | Path | None = None,
) -> Course:
    """
    Give a course a new weekly meeting time, e.g. days='MWF', start='11:00', end='11:50'.

    The schedule string carries one AM/PM marker, so a range that crosses noon
    cannot be stored and is rejected.
    """
    codes = parse_day_codes(days)
    start_minute, end_minute = parse_clock(start), parse_clock(end)
    if start_minute >= end_minute:
        raise CourseUpdateError(f"Start {start} must be before end {end}")

    schedule = format_schedule(codes, start_minute, end_minute)
    intervals = parse_schedule(schedule)
    if not intervals or any((iv.start_minute, iv.end_minute) != (start_minute, end_minute) for iv in intervals):
        raise CourseUpdateError(f"{start}-{end} crosses noon and cannot be written as one schedule")

    def change(course: Course) -> None:
        course.schedule = schedule

    course = _edit(course_key, data_dir, change)
    logger.info("%s rescheduled to %s", course.code, schedule)
    return course


def move(course_key: str, location: str, data_dir: str | Path | None = None) -> Course:
    location = location.strip()
    if not location:
        raise CourseUpdateError("Location must not be empty")

    def change(course: Course) -> None:
        course.location = location

    course = _edit(course_key, data_dir, change)
    logger.info("%s moved to %s", course.code, location)
    return course


def set_capacity(
    course_key: str,
    capacity: int,
    data_dir: str | Path | None = None,
    add: bool = False,
) -> Course:
    """
    Set the seat limit, or raise it by `capacity` seats with add=True.
    A capacity of 0 removes the limit.
    """

    def change(course: Course) -> None:
        new = course.capacity + capacity if add else capacity
        if new < 0:
            raise CourseUpdateError(f"Capacity must not be negative (got {new})")
        course.capacity = new

    course = _edit(course_key, data_dir, change)
    if 0 < course.capacity < course.enrolled:
        logger.warning("%s now has %d students for %d seats", course.code, course.enrolled, course.capacity)
    logger.info("Capacity of %s set to %d", course.code, course.capacity)
    return course
