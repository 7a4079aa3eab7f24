"""
Registration workflow (the registration gate).

Before a registration is written, the classifier checks the candidate course
against the student's currently registered courses. Any report rejects the
attempt and nothing is stored; the caller decides what to do next:
- pick another section
- join the waitlist (join_waitlist)
- override (administrators only, register(..., override=True))

The gate never resolves a conflict by itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from myregistrar.classify import detect_conflicts
from myregistrar.model import (
    COURSE_ACTIVE,
    REG_DROPPED,
    REG_REGISTERED,
    REG_WAITLISTED,
    ConflictReport,
    Course,
    Registration,
)
from myregistrar.storage import (
    active_registration,
    courses_path,
    find_course,
    load_courses,
    load_registrations,
    new_registration,
    recount_enrollment,
    registered_course_ids,
    registrations_path,
    save_courses,
    save_registrations,
)


logger = logging.getLogger(__name__)


class RegistrationError(Exception):
    """Unknown or inactive course, or duplicate registration; raised before any check runs."""


@dataclass
class RegistrationOutcome:
    accepted: bool
    registration: Optional[Registration] = None
    reports: list[ConflictReport] = field(default_factory=list)


def _load(data_dir: str | Path | None):
    return load_courses(courses_path(data_dir)), load_registrations(registrations_path(data_dir))


def _open_course(courses: list[Course], course_key: str) -> Course:
    """
    Resolve a course a student may sign up for: it must exist and be active.
    """
    course = find_course(courses, course_key)
    if course is None:
        raise RegistrationError(f"Course not found: {course_key}")
    if course.status != COURSE_ACTIVE:
        raise RegistrationError(f"Course {course.code} is not open for registration")
    return course


def _store(courses, registrations, data_dir: str | Path | None) -> None:
    recount_enrollment(courses, registrations)
    save_courses(courses, courses_path(data_dir))
    save_registrations(registrations, registrations_path(data_dir))


def check(student_id: str, course_key: str, data_dir: str | Path | None = None) -> list[ConflictReport]:
    """
    Dry run of the gate: the reports a registration attempt would produce.
    """
    courses, registrations = _load(data_dir)
    course = _open_course(courses, course_key)

    held_ids = set(registered_course_ids(registrations, student_id))
    held = [c for c in courses if c.id in held_ids]
    return detect_conflicts(course, held)


def register(
    student_id: str,
    course_key: str,
    data_dir: str | Path | None = None,
    override: bool = False,
) -> RegistrationOutcome:
    """
    Try to register a student for a course (by id or code).

    Returns an outcome with accepted=False and the full report list when the
    gate rejects. With override=True the registration is stored anyway and
    the reports are still returned for the record.
    """
    courses, registrations = _load(data_dir)
    course = _open_course(courses, course_key)
    if active_registration(registrations, student_id, course.id) is not None:
        raise RegistrationError(f"Student {student_id} is already registered for {course.code}")

    held_ids = set(registered_course_ids(registrations, student_id))
    held = [c for c in courses if c.id in held_ids]
    reports = detect_conflicts(course, held)

    if reports and not override:
        logger.info(
            "Registration of %s for %s rejected: %s",
            student_id,
            course.code,
            ", ".join(r.kind for r in reports),
        )
        return RegistrationOutcome(accepted=False, reports=reports)

    if reports:
        logger.warning("Registration of %s for %s stored with override (%d conflicts)", student_id, course.code, len(reports))

    reg = new_registration(student_id, course.id, REG_REGISTERED, course.semester)
    registrations.append(reg)
    _store(courses, registrations, data_dir)
    logger.info("Registered %s for %s", student_id, course.code)
    return RegistrationOutcome(accepted=True, registration=reg, reports=reports)


def join_waitlist(student_id: str, course_key: str, data_dir: str | Path | None = None) -> Registration:
    courses, registrations = _load(data_dir)
    course = _open_course(courses, course_key)
    if active_registration(registrations, student_id, course.id) is not None:
        raise RegistrationError(f"Student {student_id} is already registered for {course.code}")

    reg = new_registration(student_id, course.id, REG_WAITLISTED, course.semester)
    registrations.append(reg)
    _store(courses, registrations, data_dir)
    logger.info("Waitlisted %s for %s", student_id, course.code)
    return reg


def drop(student_id: str, course_key: str, data_dir: str | Path | None = None) -> Registration:
    """
    Mark the student's non-dropped registration for the course as dropped.
    """
    courses, registrations = _load(data_dir)
    course = find_course(courses, course_key)
    course_id = course.id if course is not None else course_key.strip()

    reg = active_registration(registrations, student_id, course_id)
    if reg is None:
        raise RegistrationError(f"Student {student_id} has no active registration for {course_key}")

    reg.status = REG_DROPPED
    _store(courses, registrations, data_dir)
    logger.info("Dropped %s from %s", student_id, course_id)
    return reg
