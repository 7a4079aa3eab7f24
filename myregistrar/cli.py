"""
CLI (Command Line Interface).

This module provides terminal commands for students and administrators, e.g.:

    myregistrar init-demo
    myregistrar search <text>
    myregistrar check <student_id> <course>
    myregistrar register <student_id> <course> [--override] [--waitlist]
    myregistrar drop <student_id> <course>
    myregistrar conflicts <student_id>
    myregistrar admin-conflicts [--suggestions]
    myregistrar course-status <course> draft|active|archived
    myregistrar reschedule <course> --days MWF --start 11:00 --end 11:50
    myregistrar move <course> <room>
    myregistrar set-capacity <course> <n> [--add]
    myregistrar week <student_id>
    myregistrar export <student_id> <file.ics>
    myregistrar fetch --url <catalog.json>

<course> may be a course id (course-1) or a course code (CS101).
Data lives in MYREGISTRAR_DATA_DIR (see myregistrar.config).
"""

from __future__ import annotations

import argparse
from datetime import date, datetime, timedelta

import requests
from rich.console import Console

from myregistrar.admin import CourseUpdateError, move, reschedule, set_capacity, set_status
from myregistrar.classify import detect_all_conflicts, student_conflicts, summarize
from myregistrar.config import get_settings
from myregistrar.export_ics import export_week_to_ics
from myregistrar.fetch import sync_catalog
from myregistrar.grid import project_week
from myregistrar.logging_config import setup_logging
from myregistrar.model import COURSE_STATUSES
from myregistrar.registration import RegistrationError, check, drop, join_waitlist, register
from myregistrar.render import SEVERITY_LABEL, conflict_table, course_table, week_table
from myregistrar.storage import (
    courses_path,
    load_courses,
    load_registrations,
    registered_course_ids,
    seed_demo_data,
)


console = Console(highlight=False)


def _cmd_init_demo(args: argparse.Namespace) -> int:
    """
    Write the demo catalog and registrations into the data directory.
    """
    if courses_path().exists() and not args.force:
        console.print(f"Data already exists at {courses_path().parent} (use --force to overwrite).")
        return 1

    n_courses, n_regs = seed_demo_data()
    console.print(f"Demo data written: {n_courses} courses, {n_regs} registrations.")
    return 0


def _cmd_search(args: argparse.Namespace) -> int:
    """
    Search active courses by substring match in code, title or instructor.
    """
    query = (args.text or "").strip().lower()
    if not query:
        console.print("Please provide a search text.")
        return 1

    matches = []
    for c in load_courses():
        if c.status != "active":
            continue
        hay = f"{c.code} {c.title} {c.instructor}".lower()
        if query in hay:
            matches.append(c)

    if not matches:
        console.print("No results.")
        return 0

    # show max 20
    console.print(course_table(matches[:20], title="Search results"))
    if len(matches) > 20:
        console.print(f"... and {len(matches) - 20} more results")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    try:
        reports = check(args.student_id, args.course)
    except RegistrationError as e:
        console.print(str(e))
        return 1

    if not reports:
        console.print("No conflicts: registration would be accepted.")
        return 0

    console.print(conflict_table(reports, title="Registration would be rejected", suggestions=True))
    return 1


def _cmd_register(args: argparse.Namespace) -> int:
    try:
        if args.waitlist:
            reg = join_waitlist(args.student_id, args.course)
            console.print(f"Waitlisted: {args.student_id} for {reg.course_id}")
            return 0
        outcome = register(args.student_id, args.course, override=args.override)
    except RegistrationError as e:
        console.print(str(e))
        return 1

    if not outcome.accepted:
        console.print(conflict_table(outcome.reports, title="Registration failed", suggestions=True))
        console.print("Nothing was registered. Choose another section, join the waitlist (--waitlist) or ask an administrator.")
        return 1

    assert outcome.registration is not None
    if outcome.reports:
        console.print(f"Registered with override despite {len(outcome.reports)} conflict(s).")
    console.print(f"Registered: {args.student_id} for {outcome.registration.course_id}")
    return 0


def _cmd_drop(args: argparse.Namespace) -> int:
    try:
        reg = drop(args.student_id, args.course)
    except RegistrationError as e:
        console.print(str(e))
        return 1

    console.print(f"Dropped: {args.student_id} from {reg.course_id}")
    return 0


def _cmd_conflicts(args: argparse.Namespace) -> int:
    """
    Print time conflicts among the student's registered courses.
    """
    ids = registered_course_ids(load_registrations(), args.student_id)
    reports = student_conflicts(load_courses(), ids)
    if not reports:
        console.print("No conflicts found.")
        return 0

    console.print(conflict_table(reports, title=f"Conflicts for {args.student_id}"))
    return 0


def _cmd_admin_conflicts(args: argparse.Namespace) -> int:
    """
    Administrator scan over all active courses.
    """
    reports = detect_all_conflicts(load_courses())
    counts = summarize(reports)
    console.print(" | ".join(f"{SEVERITY_LABEL[s]}: {n}" for s, n in counts.items()))

    if not reports:
        console.print("No conflicts found.")
        return 0

    console.print(conflict_table(reports, title="Conflict resolution", suggestions=args.suggestions))
    return 0


def _cmd_course_status(args: argparse.Namespace) -> int:
    try:
        course = set_status(args.course, args.status)
    except CourseUpdateError as e:
        console.print(str(e))
        return 1

    console.print(f"{course.code} is now {course.status}")
    return 0


def _cmd_reschedule(args: argparse.Namespace) -> int:
    try:
        course = reschedule(args.course, args.days, args.start, args.end)
    except CourseUpdateError as e:
        console.print(str(e))
        return 1

    console.print(f"{course.code} now meets {course.schedule}")
    return 0


def _cmd_move(args: argparse.Namespace) -> int:
    try:
        course = move(args.course, args.room)
    except CourseUpdateError as e:
        console.print(str(e))
        return 1

    console.print(f"{course.code} moved to {course.location}")
    return 0


def _cmd_set_capacity(args: argparse.Namespace) -> int:
    """
    Set a seat limit, or raise it with --add (e.g. --add 5 / 10 / 15).
    """
    try:
        course = set_capacity(args.course, args.capacity, add=args.add)
    except CourseUpdateError as e:
        console.print(str(e))
        return 1

    console.print(f"{course.code} capacity: {course.enrolled}/{course.capacity}")
    return 0


def _cmd_week(args: argparse.Namespace) -> int:
    ids = registered_course_ids(load_registrations(), args.student_id)
    if not ids:
        console.print("No registered courses.")
        return 0

    projection = project_week(load_courses(), ids)
    console.print(week_table(projection, title=f"Weekly schedule for {args.student_id}"))
    console.print(f"Total credits: {projection.total_credits} | Hours/week: {projection.total_hours:.1f}")
    if projection.conflicting_ids:
        console.print(f"[bold red]Conflicting meetings: {', '.join(sorted(projection.conflicting_ids))}[/]")
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    """
    Export the student's weekly meetings into an iCalendar (.ics) file.
    """
    ids = registered_course_ids(load_registrations(), args.student_id)
    if not ids:
        console.print("No registered courses to export.")
        return 0

    if args.start:
        try:
            start = datetime.strptime(args.start, "%Y-%m-%d").date()
        except ValueError:
            console.print(f"Invalid start date: {args.start!r} (expected YYYY-MM-DD)")
            return 1
    else:
        start = date.today()

    # snap to the Monday of that week
    start = start - timedelta(days=start.weekday())

    if args.weeks < 1:
        console.print("--weeks must be at least 1.")
        return 1

    n = export_week_to_ics(load_courses(), ids, args.out, start, weeks=args.weeks)
    console.print(f"Exported {n} events to: {args.out}")
    return 0


def _cmd_fetch(args: argparse.Namespace) -> int:
    settings = get_settings()
    url = (args.url or settings.CATALOG_URL).strip()
    if not url:
        console.print("Please provide --url or set MYREGISTRAR_CATALOG_URL.")
        return 1

    try:
        n = sync_catalog(url, timeout=settings.REQUEST_TIMEOUT)
    except (requests.RequestException, ValueError) as e:
        console.print(f"Fetching the catalog failed: {e}")
        return 1

    console.print(f"Imported {n} courses.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="myregistrar", description="MyRegistrar CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    p_init = sub.add_parser("init-demo", help="Write demo catalog and registrations")
    p_init.add_argument("--force", action="store_true", help="Overwrite existing data")

    p_search = sub.add_parser("search", help="Search for courses")
    p_search.add_argument("text", type=str, help="Search text")

    p_check = sub.add_parser("check", help="Show what a registration attempt would report")
    p_check.add_argument("student_id", type=str)
    p_check.add_argument("course", type=str, help="Course id or code (e.g. CS101)")

    p_register = sub.add_parser("register", help="Register a student for a course")
    p_register.add_argument("student_id", type=str)
    p_register.add_argument("course", type=str, help="Course id or code (e.g. CS101)")
    p_register.add_argument("--override", action="store_true", help="Administrator override of conflicts")
    p_register.add_argument("--waitlist", action="store_true", help="Join the waitlist instead")

    p_drop = sub.add_parser("drop", help="Drop a course")
    p_drop.add_argument("student_id", type=str)
    p_drop.add_argument("course", type=str, help="Course id or code (e.g. CS101)")

    p_conf = sub.add_parser("conflicts", help="Show conflicts among a student's registered courses")
    p_conf.add_argument("student_id", type=str)

    p_admin = sub.add_parser("admin-conflicts", help="Scan all active courses for conflicts")
    p_admin.add_argument("--suggestions", action="store_true", help="Show suggested resolutions")

    p_status = sub.add_parser("course-status", help="Change a course's status (admin)")
    p_status.add_argument("course", type=str, help="Course id or code (e.g. CS101)")
    p_status.add_argument("status", type=str, choices=COURSE_STATUSES)

    p_resched = sub.add_parser("reschedule", help="Give a course a new meeting time (admin)")
    p_resched.add_argument("course", type=str, help="Course id or code (e.g. CS101)")
    p_resched.add_argument("--days", type=str, required=True, help="Day letters, e.g. MWF or TTh")
    p_resched.add_argument("--start", type=str, required=True, help="Start time, 24h HH:MM")
    p_resched.add_argument("--end", type=str, required=True, help="End time, 24h HH:MM")

    p_move = sub.add_parser("move", help="Move a course to another room (admin)")
    p_move.add_argument("course", type=str, help="Course id or code (e.g. CS101)")
    p_move.add_argument("room", type=str, help="New location")

    p_cap = sub.add_parser("set-capacity", help="Change a course's capacity (admin)")
    p_cap.add_argument("course", type=str, help="Course id or code (e.g. CS101)")
    p_cap.add_argument("capacity", type=int, help="New capacity (0 = no limit)")
    p_cap.add_argument("--add", action="store_true", help="Raise the capacity by this many seats instead")

    p_week = sub.add_parser("week", help="Show a student's weekly grid")
    p_week.add_argument("student_id", type=str)

    p_export = sub.add_parser("export", help="Export a student's meetings to .ics")
    p_export.add_argument("student_id", type=str)
    p_export.add_argument("out", type=str, help="Output file path (e.g. out.ics)")
    p_export.add_argument("--start", type=str, default="", help="First week (YYYY-MM-DD, snapped to Monday)")
    p_export.add_argument("--weeks", type=int, default=1, help="Number of weeks to repeat")

    p_fetch = sub.add_parser("fetch", help="Import the course catalog from a JSON URL")
    p_fetch.add_argument("--url", type=str, default="", help="Catalog URL (default: MYREGISTRAR_CATALOG_URL)")

    return parser


COMMANDS = {
    "init-demo": _cmd_init_demo,
    "search": _cmd_search,
    "check": _cmd_check,
    "register": _cmd_register,
    "drop": _cmd_drop,
    "conflicts": _cmd_conflicts,
    "admin-conflicts": _cmd_admin_conflicts,
    "course-status": _cmd_course_status,
    "reschedule": _cmd_reschedule,
    "move": _cmd_move,
    "set-capacity": _cmd_set_capacity,
    "week": _cmd_week,
    "export": _cmd_export,
    "fetch": _cmd_fetch,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)
    raise SystemExit(handler(args))
