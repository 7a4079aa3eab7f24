from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

import requests

from myregistrar.config import get_settings
from myregistrar.model import Course, course_from_dict
from myregistrar.storage import (
    courses_path,
    load_registrations,
    recount_enrollment,
    registrations_path,
    save_courses,
)


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def fetch_catalog(url: str, timeout: float = 30) -> List[Course]:
    """
    Download a course catalog published as JSON.

    Accepts either a plain list of course records or {"courses": [...]}.
    Records without an id are dropped; HTTP errors propagate.
    """
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()

    data = resp.json()
    if isinstance(data, dict):
        data = data.get("courses", [])
    if not isinstance(data, list):
        raise ValueError(f"Catalog at {url} is not a list of courses")

    courses: List[Course] = []
    seen: set[str] = set()
    for record in data:
        if not isinstance(record, dict):
            continue
        course = course_from_dict(record)
        if course is None or course.id in seen:
            continue
        seen.add(course.id)
        courses.append(course)

    logger.info("Fetched %d courses from %s", len(courses), url)
    return courses


def sync_catalog(url: str, data_dir: str | Path | None = None, timeout: float = 30) -> int:
    """
    Replace the local catalog with the remote one. Enrollment counts are
    recomputed from local registrations. Returns number of courses stored.
    """
    courses = fetch_catalog(url, timeout=timeout)
    recount_enrollment(courses, load_registrations(registrations_path(data_dir)))
    save_courses(courses, courses_path(data_dir))
    return len(courses)


# ---------------------------------------------------------------------------
# CLI entry
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    p = argparse.ArgumentParser(prog="myregistrar.fetch", description="Import a course catalog from a JSON URL")
    p.add_argument("--url", type=str, default=settings.CATALOG_URL, help="Catalog URL (default: MYREGISTRAR_CATALOG_URL)")
    p.add_argument("--data-dir", type=Path, default=None, help="Data directory (default: MYREGISTRAR_DATA_DIR)")
    p.add_argument("--timeout", type=float, default=settings.REQUEST_TIMEOUT, help="Request timeout in seconds")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    if not args.url:
        print("Please provide --url or set MYREGISTRAR_CATALOG_URL.")
        raise SystemExit(1)

    n = sync_catalog(args.url.strip(), data_dir=args.data_dir, timeout=args.timeout)
    print(f"Imported {n} courses.")


if __name__ == "__main__":
    main()
